"""
Tests for the easy-config CLI.
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from easyconfig import __version__
from easyconfig.cli.main import app

runner = CliRunner()


class TestDataCommands:
    """get/set/remove/list against a properties file."""

    def test_set_then_get(self, mock_env_vars: dict[str, str]) -> None:
        result = runner.invoke(app, ["set", "port", "8080"])
        assert result.exit_code == 0, result.output

        result = runner.invoke(app, ["get", "port"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "8080"

        path = Path(mock_env_vars["PROPERTIES_PATH"])
        assert path.read_text() == "app.port=8080\n"

    def test_module_option(self, mock_env_vars: dict[str, str]) -> None:
        runner.invoke(app, ["set", "port", "1", "--module", "svc"])

        assert runner.invoke(app, ["get", "port", "-m", "svc"]).stdout.strip() == "1"
        assert runner.invoke(app, ["get", "port"]).exit_code == 1

    def test_get_missing_key_exits_1(self, mock_env_vars: dict[str, str]) -> None:
        result = runner.invoke(app, ["get", "missing"])
        assert result.exit_code == 1

    def test_remove(self, mock_env_vars: dict[str, str]) -> None:
        runner.invoke(app, ["set", "port", "8080"])

        result = runner.invoke(app, ["remove", "port"])

        assert result.exit_code == 0
        assert runner.invoke(app, ["get", "port"]).exit_code == 1

    def test_list(self, mock_env_vars: dict[str, str]) -> None:
        runner.invoke(app, ["set", "alpha", "1"])
        runner.invoke(app, ["set", "beta", "2"])

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "alpha" in result.stdout
        assert "beta" in result.stdout

    def test_sqlite_backend(self, mock_env_vars: dict[str, str]) -> None:
        with patch.dict(os.environ, {"STORAGE_BACKEND": "sqlite"}):
            assert runner.invoke(app, ["set", "timeout", "30"]).exit_code == 0
            result = runner.invoke(app, ["get", "timeout"])

        assert result.stdout.strip() == "30"
        assert Path(mock_env_vars["SQLITE_PATH"]).exists()

    def test_set_failure_exits_1(self, mock_env_vars: dict[str, str], temp_dir: Path) -> None:
        with patch.dict(os.environ, {"PROPERTIES_PATH": str(temp_dir)}):
            result = runner.invoke(app, ["set", "port", "8080"])

        assert result.exit_code == 1

    def test_invalid_settings_exit_1(self, mock_env_vars: dict[str, str]) -> None:
        with patch.dict(os.environ, {"STORAGE_BACKEND": "redis"}):
            result = runner.invoke(app, ["get", "port"])

        assert result.exit_code == 1


class TestInfoCommands:
    """config and version."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_config(self, mock_env_vars: dict[str, str]) -> None:
        with patch.dict(os.environ, {"DB_PASSWORD": "hunter2"}):
            result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert "STORAGE_BACKEND" in result.stdout
        assert "hunter2" not in result.stdout
