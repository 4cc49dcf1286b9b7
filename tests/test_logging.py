"""
Tests for structured logging and the exception hierarchy.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from easyconfig.exceptions import (
    EasyConfigError,
    PropertiesFileError,
    QueryError,
    StorageError,
)
from easyconfig.logging import (
    ROOT_LOGGER_NAME,
    ContextRichHandler,
    get_backend,
    get_logger,
    get_module,
    log_context,
    setup_logging,
)


class TestLogContext:
    """Tests for scoped logging context."""

    def test_sets_and_restores(self) -> None:
        assert get_backend() is None
        with log_context(backend="sqlite", module="svc"):
            assert get_backend() == "sqlite"
            assert get_module() == "svc"
            with log_context(module="inner"):
                assert get_backend() == "sqlite"
                assert get_module() == "inner"
            assert get_module() == "svc"
        assert get_backend() is None
        assert get_module() is None


class TestSetupLogging:
    """Tests for handler wiring."""

    def test_console_handler_writes_to_stderr(self) -> None:
        setup_logging(log_level="DEBUG")
        try:
            handlers = logging.getLogger(ROOT_LOGGER_NAME).handlers
            assert len(handlers) == 1
            assert isinstance(handlers[0], ContextRichHandler)
            assert handlers[0].console.stderr
            assert handlers[0].level == logging.DEBUG
        finally:
            setup_logging()

    def test_console_output_disabled(self) -> None:
        setup_logging(console_output=False)
        try:
            assert logging.getLogger(ROOT_LOGGER_NAME).handlers == []
        finally:
            setup_logging()


class TestJSONFileLogging:
    """Tests for the JSON-lines file handler."""

    def test_records_include_context_and_extra(self, temp_dir: Path) -> None:
        log_file = temp_dir / "logs" / "easyconfig.jsonl"
        setup_logging(log_level="DEBUG", log_file=log_file, console_output=False)
        try:
            logger = get_logger("tests")
            with log_context(backend="properties", module="app"):
                logger.info("Set item", key="port")
            for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
                handler.flush()

            record = json.loads(log_file.read_text().splitlines()[-1])
        finally:
            setup_logging()

        assert record["message"] == "Set item"
        assert record["logger"] == "easyconfig.tests"
        assert record["backend"] == "properties"
        assert record["module"] == "app"
        assert record["extra"]["key"] == "port"


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_str_includes_context(self) -> None:
        err = QueryError("Failed to set item", {"module": "svc", "key": "timeout"})
        assert str(err) == "Failed to set item (module='svc', key='timeout')"

    def test_str_without_context(self) -> None:
        assert str(EasyConfigError("boom")) == "boom"

    def test_hierarchy(self) -> None:
        assert issubclass(PropertiesFileError, StorageError)
        assert issubclass(QueryError, StorageError)
        assert issubclass(StorageError, EasyConfigError)

    def test_repr(self) -> None:
        err = PropertiesFileError("bad", {"path": "/tmp/x"})
        assert repr(err) == "PropertiesFileError('bad', context={'path': '/tmp/x'})"
