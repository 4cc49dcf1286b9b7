"""
Properties-file handler.

The whole file is loaded into memory when the handler is created and every
read is served from that snapshot. Writes rewrite the file line by line so
that entries of other modules, and lines this handler cannot parse, are kept
verbatim.

File format: one ``key=value`` entry per line, newline-terminated, no quoting,
escaping or comments. Keys are stored as ``<module>.<key>``. Files are decoded
as UTF-8 with surrogateescape, so bytes that are not UTF-8 survive a rewrite
unchanged.
"""

from __future__ import annotations

import threading
from pathlib import Path

from easyconfig.exceptions import InvalidItemError, PropertiesFileError
from easyconfig.handlers.base import Handler
from easyconfig.logging import get_logger, log_context
from easyconfig.types import Item, StorageKind

logger = get_logger(__name__)

ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"


def split_lines(text: str) -> list[str]:
    """Split on newlines only; a trailing newline does not start a new line."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def check_entry(key: str, value: str) -> None:
    """Reject entries the line format cannot represent.

    Raises:
        InvalidItemError: If key contains ``=`` or a line break, or value
            contains a line break.
    """
    if any(c in key for c in "=\n\r"):
        raise InvalidItemError("Key must not contain '=' or line breaks", {"key": key})
    if any(c in value for c in "\n\r"):
        raise InvalidItemError("Value must not contain line breaks", {"key": key})


def _read_lines(path: Path) -> list[str]:
    # newline="" keeps carriage returns inside the lines they belong to
    with path.open(encoding=ENCODING, errors=ENCODING_ERRORS, newline="") as f:
        return split_lines(f.read())


def parse_properties(text: str, source: str = "<string>") -> dict[str, str]:
    """Parse properties text into a dict.

    Blank lines are skipped. The key is everything before the first ``=`` and
    the value everything after it. Lines without ``=`` are skipped with a
    warning.
    """
    conf: dict[str, str] = {}
    for lineno, raw in enumerate(split_lines(text), start=1):
        prop = raw.strip()
        if not prop:
            continue
        key, sep, value = prop.partition("=")
        if not sep:
            logger.warning("Skipping malformed line", source=source, line=lineno)
            continue
        conf[key] = value
    return conf


def load_properties(path: Path) -> dict[str, str]:
    """Load a properties file. A missing or unreadable file yields an empty dict."""
    try:
        with path.open(encoding=ENCODING, errors=ENCODING_ERRORS, newline="") as f:
            text = f.read()
    except FileNotFoundError:
        logger.debug("Properties file not found, starting empty", path=str(path))
        return {}
    except OSError as e:
        logger.error("Failed to read properties file", path=str(path), error=str(e))
        return {}
    return parse_properties(text, source=str(path))


def _write_lines(path: Path, lines: list[str]) -> None:
    with path.open("w", encoding=ENCODING, errors=ENCODING_ERRORS, newline="") as f:
        f.write("".join(f"{line}\n" for line in lines))


def update_property(path: Path, key: str, value: str) -> None:
    """Set key=value in the file, creating the file if needed.

    Every line starting with ``key=`` is replaced; if none matched the entry
    is appended. The file is truncated and fully rewritten.

    Raises:
        InvalidItemError: If the entry cannot be written as one line.
        PropertiesFileError: If the file cannot be read or written.
    """
    check_entry(key, value)
    prefix = f"{key}="
    entry = f"{key}={value}"
    try:
        lines = _read_lines(path) if path.exists() else []
    except OSError as e:
        raise PropertiesFileError(
            "Failed to read properties file", {"path": str(path), "error": str(e)}
        ) from e

    found = False
    updated: list[str] = []
    for line in lines:
        if line.lstrip().startswith(prefix):
            updated.append(entry)
            found = True
        else:
            updated.append(line)
    if not found:
        updated.append(entry)

    try:
        _write_lines(path, updated)
    except (OSError, UnicodeError) as e:
        raise PropertiesFileError(
            "Failed to write properties file", {"path": str(path), "error": str(e)}
        ) from e


def remove_property(path: Path, key: str) -> bool:
    """Drop every line starting with ``key=``.

    The file is only rewritten when a line was dropped.

    Returns:
        True if a line was removed.

    Raises:
        PropertiesFileError: If the file does not exist or cannot be rewritten.
    """
    prefix = f"{key}="
    try:
        lines = _read_lines(path)
    except FileNotFoundError as e:
        raise PropertiesFileError("Properties file does not exist", {"path": str(path)}) from e
    except OSError as e:
        raise PropertiesFileError(
            "Failed to read properties file", {"path": str(path), "error": str(e)}
        ) from e

    kept = [line for line in lines if not line.lstrip().startswith(prefix)]
    if len(kept) == len(lines):
        return False

    try:
        _write_lines(path, kept)
    except (OSError, UnicodeError) as e:
        raise PropertiesFileError(
            "Failed to write properties file", {"path": str(path), "error": str(e)}
        ) from e
    return True


class PropertiesHandler(Handler):
    """Handler backed by a properties file.

    Rewrites are serialized within one handler. Separate handlers or processes
    writing the same file are not coordinated.
    """

    def __init__(self, path: Path | str, module: str) -> None:
        self.path = Path(path)
        self.module = module
        self._prefix = f"{module}."
        self._lock = threading.Lock()
        self._config = load_properties(self.path)

    def _file_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> str:
        return self._config.get(self._file_key(key), "")

    def set(self, key: str, value: str) -> None:
        file_key = self._file_key(key)
        with self._lock, log_context(backend=StorageKind.PROPERTIES.value, module=self.module):
            try:
                update_property(self.path, file_key, value)
            except (InvalidItemError, PropertiesFileError) as e:
                logger.error("Failed to set item", key=key, error=str(e))
                raise
            self._config[file_key] = value
            logger.debug("Set item", key=key)

    def remove(self, key: str) -> None:
        file_key = self._file_key(key)
        with self._lock, log_context(backend=StorageKind.PROPERTIES.value, module=self.module):
            try:
                removed = remove_property(self.path, file_key)
            except PropertiesFileError as e:
                logger.error("Failed to remove item", key=key, error=str(e))
                return
            self._config.pop(file_key, None)
            if removed:
                logger.debug("Removed item", key=key)

    def list(self) -> list[Item]:
        items = [
            Item(module=self.module, key=k[len(self._prefix):], value=v)
            for k, v in self._config.items()
            if k.startswith(self._prefix)
        ]
        return sorted(items, key=lambda item: item.key)

    def reload(self) -> None:
        """Re-read the file into the in-memory snapshot."""
        with self._lock:
            self._config = load_properties(self.path)
