"""
Store per-user JSON documents as individual files on disk.

Each (username, kind) pair maps to exactly one file:

    <data_dir>/<username>_<kind>.json

A save replaces the whole file. Documents are never merged, cached or
deleted here.
"""

import json
import logging
import math
import os
import tempfile
import threading
from enum import Enum
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_FORBIDDEN_CHARS = ("/", "\\", "\x00")
_FORBIDDEN_NAMES = (".", "..")

# Writers to the same path always share one of these locks
LOCK_STRIPES = 64


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


class DocumentKind(str, Enum):
    """The two document types kept per username."""

    DATA = "data"
    CALENDAR = "calendar"


class InvalidUsernameError(ValueError):
    """Raised when a username cannot be used as a file name component."""

    pass


class InvalidDocumentError(ValueError):
    """Raised when a document cannot be stored as standard JSON."""

    pass


class StoredDocumentError(ValueError):
    """Raised when a stored file does not contain valid JSON."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid JSON in {path.name}: {reason}")


def _reject_constant(name: str):
    raise ValueError(f"Non-finite number {name} is not valid JSON")


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Number {text} is out of range")
    return value


def validate_username(username: str) -> str:
    """
    Check that a username is safe to embed in a file name.

    Raises:
        InvalidUsernameError: If the username is empty, contains a path
            separator or NUL byte, or is a relative path component.
    """
    if not username:
        raise InvalidUsernameError("Username must not be empty")
    if username in _FORBIDDEN_NAMES or any(c in username for c in _FORBIDDEN_CHARS):
        raise InvalidUsernameError(f"Username contains illegal characters: {username!r}")
    return username


class UserFileStore:
    """File-per-document storage rooted at ``data_dir``."""

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)
        self._locks = [threading.Lock() for _ in range(LOCK_STRIPES)]

    def ensure_data_dir(self) -> None:
        """Create the storage root (and parents) if it does not exist."""
        if not self.data_dir.exists():
            logger.info(f"Creating data directory {self.data_dir}")
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, username: str, kind: DocumentKind | str) -> Path:
        kind = DocumentKind(kind)
        validate_username(username)
        return self.data_dir / f"{username}_{kind.value}.json"

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def _lock_for(self, path: Path) -> threading.Lock:
        return self._locks[hash(path) % LOCK_STRIPES]

    def write(self, path: Path, document: Any) -> None:
        """
        Serialize ``document`` as pretty-printed JSON and replace ``path``.

        The content is written to a temporary file in the same directory and
        moved into place, so readers see either the old or the new document.
        Concurrent writers to the same path are serialized; the last one wins.

        Raises:
            InvalidDocumentError: If the document contains NaN or Infinity.
            OSError: If the directory is not writable or the disk is full.
            TypeError: If the document is not JSON serializable.
        """
        try:
            payload = json.dumps(
                document, indent=2, ensure_ascii=False, allow_nan=False
            )
        except ValueError as e:
            raise InvalidDocumentError(f"Document is not valid JSON: {e}") from e

        with self._lock_for(path):
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.stem}.", suffix=".tmp", dir=path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                # mkstemp creates 0600; match a plainly created file
                os.chmod(tmp_name, 0o666 & ~_current_umask())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise

    def read(self, path: Path) -> Any:
        """
        Load and parse the JSON document at ``path``.

        Raises:
            StoredDocumentError: If the file content is not valid JSON,
                including NaN, Infinity or out-of-range numbers.
            OSError: If the file cannot be read.
        """
        with open(path, encoding="utf-8") as f:
            content = f.read()

        try:
            return json.loads(
                content,
                parse_constant=_reject_constant,
                parse_float=_parse_finite_float,
            )
        except ValueError as e:
            raise StoredDocumentError(path, str(e)) from e

    def save(self, username: str, kind: DocumentKind | str, document: Any) -> Path:
        """Write the document for ``username`` and return the file path."""
        path = self.path_for(username, kind)
        self.write(path, document)
        return path

    def load(self, username: str, kind: DocumentKind | str) -> Any | None:
        """Return the stored document, or None if nothing was saved yet."""
        path = self.path_for(username, kind)
        if not self.exists(path):
            return None
        return self.read(path)
