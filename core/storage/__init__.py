"""Per-user JSON document storage."""

from .user_files import (
    DocumentKind,
    InvalidDocumentError,
    InvalidUsernameError,
    StoredDocumentError,
    UserFileStore,
)

__all__ = [
    "DocumentKind",
    "InvalidDocumentError",
    "InvalidUsernameError",
    "StoredDocumentError",
    "UserFileStore",
]
