"""FastAPI dependencies shared by the API routes."""

from functools import lru_cache

from core.config import get_data_dir
from core.storage import UserFileStore


@lru_cache
def get_user_file_store() -> UserFileStore:
    """
    Return the process-wide document store.

    Tests swap this out via ``app.dependency_overrides`` to point the API at
    a temporary directory.
    """
    return UserFileStore(get_data_dir())
