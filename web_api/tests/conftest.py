# web_api/tests/conftest.py
"""Pytest fixtures for web API tests.

Points the API at a temporary data directory so tests never touch the
real storage root.
"""

import pytest
from fastapi.testclient import TestClient

from core.storage import UserFileStore
from main import app
from web_api.dependencies import get_user_file_store


@pytest.fixture
def store(tmp_path):
    store = UserFileStore(tmp_path / "data")
    store.ensure_data_dir()
    return store


@pytest.fixture
def client(store):
    app.dependency_overrides[get_user_file_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
