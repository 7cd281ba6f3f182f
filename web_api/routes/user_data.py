"""
User data API routes.

Endpoints:
- POST /api/save-data - Save a user's application state
- GET /api/get-data/{username} - Get a user's saved application state
"""

import logging
from typing import Any

import sentry_sdk
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from core.storage import (
    DocumentKind,
    InvalidDocumentError,
    InvalidUsernameError,
    UserFileStore,
)
from web_api.dependencies import get_user_file_store
from web_api.responses import error_response, is_missing

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["user-data"])


class SaveDataRequest(BaseModel):
    """Request body for saving user data."""

    username: str | None = None
    data: Any = None


@router.post("/save-data", summary="Save user data")
def save_data(
    request: SaveDataRequest,
    store: UserFileStore = Depends(get_user_file_store),
):
    """
    Save a user's data document, replacing any previous one.

    Request body:
    - username: Owner of the document
    - data: Any JSON value, stored verbatim
    """
    if is_missing(request.username) or is_missing(request.data):
        return error_response(400, "Username and data are required")

    try:
        store.save(request.username, DocumentKind.DATA, request.data)
    except (InvalidUsernameError, InvalidDocumentError) as e:
        return error_response(400, str(e))
    except Exception as e:
        logger.error(f"Failed to save data for {request.username!r}: {e}")
        sentry_sdk.capture_exception(e)
        return error_response(500, "Server error", error=str(e))

    return {"success": True, "message": "Data saved successfully"}


@router.get("/get-data/{username}", summary="Get user data")
def get_data(
    username: str,
    store: UserFileStore = Depends(get_user_file_store),
):
    """
    Get a user's data document.

    Returns data=null (still 200) when nothing has been saved for the user.
    """
    if not username:
        return error_response(400, "Username is required")

    try:
        path = store.path_for(username, DocumentKind.DATA)
        if not store.exists(path):
            return {"success": True, "data": None, "message": "No user data found"}
        data = store.read(path)
    except InvalidUsernameError as e:
        return error_response(400, str(e))
    except Exception as e:
        logger.error(f"Failed to read data for {username!r}: {e}")
        sentry_sdk.capture_exception(e)
        return error_response(500, "Server error", error=str(e))

    return {"success": True, "data": data}
