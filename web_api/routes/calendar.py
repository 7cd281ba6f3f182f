"""
Study calendar API routes.

Endpoints:
- POST /api/save-calendar - Save a user's calendar
- GET /api/get-calendar/{username} - Get a user's calendar
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

router = APIRouter(prefix="/api", tags=["calendar"])


class SaveCalendarRequest(BaseModel):
    """Request body for saving calendar data."""

    username: str | None = None
    calendarData: Any = None


@router.post("/save-calendar", summary="Save calendar data")
def save_calendar(
    request: SaveCalendarRequest,
    store: UserFileStore = Depends(get_user_file_store),
):
    """
    Save a user's calendar, replacing any previous one.

    Request body:
    - username: Owner of the calendar
    - calendarData: Any JSON value, conventionally a date -> entry mapping
    """
    if is_missing(request.username) or is_missing(request.calendarData):
        return error_response(400, "Username and calendar data are required")

    try:
        store.save(request.username, DocumentKind.CALENDAR, request.calendarData)
    except (InvalidUsernameError, InvalidDocumentError) as e:
        return error_response(400, str(e))
    except Exception as e:
        logger.error(f"Failed to save calendar for {request.username!r}: {e}")
        sentry_sdk.capture_exception(e)
        return error_response(500, "Server error", error=str(e))

    return {"success": True, "message": "Calendar data saved successfully"}


@router.get("/get-calendar/{username}", summary="Get calendar data")
def get_calendar(
    username: str,
    store: UserFileStore = Depends(get_user_file_store),
):
    """
    Get a user's calendar.

    Unlike /get-data, a user with no saved calendar gets an empty object.
    """
    if not username:
        return error_response(400, "Username is required")

    try:
        path = store.path_for(username, DocumentKind.CALENDAR)
        if not store.exists(path):
            return {
                "success": True,
                "calendarData": {},
                "message": "No calendar data found",
            }
        calendar_data = store.read(path)
    except InvalidUsernameError as e:
        return error_response(400, str(e))
    except Exception as e:
        logger.error(f"Failed to read calendar for {username!r}: {e}")
        sentry_sdk.capture_exception(e)
        return error_response(500, "Server error", error=str(e))

    return {"success": True, "calendarData": calendar_data}
