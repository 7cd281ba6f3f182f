"""
Response envelope helpers.

Every API response carries a ``success`` flag. Failures add a human-readable
``message`` and, for server errors, an ``error`` string with the underlying
failure text.
"""

from typing import Any

from fastapi.responses import JSONResponse


def is_missing(value: Any) -> bool:
    """
    True if a required field counts as not provided.

    Absent, null, false, empty string and numeric zero are all missing.
    Empty objects and arrays are present.
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    return False


def error_response(
    status_code: int, message: str, error: str | None = None
) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "message": message}
    if error is not None:
        content["error"] = error
    return JSONResponse(status_code=status_code, content=content)
