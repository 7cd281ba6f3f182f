"""API route modules."""

from .calendar import router as calendar_router
from .user_data import router as user_data_router

__all__ = ["calendar_router", "user_data_router"]
