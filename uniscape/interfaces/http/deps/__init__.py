"""Reusable FastAPI dependencies."""

from .auth import get_current_account, get_current_admin
from .container import get_app_container
from .database import get_db_session

__all__ = [
    "get_app_container",
    "get_current_account",
    "get_current_admin",
    "get_db_session",
]
