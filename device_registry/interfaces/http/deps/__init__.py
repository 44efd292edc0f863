"""Reusable FastAPI dependencies."""

from .database import get_db_session
from .devices import (
    get_app_settings,
    get_computer_service,
    get_device_service,
    get_history_service,
    get_medical_device_service,
)

__all__ = [
    "get_db_session",
    "get_app_settings",
    "get_computer_service",
    "get_device_service",
    "get_history_service",
    "get_medical_device_service",
]
