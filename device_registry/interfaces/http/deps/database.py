"""Database session dependency."""

from device_registry.infrastructure.database.session import get_session as get_db_session

__all__ = ["get_db_session"]
