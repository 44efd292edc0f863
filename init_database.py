"""
Create the device registry tables and the photo directory.
Alembic migrations remain the path for existing databases.
"""
import asyncio

from device_registry.core.config import get_settings
from device_registry.core.container import ApplicationContainer
from device_registry.infrastructure.database.session import dispose_engine, init_db


async def create_tables():
    settings = get_settings()
    container = ApplicationContainer.from_settings(settings)
    container.init_infrastructure()
    try:
        await init_db(settings)
    finally:
        await dispose_engine()

    print("=" * 50)
    print(f"Database ready: {settings.database_url}")
    print(f"Photo directory: {settings.storage.photo_dir}")
    print("=" * 50)


if __name__ == "__main__":
    asyncio.run(create_tables())
