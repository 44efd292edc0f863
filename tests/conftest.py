"""Shared fixtures: a throwaway SQLite database per test and sample devices."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from device_registry.db import models  # noqa: F401
from device_registry.infrastructure.database.base import Base
from device_registry.infrastructure.database.repositories import SqlDeviceRepository
from device_registry.modules.devices import (
    Computer,
    FrequentComputer,
    MedicalDevice,
    Owner,
    PhotoUpload,
)

T0 = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)


def at(minutes: int) -> datetime:
    return T0 + timedelta(minutes=minutes)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def session(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'devices.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as db:
        yield db
    await engine.dispose()


@pytest.fixture
def repository(session) -> SqlDeviceRepository:
    return SqlDeviceRepository(session)


def make_computer(device_id: str = "pc-1", *, checkin_at=T0, **overrides) -> Computer:
    fields = {
        "id": device_id,
        "brand": "Dell",
        "model": "Latitude 7440",
        "color": "black",
        "owner": Owner(name="Grace Hopper", id="EMP-001"),
        "checkin_at": checkin_at,
        "updated_at": checkin_at or T0,
    }
    fields.update(overrides)
    return Computer(**fields)


def make_frequent(device_id: str = "fc-1", **overrides) -> FrequentComputer:
    return FrequentComputer(
        device=make_computer(device_id, checkin_at=None, **overrides),
        checkin_url=f"http://registry.test/api/computers/frequent/checkin/{device_id}",
        checkout_url=f"http://registry.test/api/devices/checkout/{device_id}",
    )


def make_medical(device_id: str = "md-1", *, checkin_at=T0, **overrides) -> MedicalDevice:
    fields = {
        "id": device_id,
        "brand": "Philips",
        "model": "IntelliVue MX40",
        "serial": "SN-40-0001",
        "photo_url": f"http://registry.test/photos/{device_id}.png",
        "owner": Owner(name="Alan Turing", id="EMP-002"),
        "checkin_at": checkin_at,
        "updated_at": checkin_at,
    }
    fields.update(overrides)
    return MedicalDevice(**fields)


@pytest.fixture
def photo() -> PhotoUpload:
    return PhotoUpload(filename="device.png", content=b"\x89PNG fake image", content_type="image/png")
