"""Domain service for device-wide operations: check-out and presence listing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from .criteria import DeviceCriteria, validate_pagination
from .exceptions import DeviceNotFoundError
from .helpers import utcnow
from .models import EnteredDevice
from .repository import DeviceRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DeviceService:
    repository: DeviceRepository
    clock: Callable[[], datetime] = utcnow

    @classmethod
    def with_session(cls, session: AsyncSession) -> "DeviceService":
        # Imported lazily: the SQL repository imports this package.
        from device_registry.infrastructure.database.repositories import SqlDeviceRepository

        return cls(SqlDeviceRepository(session))

    async def checkout_device(self, device_id: str) -> None:
        if not await self.repository.is_device_entered(device_id):
            logger.warning("Rejected check-out of device %s: not entered", device_id)
            raise DeviceNotFoundError(f"Device is not entered: {device_id}")

        await self.repository.checkout_device(device_id, self.clock())
        logger.info("Device %s checked out", device_id)

    async def get_entered_devices(self, criteria: DeviceCriteria) -> list[EnteredDevice]:
        validate_pagination(criteria)
        return list(await self.repository.get_entered_devices(criteria))
