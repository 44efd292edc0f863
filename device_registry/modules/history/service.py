"""Domain service for the device history ledger."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from device_registry.modules.devices.history import DeviceHistoryEntry, DeviceHistoryFilters
from device_registry.modules.devices.repository import DeviceRepository


@dataclass(slots=True)
class DeviceHistoryService:
    repository: DeviceRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "DeviceHistoryService":
        from device_registry.infrastructure.database.repositories import SqlDeviceRepository

        return cls(SqlDeviceRepository(session))

    async def get_history(self, filters: Optional[DeviceHistoryFilters] = None) -> list[DeviceHistoryEntry]:
        return list(await self.repository.get_device_history(filters))
