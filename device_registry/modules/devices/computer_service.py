"""Use cases for general and frequent computers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from device_registry.core.config import Settings, get_settings

from .criteria import DeviceCriteria, validate_pagination
from .exceptions import DeviceNotFoundError
from .helpers import (
    frequent_checkin_url,
    frequent_checkout_url,
    generate_device_id,
    save_photo,
    utcnow,
)
from .models import Computer, FrequentComputer, Owner
from .repository import DeviceRepository, PhotoRepository
from .requests import ComputerCheckinInput, validate_input

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ComputerService:
    repository: DeviceRepository
    photos: PhotoRepository
    base_url: str
    clock: Callable[[], datetime] = utcnow

    @classmethod
    def with_session(cls, session: AsyncSession, settings: Settings | None = None) -> "ComputerService":
        # Imported lazily: the adapters import this package.
        from device_registry.infrastructure.database.repositories import SqlDeviceRepository
        from device_registry.infrastructure.photos import FileSystemPhotoRepository

        settings = settings or get_settings()
        photos = FileSystemPhotoRepository(settings.storage.photo_dir, settings.storage.photo_base_url)
        return cls(SqlDeviceRepository(session), photos, settings.public_base_url)

    async def get_computers(self, criteria: DeviceCriteria) -> list[Computer]:
        validate_pagination(criteria)
        return list(await self.repository.get_computers(criteria))

    async def get_frequent_computers(self, criteria: DeviceCriteria) -> list[FrequentComputer]:
        validate_pagination(criteria)
        return list(await self.repository.get_frequent_computers(criteria))

    async def register_frequent_computer(
        self, payload: Union[ComputerCheckinInput, Mapping[str, Any]]
    ) -> FrequentComputer:
        request = validate_input(ComputerCheckinInput, payload)
        device_id = generate_device_id()
        computer = await self._build_computer(request, device_id, checkin_at=None)
        frequent = FrequentComputer(
            device=computer,
            checkin_url=frequent_checkin_url(device_id, self.base_url),
            checkout_url=frequent_checkout_url(device_id, self.base_url),
        )
        registered = await self.repository.register_frequent_computer(frequent)
        logger.info("Frequent computer %s registered for owner %s", device_id, request.owner_id)
        return registered

    async def checkin_computer(self, payload: Union[ComputerCheckinInput, Mapping[str, Any]]) -> Computer:
        request = validate_input(ComputerCheckinInput, payload)
        device_id = generate_device_id()
        computer = await self._build_computer(request, device_id, checkin_at=self.clock())
        saved = await self.repository.checkin_computer(computer)
        logger.info("Computer %s checked in", device_id)
        return saved

    async def checkin_frequent_computer(self, device_id: str) -> FrequentComputer:
        if not await self.repository.is_frequent_computer_registered(device_id):
            logger.warning("Rejected check-in of unregistered frequent computer %s", device_id)
            raise DeviceNotFoundError(f"Frequent computer not found: {device_id}")

        computer = await self.repository.checkin_frequent_computer(device_id, self.clock())
        logger.info("Frequent computer %s checked in", device_id)
        return computer

    async def _build_computer(
        self,
        request: ComputerCheckinInput,
        device_id: str,
        *,
        checkin_at: Optional[datetime],
    ) -> Computer:
        # The photo lands before the record so a record never points at a missing blob.
        photo_url = None
        if request.photo is not None:
            photo_url = await save_photo(self.photos, request.photo, device_id)

        return Computer(
            id=device_id,
            brand=request.brand,
            model=request.model,
            color=request.color,
            owner=Owner(name=request.owner_name, id=request.owner_id),
            photo_url=photo_url,
            checkin_at=checkin_at,
            updated_at=checkin_at or self.clock(),
        )
