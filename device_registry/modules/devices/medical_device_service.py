"""Use cases for regulated medical devices."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping, Union

from sqlalchemy.ext.asyncio import AsyncSession

from device_registry.core.config import Settings, get_settings

from .criteria import DeviceCriteria, validate_pagination
from .helpers import generate_device_id, save_photo, utcnow
from .models import MedicalDevice, Owner
from .repository import DeviceRepository, PhotoRepository
from .requests import MedicalDeviceCheckinInput, validate_input

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MedicalDeviceService:
    repository: DeviceRepository
    photos: PhotoRepository
    clock: Callable[[], datetime] = utcnow

    @classmethod
    def with_session(cls, session: AsyncSession, settings: Settings | None = None) -> "MedicalDeviceService":
        # Imported lazily: the adapters import this package.
        from device_registry.infrastructure.database.repositories import SqlDeviceRepository
        from device_registry.infrastructure.photos import FileSystemPhotoRepository

        settings = settings or get_settings()
        photos = FileSystemPhotoRepository(settings.storage.photo_dir, settings.storage.photo_base_url)
        return cls(SqlDeviceRepository(session), photos)

    async def get_medical_devices(self, criteria: DeviceCriteria) -> list[MedicalDevice]:
        validate_pagination(criteria)
        return list(await self.repository.get_medical_devices(criteria))

    async def checkin_medical_device(
        self, payload: Union[MedicalDeviceCheckinInput, Mapping[str, Any]]
    ) -> MedicalDevice:
        request = validate_input(MedicalDeviceCheckinInput, payload)
        device_id = generate_device_id()
        checkin_at = self.clock()
        photo_url = await save_photo(self.photos, request.photo, device_id)

        device = MedicalDevice(
            id=device_id,
            brand=request.brand,
            model=request.model,
            serial=request.serial,
            photo_url=photo_url,
            owner=Owner(name=request.owner_name, id=request.owner_id),
            checkin_at=checkin_at,
            updated_at=checkin_at,
        )
        saved = await self.repository.checkin_medical_device(device)
        logger.info("Medical device %s (serial %s) checked in", device_id, request.serial)
        return saved
