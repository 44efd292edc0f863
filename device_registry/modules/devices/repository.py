"""Ports consumed by the device lifecycle services."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .criteria import DeviceCriteria
from .history import DeviceHistoryEntry, DeviceHistoryFilters
from .models import Computer, EnteredDevice, FrequentComputer, MedicalDevice
from .requests import PhotoUpload


class DeviceRepository(Protocol):
    """Persistence contract for devices and their history ledger.

    Implementations raise ``DeviceNotFoundError`` when an id fails an existence
    requirement, ``DeviceConflictError`` when a write would break id uniqueness
    or timestamp ordering, and ``StorageFailureError`` for every lower-level
    problem.
    """

    async def register_frequent_computer(self, computer: FrequentComputer) -> FrequentComputer:
        ...

    async def get_computers(self, criteria: DeviceCriteria) -> Sequence[Computer]:
        ...

    async def get_medical_devices(self, criteria: DeviceCriteria) -> Sequence[MedicalDevice]:
        ...

    async def get_frequent_computers(self, criteria: DeviceCriteria) -> Sequence[FrequentComputer]:
        ...

    async def get_entered_devices(self, criteria: DeviceCriteria) -> Sequence[EnteredDevice]:
        ...

    async def checkin_computer(self, computer: Computer) -> Computer:
        ...

    async def checkin_medical_device(self, device: MedicalDevice) -> MedicalDevice:
        ...

    async def checkin_frequent_computer(self, device_id: str, checkin_at: datetime) -> FrequentComputer:
        ...

    async def checkout_device(self, device_id: str, checkout_at: datetime) -> None:
        ...

    async def is_device_entered(self, device_id: str) -> bool:
        ...

    async def is_frequent_computer_registered(self, device_id: str) -> bool:
        ...

    async def get_device_history(
        self, filters: Optional[DeviceHistoryFilters] = None
    ) -> Sequence[DeviceHistoryEntry]:
        ...


class PhotoRepository(Protocol):
    """Binary photo storage addressed by device id."""

    async def save(self, photo: PhotoUpload, device_id: str) -> str:
        ...

    async def delete(self, device_id: str) -> bool:
        ...

    async def lookup(self, device_id: str, extension: str = "png") -> Optional[str]:
        ...
