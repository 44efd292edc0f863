"""Device lifecycle: domain types, ports and services."""

from .models import Computer, DeviceType, EnteredDevice, FrequentComputer, MedicalDevice, Owner
from .history import DeviceHistoryEntry, DeviceHistoryFilters, HistoryEvent
from .criteria import DeviceCriteria, FilterQuery, SortQuery, parse_criteria
from .requests import ComputerCheckinInput, MedicalDeviceCheckinInput, PhotoUpload
from .exceptions import (
    DeviceConflictError,
    DeviceError,
    DeviceNotFoundError,
    DeviceValidationError,
    PhotoUploadError,
    StorageFailureError,
)
from .repository import DeviceRepository, PhotoRepository
from .service import DeviceService
from .computer_service import ComputerService
from .medical_device_service import MedicalDeviceService

__all__ = [
    "Computer",
    "DeviceType",
    "EnteredDevice",
    "FrequentComputer",
    "MedicalDevice",
    "Owner",
    "DeviceHistoryEntry",
    "DeviceHistoryFilters",
    "HistoryEvent",
    "DeviceCriteria",
    "FilterQuery",
    "SortQuery",
    "parse_criteria",
    "ComputerCheckinInput",
    "MedicalDeviceCheckinInput",
    "PhotoUpload",
    "DeviceConflictError",
    "DeviceError",
    "DeviceNotFoundError",
    "DeviceValidationError",
    "PhotoUploadError",
    "StorageFailureError",
    "DeviceRepository",
    "PhotoRepository",
    "DeviceService",
    "ComputerService",
    "MedicalDeviceService",
]
