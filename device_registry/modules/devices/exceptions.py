"""Device domain specific exceptions."""

from __future__ import annotations

from typing import Any


class DeviceError(Exception):
    """Base class for device related domain errors."""

    kind = "device_error"


class DeviceValidationError(DeviceError):
    """Raised when a request is malformed or misses required fields."""

    kind = "validation_error"

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class DeviceNotFoundError(DeviceError):
    """Raised when an id does not satisfy the existence guard of an operation."""

    kind = "device_not_found"


class DeviceConflictError(DeviceError):
    """Raised when a write would violate id uniqueness or timestamp ordering."""

    kind = "conflict"


class PhotoUploadError(DeviceError):
    """Raised when the photo store rejects a write."""

    kind = "upload_failure"


class StorageFailureError(DeviceError):
    """Raised when the device store cannot complete a read or write."""

    kind = "storage_failure"
