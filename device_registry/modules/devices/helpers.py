"""Small helpers shared by the device services."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from .exceptions import PhotoUploadError
from .repository import PhotoRepository
from .requests import PhotoUpload


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_device_id() -> str:
    return str(uuid.uuid4())


def frequent_checkin_url(device_id: str, base_url: str) -> str:
    return f"{base_url.rstrip('/')}/computers/frequent/checkin/{device_id}"


def frequent_checkout_url(device_id: str, base_url: str) -> str:
    return f"{base_url.rstrip('/')}/devices/checkout/{device_id}"


async def save_photo(photos: PhotoRepository, photo: PhotoUpload, device_id: str) -> str:
    """Persist ``photo`` and return its URL; any store failure becomes ``PhotoUploadError``."""
    try:
        return await photos.save(photo, device_id)
    except PhotoUploadError:
        raise
    except Exception as exc:
        raise PhotoUploadError(f"Failed to store photo for {device_id}") from exc
