"""Photo storage on the local filesystem, served back under a public base URL."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from device_registry.modules.devices.exceptions import PhotoUploadError
from device_registry.modules.devices.requests import PhotoUpload

logger = logging.getLogger(__name__)


class FileSystemPhotoRepository:
    """Stores one photo per device as ``<root>/<device_id>.<extension>``."""

    def __init__(self, storage_root: Path, public_base_url: str) -> None:
        self._root = Path(storage_root)
        self._base_url = public_base_url.rstrip("/")

    async def save(self, photo: PhotoUpload, device_id: str) -> str:
        extension = photo.extension
        if not extension:
            raise PhotoUploadError("Invalid file: no extension found")
        if not photo.content:
            raise PhotoUploadError("Invalid file: empty content")

        file_name = f"{_sanitize(device_id)}.{extension}"
        target_path = self._root / file_name
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            with target_path.open("wb") as buffer:
                buffer.write(photo.content)
        except OSError as exc:
            logger.error("Failed to store photo for %s: %s", device_id, exc)
            target_path.unlink(missing_ok=True)
            raise PhotoUploadError(f"Failed to store photo for {device_id}") from exc

        logger.info("Stored photo %s (%d bytes)", file_name, len(photo.content))
        return f"{self._base_url}/{file_name}"

    async def delete(self, device_id: str) -> bool:
        try:
            for path in self._root.glob(f"{_sanitize(device_id)}.*"):
                path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Failed to delete photo for %s: %s", device_id, exc)
            return False
        return True

    async def lookup(self, device_id: str, extension: str = "png") -> Optional[str]:
        file_name = f"{_sanitize(device_id)}.{extension.lstrip('.')}"
        try:
            exists = (self._root / file_name).is_file()
        except OSError as exc:
            logger.warning("Failed to look up photo for %s: %s", device_id, exc)
            return None
        return f"{self._base_url}/{file_name}" if exists else None


def _sanitize(device_id: str) -> str:
    # Ids come from uuid4, but never let one escape the storage root.
    return Path(device_id.replace("\0", "")).name
