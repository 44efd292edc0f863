"""Multipart form helpers shared by the check-in routers."""

from typing import Optional

from fastapi import UploadFile

from device_registry.modules.devices import PhotoUpload


async def read_photo(upload: Optional[UploadFile]) -> Optional[PhotoUpload]:
    if upload is None or not upload.filename:
        return None
    content = await upload.read()
    return PhotoUpload(filename=upload.filename, content=content, content_type=upload.content_type)


def checkin_payload(**fields) -> dict:
    """Drop absent form fields so the input models report them as missing."""
    return {key: value for key, value in fields.items() if value is not None}
