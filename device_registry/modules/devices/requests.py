"""Validated inputs for the check-in and registration use cases."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import DeviceValidationError


@dataclass(slots=True)
class PhotoUpload:
    filename: str
    content: bytes = field(repr=False)
    content_type: Optional[str] = None

    @property
    def extension(self) -> Optional[str]:
        suffix = PurePath(self.filename).suffix
        return suffix[1:].lower() if len(suffix) > 1 else None


class ComputerCheckinInput(BaseModel):
    """Shared by one-shot computer check-in and frequent computer registration."""

    model_config = ConfigDict(arbitrary_types_allowed=True, str_strip_whitespace=True)

    brand: str = Field(..., min_length=2, max_length=100)
    model: str = Field(..., min_length=2, max_length=100)
    color: Optional[str] = Field(default=None, max_length=50)
    owner_name: str = Field(..., min_length=3, max_length=150)
    owner_id: str = Field(..., min_length=3, max_length=100)
    photo: Optional[PhotoUpload] = None


class MedicalDeviceCheckinInput(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, str_strip_whitespace=True)

    brand: str = Field(..., min_length=2, max_length=100)
    model: str = Field(..., min_length=2, max_length=100)
    serial: str = Field(..., min_length=3, max_length=100)
    owner_name: str = Field(..., min_length=3, max_length=150)
    owner_id: str = Field(..., min_length=3, max_length=100)
    photo: PhotoUpload


InputT = TypeVar("InputT", bound=BaseModel)


def validate_input(schema: type[InputT], payload: Union[InputT, Mapping[str, Any]]) -> InputT:
    """Coerce ``payload`` into ``schema`` or raise :class:`DeviceValidationError`."""
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        errors = [
            {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
            for error in exc.errors()
        ]
        raise DeviceValidationError(f"invalid {schema.__name__} payload", errors) from exc
