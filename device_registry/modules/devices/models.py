"""Device domain models."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from device_registry.db import models as orm

from .exceptions import DeviceValidationError


class DeviceType(str, enum.Enum):
    COMPUTER = "computer"
    FREQUENT_COMPUTER = "frequent-computer"
    MEDICAL_DEVICE = "medical-device"


@dataclass(slots=True)
class Owner:
    name: str
    id: str


@dataclass(slots=True)
class Computer:
    id: str
    brand: str
    model: str
    owner: Owner
    updated_at: datetime
    color: Optional[str] = None
    photo_url: Optional[str] = None
    checkin_at: Optional[datetime] = None
    checkout_at: Optional[datetime] = None

    @property
    def is_entered(self) -> bool:
        return self.checkin_at is not None and self.checkout_at is None

    @classmethod
    def from_orm(cls, instance: orm.Computer) -> "Computer":
        return cls(
            id=str(instance.id),
            brand=instance.brand,
            model=instance.model,
            color=instance.color,
            owner=Owner(name=instance.owner_name, id=instance.owner_id),
            photo_url=instance.photo_url,
            checkin_at=instance.checkin_at,
            checkout_at=instance.checkout_at,
            updated_at=instance.updated_at,
        )


@dataclass(slots=True)
class FrequentComputer:
    """A computer enrolled for repeated check-in/check-out through fixed links."""

    device: Computer
    checkin_url: Optional[str] = None
    checkout_url: Optional[str] = None

    @classmethod
    def from_orm(cls, instance: orm.FrequentComputer) -> "FrequentComputer":
        return cls(
            device=Computer.from_orm(instance.computer),
            checkin_url=instance.checkin_url,
            checkout_url=instance.checkout_url,
        )


@dataclass(slots=True)
class MedicalDevice:
    id: str
    brand: str
    model: str
    serial: str
    photo_url: str
    owner: Owner
    updated_at: datetime
    checkin_at: Optional[datetime] = None
    checkout_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        # Traceability: a medical device always carries its serial and photo.
        if not self.serial:
            raise DeviceValidationError("medical device requires a serial number")
        if not self.photo_url:
            raise DeviceValidationError("medical device requires a photo")

    @property
    def is_entered(self) -> bool:
        return self.checkin_at is not None and self.checkout_at is None

    @classmethod
    def from_orm(cls, instance: orm.MedicalDevice) -> "MedicalDevice":
        return cls(
            id=str(instance.id),
            brand=instance.brand,
            model=instance.model,
            serial=instance.serial,
            photo_url=instance.photo_url,
            owner=Owner(name=instance.owner_name, id=instance.owner_id),
            checkin_at=instance.checkin_at,
            checkout_at=instance.checkout_at,
            updated_at=instance.updated_at,
        )


@dataclass(slots=True)
class EnteredDevice:
    """Read projection of a device currently present on site."""

    id: str
    type: DeviceType
    brand: str
    model: str
    owner: Owner
    updated_at: datetime
    checkin_at: Optional[datetime] = None
    checkout_at: Optional[datetime] = None
    serial: Optional[str] = None
    color: Optional[str] = None
    photo_url: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "EnteredDevice":
        return cls(
            id=str(row["id"]),
            type=DeviceType(row["type"]),
            brand=row["brand"],
            model=row["model"],
            owner=Owner(name=row["owner_name"], id=row["owner_id"]),
            checkin_at=row["checkin_at"],
            checkout_at=row["checkout_at"],
            updated_at=row["updated_at"],
            serial=row["serial"],
            color=row["color"],
            photo_url=row["photo_url"],
        )
