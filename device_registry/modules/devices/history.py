"""History ledger types: one entry per check-in or check-out that reached the store."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from device_registry.db import models as orm

from .models import DeviceType, Owner


class HistoryEvent(str, enum.Enum):
    CHECKIN = "checkin"
    CHECKOUT = "checkout"


@dataclass(slots=True)
class DeviceHistoryEntry:
    id: str
    device_id: str
    device_type: DeviceType
    brand: str
    model: str
    owner: Owner
    event: HistoryEvent
    event_date: datetime
    serial: Optional[str] = None
    color: Optional[str] = None

    @classmethod
    def from_orm(cls, instance: orm.DeviceHistory) -> "DeviceHistoryEntry":
        return cls(
            id=str(instance.id),
            device_id=instance.device_id,
            device_type=DeviceType(instance.device_type),
            brand=instance.brand,
            model=instance.model,
            owner=Owner(name=instance.owner_name, id=instance.owner_id),
            event=HistoryEvent(instance.event),
            event_date=instance.event_date,
            serial=instance.serial,
            color=instance.color,
        )


@dataclass(slots=True)
class DeviceHistoryFilters:
    """Conjunctive history predicates; ``None`` means unconstrained."""

    device_type: Optional[DeviceType] = None
    event: Optional[HistoryEvent] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    owner_id: Optional[str] = None
