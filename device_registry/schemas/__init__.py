"""Pydantic schemas rendered by the HTTP adapter."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from device_registry.modules.devices.history import HistoryEvent
from device_registry.modules.devices.models import DeviceType


class CamelModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class OwnerResponse(CamelModel):
    name: str
    id: str


class ComputerResponse(CamelModel):
    id: str
    brand: str
    model: str
    color: Optional[str] = None
    photo_url: Optional[str] = Field(default=None, alias="photoURL")
    owner: OwnerResponse
    updated_at: datetime
    checkin_at: Optional[datetime] = None
    checkout_at: Optional[datetime] = None


class FrequentComputerResponse(CamelModel):
    device: ComputerResponse
    checkin_url: Optional[str] = Field(default=None, alias="checkinURL")
    checkout_url: Optional[str] = Field(default=None, alias="checkoutURL")


class MedicalDeviceResponse(CamelModel):
    id: str
    brand: str
    model: str
    serial: str
    photo_url: str = Field(alias="photoURL")
    owner: OwnerResponse
    updated_at: datetime
    checkin_at: Optional[datetime] = None
    checkout_at: Optional[datetime] = None


class EnteredDeviceResponse(CamelModel):
    id: str
    type: DeviceType
    brand: str
    model: str
    owner: OwnerResponse
    updated_at: datetime
    checkin_at: Optional[datetime] = None
    checkout_at: Optional[datetime] = None
    serial: Optional[str] = None
    color: Optional[str] = None
    photo_url: Optional[str] = Field(default=None, alias="photoURL")


class DeviceHistoryEntryResponse(CamelModel):
    id: str
    device_id: str
    device_type: DeviceType
    brand: str
    model: str
    owner: OwnerResponse
    event: HistoryEvent
    event_date: datetime
    serial: Optional[str] = None
    color: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
    detail: str
    errors: list[dict] = Field(default_factory=list)
