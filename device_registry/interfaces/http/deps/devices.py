"""Device lifecycle dependency providers."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from device_registry.core.config import Settings
from device_registry.modules.devices import ComputerService, DeviceService, MedicalDeviceService
from device_registry.modules.history import DeviceHistoryService

from .database import get_db_session


def get_app_settings(request: Request) -> Settings:
    return request.app.state.container.settings


def get_computer_service(
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> ComputerService:
    return ComputerService.with_session(db, settings)


def get_medical_device_service(
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> MedicalDeviceService:
    return MedicalDeviceService.with_session(db, settings)


def get_device_service(db: AsyncSession = Depends(get_db_session)) -> DeviceService:
    return DeviceService.with_session(db)


def get_history_service(db: AsyncSession = Depends(get_db_session)) -> DeviceHistoryService:
    return DeviceHistoryService.with_session(db)


__all__ = [
    "get_app_settings",
    "get_computer_service",
    "get_medical_device_service",
    "get_device_service",
    "get_history_service",
]
