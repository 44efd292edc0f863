"""HTTP adapter over the device lifecycle services."""

from fastapi import APIRouter, Depends

from device_registry.core.security import get_current_principal

from .routers import computers, devices, history, medical_devices


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix, dependencies=[Depends(get_current_principal)])
    router.include_router(computers.router, prefix="/computers", tags=["computers"])
    router.include_router(medical_devices.router, prefix="/medical-devices", tags=["medical devices"])
    router.include_router(devices.router, prefix="/devices", tags=["devices"])
    router.include_router(history.router, prefix="/devices", tags=["history"])
    return router


__all__ = ["create_api_router"]
