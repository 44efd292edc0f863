"""Translate device domain errors into HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from device_registry.modules.devices.exceptions import (
    DeviceConflictError,
    DeviceError,
    DeviceNotFoundError,
    DeviceValidationError,
    PhotoUploadError,
    StorageFailureError,
)
from device_registry.schemas import ErrorResponse

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[DeviceError], int] = {
    DeviceValidationError: 422,
    DeviceNotFoundError: status.HTTP_404_NOT_FOUND,
    DeviceConflictError: status.HTTP_409_CONFLICT,
    PhotoUploadError: status.HTTP_502_BAD_GATEWAY,
    StorageFailureError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _status_for(exc: DeviceError) -> int:
    for error_type, status_code in STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def device_error_handler(request: Request, exc: DeviceError) -> JSONResponse:
    status_code = _status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    else:
        logger.warning("%s %s rejected (%s): %s", request.method, request.url.path, exc.kind, exc)

    body = ErrorResponse(error=exc.kind, detail=str(exc), errors=getattr(exc, "errors", []))
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DeviceError, device_error_handler)


__all__ = ["register_exception_handlers", "device_error_handler"]
