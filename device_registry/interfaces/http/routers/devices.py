"""Cross-variant device endpoints."""

from fastapi import APIRouter, Depends, Request, Response, status

from device_registry.interfaces.http.deps import get_device_service
from device_registry.modules.devices import DeviceService, parse_criteria
from device_registry.schemas import EnteredDeviceResponse

router = APIRouter()


@router.patch(
    "/checkout/{device_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Check out any entered device",
)
async def checkout_device(
    device_id: str,
    service: DeviceService = Depends(get_device_service),
) -> Response:
    await service.checkout_device(device_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/entered", response_model=list[EnteredDeviceResponse], summary="List devices currently inside")
async def list_entered_devices(
    request: Request,
    service: DeviceService = Depends(get_device_service),
):
    devices = await service.get_entered_devices(parse_criteria(request.query_params))
    return [EnteredDeviceResponse.model_validate(device) for device in devices]
