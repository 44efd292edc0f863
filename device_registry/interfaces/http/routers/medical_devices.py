"""Medical device endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status

from device_registry.interfaces.http.deps import get_medical_device_service
from device_registry.interfaces.http.forms import checkin_payload, read_photo
from device_registry.modules.devices import MedicalDeviceService, parse_criteria
from device_registry.schemas import MedicalDeviceResponse

router = APIRouter()


@router.post(
    "/checkin",
    response_model=MedicalDeviceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Check in a medical device",
)
async def checkin_medical_device(
    brand: Optional[str] = Form(None),
    model: Optional[str] = Form(None),
    serial: Optional[str] = Form(None),
    owner_name: Optional[str] = Form(None, alias="ownerName"),
    owner_id: Optional[str] = Form(None, alias="ownerId"),
    photo: Optional[UploadFile] = File(None),
    service: MedicalDeviceService = Depends(get_medical_device_service),
):
    payload = checkin_payload(
        brand=brand,
        model=model,
        serial=serial,
        owner_name=owner_name,
        owner_id=owner_id,
        photo=await read_photo(photo),
    )
    device = await service.checkin_medical_device(payload)
    return MedicalDeviceResponse.model_validate(device)


@router.get("", response_model=list[MedicalDeviceResponse], summary="List medical devices")
async def list_medical_devices(
    request: Request,
    service: MedicalDeviceService = Depends(get_medical_device_service),
):
    devices = await service.get_medical_devices(parse_criteria(request.query_params))
    return [MedicalDeviceResponse.model_validate(device) for device in devices]
