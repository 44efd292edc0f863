"""General and frequent computer endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status

from device_registry.interfaces.http.deps import get_computer_service
from device_registry.interfaces.http.forms import checkin_payload, read_photo
from device_registry.modules.devices import ComputerService, parse_criteria
from device_registry.schemas import ComputerResponse, FrequentComputerResponse

router = APIRouter()


@router.post(
    "/frequent",
    response_model=FrequentComputerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a frequent computer",
)
async def register_frequent_computer(
    brand: Optional[str] = Form(None),
    model: Optional[str] = Form(None),
    color: Optional[str] = Form(None),
    owner_name: Optional[str] = Form(None, alias="ownerName"),
    owner_id: Optional[str] = Form(None, alias="ownerId"),
    photo: Optional[UploadFile] = File(None),
    service: ComputerService = Depends(get_computer_service),
):
    payload = checkin_payload(
        brand=brand,
        model=model,
        color=color,
        owner_name=owner_name,
        owner_id=owner_id,
        photo=await read_photo(photo),
    )
    frequent = await service.register_frequent_computer(payload)
    return FrequentComputerResponse.model_validate(frequent)


@router.get("/frequent", response_model=list[FrequentComputerResponse], summary="List frequent computers")
async def list_frequent_computers(
    request: Request,
    service: ComputerService = Depends(get_computer_service),
):
    computers = await service.get_frequent_computers(parse_criteria(request.query_params))
    return [FrequentComputerResponse.model_validate(computer) for computer in computers]


@router.patch(
    "/frequent/checkin/{device_id}",
    response_model=FrequentComputerResponse,
    summary="Check in a registered frequent computer",
)
async def checkin_frequent_computer(
    device_id: str,
    service: ComputerService = Depends(get_computer_service),
):
    frequent = await service.checkin_frequent_computer(device_id)
    return FrequentComputerResponse.model_validate(frequent)


@router.post(
    "/checkin",
    response_model=ComputerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Check in a computer",
)
async def checkin_computer(
    brand: Optional[str] = Form(None),
    model: Optional[str] = Form(None),
    color: Optional[str] = Form(None),
    owner_name: Optional[str] = Form(None, alias="ownerName"),
    owner_id: Optional[str] = Form(None, alias="ownerId"),
    photo: Optional[UploadFile] = File(None),
    service: ComputerService = Depends(get_computer_service),
):
    payload = checkin_payload(
        brand=brand,
        model=model,
        color=color,
        owner_name=owner_name,
        owner_id=owner_id,
        photo=await read_photo(photo),
    )
    computer = await service.checkin_computer(payload)
    return ComputerResponse.model_validate(computer)


@router.get("", response_model=list[ComputerResponse], summary="List computers")
async def list_computers(
    request: Request,
    service: ComputerService = Depends(get_computer_service),
):
    computers = await service.get_computers(parse_criteria(request.query_params))
    return [ComputerResponse.model_validate(computer) for computer in computers]
