"""Device history endpoint."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query

from device_registry.interfaces.http.deps import get_history_service
from device_registry.modules.devices import DeviceType
from device_registry.modules.history import DeviceHistoryFilters, DeviceHistoryService, HistoryEvent
from device_registry.schemas import DeviceHistoryEntryResponse

router = APIRouter()


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Naive query timestamps are read as UTC.
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


@router.get("/history", response_model=list[DeviceHistoryEntryResponse], summary="Query the device history")
async def list_device_history(
    device_type: Optional[DeviceType] = Query(None, alias="deviceType"),
    event: Optional[HistoryEvent] = Query(None),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    owner_id: Optional[str] = Query(None, alias="ownerId"),
    service: DeviceHistoryService = Depends(get_history_service),
):
    filters = DeviceHistoryFilters(
        device_type=device_type,
        event=event,
        start_date=_as_utc(start_date),
        end_date=_as_utc(end_date),
        owner_id=owner_id,
    )
    entries = await service.get_history(filters)
    return [DeviceHistoryEntryResponse.model_validate(entry) for entry in entries]
