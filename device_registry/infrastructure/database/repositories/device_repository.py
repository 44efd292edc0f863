"""SQLAlchemy powered repository for device persistence and the history ledger."""

from __future__ import annotations

import logging
import math
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Mapping, Optional, Sequence, Union

from sqlalchemy import String, cast, func, literal, null, or_, select, union_all, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager
from sqlalchemy.sql import ColumnElement, Select

from device_registry.db.models import (
    Computer as ComputerModel,
    DeviceHistory as DeviceHistoryModel,
    DeviceIndex as DeviceIndexModel,
    FrequentComputer as FrequentComputerModel,
    MedicalDevice as MedicalDeviceModel,
    generate_uuid,
)
from device_registry.modules.devices.criteria import DeviceCriteria
from device_registry.modules.devices.exceptions import (
    DeviceConflictError,
    DeviceNotFoundError,
    StorageFailureError,
)
from device_registry.modules.devices.history import (
    DeviceHistoryEntry,
    DeviceHistoryFilters,
    HistoryEvent,
)
from device_registry.modules.devices.models import (
    Computer,
    DeviceType,
    EnteredDevice,
    FrequentComputer,
    MedicalDevice,
    Owner,
)

logger = logging.getLogger(__name__)

# Criteria field names arrive camelCased from the wire; snake_case works too.
_FIELD_NAMES = {
    "id": "id",
    "type": "type",
    "brand": "brand",
    "model": "model",
    "color": "color",
    "serial": "serial",
    "ownerid": "owner_id",
    "ownername": "owner_name",
    "photourl": "photo_url",
    "checkinurl": "checkin_url",
    "checkouturl": "checkout_url",
    "checkinat": "checkin_at",
    "checkoutat": "checkout_at",
    "updatedat": "updated_at",
}
_SORT_ONLY_FIELDS = {"checkin_at", "checkout_at", "updated_at"}

_COMPUTER_FIELDS = (
    "id", "brand", "model", "color", "owner_id", "owner_name", "photo_url",
    "checkin_at", "checkout_at", "updated_at",
)
_MEDICAL_FIELDS = (
    "id", "brand", "model", "serial", "owner_id", "owner_name", "photo_url",
    "checkin_at", "checkout_at", "updated_at",
)
_COMPUTER_SEARCH = ("id", "brand", "model", "color", "owner_name", "owner_id")
_MEDICAL_SEARCH = ("id", "brand", "model", "serial", "owner_name", "owner_id")
_ENTERED_SEARCH = ("id", "brand", "model", "color", "serial", "owner_name", "owner_id")


class SqlDeviceRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # ------------------------------------------------------------------ writes

    async def register_frequent_computer(self, computer: FrequentComputer) -> FrequentComputer:
        device = computer.device
        async with self._storage_errors("register frequent computer"):
            stored = await self._save_computer(device, DeviceType.COMPUTER)

            registration = await self._session.get(FrequentComputerModel, device.id)
            if registration is None:
                registration = FrequentComputerModel(
                    id=device.id,
                    checkin_url=computer.checkin_url,
                    checkout_url=computer.checkout_url,
                )
                self._session.add(registration)
            else:
                # Links handed out at first registration stay valid.
                registration.checkin_url = registration.checkin_url or computer.checkin_url
                registration.checkout_url = registration.checkout_url or computer.checkout_url
            await self._session.flush()

        return FrequentComputer(
            device=Computer.from_orm(stored),
            checkin_url=registration.checkin_url,
            checkout_url=registration.checkout_url,
        )

    async def checkin_computer(self, computer: Computer) -> Computer:
        async with self._storage_errors("check in computer"):
            await self._save_computer(computer, DeviceType.COMPUTER)
            await self._session.flush()
        return computer

    async def checkin_medical_device(self, device: MedicalDevice) -> MedicalDevice:
        async with self._storage_errors("check in medical device"):
            await self._claim_id(device.id, DeviceType.MEDICAL_DEVICE)
            model = await self._session.get(MedicalDeviceModel, device.id)
            if model is None:
                model = MedicalDeviceModel(
                    id=device.id, checkin_at=device.checkin_at, checkout_at=device.checkout_at
                )
                self._session.add(model)
            elif device.checkin_at is not None:
                self._ensure_can_check_in(MedicalDevice.from_orm(model), device.checkin_at)
                model.checkin_at = device.checkin_at
                model.checkout_at = None

            model.brand = device.brand
            model.model = device.model
            model.serial = device.serial
            model.owner_name = device.owner.name
            model.owner_id = device.owner.id
            model.photo_url = device.photo_url
            model.updated_at = device.updated_at

            if device.checkin_at is not None:
                self._append_history(
                    device_id=device.id,
                    device_type=DeviceType.MEDICAL_DEVICE,
                    brand=device.brand,
                    model=device.model,
                    owner=device.owner,
                    event=HistoryEvent.CHECKIN,
                    event_date=device.checkin_at,
                    serial=device.serial,
                )
            await self._session.flush()
        return device

    async def checkin_frequent_computer(self, device_id: str, checkin_at: datetime) -> FrequentComputer:
        async with self._storage_errors("check in frequent computer"):
            registration = await self._session.get(FrequentComputerModel, device_id)
            if registration is None:
                raise DeviceNotFoundError(f"Frequent computer not found: {device_id}")

            # The guard is part of the UPDATE so a concurrent transition loses cleanly.
            stmt = (
                update(ComputerModel)
                .where(ComputerModel.id == device_id)
                .where(or_(ComputerModel.checkin_at.is_(None), ComputerModel.checkout_at.is_not(None)))
                .where(or_(ComputerModel.checkout_at.is_(None), ComputerModel.checkout_at < checkin_at))
                .values(checkin_at=checkin_at, checkout_at=None, updated_at=checkin_at)
                .execution_options(synchronize_session=False)
            )
            result = await self._session.execute(stmt)
            if result.rowcount == 0:
                raise DeviceConflictError(
                    f"Frequent computer {device_id} is already entered or was checked out after {checkin_at.isoformat()}"
                )

            computer = await self._session.get(ComputerModel, device_id)
            await self._session.refresh(computer)
            self._append_history(
                device_id=device_id,
                device_type=DeviceType.FREQUENT_COMPUTER,
                brand=computer.brand,
                model=computer.model,
                owner=Owner(name=computer.owner_name, id=computer.owner_id),
                event=HistoryEvent.CHECKIN,
                event_date=checkin_at,
                color=computer.color,
            )
            await self._session.flush()
            return FrequentComputer(
                device=Computer.from_orm(computer),
                checkin_url=registration.checkin_url,
                checkout_url=registration.checkout_url,
            )

    async def checkout_device(self, device_id: str, checkout_at: datetime) -> None:
        async with self._storage_errors("check out device"):
            index = await self._session.get(DeviceIndexModel, device_id)
            if index is None:
                raise DeviceNotFoundError(f"Device not found: {device_id}")

            variant = DeviceType(index.device_type)
            model_cls = MedicalDeviceModel if variant is DeviceType.MEDICAL_DEVICE else ComputerModel
            model = await self._session.get(model_cls, device_id)
            if model is None:
                raise DeviceNotFoundError(f"Device not found: {device_id}")
            if model.checkin_at is not None and checkout_at < model.checkin_at:
                raise DeviceConflictError(
                    f"Device {device_id} cannot be checked out before its check-in"
                )

            stmt = (
                update(model_cls)
                .where(model_cls.id == device_id)
                .where(model_cls.checkin_at.is_not(None))
                .where(model_cls.checkout_at.is_(None))
                .values(checkout_at=checkout_at, updated_at=checkout_at)
                .execution_options(synchronize_session=False)
            )
            result = await self._session.execute(stmt)
            if result.rowcount == 0:
                raise DeviceNotFoundError(f"Device is not entered: {device_id}")
            await self._session.refresh(model)

            if variant is DeviceType.COMPUTER and await self._is_frequent(device_id):
                variant = DeviceType.FREQUENT_COMPUTER

            self._append_history(
                device_id=device_id,
                device_type=variant,
                brand=model.brand,
                model=model.model,
                owner=Owner(name=model.owner_name, id=model.owner_id),
                event=HistoryEvent.CHECKOUT,
                event_date=checkout_at,
                serial=getattr(model, "serial", None),
                color=getattr(model, "color", None),
            )
            await self._session.flush()

    # ------------------------------------------------------------------- reads

    async def get_computers(self, criteria: DeviceCriteria) -> list[Computer]:
        columns = {name: getattr(ComputerModel, name) for name in _COMPUTER_FIELDS}
        stmt = _apply_criteria(select(ComputerModel), columns, criteria, _COMPUTER_SEARCH)
        async with self._storage_errors("list computers"):
            result = await self._session.execute(stmt)
            return [Computer.from_orm(model) for model in result.scalars().all()]

    async def get_medical_devices(self, criteria: DeviceCriteria) -> list[MedicalDevice]:
        columns = {name: getattr(MedicalDeviceModel, name) for name in _MEDICAL_FIELDS}
        stmt = _apply_criteria(select(MedicalDeviceModel), columns, criteria, _MEDICAL_SEARCH)
        async with self._storage_errors("list medical devices"):
            result = await self._session.execute(stmt)
            return [MedicalDevice.from_orm(model) for model in result.scalars().all()]

    async def get_frequent_computers(self, criteria: DeviceCriteria) -> list[FrequentComputer]:
        columns: dict[str, ColumnElement[Any]] = {
            name: getattr(ComputerModel, name) for name in _COMPUTER_FIELDS
        }
        columns["checkin_url"] = FrequentComputerModel.checkin_url
        columns["checkout_url"] = FrequentComputerModel.checkout_url
        base = (
            select(FrequentComputerModel)
            .join(FrequentComputerModel.computer)
            .options(contains_eager(FrequentComputerModel.computer))
        )
        stmt = _apply_criteria(base, columns, criteria, _COMPUTER_SEARCH)
        async with self._storage_errors("list frequent computers"):
            result = await self._session.execute(stmt)
            return [FrequentComputer.from_orm(model) for model in result.scalars().unique().all()]

    async def get_entered_devices(self, criteria: DeviceCriteria) -> list[EnteredDevice]:
        computers = select(
            ComputerModel.id.label("id"),
            literal(DeviceType.COMPUTER.value, type_=String).label("type"),
            ComputerModel.brand.label("brand"),
            ComputerModel.model.label("model"),
            ComputerModel.owner_name.label("owner_name"),
            ComputerModel.owner_id.label("owner_id"),
            ComputerModel.checkin_at.label("checkin_at"),
            ComputerModel.checkout_at.label("checkout_at"),
            ComputerModel.updated_at.label("updated_at"),
            cast(null(), String).label("serial"),
            ComputerModel.color.label("color"),
            ComputerModel.photo_url.label("photo_url"),
        ).where(ComputerModel.checkin_at.is_not(None), ComputerModel.checkout_at.is_(None))
        medical = select(
            MedicalDeviceModel.id,
            literal(DeviceType.MEDICAL_DEVICE.value, type_=String),
            MedicalDeviceModel.brand,
            MedicalDeviceModel.model,
            MedicalDeviceModel.owner_name,
            MedicalDeviceModel.owner_id,
            MedicalDeviceModel.checkin_at,
            MedicalDeviceModel.checkout_at,
            MedicalDeviceModel.updated_at,
            MedicalDeviceModel.serial,
            cast(null(), String),
            MedicalDeviceModel.photo_url,
        ).where(MedicalDeviceModel.checkin_at.is_not(None), MedicalDeviceModel.checkout_at.is_(None))

        entered = union_all(computers, medical).subquery("entered")
        columns = {name: entered.c[name] for name in entered.c.keys()}
        stmt = _apply_criteria(select(entered), columns, criteria, _ENTERED_SEARCH)
        async with self._storage_errors("list entered devices"):
            result = await self._session.execute(stmt)
            return [EnteredDevice.from_row(row) for row in result.mappings().all()]

    async def is_device_entered(self, device_id: str) -> bool:
        async with self._storage_errors("check device presence"):
            for model_cls in (ComputerModel, MedicalDeviceModel):
                stmt = select(model_cls.checkin_at, model_cls.checkout_at).where(model_cls.id == device_id)
                row = (await self._session.execute(stmt)).first()
                if row is not None and row.checkin_at is not None and row.checkout_at is None:
                    return True
        return False

    async def is_frequent_computer_registered(self, device_id: str) -> bool:
        async with self._storage_errors("check frequent registration"):
            return await self._is_frequent(device_id)

    async def get_device_history(
        self, filters: Optional[DeviceHistoryFilters] = None
    ) -> list[DeviceHistoryEntry]:
        stmt = select(DeviceHistoryModel)
        if filters is not None:
            if filters.device_type is not None:
                stmt = stmt.where(DeviceHistoryModel.device_type == DeviceType(filters.device_type).value)
            if filters.event is not None:
                stmt = stmt.where(DeviceHistoryModel.event == HistoryEvent(filters.event).value)
            if filters.start_date is not None:
                stmt = stmt.where(DeviceHistoryModel.event_date >= filters.start_date)
            if filters.end_date is not None:
                stmt = stmt.where(DeviceHistoryModel.event_date <= filters.end_date)
            if filters.owner_id is not None:
                stmt = stmt.where(DeviceHistoryModel.owner_id == filters.owner_id)
        stmt = stmt.order_by(DeviceHistoryModel.event_date.desc(), DeviceHistoryModel.id.asc())

        async with self._storage_errors("read device history"):
            result = await self._session.execute(stmt)
            return [DeviceHistoryEntry.from_orm(model) for model in result.scalars().all()]

    # ----------------------------------------------------------------- helpers

    async def _save_computer(self, computer: Computer, device_type: DeviceType) -> ComputerModel:
        await self._claim_id(computer.id, device_type)
        model = await self._session.get(ComputerModel, computer.id)
        if model is None:
            model = ComputerModel(
                id=computer.id, checkin_at=computer.checkin_at, checkout_at=computer.checkout_at
            )
            self._session.add(model)
        # Re-registration carries no checkin_at and leaves presence untouched.
        elif computer.checkin_at is not None:
            self._ensure_can_check_in(Computer.from_orm(model), computer.checkin_at)
            model.checkin_at = computer.checkin_at
            model.checkout_at = None

        model.brand = computer.brand
        model.model = computer.model
        model.color = computer.color
        model.owner_name = computer.owner.name
        model.owner_id = computer.owner.id
        model.photo_url = computer.photo_url
        model.updated_at = computer.updated_at

        if computer.checkin_at is not None:
            self._append_history(
                device_id=computer.id,
                device_type=DeviceType.COMPUTER,
                brand=computer.brand,
                model=computer.model,
                owner=computer.owner,
                event=HistoryEvent.CHECKIN,
                event_date=computer.checkin_at,
                color=computer.color,
            )
        return model

    async def _claim_id(self, device_id: str, device_type: DeviceType) -> None:
        index = await self._session.get(DeviceIndexModel, device_id)
        if index is None:
            self._session.add(DeviceIndexModel(id=device_id, device_type=device_type.value))
        elif index.device_type != device_type.value:
            raise DeviceConflictError(
                f"Device id {device_id} already belongs to a {index.device_type}"
            )

    async def _is_frequent(self, device_id: str) -> bool:
        stmt = select(FrequentComputerModel.id).where(FrequentComputerModel.id == device_id)
        return (await self._session.execute(stmt)).scalar_one_or_none() is not None

    @staticmethod
    def _ensure_can_check_in(current: Union[Computer, MedicalDevice], checkin_at: datetime) -> None:
        if current.is_entered:
            raise DeviceConflictError(f"Device {current.id} is already entered")
        if current.checkout_at is not None and checkin_at <= current.checkout_at:
            raise DeviceConflictError(
                f"Check-in of {current.id} must be later than its last check-out"
            )

    def _append_history(
        self,
        *,
        device_id: str,
        device_type: DeviceType,
        brand: str,
        model: str,
        owner: Owner,
        event: HistoryEvent,
        event_date: datetime,
        serial: Optional[str] = None,
        color: Optional[str] = None,
    ) -> None:
        self._session.add(
            DeviceHistoryModel(
                id=generate_uuid(),
                device_id=device_id,
                device_type=device_type.value,
                brand=brand,
                model=model,
                owner_name=owner.name,
                owner_id=owner.id,
                event=event.value,
                event_date=event_date,
                serial=serial,
                color=color,
            )
        )

    @asynccontextmanager
    async def _storage_errors(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error("Device store failed to %s: %s", operation, exc)
            raise StorageFailureError(f"Could not {operation}") from exc


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _resolve_field(columns: Mapping[str, ColumnElement[Any]], field: str) -> Optional[str]:
    name = _FIELD_NAMES.get(field.replace("_", "").lower())
    if name is None or name not in columns:
        return None
    return name


def _page_value(name: str, value: Any) -> Optional[int]:
    if value is None:
        return None
    if (isinstance(value, float) and not math.isfinite(value)) or value < 0:
        logger.warning("Ignoring invalid %s: %s", name, value)
        return None
    return int(value)


def _apply_criteria(
    stmt: Select,
    columns: Mapping[str, ColumnElement[Any]],
    criteria: DeviceCriteria,
    search_fields: Sequence[str],
) -> Select:
    if criteria.filter_by is not None:
        name = _resolve_field(columns, criteria.filter_by.field)
        if name is None or name in _SORT_ONLY_FIELDS:
            logger.warning("Ignoring filter on unsupported field %s", criteria.filter_by.field)
        else:
            stmt = stmt.where(columns[name] == str(criteria.filter_by.value))

    if criteria.search:
        pattern = f"%{_escape_like(criteria.search.lower())}%"
        stmt = stmt.where(
            or_(*(func.lower(columns[name]).like(pattern, escape="\\") for name in search_fields))
        )

    order_by = []
    if criteria.sort_by is not None:
        name = _resolve_field(columns, criteria.sort_by.field)
        if name is None:
            logger.warning("Ignoring sort on unsupported field %s", criteria.sort_by.field)
        else:
            column = columns[name]
            order_by.append(column.asc() if criteria.sort_by.is_ascending else column.desc())
    if not order_by:
        order_by.append(columns["updated_at"].desc())
    order_by.append(columns["id"].asc())
    stmt = stmt.order_by(*order_by)

    offset = _page_value("offset", criteria.offset)
    limit = _page_value("limit", criteria.limit)
    if offset:
        stmt = stmt.offset(offset)
    if limit:
        stmt = stmt.limit(limit)
    return stmt
