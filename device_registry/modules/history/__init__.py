"""Read access to the append-only device history ledger."""

from device_registry.modules.devices.history import DeviceHistoryEntry, DeviceHistoryFilters, HistoryEvent

from .service import DeviceHistoryService

__all__ = [
    "DeviceHistoryEntry",
    "DeviceHistoryFilters",
    "DeviceHistoryService",
    "HistoryEvent",
]
