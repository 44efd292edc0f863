"""Feature modules and their public exports."""

from . import devices, history

__all__ = [
    "devices",
    "history",
]
