"""HTTP routers."""

from . import computers, devices, history, medical_devices

__all__ = ["computers", "devices", "history", "medical_devices"]
