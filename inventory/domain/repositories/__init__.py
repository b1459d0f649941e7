"""
Repositories Package

Repository contracts for device persistence. Implementations live in the
infrastructure layer.
"""

from .device_repository import IDeviceRepository

__all__ = ["IDeviceRepository"]
