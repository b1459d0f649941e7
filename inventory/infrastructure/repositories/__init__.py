"""
Repositories Package - Infrastructure Layer

Concrete implementations of the domain repository interfaces.
"""

from .device_repository import DeviceRepository

__all__ = ["DeviceRepository"]
