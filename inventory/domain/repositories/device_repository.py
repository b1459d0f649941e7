"""
Device Repository Interface

Port through which the application layer reads and writes devices. The
implementation owns all consistency guarantees: single-document upserts,
conditional group writes and count+page reads from one execution.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from inventory.domain.entities.device import Device, DeviceAttribute
from inventory.domain.entities.query import ListQuery, SearchParams


class IDeviceRepository(ABC):
    """Interface for device repository implementations."""

    @abstractmethod
    async def create_device(self, device: Device) -> None:
        """
        Store a new device, materializing its initial group as an attribute.

        Raises:
            InvalidAttributeError: If any attribute is invalid; nothing is written.
        """
        pass

    @abstractmethod
    async def upsert_attributes(
        self, device_id: str, attributes: List[DeviceAttribute]
    ) -> None:
        """
        Merge attributes into a device, creating it when missing.

        Raises:
            InvalidAttributeError: If any attribute is invalid; nothing is written.
        """
        pass

    @abstractmethod
    async def get_device(self, device_id: str) -> Optional[Device]:
        """Return the device, or None if it does not exist."""
        pass

    @abstractmethod
    async def list_devices(self, query: ListQuery) -> Tuple[List[Device], int]:
        """Return one page of matching devices and the total match count."""
        pass

    @abstractmethod
    async def delete_device(self, device_id: str) -> None:
        """
        Raises:
            DeviceNotFoundError: If no device was deleted.
        """
        pass

    @abstractmethod
    async def search_devices(self, params: SearchParams) -> Tuple[List[Device], int]:
        """Operator-based variant of ``list_devices``."""
        pass

    @abstractmethod
    async def list_attribute_names(self) -> List[str]:
        """Distinct attribute names across all devices."""
        pass

    @abstractmethod
    async def list_groups(self) -> List[str]:
        """Distinct non-empty group names currently in use."""
        pass

    @abstractmethod
    async def list_device_ids_by_group(
        self, group: str, skip: int = 0, limit: int = 0
    ) -> Tuple[List[str], int]:
        """
        Raises:
            GroupNotFoundError: If no device carries the group.
        """
        pass

    @abstractmethod
    async def get_device_group(self, device_id: str) -> Optional[str]:
        """
        Raises:
            DeviceNotFoundError: If the device does not exist.
        """
        pass

    @abstractmethod
    async def set_device_group(self, device_id: str, group: str) -> None:
        """
        Raises:
            DeviceNotFoundError: If the device does not exist.
        """
        pass

    @abstractmethod
    async def unset_device_group(self, device_id: str, expected_group: str) -> None:
        """
        Clear the group only if it currently equals ``expected_group``.

        Raises:
            DeviceNotFoundError: If no device matched both conditions.
        """
        pass

    @abstractmethod
    async def bulk_set_group(self, device_ids: List[str], group: str) -> Tuple[int, int]:
        """Returns ``(matched, modified)``; unknown ids are not errors."""
        pass

    @abstractmethod
    async def bulk_unset_group(self, device_ids: List[str], group: str) -> int:
        """Returns the number of devices whose group was cleared."""
        pass
