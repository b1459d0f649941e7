"""
Group Use Cases - Application Layer

Group membership is the reserved system group attribute of each device.
Single-device changes report a missing device as ``DeviceNotFoundError``;
bulk changes never fail on unknown IDs and report counts instead.
"""

from typing import List

from dependency_injector.wiring import Provide, inject

from inventory.domain.repositories.device_repository import IDeviceRepository
from inventory.shared import get_logger

from ..dtos.group_dto import BulkGroupUpdateDTO, DeviceGroupDTO, GroupDevicesDTO

logger = get_logger(__name__)


class ListGroupsUseCase:
    """Use case for enumerating the groups currently in use."""

    @inject
    def __init__(
        self,
        device_repository: IDeviceRepository = Provide["device_repository"],
    ):
        self.device_repository = device_repository

    async def execute(self) -> List[str]:
        return await self.device_repository.list_groups()


class ListGroupDevicesUseCase:
    """Use case for paging through the device IDs of a group."""

    @inject
    def __init__(
        self,
        device_repository: IDeviceRepository = Provide["device_repository"],
    ):
        self.device_repository = device_repository

    async def execute(self, group: str, skip: int = 0, limit: int = 0) -> GroupDevicesDTO:
        """
        Raises:
            GroupNotFoundError: If no device carries ``group``.
        """
        device_ids, total = await self.device_repository.list_device_ids_by_group(
            group, skip=skip, limit=limit
        )
        return GroupDevicesDTO(group=group, device_ids=device_ids, total_count=total)


class GetDeviceGroupUseCase:
    """Use case for reading the group of a device."""

    @inject
    def __init__(
        self,
        device_repository: IDeviceRepository = Provide["device_repository"],
    ):
        self.device_repository = device_repository

    async def execute(self, device_id: str) -> DeviceGroupDTO:
        group = await self.device_repository.get_device_group(device_id)
        return DeviceGroupDTO(group=group)


class SetDeviceGroupUseCase:
    """Use case for assigning a device to a group."""

    @inject
    def __init__(
        self,
        device_repository: IDeviceRepository = Provide["device_repository"],
    ):
        self.device_repository = device_repository

    async def execute(self, device_id: str, group: str) -> None:
        """
        Assign ``group`` regardless of the current one.

        Raises:
            DeviceNotFoundError: If the device does not exist.
        """
        await self.device_repository.set_device_group(device_id, group)


class UnsetDeviceGroupUseCase:
    """Use case for removing a device from a group."""

    @inject
    def __init__(
        self,
        device_repository: IDeviceRepository = Provide["device_repository"],
    ):
        self.device_repository = device_repository

    async def execute(self, device_id: str, group: str) -> None:
        """
        Remove the device from ``group`` if it is still a member.

        A stale ``group`` never clears a newer assignment; it is reported
        like a missing device.

        Raises:
            DeviceNotFoundError: If the device does not exist or is not in
                ``group``.
        """
        await self.device_repository.unset_device_group(device_id, group)


class BulkSetGroupUseCase:
    """Use case for assigning many devices to a group at once."""

    @inject
    def __init__(
        self,
        device_repository: IDeviceRepository = Provide["device_repository"],
    ):
        self.device_repository = device_repository

    async def execute(self, device_ids: List[str], group: str) -> BulkGroupUpdateDTO:
        matched, modified = await self.device_repository.bulk_set_group(
            device_ids, group
        )
        if matched < len(set(device_ids)):
            logger.warning(
                "groups.bulk_set_partial",
                group=group,
                requested=len(set(device_ids)),
                matched=matched,
            )
        return BulkGroupUpdateDTO(matched_count=matched, modified_count=modified)


class BulkUnsetGroupUseCase:
    """Use case for removing many devices from a group at once."""

    @inject
    def __init__(
        self,
        device_repository: IDeviceRepository = Provide["device_repository"],
    ):
        self.device_repository = device_repository

    async def execute(self, device_ids: List[str], group: str) -> BulkGroupUpdateDTO:
        """Devices that are missing or not in ``group`` are skipped silently."""
        modified = await self.device_repository.bulk_unset_group(device_ids, group)
        return BulkGroupUpdateDTO(modified_count=modified)
