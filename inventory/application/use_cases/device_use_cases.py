"""
Device Use Cases - Application Layer

Use cases for registering devices, merging their attributes and querying
them. They translate DTOs into domain objects, delegate to the device
repository and log the outcome; consistency is the repository's concern.
"""

from typing import List, Optional

from dependency_injector.wiring import Provide, inject

from inventory.domain.entities.device import (
    Device,
    DeviceAttribute,
)
from inventory.domain.entities.errors import DomainError
from inventory.domain.entities.query import (
    Filter,
    ListQuery,
    SearchFilter,
    SearchParams,
    SearchSort,
    Sort,
    SortOrder,
)
from inventory.domain.repositories.device_repository import IDeviceRepository
from inventory.shared import get_logger

from ..dtos.device_dto import (
    AttributeDTO,
    AttributeResponseDTO,
    DeviceCreateDTO,
    DeviceListQueryDTO,
    DeviceListResponseDTO,
    DeviceResponseDTO,
    FilterDTO,
    SearchRequestDTO,
)

logger = get_logger(__name__)


def _to_attribute(dto: AttributeDTO) -> DeviceAttribute:
    return DeviceAttribute(
        name=dto.name,
        scope=dto.scope,
        value=dto.value,
        description=dto.description,
    )


def _to_device_dto(device: Device) -> DeviceResponseDTO:
    return DeviceResponseDTO(
        id=device.id,
        group=device.group,
        created_at=device.created_at,
        updated_at=device.updated_at,
        attributes=[
            AttributeResponseDTO(
                name=attribute.name,
                scope=attribute.scope,
                value=attribute.value,
                description=attribute.description,
            )
            for attribute in device.attribute_list()
        ],
    )


def _to_filter(dto: FilterDTO) -> Filter:
    # String literals may stand for numbers stored as such
    if isinstance(dto.value, str):
        return Filter.parse(dto.name, dto.value, scope=dto.scope)
    return Filter(name=dto.name, value=dto.value, scope=dto.scope)


def _to_list_query(dto: DeviceListQueryDTO) -> ListQuery:
    sort = None
    if dto.sort is not None:
        sort = Sort(name=dto.sort.name, scope=dto.sort.scope, ascending=dto.sort.ascending)

    return ListQuery(
        skip=dto.skip,
        limit=dto.limit,
        filters=[_to_filter(f) for f in dto.filters],
        sort=sort,
        group_name=dto.group,
        has_group=dto.has_group,
    )


def _to_search_params(dto: SearchRequestDTO) -> SearchParams:
    return SearchParams(
        filters=[
            SearchFilter(
                attribute=f.attribute, value=f.value, operator=f.type, scope=f.scope
            )
            for f in dto.filters
        ],
        sort=[
            SearchSort(attribute=s.attribute, order=SortOrder(s.order), scope=s.scope)
            for s in dto.sort
        ],
        device_ids=list(dto.device_ids),
        page=dto.page,
        per_page=dto.per_page,
    )


class CreateDeviceUseCase:
    """Use case for registering a new device."""

    @inject
    def __init__(
        self,
        device_repository: IDeviceRepository = Provide["device_repository"],
    ):
        self.device_repository = device_repository

    async def execute(self, device_dto: DeviceCreateDTO) -> None:
        """
        Register a device with its initial attributes and group.

        Raises:
            InvalidAttributeError: If an attribute has no name; nothing is stored.
            StorageError: If the store fails.
        """
        attributes = [_to_attribute(a) for a in device_dto.attributes]
        device = Device(
            id=device_dto.id,
            attributes={a.key: a for a in attributes},
            initial_group=device_dto.group,
        )
        try:
            await self.device_repository.create_device(device)
        except DomainError as e:
            logger.error(
                "devices.create_failed",
                device_id=device_dto.id,
                error=e.message,
                details=e.details,
            )
            raise


class UpsertAttributesUseCase:
    """Use case for merging reported attributes into a device."""

    @inject
    def __init__(
        self,
        device_repository: IDeviceRepository = Provide["device_repository"],
    ):
        self.device_repository = device_repository

    async def execute(self, device_id: str, attributes: List[AttributeDTO]) -> None:
        """
        Merge attributes, creating the device on first report.

        Only the fields present in each submitted attribute are overwritten.
        """
        logger.debug(
            "devices.upsert_started", device_id=device_id, count=len(attributes)
        )
        await self.device_repository.upsert_attributes(
            device_id, [_to_attribute(a) for a in attributes]
        )


class GetDeviceUseCase:
    """Use case for retrieving a single device."""

    @inject
    def __init__(
        self,
        device_repository: IDeviceRepository = Provide["device_repository"],
    ):
        self.device_repository = device_repository

    async def execute(self, device_id: str) -> Optional[DeviceResponseDTO]:
        device = await self.device_repository.get_device(device_id)
        if device is None:
            return None
        return _to_device_dto(device)


class ListDevicesUseCase:
    """Use case for the filtered, sorted and paginated device listing."""

    @inject
    def __init__(
        self,
        device_repository: IDeviceRepository = Provide["device_repository"],
    ):
        self.device_repository = device_repository

    async def execute(self, query_dto: DeviceListQueryDTO) -> DeviceListResponseDTO:
        """
        List devices matching the query.

        Args:
            query_dto: Filters, sort, group restrictions and pagination

        Returns:
            The requested page and the total number of matches. No match is
            an empty page with a zero count, not an error.
        """
        devices, total = await self.device_repository.list_devices(
            _to_list_query(query_dto)
        )
        logger.info(
            "devices.listed",
            returned=len(devices),
            total=total,
            skip=query_dto.skip,
            limit=query_dto.limit,
        )
        return DeviceListResponseDTO(
            devices=[_to_device_dto(d) for d in devices], total_count=total
        )


class SearchDevicesUseCase:
    """Use case for operator-based device search."""

    @inject
    def __init__(
        self,
        device_repository: IDeviceRepository = Provide["device_repository"],
    ):
        self.device_repository = device_repository

    async def execute(self, request: SearchRequestDTO) -> DeviceListResponseDTO:
        devices, total = await self.device_repository.search_devices(
            _to_search_params(request)
        )
        return DeviceListResponseDTO(
            devices=[_to_device_dto(d) for d in devices], total_count=total
        )


class DeleteDeviceUseCase:
    """Use case for removing a device and all of its attributes."""

    @inject
    def __init__(
        self,
        device_repository: IDeviceRepository = Provide["device_repository"],
    ):
        self.device_repository = device_repository

    async def execute(self, device_id: str) -> None:
        """
        Raises:
            DeviceNotFoundError: If the device does not exist.
        """
        await self.device_repository.delete_device(device_id)


class ListAttributeNamesUseCase:
    """Use case for the catalogue of attribute names in use."""

    @inject
    def __init__(
        self,
        device_repository: IDeviceRepository = Provide["device_repository"],
    ):
        self.device_repository = device_repository

    async def execute(self) -> List[str]:
        return await self.device_repository.list_attribute_names()
