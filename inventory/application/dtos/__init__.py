"""
DTOs Package - Application Layer

Data Transfer Objects exchanged between the application layer and its
callers.
"""

from .device_dto import (
    AttributeDTO,
    AttributeResponseDTO,
    DeviceCreateDTO,
    DeviceListQueryDTO,
    DeviceListResponseDTO,
    DeviceResponseDTO,
    FilterDTO,
    SearchFilterDTO,
    SearchRequestDTO,
    SearchSortDTO,
    SortDTO,
)
from .group_dto import BulkGroupUpdateDTO, DeviceGroupDTO, GroupDevicesDTO

__all__ = [
    "AttributeDTO",
    "AttributeResponseDTO",
    "DeviceCreateDTO",
    "DeviceListQueryDTO",
    "DeviceListResponseDTO",
    "DeviceResponseDTO",
    "FilterDTO",
    "SearchFilterDTO",
    "SearchRequestDTO",
    "SearchSortDTO",
    "SortDTO",
    "BulkGroupUpdateDTO",
    "DeviceGroupDTO",
    "GroupDevicesDTO",
]
