"""
Use Cases Package - Application Layer

One use case per inventory operation. Each wraps the device repository and
speaks DTOs to its caller.
"""

from .device_use_cases import (
    CreateDeviceUseCase,
    DeleteDeviceUseCase,
    GetDeviceUseCase,
    ListAttributeNamesUseCase,
    ListDevicesUseCase,
    SearchDevicesUseCase,
    UpsertAttributesUseCase,
)
from .group_use_cases import (
    BulkSetGroupUseCase,
    BulkUnsetGroupUseCase,
    GetDeviceGroupUseCase,
    ListGroupDevicesUseCase,
    ListGroupsUseCase,
    SetDeviceGroupUseCase,
    UnsetDeviceGroupUseCase,
)

__all__ = [
    "CreateDeviceUseCase",
    "UpsertAttributesUseCase",
    "GetDeviceUseCase",
    "ListDevicesUseCase",
    "SearchDevicesUseCase",
    "DeleteDeviceUseCase",
    "ListAttributeNamesUseCase",
    "ListGroupsUseCase",
    "ListGroupDevicesUseCase",
    "GetDeviceGroupUseCase",
    "SetDeviceGroupUseCase",
    "UnsetDeviceGroupUseCase",
    "BulkSetGroupUseCase",
    "BulkUnsetGroupUseCase",
]
