"""
Domain Entities Package

Devices, attributes, queries and the error taxonomy of the inventory.
"""

from .device import (
    ATTR_NAME_CREATED,
    ATTR_NAME_GROUP,
    ATTR_NAME_UPDATED,
    NIL_DEVICE_ID,
    RESERVED_SYSTEM_ATTRIBUTES,
    SCOPE_INVENTORY,
    SCOPE_SYSTEM,
    AttributeValue,
    Device,
    DeviceAttribute,
    DeviceAttributes,
    attribute_key,
)
from .errors import (
    DeviceNotFoundError,
    DomainError,
    GroupNotFoundError,
    InvalidAttributeError,
    InvalidQueryError,
    OperationTimeoutError,
    StorageError,
)
from .query import (
    SEARCH_OPERATORS,
    ComparisonOperator,
    Filter,
    ListQuery,
    SearchFilter,
    SearchParams,
    SearchSort,
    Sort,
    SortOrder,
)

__all__ = [
    "ATTR_NAME_CREATED",
    "ATTR_NAME_GROUP",
    "ATTR_NAME_UPDATED",
    "NIL_DEVICE_ID",
    "RESERVED_SYSTEM_ATTRIBUTES",
    "SCOPE_INVENTORY",
    "SCOPE_SYSTEM",
    "AttributeValue",
    "Device",
    "DeviceAttribute",
    "DeviceAttributes",
    "attribute_key",
    "DomainError",
    "InvalidAttributeError",
    "InvalidQueryError",
    "DeviceNotFoundError",
    "GroupNotFoundError",
    "StorageError",
    "OperationTimeoutError",
    "SEARCH_OPERATORS",
    "ComparisonOperator",
    "Filter",
    "ListQuery",
    "SearchFilter",
    "SearchParams",
    "SearchSort",
    "Sort",
    "SortOrder",
]
