"""
Attribute merge - Infrastructure Layer

Turns a batch of submitted attributes into a single MongoDB update document.
Every attribute is written field by field (``attributes.<key>.<field>``) so
that a submission only touches what it sets and never replaces the stored
attribute or the device as a whole.
"""

from datetime import datetime
from typing import Any, Dict, Iterable

from inventory.domain.entities.device import (
    ATTR_NAME_CREATED,
    ATTR_NAME_GROUP,
    ATTR_NAME_UPDATED,
    RESERVED_SYSTEM_ATTRIBUTES,
    SCOPE_INVENTORY,
    SCOPE_SYSTEM,
    AttributeValue,
    DeviceAttribute,
    attribute_key,
)
from inventory.domain.entities.errors import InvalidAttributeError

DB_DEVICE_ID = "_id"
DB_ATTRIBUTES = "attributes"

FIELD_SCOPE = "scope"
FIELD_NAME = "name"
FIELD_VALUE = "value"
FIELD_DESCRIPTION = "description"


def attribute_field(scope: str, name: str, *sub_fields: str) -> str:
    """Document path of an attribute, or of one of its fields."""
    return ".".join([DB_ATTRIBUTES, attribute_key(scope, name), *sub_fields])


GROUP_FIELD = attribute_field(SCOPE_SYSTEM, ATTR_NAME_GROUP)
GROUP_VALUE_FIELD = attribute_field(SCOPE_SYSTEM, ATTR_NAME_GROUP, FIELD_VALUE)
CREATED_FIELD = attribute_field(SCOPE_SYSTEM, ATTR_NAME_CREATED)
UPDATED_FIELD = attribute_field(SCOPE_SYSTEM, ATTR_NAME_UPDATED)


def system_attribute(name: str, value: AttributeValue) -> Dict[str, Any]:
    """Full stored form of an engine-managed attribute."""
    return {FIELD_SCOPE: SCOPE_SYSTEM, FIELD_NAME: name, FIELD_VALUE: value}


def build_attribute_upsert(
    attributes: Iterable[DeviceAttribute], now: datetime
) -> Dict[str, Any]:
    """
    Build the upsert document merging ``attributes`` into a device.

    ``scope`` and ``name`` are always written; ``value`` and ``description``
    only when provided. The ``updated`` timestamp is refreshed on every call
    while ``created`` is only written when the upsert inserts the device.

    Raises:
        InvalidAttributeError: If any attribute lacks a name, has an unusable
            identifier, targets an engine-managed timestamp or sets the group
            without a non-empty string value. The whole batch is rejected.
    """
    fields: Dict[str, Any] = {}

    for attribute in attributes:
        scope = attribute.scope or SCOPE_INVENTORY
        if scope == SCOPE_SYSTEM and attribute.name in RESERVED_SYSTEM_ATTRIBUTES:
            raise InvalidAttributeError(
                f"Attribute '{attribute.name}' is managed by the inventory",
                {"scope": scope, "name": attribute.name},
            )
        if (
            scope == SCOPE_SYSTEM
            and attribute.name == ATTR_NAME_GROUP
            and not (isinstance(attribute.value, str) and attribute.value)
        ):
            raise InvalidAttributeError(
                "Group attribute requires a non-empty string value",
                {"scope": scope, "name": attribute.name},
            )

        fields[attribute_field(scope, attribute.name, FIELD_SCOPE)] = scope
        fields[attribute_field(scope, attribute.name, FIELD_NAME)] = attribute.name
        if attribute.value is not None:
            fields[attribute_field(scope, attribute.name, FIELD_VALUE)] = attribute.value
        if attribute.description is not None:
            fields[attribute_field(scope, attribute.name, FIELD_DESCRIPTION)] = (
                attribute.description
            )

    fields[UPDATED_FIELD] = system_attribute(ATTR_NAME_UPDATED, now)

    return {
        "$set": fields,
        "$setOnInsert": {CREATED_FIELD: system_attribute(ATTR_NAME_CREATED, now)},
    }


def build_group_set(group: str) -> Dict[str, Any]:
    """Update document assigning ``group`` unconditionally."""
    return {"$set": {GROUP_FIELD: system_attribute(ATTR_NAME_GROUP, group)}}


def build_group_unset() -> Dict[str, Any]:
    """Update document removing the group attribute."""
    return {"$unset": {GROUP_FIELD: ""}}
