from __future__ import annotations

from datetime import datetime, timezone

import pytest

from inventory.domain.entities.device import (
    SCOPE_INVENTORY,
    SCOPE_SYSTEM,
    Device,
    DeviceAttribute,
    attribute_key,
)
from inventory.domain.entities.errors import (
    DeviceNotFoundError,
    InvalidAttributeError,
    OperationTimeoutError,
    StorageError,
)


def test_attribute_key_joins_scope_and_name() -> None:
    assert attribute_key("inventory", "mac") == "inventory-mac"
    assert attribute_key("system", "group") == "system-group"


def test_attribute_key_allows_dash_in_name() -> None:
    assert attribute_key("inventory", "ip-address") == "inventory-ip-address"


@pytest.mark.parametrize(
    "scope,name",
    [
        ("inventory", ""),
        ("inventory", "a.b"),
        ("inventory", "$where"),
        ("in.ventory", "mac"),
        ("$system", "mac"),
        ("my-scope", "mac"),
    ],
)
def test_attribute_key_rejects_unusable_identifiers(scope: str, name: str) -> None:
    with pytest.raises(InvalidAttributeError):
        attribute_key(scope, name)


def test_device_attribute_defaults_to_inventory_scope() -> None:
    attribute = DeviceAttribute(name="sn", value="X")

    assert attribute.scope == SCOPE_INVENTORY
    assert attribute.key == "inventory-sn"
    assert DeviceAttribute(name="sn", scope="").key == "inventory-sn"


def test_device_exposes_system_attributes() -> None:
    created = datetime(2024, 1, 1, tzinfo=timezone.utc)
    updated = datetime(2024, 1, 2, tzinfo=timezone.utc)
    attributes = [
        DeviceAttribute(name="group", value="g1", scope=SCOPE_SYSTEM),
        DeviceAttribute(name="created", value=created, scope=SCOPE_SYSTEM),
        DeviceAttribute(name="updated", value=updated, scope=SCOPE_SYSTEM),
        DeviceAttribute(name="mac", value="00:11"),
    ]
    device = Device(id="dev-1", attributes={a.key: a for a in attributes})

    assert device.group == "g1"
    assert device.created_at == created
    assert device.updated_at == updated
    assert device.get_attribute("mac").value == "00:11"
    assert device.get_attribute("missing") is None


def test_device_without_system_attributes() -> None:
    device = Device(id="dev-1")

    assert device.group is None
    assert device.created_at is None
    assert device.updated_at is None


def test_attribute_list_is_ordered_by_scope_then_name() -> None:
    attributes = [
        DeviceAttribute(name="zeta"),
        DeviceAttribute(name="group", value="g", scope=SCOPE_SYSTEM),
        DeviceAttribute(name="alpha"),
    ]
    device = Device(id="dev-1", attributes={a.key: a for a in attributes})

    assert [(a.scope, a.name) for a in device.attribute_list()] == [
        ("inventory", "alpha"),
        ("inventory", "zeta"),
        ("system", "group"),
    ]


def test_not_found_error_carries_device_id() -> None:
    error = DeviceNotFoundError("dev-9", {"group": "g"})

    assert error.message == "Device with ID dev-9 not found"
    assert error.details == {"device_id": "dev-9", "group": "g"}


def test_timeout_is_a_storage_error() -> None:
    error = OperationTimeoutError("list_devices", "deadline exceeded")

    assert isinstance(error, StorageError)
    assert error.operation == "list_devices"
    assert "list_devices" in error.message
