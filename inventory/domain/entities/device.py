"""
Domain Entities - Device

Devices carry a schemaless set of attributes. Each attribute is identified by
its ``(scope, name)`` pair, flattened into a composite ``"scope-name"`` key
that is used both in memory and as the field name inside the stored document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Union

from .errors import InvalidAttributeError

SCOPE_INVENTORY = "inventory"
SCOPE_SYSTEM = "system"

ATTR_NAME_GROUP = "group"
ATTR_NAME_CREATED = "created"
ATTR_NAME_UPDATED = "updated"

# Engine-managed attributes callers may not write directly
RESERVED_SYSTEM_ATTRIBUTES = frozenset({ATTR_NAME_CREATED, ATTR_NAME_UPDATED})

NIL_DEVICE_ID = ""

Scalar = Union[str, int, float, bool, datetime]
AttributeValue = Union[Scalar, List[Scalar]]


def attribute_key(scope: str, name: str) -> str:
    """
    Build the composite key of an attribute.

    The key doubles as a document field name, so both parts must be usable
    as a path segment.

    Raises:
        InvalidAttributeError: If the name is empty or either part is not a
            valid path segment.
    """
    if not name:
        raise InvalidAttributeError(
            "Attribute name must not be empty", {"scope": scope}
        )
    for part in (scope, name):
        if "." in part or part.startswith("$"):
            raise InvalidAttributeError(
                f"Invalid attribute identifier '{part}'",
                {"scope": scope, "name": name},
            )
    # keys are split at the first dash
    if "-" in scope:
        raise InvalidAttributeError(
            f"Attribute scope '{scope}' must not contain '-'",
            {"scope": scope, "name": name},
        )
    return f"{scope}-{name}"


@dataclass
class DeviceAttribute:
    """
    A single device attribute.

    ``value`` and ``description`` set to ``None`` mean "not provided": a merge
    leaves the stored field untouched.
    """

    name: str
    value: Optional[AttributeValue] = None
    scope: str = SCOPE_INVENTORY
    description: Optional[str] = None

    @property
    def key(self) -> str:
        return attribute_key(self.scope or SCOPE_INVENTORY, self.name)


DeviceAttributes = Dict[str, DeviceAttribute]


@dataclass
class Device:
    """A device and its attribute map keyed by composite attribute key."""

    id: str
    attributes: DeviceAttributes = field(default_factory=dict)
    # Only honoured on creation, see ``group`` for the stored value
    initial_group: Optional[str] = None

    def get_attribute(self, name: str, scope: str = SCOPE_INVENTORY) -> Optional[DeviceAttribute]:
        return self.attributes.get(attribute_key(scope, name))

    def _system_value(self, name: str) -> Optional[AttributeValue]:
        attribute = self.get_attribute(name, scope=SCOPE_SYSTEM)
        return attribute.value if attribute else None

    @property
    def group(self) -> Optional[str]:
        value = self._system_value(ATTR_NAME_GROUP)
        return str(value) if value is not None else None

    @property
    def created_at(self) -> Optional[datetime]:
        value = self._system_value(ATTR_NAME_CREATED)
        return value if isinstance(value, datetime) else None

    @property
    def updated_at(self) -> Optional[datetime]:
        value = self._system_value(ATTR_NAME_UPDATED)
        return value if isinstance(value, datetime) else None

    def attribute_list(self) -> List[DeviceAttribute]:
        """Attributes ordered by scope then name, for presentation."""
        return sorted(self.attributes.values(), key=lambda a: (a.scope, a.name))
