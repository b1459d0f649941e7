"""
Group DTOs - Application Layer

Groups are not stored on their own; these DTOs describe group membership as
seen through the reserved system group attribute.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class DeviceGroupDTO(BaseModel):
    """Current group of a device; ``None`` when it has none."""

    group: Optional[str] = None


class GroupDevicesDTO(BaseModel):
    """Page of device IDs belonging to a group."""

    group: str
    device_ids: List[str]
    total_count: int


class BulkGroupUpdateDTO(BaseModel):
    """
    Outcome of a bulk group change.

    Unknown IDs are not errors, they just do not count. ``matched_count`` is
    only reported for assignments.
    """

    matched_count: Optional[int] = Field(default=None, ge=0)
    modified_count: int = Field(ge=0)
