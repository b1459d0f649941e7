"""
Device DTOs - Application Layer

Data Transfer Objects exchanged with the API layer. Attribute values are a
closed variant at this boundary: absent, a scalar (string, number, boolean)
or a list of scalars. Engine timestamps are returned as datetimes.
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr

from inventory.domain.entities.device import SCOPE_INVENTORY

# bool must come first, otherwise True would validate as an int
ScalarValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr]
AttributeValueDTO = Union[ScalarValue, List[ScalarValue]]
StoredValueDTO = Union[ScalarValue, datetime, List[Union[ScalarValue, datetime]]]


class AttributeDTO(BaseModel):
    """DTO for an attribute submitted by a device or an operator."""

    name: str = Field(description="Attribute name, unique within its scope")
    scope: str = Field(default=SCOPE_INVENTORY, description="Attribute namespace")
    value: Optional[AttributeValueDTO] = Field(
        default=None, description="Attribute value; omitted keeps the stored one"
    )
    description: Optional[str] = Field(
        default=None, description="Free text; omitted keeps the stored one"
    )

    model_config = {
        "json_schema_extra": {
            "example": {"name": "mac", "scope": "inventory", "value": "00:11:22:33:44:55"}
        }
    }


class AttributeResponseDTO(BaseModel):
    """DTO for a stored attribute."""

    name: str
    scope: str
    value: Optional[StoredValueDTO] = None
    description: Optional[str] = None


class DeviceCreateDTO(BaseModel):
    """DTO for registering a device."""

    id: str = Field(description="Externally supplied device ID")
    group: Optional[str] = Field(default=None, description="Initial group")
    attributes: List[AttributeDTO] = Field(default_factory=list)


class DeviceResponseDTO(BaseModel):
    """DTO for a device with all of its attributes."""

    id: str
    group: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    attributes: List[AttributeResponseDTO] = Field(default_factory=list)


class FilterDTO(BaseModel):
    """Equality filter on an attribute value."""

    name: str
    value: ScalarValue
    scope: str = SCOPE_INVENTORY


class SortDTO(BaseModel):
    name: str
    scope: str = SCOPE_INVENTORY
    ascending: bool = True


class DeviceListQueryDTO(BaseModel):
    """Listing request; ``limit`` <= 0 disables the limit."""

    skip: int = Field(default=0, ge=0)
    limit: int = Field(default=20)
    filters: List[FilterDTO] = Field(default_factory=list)
    sort: Optional[SortDTO] = None
    group: Optional[str] = None
    has_group: Optional[bool] = None


class DeviceListResponseDTO(BaseModel):
    devices: List[DeviceResponseDTO]
    total_count: int = Field(description="Matches regardless of skip/limit")


class SearchFilterDTO(BaseModel):
    attribute: str
    value: Optional[AttributeValueDTO] = None
    type: str = Field(default="$eq", description="Store operator, e.g. $gt")
    scope: str = SCOPE_INVENTORY


class SearchSortDTO(BaseModel):
    attribute: str
    order: str = Field(default="asc", pattern="^(asc|desc)$")
    scope: str = SCOPE_INVENTORY


class SearchRequestDTO(BaseModel):
    filters: List[SearchFilterDTO] = Field(default_factory=list)
    sort: List[SearchSortDTO] = Field(default_factory=list)
    device_ids: List[str] = Field(default_factory=list)
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=20, ge=1)
