"""
Domain Entities - Device queries

Caller-built, never persisted descriptions of a device listing or search.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from .device import SCOPE_INVENTORY
from .errors import InvalidQueryError


class ComparisonOperator(str, Enum):
    """Operators accepted by list queries."""

    EQ = "$eq"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# Operators accepted by ``SearchFilter``
SEARCH_OPERATORS = frozenset(
    {"$eq", "$ne", "$gt", "$gte", "$lt", "$lte", "$in", "$nin", "$exists", "$regex"}
)


@dataclass
class Filter:
    """
    Equality filter on one attribute value.

    ``value_float`` carries the numeric reading of ``value`` when it has one;
    a device matches if its stored value equals either representation.
    """

    name: str
    value: Any
    scope: str = SCOPE_INVENTORY
    operator: ComparisonOperator = ComparisonOperator.EQ
    value_float: Optional[float] = None

    @classmethod
    def parse(cls, name: str, raw: str, scope: str = SCOPE_INVENTORY) -> "Filter":
        """
        Build a filter from a string literal, keeping its numeric form too.

        Only a plain decimal literal has a numeric form; underscores, padding
        and non-finite values such as ``inf`` keep the filter string-only.
        """
        number: Optional[float] = None
        if "_" not in raw and not any(char.isspace() for char in raw):
            try:
                number = float(raw)
            except ValueError:
                number = None
        if number is not None and not math.isfinite(number):
            number = None
        return cls(name=name, value=raw, scope=scope or SCOPE_INVENTORY, value_float=number)


@dataclass
class Sort:
    name: str
    scope: str = SCOPE_INVENTORY
    ascending: bool = True


@dataclass
class ListQuery:
    """
    Paged, filtered and sorted device listing.

    ``limit`` <= 0 means no limit. ``has_group`` is tri-state: ``None`` applies
    no restriction.
    """

    skip: int = 0
    limit: int = 0
    filters: List[Filter] = field(default_factory=list)
    sort: Optional[Sort] = None
    group_name: Optional[str] = None
    has_group: Optional[bool] = None

    def __post_init__(self) -> None:
        if self.skip < 0:
            raise InvalidQueryError("skip must not be negative", {"skip": self.skip})


@dataclass
class SearchFilter:
    """Filter with an explicit store operator, e.g. ``$gt`` or ``$in``."""

    attribute: str
    value: Any
    operator: str = "$eq"
    scope: str = SCOPE_INVENTORY


@dataclass
class SearchSort:
    attribute: str
    order: SortOrder = SortOrder.ASC
    scope: str = SCOPE_INVENTORY


@dataclass
class SearchParams:
    """Search request; ``page`` is 1-based."""

    filters: List[SearchFilter] = field(default_factory=list)
    sort: List[SearchSort] = field(default_factory=list)
    device_ids: List[str] = field(default_factory=list)
    page: int = 1
    per_page: int = 20

    def __post_init__(self) -> None:
        if self.page < 1:
            raise InvalidQueryError("page must be >= 1", {"page": self.page})
        if self.per_page < 1:
            raise InvalidQueryError("per_page must be >= 1", {"per_page": self.per_page})
