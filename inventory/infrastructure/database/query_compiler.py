"""
Query compiler - Infrastructure Layer

Translates device queries into MongoDB aggregation pipelines. Listings and
searches share one shape: a ``$match`` followed by a ``$facet`` computing the
requested page and the total number of matches in the same execution, so the
count always describes the set the page was sliced from.
"""

from typing import Any, Dict, List, Optional

from inventory.domain.entities.device import SCOPE_INVENTORY
from inventory.domain.entities.errors import InvalidQueryError
from inventory.domain.entities.query import (
    SEARCH_OPERATORS,
    ComparisonOperator,
    Filter,
    ListQuery,
    SearchFilter,
    SearchParams,
    Sort,
    SortOrder,
)
from inventory.infrastructure.database.attribute_update import (
    DB_ATTRIBUTES,
    DB_DEVICE_ID,
    FIELD_NAME,
    FIELD_VALUE,
    GROUP_VALUE_FIELD,
    attribute_field,
)

RESULTS = "results"
TOTAL_COUNT = "totalCount"

# $sort cannot be empty, unsorted listings use a stage that does nothing
NOOP_STAGE: Dict[str, Any] = {"$skip": 0}

Pipeline = List[Dict[str, Any]]


def attribute_value_field(scope: str, name: str) -> str:
    return attribute_field(scope or SCOPE_INVENTORY, name, FIELD_VALUE)


def compile_filter(query_filter: Filter) -> Dict[str, Any]:
    """
    Compile one equality filter.

    When the filter has a numeric reading, either representation matches:
    attribute values are not typed at rest, so ``"4.0"`` and ``4.0`` may both
    have been stored for the same logical value.
    """
    if query_filter.operator != ComparisonOperator.EQ:
        raise InvalidQueryError(
            f"Unsupported list operator '{query_filter.operator}'",
            {"attribute": query_filter.name},
        )
    field = attribute_value_field(query_filter.scope, query_filter.name)
    operator = query_filter.operator.value

    if query_filter.value_float is not None:
        return {
            "$or": [
                {field: {operator: query_filter.value}},
                {field: {operator: query_filter.value_float}},
            ]
        }
    return {field: {operator: query_filter.value}}


def build_match(query: ListQuery) -> Dict[str, Any]:
    """Conjunction of the group restrictions and attribute filters."""
    clauses: List[Dict[str, Any]] = []

    if query.group_name:
        clauses.append({GROUP_VALUE_FIELD: query.group_name})
    if query.has_group is not None:
        clauses.append({GROUP_VALUE_FIELD: {"$exists": query.has_group}})
    clauses.extend(compile_filter(f) for f in query.filters)

    if not clauses:
        return {}
    return {"$and": clauses}


def build_sort_stage(sort: Optional[Sort]) -> Dict[str, Any]:
    if sort is None:
        return NOOP_STAGE
    field = attribute_value_field(sort.scope, sort.name)
    # _id keeps pages stable when sort values tie
    return {"$sort": {field: 1 if sort.ascending else -1, DB_DEVICE_ID: 1}}


def build_page_and_count(
    match: Dict[str, Any], sort_stage: Dict[str, Any], skip: int, limit: int
) -> Pipeline:
    """
    Single-execution pipeline yielding ``{results: [...], totalCount: n}``.

    A non-positive ``limit`` means no limit; ``$limit`` only accepts positive
    values so the stage is left out.
    """
    page: Pipeline = [sort_stage, {"$skip": skip}]
    if limit > 0:
        page.append({"$limit": limit})

    return [
        {"$match": match},
        {
            "$facet": {
                RESULTS: page,
                TOTAL_COUNT: [{"$count": "count"}],
            }
        },
        {
            "$project": {
                RESULTS: 1,
                TOTAL_COUNT: {
                    "$ifNull": [{"$arrayElemAt": [f"${TOTAL_COUNT}.count", 0]}, 0]
                },
            }
        },
    ]


def build_list_pipeline(query: ListQuery) -> Pipeline:
    return build_page_and_count(
        build_match(query), build_sort_stage(query.sort), query.skip, query.limit
    )


def compile_search_filter(search_filter: SearchFilter) -> Dict[str, Any]:
    if search_filter.operator not in SEARCH_OPERATORS:
        raise InvalidQueryError(
            f"Unsupported search operator '{search_filter.operator}'",
            {"attribute": search_filter.attribute},
        )
    field = attribute_value_field(search_filter.scope, search_filter.attribute)
    return {field: {search_filter.operator: search_filter.value}}


def build_search_pipeline(params: SearchParams) -> Pipeline:
    """
    Pipeline for the operator-based search.

    Raises:
        InvalidQueryError: If a filter uses an operator outside
            ``SEARCH_OPERATORS``.
    """
    clauses = [compile_search_filter(f) for f in params.filters]
    if params.device_ids:
        clauses.append({DB_DEVICE_ID: {"$in": list(params.device_ids)}})
    match: Dict[str, Any] = {"$and": clauses} if clauses else {}

    sort_stage = NOOP_STAGE
    if params.sort:
        keys: Dict[str, int] = {}
        for sort in params.sort:
            field = attribute_value_field(sort.scope, sort.attribute)
            keys[field] = -1 if sort.order == SortOrder.DESC else 1
        keys.setdefault(DB_DEVICE_ID, 1)
        sort_stage = {"$sort": keys}

    skip = (params.page - 1) * params.per_page
    return build_page_and_count(match, sort_stage, skip, params.per_page)


def build_attribute_names_pipeline() -> Pipeline:
    """Collect the distinct attribute names of all devices into one document."""
    return [
        {"$project": {"pairs": {"$objectToArray": f"${DB_ATTRIBUTES}"}}},
        {"$unwind": "$pairs"},
        {"$group": {"_id": None, "names": {"$addToSet": f"$pairs.v.{FIELD_NAME}"}}},
    ]
