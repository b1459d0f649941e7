from __future__ import annotations

import re
import sys
from copy import deepcopy
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, cast

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from inventory.infrastructure.database.mongo_database import MongoDatabase  # noqa: E402
from inventory.infrastructure.repositories.device_repository import (  # noqa: E402
    DeviceRepository,
)


_MISSING = object()


def _get_path(document: Any, path: str) -> Any:
    current = document
    for part in path.split("."):
        if isinstance(current, list):
            current = [
                item[part] for item in current if isinstance(item, dict) and part in item
            ]
            continue
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _set_path(document: Dict[str, Any], path: str, value: Any) -> None:
    *parents, leaf = path.split(".")
    current = document
    for part in parents:
        current = current.setdefault(part, {})
    current[leaf] = value


def _unset_path(document: Dict[str, Any], path: str) -> None:
    *parents, leaf = path.split(".")
    current: Any = document
    for part in parents:
        if not isinstance(current, dict) or part not in current:
            return
        current = current[part]
    if isinstance(current, dict):
        current.pop(leaf, None)


def _equals(value: Any, expected: Any) -> bool:
    if value is _MISSING:
        return expected is None
    if isinstance(value, list) and not isinstance(expected, list):
        return any(_equals(item, expected) for item in value)
    if isinstance(value, bool) != isinstance(expected, bool):
        return False
    return value == expected


def _compare(value: Any, operand: Any, op: str) -> bool:
    if value is _MISSING or value is None:
        return False
    try:
        return {
            "$gt": value > operand,
            "$gte": value >= operand,
            "$lt": value < operand,
            "$lte": value <= operand,
        }[op]
    except TypeError:
        return False


def _apply_operator(op: str, value: Any, operand: Any) -> bool:
    if op == "$eq":
        return _equals(value, operand)
    if op == "$ne":
        return not _equals(value, operand)
    if op == "$exists":
        return (value is not _MISSING) == bool(operand)
    if op == "$in":
        return any(_equals(value, item) for item in operand)
    if op == "$nin":
        return not any(_equals(value, item) for item in operand)
    if op in ("$gt", "$gte", "$lt", "$lte"):
        return _compare(value, operand, op)
    if op == "$regex":
        return isinstance(value, str) and re.search(operand, value) is not None
    raise NotImplementedError(op)


def matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    """Evaluate the subset of the MongoDB query language the engine emits."""
    for key, condition in query.items():
        if key == "$and":
            if not all(matches(document, sub) for sub in condition):
                return False
        elif key == "$or":
            if not any(matches(document, sub) for sub in condition):
                return False
        else:
            value = _get_path(document, key)
            if (
                isinstance(condition, dict)
                and condition
                and all(op.startswith("$") for op in condition)
            ):
                if not all(
                    _apply_operator(op, value, operand)
                    for op, operand in condition.items()
                ):
                    return False
            elif not _equals(value, condition):
                return False
    return True


def _evaluate(expression: Any, document: Dict[str, Any]) -> Any:
    if isinstance(expression, str) and expression.startswith("$"):
        return _get_path(document, expression[1:])
    if isinstance(expression, list):
        return [_evaluate(item, document) for item in expression]
    if isinstance(expression, dict) and len(expression) == 1:
        ((op, argument),) = expression.items()
        if op == "$objectToArray":
            value = _evaluate(argument, document)
            if not isinstance(value, dict):
                return None
            return [{"k": k, "v": v} for k, v in value.items()]
        if op == "$ifNull":
            first = _evaluate(argument[0], document)
            if first is _MISSING or first is None:
                return _evaluate(argument[1], document)
            return first
        if op == "$arrayElemAt":
            array = _evaluate(argument[0], document)
            index = argument[1]
            if isinstance(array, list) and -len(array) <= index < len(array):
                return array[index]
            return _MISSING
    return expression


def _sort_key(value: Any) -> tuple:
    if value is _MISSING or value is None:
        return (0, 0)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (1, value)
    if isinstance(value, str):
        return (2, value)
    return (3, str(value))


class FakeCollection:
    """In-memory stand-in for ``AsyncCollection`` understanding the queries,
    updates and pipelines issued by ``DeviceRepository``."""

    def __init__(self) -> None:
        self.documents: Dict[Any, Dict[str, Any]] = {}
        self.pipelines: List[List[Dict[str, Any]]] = []
        self.updates: List[tuple] = []

    def seed(self, *documents: Dict[str, Any]) -> None:
        """Store documents directly, bypassing the recorded driver calls."""
        for document in documents:
            self.documents[document["_id"]] = deepcopy(document)

    # Writes

    async def insert_one(self, document: Dict[str, Any]) -> Any:
        self.seed(document)
        return SimpleNamespace(acknowledged=True, inserted_id=document["_id"])

    def _apply_update(
        self, document: Dict[str, Any], update: Dict[str, Any], inserting: bool
    ) -> None:
        for path, value in update.get("$set", {}).items():
            _set_path(document, path, deepcopy(value))
        if inserting:
            for path, value in update.get("$setOnInsert", {}).items():
                _set_path(document, path, deepcopy(value))
        for path in update.get("$unset", {}):
            _unset_path(document, path)

    async def update_one(
        self, query: Dict[str, Any], update: Dict[str, Any], upsert: bool = False
    ) -> Any:
        self.updates.append((query, update, upsert))
        for document in self.documents.values():
            if matches(document, query):
                before = deepcopy(document)
                self._apply_update(document, update, inserting=False)
                return SimpleNamespace(
                    matched_count=1,
                    modified_count=int(document != before),
                    upserted_id=None,
                )

        if upsert:
            document = {
                key: value
                for key, value in query.items()
                if not key.startswith("$") and not isinstance(value, dict)
            }
            self._apply_update(document, update, inserting=True)
            self.documents[document["_id"]] = document
            return SimpleNamespace(
                matched_count=0, modified_count=0, upserted_id=document["_id"]
            )

        return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=None)

    async def update_many(self, query: Dict[str, Any], update: Dict[str, Any]) -> Any:
        self.updates.append((query, update, False))
        matched = modified = 0
        for document in self.documents.values():
            if matches(document, query):
                matched += 1
                before = deepcopy(document)
                self._apply_update(document, update, inserting=False)
                modified += int(document != before)
        return SimpleNamespace(matched_count=matched, modified_count=modified)

    async def delete_one(self, query: Dict[str, Any]) -> Any:
        for key, document in list(self.documents.items()):
            if matches(document, query):
                del self.documents[key]
                return SimpleNamespace(deleted_count=1, acknowledged=True)
        return SimpleNamespace(deleted_count=0, acknowledged=True)

    # Reads

    async def find_one(
        self, query: Dict[str, Any], projection: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        for document in self.documents.values():
            if matches(document, query):
                if projection:
                    return {
                        key: deepcopy(document[key])
                        for key in ("_id", *projection)
                        if key in document
                    }
                return deepcopy(document)
        return None

    async def distinct(self, key: str, query: Optional[Dict[str, Any]] = None) -> List[Any]:
        values: List[Any] = []
        for document in self.documents.values():
            if query and not matches(document, query):
                continue
            value = _get_path(document, key)
            candidates = value if isinstance(value, list) else [value]
            for candidate in candidates:
                if candidate is not _MISSING and candidate not in values:
                    values.append(candidate)
        return values

    async def aggregate(self, pipeline: List[Dict[str, Any]]) -> "FakeCursor":
        self.pipelines.append(pipeline)
        documents = [deepcopy(d) for d in self.documents.values()]
        return FakeCursor(self._run(documents, pipeline))

    def _run(
        self, documents: List[Dict[str, Any]], pipeline: List[Dict[str, Any]]
    ) -> List[Dict[str, Any]]:
        for stage in pipeline:
            ((name, stage_args),) = stage.items()
            if name == "$match":
                documents = [d for d in documents if matches(d, stage_args)]
            elif name == "$skip":
                documents = documents[stage_args:]
            elif name == "$limit":
                documents = documents[:stage_args]
            elif name == "$sort":
                documents = list(documents)
                for field, direction in reversed(list(stage_args.items())):
                    documents.sort(
                        key=lambda d, f=field: _sort_key(_get_path(d, f)),
                        reverse=direction < 0,
                    )
            elif name == "$count":
                documents = [{stage_args: len(documents)}] if documents else []
            elif name == "$facet":
                documents = [
                    {key: self._run(list(documents), sub) for key, sub in stage_args.items()}
                ]
            elif name == "$project":
                documents = [self._project(d, stage_args) for d in documents]
            elif name == "$unwind":
                documents = self._unwind(documents, stage_args[1:])
            elif name == "$group":
                documents = self._group(documents, stage_args)
            else:
                raise NotImplementedError(name)
        return documents

    @staticmethod
    def _project(document: Dict[str, Any], stage_args: Dict[str, Any]) -> Dict[str, Any]:
        projected: Dict[str, Any] = {}
        if "_id" in document and stage_args.get("_id", 1):
            projected["_id"] = document["_id"]
        for field, expression in stage_args.items():
            if field == "_id":
                continue
            if expression in (1, True):
                value = _get_path(document, field)
            else:
                value = _evaluate(expression, document)
            if value is not _MISSING:
                projected[field] = value
        return projected

    @staticmethod
    def _unwind(documents: List[Dict[str, Any]], path: str) -> List[Dict[str, Any]]:
        unwound = []
        for document in documents:
            value = _get_path(document, path)
            if value is _MISSING or value is None or value == []:
                continue
            for item in value if isinstance(value, list) else [value]:
                copy = deepcopy(document)
                _set_path(copy, path, item)
                unwound.append(copy)
        return unwound

    @staticmethod
    def _group(documents: List[Dict[str, Any]], stage_args: Dict[str, Any]) -> List[Dict[str, Any]]:
        if not documents:
            return []
        grouped: Dict[str, Any] = {"_id": stage_args["_id"]}
        for field, accumulator in stage_args.items():
            if field == "_id":
                continue
            ((op, expression),) = accumulator.items()
            if op != "$addToSet":
                raise NotImplementedError(op)
            values: List[Any] = []
            for document in documents:
                value = _evaluate(expression, document)
                if value is not _MISSING and value not in values:
                    values.append(value)
            grouped[field] = values
        return [grouped]


class FakeCursor:
    def __init__(self, documents: List[Dict[str, Any]]) -> None:
        self.documents = documents

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        return list(self.documents[:length])


class FakeMongoDatabase:
    def __init__(self) -> None:
        self.collections: Dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())

    async def connect(self) -> None:  # pragma: no cover - stub for tests
        pass

    async def close(self) -> None:
        pass


@pytest.fixture()
def fake_mongo_database() -> FakeMongoDatabase:
    return FakeMongoDatabase()


@pytest.fixture()
def devices_collection(fake_mongo_database: FakeMongoDatabase) -> FakeCollection:
    return fake_mongo_database.get_collection("devices")


@pytest.fixture()
def device_repository(fake_mongo_database: FakeMongoDatabase) -> DeviceRepository:
    return DeviceRepository(database=cast(MongoDatabase, fake_mongo_database))


def stored_device(
    device_id: str,
    group: Optional[str] = None,
    **inventory: Any,
) -> Dict[str, Any]:
    """Build a stored device document with inventory-scoped attributes."""
    attributes: Dict[str, Any] = {
        f"inventory-{name}": {"scope": "inventory", "name": name, "value": value}
        for name, value in inventory.items()
    }
    if group is not None:
        attributes["system-group"] = {"scope": "system", "name": "group", "value": group}
    return {"_id": device_id, "attributes": attributes}
