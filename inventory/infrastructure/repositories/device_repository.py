"""
Infrastructure Repository - Device MongoDB Implementation

Every operation maps onto one atomic store primitive: a single-document
upsert for attribute merges, a single conditional update for group changes
and a single aggregation for paged listings. Driver calls are awaited on
the event loop, so cancelling the awaiting task aborts the operation where
it stands instead of letting it complete behind the caller's back.
"""

from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, TypeVar

import structlog
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from inventory.domain.entities.device import (
    ATTR_NAME_GROUP,
    NIL_DEVICE_ID,
    SCOPE_SYSTEM,
    Device,
    DeviceAttribute,
    attribute_key,
)
from inventory.domain.entities.errors import (
    DeviceNotFoundError,
    GroupNotFoundError,
    InvalidAttributeError,
    OperationTimeoutError,
    StorageError,
)
from inventory.domain.entities.query import ListQuery, SearchParams
from inventory.domain.repositories.device_repository import IDeviceRepository
from inventory.infrastructure.database.attribute_update import (
    DB_ATTRIBUTES,
    DB_DEVICE_ID,
    FIELD_DESCRIPTION,
    FIELD_NAME,
    FIELD_SCOPE,
    FIELD_VALUE,
    GROUP_VALUE_FIELD,
    build_attribute_upsert,
    build_group_set,
    build_group_unset,
)
from inventory.infrastructure.database.mongo_database import MongoDatabase
from inventory.infrastructure.database.query_compiler import (
    RESULTS,
    TOTAL_COUNT,
    Pipeline,
    build_attribute_names_pipeline,
    build_list_pipeline,
    build_search_pipeline,
)
from inventory.shared import DEVICES_COLLECTION

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class DeviceRepository(IDeviceRepository):
    """MongoDB implementation of device repository."""

    def __init__(self, database: MongoDatabase):
        """Initialize repository with database connection."""
        self.database = database
        self.collection_name = DEVICES_COLLECTION

    @property
    def collection(self) -> AsyncCollection:
        return self.database.get_collection(self.collection_name)

    async def _execute(
        self,
        operation: str,
        call: Callable[..., Awaitable[T]],
        *args: Any,
        **context: Any,
    ) -> T:
        """
        Await a driver call, translating driver failures.

        ``context`` only feeds the error log and the raised error details.
        Cancellation is not a driver failure and propagates unchanged.

        Raises:
            OperationTimeoutError: If the driver hit its deadline.
            StorageError: For any other driver failure.
        """
        try:
            return await call(*args)
        except PyMongoError as e:
            logger.error(
                "devices.storage_failed", operation=operation, error=str(e), **context
            )
            if e.timeout:
                raise OperationTimeoutError(operation, str(e), context) from e
            raise StorageError(operation, str(e), context) from e

    # Attribute merge

    async def create_device(self, device: Device) -> None:
        """Store a new device; a non-empty initial group becomes an attribute."""
        attributes = list(device.attributes.values())
        if device.initial_group:
            attributes.append(
                DeviceAttribute(
                    scope=SCOPE_SYSTEM,
                    name=ATTR_NAME_GROUP,
                    value=device.initial_group,
                )
            )
        await self.upsert_attributes(device.id, attributes)
        logger.info("devices.created", device_id=device.id, group=device.initial_group)

    async def upsert_attributes(
        self, device_id: str, attributes: List[DeviceAttribute]
    ) -> None:
        """Merge attributes into the device document, creating it when missing."""
        update = build_attribute_upsert(attributes, datetime.now(timezone.utc))

        async def _upsert() -> Any:
            return await self.collection.update_one(
                {DB_DEVICE_ID: device_id}, update, upsert=True
            )

        result = await self._execute(
            "upsert_attributes", _upsert, device_id=device_id
        )
        logger.debug(
            "devices.attributes_upserted",
            device_id=device_id,
            attribute_count=len(attributes),
            created=result.upserted_id is not None,
        )

    # Queries

    async def get_device(self, device_id: str) -> Optional[Device]:
        """Get a device by ID; the nil ID never matches."""
        if device_id == NIL_DEVICE_ID:
            return None

        document = await self._execute(
            "get_device",
            self.collection.find_one,
            {DB_DEVICE_ID: device_id},
            device_id=device_id,
        )
        if document is None:
            return None
        return self._decode("get_device", document)

    async def list_devices(self, query: ListQuery) -> Tuple[List[Device], int]:
        """Page of matching devices plus total count, from one aggregation."""
        return await self._aggregate_page(
            "list_devices",
            build_list_pipeline(query),
            skip=query.skip,
            limit=query.limit,
        )

    async def search_devices(self, params: SearchParams) -> Tuple[List[Device], int]:
        return await self._aggregate_page(
            "search_devices",
            build_search_pipeline(params),
            page=params.page,
            per_page=params.per_page,
        )

    async def _aggregate_page(
        self, operation: str, pipeline: Pipeline, **context: Any
    ) -> Tuple[List[Device], int]:
        async def _run() -> List[Dict[str, Any]]:
            cursor = await self.collection.aggregate(pipeline)
            return await cursor.to_list(None)

        documents = await self._execute(operation, _run, **context)
        if not documents:
            return [], 0

        try:
            results = documents[0][RESULTS]
            total = int(documents[0][TOTAL_COUNT])
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(operation, f"malformed result: {e}", context) from e

        devices = [self._decode(operation, document) for document in results]
        return devices, total

    async def delete_device(self, device_id: str) -> None:
        result = await self._execute(
            "delete_device",
            self.collection.delete_one,
            {DB_DEVICE_ID: device_id},
            device_id=device_id,
        )
        if result.deleted_count < 1:
            raise DeviceNotFoundError(device_id)
        logger.info("devices.deleted", device_id=device_id)

    async def list_attribute_names(self) -> List[str]:
        """Distinct attribute names of all devices; empty when there are none."""
        pipeline = build_attribute_names_pipeline()

        async def _run() -> List[Dict[str, Any]]:
            cursor = await self.collection.aggregate(pipeline)
            return await cursor.to_list(None)

        documents = await self._execute("list_attribute_names", _run)
        if not documents:
            return []
        names = documents[0].get("names") or []
        return sorted(str(name) for name in names if name)

    # Groups

    async def list_groups(self) -> List[str]:
        values = await self._execute(
            "list_groups",
            self.collection.distinct,
            GROUP_VALUE_FIELD,
            {GROUP_VALUE_FIELD: {"$exists": True, "$ne": ""}},
        )
        return [str(value) for value in values]

    async def list_device_ids_by_group(
        self, group: str, skip: int = 0, limit: int = 0
    ) -> Tuple[List[str], int]:
        member = await self._execute(
            "list_device_ids_by_group",
            self.collection.find_one,
            {GROUP_VALUE_FIELD: group},
            {DB_DEVICE_ID: 1},
            group=group,
        )
        if member is None:
            raise GroupNotFoundError(group)

        devices, total = await self.list_devices(
            ListQuery(skip=skip, limit=limit, group_name=group, has_group=group != "")
        )
        return [device.id for device in devices], total

    async def get_device_group(self, device_id: str) -> Optional[str]:
        device = await self.get_device(device_id)
        if device is None:
            raise DeviceNotFoundError(device_id)
        return device.group

    async def set_device_group(self, device_id: str, group: str) -> None:
        result = await self._execute(
            "set_device_group",
            self.collection.update_one,
            {DB_DEVICE_ID: device_id},
            build_group_set(group),
            device_id=device_id,
            group=group,
        )
        if result.matched_count < 1:
            raise DeviceNotFoundError(device_id)
        logger.info("devices.group_set", device_id=device_id, group=group)

    async def unset_device_group(self, device_id: str, expected_group: str) -> None:
        """Compare-and-clear: the match on the current group and the removal
        are one conditional write."""
        result = await self._execute(
            "unset_device_group",
            self.collection.update_one,
            {DB_DEVICE_ID: device_id, GROUP_VALUE_FIELD: expected_group},
            build_group_unset(),
            device_id=device_id,
            group=expected_group,
        )
        if result.modified_count < 1:
            raise DeviceNotFoundError(device_id, {"group": expected_group})
        logger.info("devices.group_unset", device_id=device_id, group=expected_group)

    async def bulk_set_group(self, device_ids: List[str], group: str) -> Tuple[int, int]:
        if not device_ids:
            return 0, 0
        result = await self._execute(
            "bulk_set_group",
            self.collection.update_many,
            {DB_DEVICE_ID: {"$in": list(device_ids)}},
            build_group_set(group),
            group=group,
            device_count=len(device_ids),
        )
        logger.info(
            "devices.group_bulk_set",
            group=group,
            requested=len(device_ids),
            matched=result.matched_count,
            modified=result.modified_count,
        )
        return result.matched_count, result.modified_count

    async def bulk_unset_group(self, device_ids: List[str], group: str) -> int:
        if not device_ids:
            return 0
        result = await self._execute(
            "bulk_unset_group",
            self.collection.update_many,
            {DB_DEVICE_ID: {"$in": list(device_ids)}, GROUP_VALUE_FIELD: group},
            build_group_unset(),
            group=group,
            device_count=len(device_ids),
        )
        logger.info(
            "devices.group_bulk_unset",
            group=group,
            requested=len(device_ids),
            modified=result.modified_count,
        )
        return result.modified_count

    # Decoding

    def _decode(self, operation: str, document: Dict[str, Any]) -> Device:
        try:
            return self._from_document(document)
        except (
            KeyError,
            TypeError,
            AttributeError,
            ValueError,
            InvalidAttributeError,
        ) as e:
            raise StorageError(
                operation,
                f"cannot decode device document: {e}",
                {"device_id": document.get(DB_DEVICE_ID)},
            ) from e

    @staticmethod
    def _from_document(document: Dict[str, Any]) -> Device:
        attributes: Dict[str, DeviceAttribute] = {}
        for stored in (document.get(DB_ATTRIBUTES) or {}).values():
            attribute = DeviceAttribute(
                scope=stored[FIELD_SCOPE],
                name=stored[FIELD_NAME],
                value=stored.get(FIELD_VALUE),
                description=stored.get(FIELD_DESCRIPTION),
            )
            attributes[attribute_key(attribute.scope, attribute.name)] = attribute
        return Device(id=str(document[DB_DEVICE_ID]), attributes=attributes)
