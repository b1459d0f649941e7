"""
Dependency container injection module - Main Layer

Composition root. The MongoDB connection is a container singleton: it is
built once, connected explicitly in ``app_lifespan`` and shared by every
repository and use case until the lifespan ends.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from dependency_injector import containers, providers

from inventory.application.use_cases import (
    BulkSetGroupUseCase,
    BulkUnsetGroupUseCase,
    CreateDeviceUseCase,
    DeleteDeviceUseCase,
    GetDeviceGroupUseCase,
    GetDeviceUseCase,
    ListAttributeNamesUseCase,
    ListDevicesUseCase,
    ListGroupDevicesUseCase,
    ListGroupsUseCase,
    SearchDevicesUseCase,
    SetDeviceGroupUseCase,
    UnsetDeviceGroupUseCase,
    UpsertAttributesUseCase,
)
from inventory.infrastructure.database import MongoDatabase
from inventory.infrastructure.repositories import DeviceRepository
from inventory.shared import get_logger

from .config import AppSettings

logger = get_logger(__name__)


class AppContainer(containers.DeclarativeContainer):
    """Composition Root using dependecy-injector."""

    wiring_config = containers.WiringConfiguration(packages=["..application"])

    # Settings
    config = providers.Configuration()

    # Infrastructure
    mongo_database = providers.Singleton(
        MongoDatabase,
        mongo_uri=config.database.mongo_uri,
        db_name=config.database.database_name,
        username=config.database.username,
        password=config.database.password,
        ssl=config.database.ssl,
        ssl_skip_verify=config.database.ssl_skip_verify,
        timeout_ms=config.database.timeout_ms,
    )

    device_repository = providers.Singleton(
        DeviceRepository,
        database=mongo_database,
    )

    # Application (use cases) - devices
    create_device_use_case = providers.Factory(
        CreateDeviceUseCase, device_repository=device_repository
    )
    upsert_attributes_use_case = providers.Factory(
        UpsertAttributesUseCase, device_repository=device_repository
    )
    get_device_use_case = providers.Factory(
        GetDeviceUseCase, device_repository=device_repository
    )
    list_devices_use_case = providers.Factory(
        ListDevicesUseCase, device_repository=device_repository
    )
    search_devices_use_case = providers.Factory(
        SearchDevicesUseCase, device_repository=device_repository
    )
    delete_device_use_case = providers.Factory(
        DeleteDeviceUseCase, device_repository=device_repository
    )
    list_attribute_names_use_case = providers.Factory(
        ListAttributeNamesUseCase, device_repository=device_repository
    )

    # Application (use cases) - groups
    list_groups_use_case = providers.Factory(
        ListGroupsUseCase, device_repository=device_repository
    )
    list_group_devices_use_case = providers.Factory(
        ListGroupDevicesUseCase, device_repository=device_repository
    )
    get_device_group_use_case = providers.Factory(
        GetDeviceGroupUseCase, device_repository=device_repository
    )
    set_device_group_use_case = providers.Factory(
        SetDeviceGroupUseCase, device_repository=device_repository
    )
    unset_device_group_use_case = providers.Factory(
        UnsetDeviceGroupUseCase, device_repository=device_repository
    )
    bulk_set_group_use_case = providers.Factory(
        BulkSetGroupUseCase, device_repository=device_repository
    )
    bulk_unset_group_use_case = providers.Factory(
        BulkUnsetGroupUseCase, device_repository=device_repository
    )


# -------------------------
# Global Container Instance
# -------------------------
_app_container: AppContainer | None = None


def init_container(settings: AppSettings) -> AppContainer:
    """Initialize global container with application settings."""

    global _app_container

    container = AppContainer()
    container.config.from_pydantic(settings)
    _app_container = container
    return container


def get_container() -> AppContainer:
    """Get the initialized global container."""

    if _app_container is None:
        raise RuntimeError("Container has not been initialized yet")

    return _app_container


@asynccontextmanager
async def app_lifespan() -> AsyncIterator[AppContainer]:
    """
    Connect external resources on entry and release them on exit.

    The MongoDB connection is verified before anything is served; a failure
    raises ``StorageError`` from here and the connection is closed again.
    """
    container = get_container()
    mongo_database = container.mongo_database()

    try:
        logger.info("container.mongo.connect")
        await mongo_database.connect()
        logger.info("container.resources.initialized")
        yield container
    finally:
        logger.info("container.mongo.close")
        await mongo_database.close()
        logger.info("container.resources.shutdown")
