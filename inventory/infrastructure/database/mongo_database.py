"""
MongoDB Database - Infrastructure Layer

Process-scoped MongoDB connection holder on the asyncio driver. It is
created once by the dependency container and handed to every repository;
``connect`` is called explicitly at startup so connection problems surface
there, not on the first request.
"""

from typing import Any, Dict, Optional

from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from inventory.domain.entities.errors import StorageError
from inventory.shared import get_logger

logger = get_logger(__name__)

URI_SCHEME = "mongodb://"


def normalize_mongo_uri(mongo_uri: str) -> str:
    """Prefix bare ``host:port`` addresses with the mongodb scheme."""
    if "://" not in mongo_uri:
        return URI_SCHEME + mongo_uri
    return mongo_uri


class MongoDatabase:
    """MongoDB database client."""

    def __init__(
        self,
        mongo_uri: str,
        db_name: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        ssl: bool = False,
        ssl_skip_verify: bool = False,
        timeout_ms: Optional[int] = None,
    ):
        """
        Initialize the MongoDB database client.

        No network traffic happens here; call ``connect`` to verify the
        server is reachable.

        Args:
            mongo_uri: MongoDB connection URI or bare address
            db_name: Name of the database to use
            username: Overrides the credentials of the URI when set
            password: Password for ``username``
            ssl: Enable TLS
            ssl_skip_verify: Accept invalid certificates and host names
            timeout_ms: Client-side deadline for every operation
        """
        options: Dict[str, Any] = {"tz_aware": True}
        if username:
            options["username"] = username
            options["password"] = password
        if ssl:
            options["tls"] = True
            options["tlsInsecure"] = ssl_skip_verify
        if timeout_ms:
            options["timeoutMS"] = timeout_ms

        self.client: AsyncMongoClient = AsyncMongoClient(
            normalize_mongo_uri(mongo_uri), **options
        )
        self.db: AsyncDatabase = self.client[db_name]

    def get_collection(self, collection_name: str) -> AsyncCollection:
        """
        Get a collection from the database.

        Args:
            collection_name: Name of the collection

        Returns:
            MongoDB collection
        """
        return self.db[collection_name]

    async def connect(self) -> None:
        """
        Establish the connection by pinging the server.

        Raises:
            StorageError: If the server cannot be reached.
        """
        try:
            await self.client.admin.command("ping")
        except PyMongoError as e:
            logger.error("mongo.connect_failed", database=self.db.name, error=str(e))
            raise StorageError("connect", str(e), {"database": self.db.name}) from e
        logger.info("mongo.connected", database=self.db.name)

    async def close(self) -> None:
        """Close the database connection."""
        await self.client.close()
