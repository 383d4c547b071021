"""
A MongoDB connection handle that controls client lifecycle and collection access
"""

import logging
from urllib.parse import quote_plus

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from mymongo.helpers.error import MongoConnectionError
from mymongo.repositories.mongo_repository import MongoRepository

DEFAULT_CONNECT_TIMEOUT = 10

logger = logging.getLogger(__name__)


def get_mongo_client(config, connect_timeout=DEFAULT_CONNECT_TIMEOUT):
    """Get MongoDB client instance.

    Args:
        config: MongoConfig with credentials and address
        connect_timeout: Seconds allowed for server selection and connecting

    Returns:
        MongoDB client instance
    """
    # connect to cluster string
    credentials = ""
    if config.username:
        credentials = f"{quote_plus(config.username)}:{quote_plus(config.password)}@"
    mongo_uri = f"mongodb://{credentials}{config.host}:{config.port}"
    timeout_ms = int(connect_timeout * 1000)
    return MongoClient(
        mongo_uri,
        serverSelectionTimeoutMS=timeout_ms,
        connectTimeoutMS=timeout_ms
    )


class MongoConnection:
    """An open session to a MongoDB server.

    The handle is created once by the caller and passed to every operation.
    Repositories are created lazily and cached per (database, collection).
    Thread safety is that of the underlying MongoClient.
    """

    def __init__(self, client, operation_timeout=None):
        if client is None:
            raise ValueError("client must be provided")
        self.client = client
        self.operation_timeout = operation_timeout
        self._repositories = {}

    @classmethod
    def open(cls, config, *, connect_timeout=DEFAULT_CONNECT_TIMEOUT, operation_timeout=None, verify=True):
        """Open a connection to the server described by config.

        Args:
            config: MongoConfig with credentials and address
            connect_timeout: Seconds allowed to establish the session
            operation_timeout: Default deadline in seconds for each store call
            verify: Run a ping so an unreachable server fails here

        Returns:
            MongoConnection instance

        Raises:
            MongoConnectionError: If the server cannot be reached in time
        """
        logger.info("Connecting to MongoDB at %s:%s...", config.host, config.port)
        try:
            client = get_mongo_client(config, connect_timeout)
        except PyMongoError as e:
            raise MongoConnectionError(f"Failed to connect to MongoDB at {config.host}:{config.port}: {str(e)}") from e

        if verify:
            try:
                client.admin.command("ping")
            except PyMongoError as e:
                client.close()
                logger.error("Failed to connect to MongoDB at %s:%s: %s", config.host, config.port, str(e))
                raise MongoConnectionError(f"Failed to connect to MongoDB at {config.host}:{config.port}: {str(e)}") from e

        logger.info("Successfully connected to MongoDB at %s:%s", config.host, config.port)
        return cls(client, operation_timeout=operation_timeout)

    def repository(self, db_name: str, collection_name: str, *, key_field="uuid") -> MongoRepository:
        """Get or create the repository for a collection.

        Args:
            db_name: Database name
            collection_name: Collection name
            key_field: Field name used to target records

        Returns:
            Repository instance for the collection
        """
        cache_key = (db_name, collection_name, key_field)
        if cache_key in self._repositories:
            return self._repositories[cache_key]

        repo = MongoRepository(
            collection=self.client[db_name][collection_name],
            key_field=key_field,
            timeout=self.operation_timeout
        )
        self._repositories[cache_key] = repo
        return repo

    def close(self):
        """Close the underlying client"""
        self._repositories = {}
        self.client.close()
        logger.info("MongoDB connection closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
