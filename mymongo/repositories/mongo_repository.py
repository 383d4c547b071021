"""MongoDB repository implementation for database operations."""

import contextlib
import logging

import pymongo
from pymongo.errors import PyMongoError

from mymongo.base.base_repository import BaseRepository


class MongoRepository(BaseRepository):
    """MongoDB repository implementation providing CRUD operations.

    This class implements the BaseRepository interface over a single
    pymongo collection. Driver errors are logged and re-raised unchanged.
    """

    def __init__(self, collection, key_field: str = "uuid", timeout=None):
        super().__init__(key_field)
        if collection is None:
            raise ValueError("collection must be provided")
        self.collection = collection
        self.timeout = timeout
        self._logger = logging.getLogger(f"{__name__}.{collection.name}")

    def _deadline(self, timeout):
        """Apply a per-call deadline, falling back to the repository default"""
        timeout = self.timeout if timeout is None else timeout
        if timeout is None:
            return contextlib.nullcontext()
        return pymongo.timeout(timeout)

    def create(self, record: dict, timeout=None):
        """Insert a record as a new document"""
        # insert_one adds _id to the document it is given
        document = dict(record)
        try:
            with self._deadline(timeout):
                result = self.collection.insert_one(document)
        except PyMongoError as e:
            self._logger.error("Failed to insert '%s': %s", record.get(self.key_field), str(e))
            raise
        self._logger.debug("Inserted '%s' as %s", record.get(self.key_field), result.inserted_id)
        return result

    def update(self, key: str, data: dict, timeout=None):
        """Set the fields in data on the document matching key"""
        try:
            with self._deadline(timeout):
                result = self.collection.update_one({self.key_field: key}, {"$set": dict(data)})
        except PyMongoError as e:
            self._logger.error("Failed to update '%s': %s", key, str(e))
            raise
        self._logger.debug("Updated '%s': matched %s, modified %s", key, result.matched_count, result.modified_count)
        return result

    def delete(self, key: str, timeout=None):
        """Delete the document matching key; a missing key is not an error"""
        try:
            with self._deadline(timeout):
                result = self.collection.delete_one({self.key_field: key})
        except PyMongoError as e:
            self._logger.error("Failed to delete '%s': %s", key, str(e))
            raise
        self._logger.debug("Deleted '%s': %s document(s)", key, result.deleted_count)
        return result

    def find_one(self, query: dict, timeout=None):
        """Get the first document matching query, or None"""
        try:
            with self._deadline(timeout):
                return self.collection.find_one(query)
        except PyMongoError as e:
            self._logger.error("Failed to find one with %s: %s", query, str(e))
            raise

    def find_many(self, query: dict, timeout=None):
        """Get all documents matching query"""
        try:
            with self._deadline(timeout):
                with self.collection.find(query) as cursor:
                    return list(cursor)
        except PyMongoError as e:
            self._logger.error("Failed to find with %s: %s", query, str(e))
            raise
