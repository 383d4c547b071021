"""Base repository interface for database operations."""

class BaseRepository:
    """Base repository class defining the interface for database operations.

    Records are targeted by a caller-chosen identifier field (``uuid`` by
    default) rather than the storage engine's own primary key.
    """

    def __init__(self, key_field: str = "uuid"):
        """Initialize the repository with the specified key field.

        Args:
            key_field: The name of the field used to target records
        """
        self.key_field = key_field

    def create(self, record: dict, timeout=None):
        """Insert a record as a new document.

        Args:
            record: The record to insert
            timeout: Optional deadline in seconds for this call

        Returns:
            The driver's insert result
        """
        raise NotImplementedError

    def update(self, key: str, data: dict, timeout=None):
        """Overwrite the fields present in data on the matching document.

        Args:
            key: The identifier of the document to update
            data: The fields to set
            timeout: Optional deadline in seconds for this call

        Returns:
            The driver's update result
        """
        raise NotImplementedError

    def delete(self, key: str, timeout=None):
        """Delete the document with the given identifier.

        Args:
            key: The identifier of the document to delete
            timeout: Optional deadline in seconds for this call

        Returns:
            The driver's delete result
        """
        raise NotImplementedError

    def find_one(self, query: dict, timeout=None):
        """Get the first document matching a query.

        Args:
            query: The query document
            timeout: Optional deadline in seconds for this call

        Returns:
            The raw document if found, None otherwise
        """
        raise NotImplementedError

    def find_many(self, query: dict, timeout=None):
        """Get every document matching a query.

        Args:
            query: The query document
            timeout: Optional deadline in seconds for this call

        Returns:
            List of raw documents, empty if nothing matched
        """
        raise NotImplementedError
