"""
Error types raised by the mymongo helpers
"""


class MyMongoError(Exception):
    """Base class for every error raised by this package"""


class ConfigError(MyMongoError):
    """A required configuration field is missing or has the wrong type"""


class MongoConnectionError(MyMongoError, ConnectionError):
    """The database session could not be established within the timeout"""


class InvalidRecord(MyMongoError, ValueError):
    """A mutating action was invoked without a string 'uuid' field"""


class UnsupportedAction(MyMongoError, ValueError):
    """The action is not one of CREATE, DELETE or UPDATE"""


class QueryError(MyMongoError, ValueError):
    """A filter could not be serialized or parsed"""


class DecodeError(MyMongoError):
    """
    A matched document could not be decoded into the requested type

    :param target: The type that was requested
    :param document: The raw document, when available
    """

    def __init__(self, message, target=None, document=None):
        super().__init__(message)
        self.target = target
        self.document = document


class NotFound(MyMongoError, LookupError):
    """No document matched a filter that was required to match"""
