"""
Root conftest.py for the mymongo test suite.

Provides in-memory fakes of the pymongo client, a connection fixture built
on them, and sample records.
"""

import os
import copy
import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

# Keep settings classes deterministic regardless of the developer's shell
os.environ.pop('MONGODB_OPERATION_TIMEOUT', None)
os.environ.setdefault('MYMONGO_SETTINGS', 'DevelopmentConfig')

from mymongo.repositories.connection import MongoConnection


def _compare(actual, operator, expected):
    """Evaluate a single query operator against a field value."""
    if operator == '$eq':
        return actual == expected
    if operator == '$ne':
        return actual != expected
    if operator == '$in':
        return actual in expected
    if operator == '$nin':
        return actual not in expected
    if actual is None:
        return False
    if operator == '$gt':
        return actual > expected
    if operator == '$gte':
        return actual >= expected
    if operator == '$lt':
        return actual < expected
    if operator == '$lte':
        return actual <= expected
    raise ValueError(f"Unsupported operator in mock: {operator}")


def _matches(document, query):
    """Simple query evaluator for testing."""
    for field, condition in query.items():
        actual = document.get(field)
        if isinstance(condition, dict) and condition and all(k.startswith('$') for k in condition):
            for operator, expected in condition.items():
                if not _compare(actual, operator, expected):
                    return False
        elif actual != condition:
            return False
    return True


class MockCursor:
    """In-memory stand-in for a pymongo Cursor."""

    def __init__(self, documents):
        self._documents = documents
        self.closed = False

    def __iter__(self):
        return iter(self._documents)

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class MockMongoCollection:
    """In-memory mock of a MongoDB collection for testing."""

    def __init__(self, name):
        self.name = name
        self.documents = []
        self.calls = []

    def insert_one(self, document):
        self.calls.append('insert_one')
        # pymongo mutates the given document the same way
        document.setdefault('_id', ObjectId())
        if any(existing['_id'] == document['_id'] for existing in self.documents):
            raise DuplicateKeyError(f"E11000 duplicate key error collection: {self.name}")
        self.documents.append(copy.deepcopy(document))
        return InsertOneResult(document['_id'], True)

    def delete_one(self, query):
        self.calls.append('delete_one')
        for index, document in enumerate(self.documents):
            if _matches(document, query):
                del self.documents[index]
                return DeleteResult({'n': 1}, True)
        return DeleteResult({'n': 0}, True)

    def update_one(self, query, update):
        self.calls.append('update_one')
        for document in self.documents:
            if _matches(document, query):
                before = dict(document)
                document.update(copy.deepcopy(update.get('$set', {})))
                modified = 1 if document != before else 0
                return UpdateResult({'n': 1, 'nModified': modified}, True)
        return UpdateResult({'n': 0, 'nModified': 0}, True)

    def find_one(self, query=None):
        self.calls.append('find_one')
        for document in self.documents:
            if _matches(document, query or {}):
                return copy.deepcopy(document)
        return None

    def find(self, query=None):
        self.calls.append('find')
        return MockCursor([copy.deepcopy(d) for d in self.documents if _matches(d, query or {})])


class MockMongoDatabase:
    """Mock database returning MockMongoCollection instances."""

    def __init__(self, name):
        self.name = name
        self.collections = {}

    def __getitem__(self, collection_name):
        if collection_name not in self.collections:
            self.collections[collection_name] = MockMongoCollection(collection_name)
        return self.collections[collection_name]

    def command(self, name):
        return {'ok': 1.0}


class MockMongoClient:
    """Mock MongoClient returning MockMongoDatabase instances."""

    def __init__(self, reachable=True):
        self.databases = {}
        self.reachable = reachable
        self.closed = False

    def __getitem__(self, db_name):
        if db_name not in self.databases:
            self.databases[db_name] = MockMongoDatabase(db_name)
        return self.databases[db_name]

    @property
    def admin(self):
        if not self.reachable:
            return _UnreachableAdmin()
        return self['admin']

    def close(self):
        self.closed = True


class _UnreachableAdmin:

    def command(self, name):
        raise ServerSelectionTimeoutError("localhost:27017: [Errno 111] Connection refused")


TEST_DB = 'myMongoTestDB'
TEST_COLLECTION = 'myMongoTestCollection'


@pytest.fixture
def mock_mongo_client():
    """Provide a mock MongoDB client."""
    return MockMongoClient()


@pytest.fixture
def connection(mock_mongo_client):
    """Provide a MongoConnection over the mock client."""
    conn = MongoConnection(mock_mongo_client)
    yield conn
    conn.close()


@pytest.fixture
def collection(mock_mongo_client):
    """Provide the mock collection used by the connection fixture."""
    return mock_mongo_client[TEST_DB][TEST_COLLECTION]


@pytest.fixture
def sample_records():
    """Provide three records sharing a name."""
    return [
        {'uuid': '1', 'name': 'Object', 'value': 42.0},
        {'uuid': '2', 'name': 'Object', 'value': 37.5},
        {'uuid': '3', 'name': 'Object', 'value': 12.8},
    ]


@pytest.fixture
def config_data():
    """Provide a valid raw config mapping."""
    return {
        'username': 'admin',
        'password': 'secret',
        'host': 'localhost',
        'port': '27017'
    }


@pytest.fixture
def unreachable_mongo_client():
    """Provide a mock MongoDB client whose server never answers."""
    return MockMongoClient(reachable=False)
