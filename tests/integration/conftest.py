"""
Integration test fixtures for a real MongoDB server.

Expect MONGODB_USERNAME, MONGODB_PASSWORD, MONGODB_HOST and MONGODB_PORT to be
set, plus INTEGRATION=1, e.g.:
  INTEGRATION=1 MONGODB_USERNAME=root MONGODB_PASSWORD=example \
  MONGODB_HOST=localhost MONGODB_PORT=27017 pytest tests/integration
"""

import os
import uuid
import pytest

from mymongo.config import MongoConfig
from mymongo.helpers.error import ConfigError, MongoConnectionError
from mymongo.repositories.connection import MongoConnection


INTEGRATION_DB_NAME = "myMongoTestDB"


def _require_integration_env():
    """Skip if integration env is not set (INTEGRATION=1 and MONGODB_* configured)."""
    if os.environ.get("INTEGRATION") != "1":
        pytest.skip(
            "Integration tests require INTEGRATION=1 and MONGODB_* env"
        )


@pytest.fixture(scope="session")
def mongo_config():
    """Provide the MongoConfig read from the environment."""
    _require_integration_env()
    try:
        return MongoConfig.from_env()
    except ConfigError as e:
        pytest.skip(f"MongoDB integration env incomplete: {e}")


@pytest.fixture(scope="session")
def live_connection(mongo_config):
    """Provide a MongoConnection to the real server, skipping if unreachable."""
    try:
        connection = MongoConnection.open(mongo_config, connect_timeout=5)
    except MongoConnectionError as e:
        pytest.skip(f"MongoDB not reachable: {e}")
    yield connection
    connection.close()


@pytest.fixture
def collection_name(live_connection):
    """Provide a unique collection name and drop it afterwards."""
    name = f"myMongoTestCollection_{uuid.uuid4().hex[:8]}"
    yield name
    live_connection.client[INTEGRATION_DB_NAME].drop_collection(name)
