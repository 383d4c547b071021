"""
mymongo init
"""

import logging

from mymongo.config import get_settings, read_config
from mymongo.helpers.database import fetch_many, fetch_one, perform
from mymongo.helpers.filter_builder import (
    build_document_filter,
    build_filter,
    build_operator_filter,
    parse_filter
)
from mymongo.models.action import Action
from mymongo.repositories.connection import MongoConnection


def init(config_path=None, settings=None):
    """
    init Will read the config file and open the database connection

    :param config_path: JSON config file, defaults to settings.MONGODB_CONFIG_PATH
    :param settings: Settings class, defaults to get_settings()
    :return MongoConnection owned by the caller
    """

    settings = settings or get_settings()

    # Configure logging
    package_logger = logging.getLogger(__name__)
    if settings.DEBUG:
        package_logger.setLevel(logging.DEBUG)
    else:
        package_logger.setLevel(logging.INFO)

    config = read_config(config_path or settings.MONGODB_CONFIG_PATH)

    return MongoConnection.open(
        config,
        connect_timeout=settings.MONGODB_CONNECT_TIMEOUT,
        operation_timeout=settings.MONGODB_OPERATION_TIMEOUT
    )


__all__ = [
    "Action",
    "MongoConnection",
    "build_document_filter",
    "build_filter",
    "build_operator_filter",
    "fetch_many",
    "fetch_one",
    "init",
    "parse_filter",
    "perform",
]
