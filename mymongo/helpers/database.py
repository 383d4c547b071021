"""
Helper functions for database actions and typed fetches
"""

import logging

from mymongo.base.decoder import decode_document
from mymongo.helpers.error import NotFound
from mymongo.helpers.filter_builder import parse_filter
from mymongo.helpers.validation import validate_action, validate_record
from mymongo.models.action import Action

logger = logging.getLogger(__name__)


def perform(connection, db_name, collection_name, action, record, *, timeout=None):
    """
    perform Apply one mutating action to the record identified by its uuid

    Exactly one store call is made. Deleting or updating a uuid that does
    not exist completes without error.

    :param connection: MongoConnection handle
    :param db_name: Database name
    :param collection_name: Collection name
    :param action: Action.CREATE, Action.DELETE or Action.UPDATE
    :param record: Mapping with a string 'uuid' field
    :param timeout: Optional deadline in seconds
    :return the driver's InsertOneResult, DeleteResult or UpdateResult
    :raises InvalidRecord: if 'uuid' is missing or not a string
    :raises UnsupportedAction: if action is unknown
    """

    repo = connection.repository(db_name, collection_name)
    uuid = validate_record(record, repo.key_field)
    action = validate_action(action)

    logger.debug("%s '%s' in %s.%s", action.name, uuid, db_name, collection_name)

    if action == Action.CREATE:
        return repo.create(record, timeout=timeout)
    if action == Action.DELETE:
        return repo.delete(uuid, timeout=timeout)
    return repo.update(uuid, record, timeout=timeout)


def fetch_one(connection, filter_query, db_name, collection_name, target=dict, *, must_exist=False, timeout=None):
    """
    fetch_one Decode the first document matching a filter

    :param connection: MongoConnection handle
    :param filter_query: Extended JSON filter text, a mapping, or empty for match-all
    :param target: Type to decode into
    :param must_exist: Raise NotFound instead of returning None on no match
    :return the decoded value, or None when nothing matched
    """

    query = parse_filter(filter_query)
    document = connection.repository(db_name, collection_name).find_one(query, timeout=timeout)

    if document is None:
        if must_exist:
            raise NotFound(f"No document in {db_name}.{collection_name} matches {filter_query}")
        return None

    return decode_document(document, target)


def fetch_many(connection, filter_query, db_name, collection_name, target=dict, *, timeout=None):
    """
    fetch_many Decode every document matching a filter

    A document that does not decode fails the whole call.

    :return list of decoded values, empty when nothing matched
    """

    query = parse_filter(filter_query)
    documents = connection.repository(db_name, collection_name).find_many(query, timeout=timeout)

    return [decode_document(document, target) for document in documents]
