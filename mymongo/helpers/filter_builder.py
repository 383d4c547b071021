"""Filter builder producing canonical MongoDB Extended JSON queries."""

from collections.abc import Mapping
from typing import Any, Dict, Optional, Union

from bson import json_util
from bson.errors import BSONError
from bson.json_util import CANONICAL_JSON_OPTIONS

from mymongo.helpers.error import QueryError


# Compact separators match the driver's own Extended JSON output
_SEPARATORS = (',', ':')

# BSON integers are at most 64 bits
_INT64_MIN = -2 ** 63
_INT64_MAX = 2 ** 63 - 1


def _check_int_range(value, path="filter"):
    """
    Reject integers the driver cannot encode, anywhere in a query value

    Raises:
        QueryError: If an integer falls outside the signed 64-bit range
    """
    if isinstance(value, bool):
        return
    if isinstance(value, int):
        if not _INT64_MIN <= value <= _INT64_MAX:
            raise QueryError(f"Integer out of 64-bit range at {path}: {value}")
    elif isinstance(value, Mapping):
        for key, item in value.items():
            _check_int_range(item, f"{path}.{key}")
    elif isinstance(value, (list, tuple)):
        for i, item in enumerate(value):
            _check_int_range(item, f"{path}[{i}]")


def dumps_canonical(document: Mapping) -> str:
    """
    Serialize a mapping to canonical Extended JSON

    Keys keep their insertion order, so equal input gives equal text.

    Args:
        document: The query document to serialize

    Returns:
        The canonical textual form

    Raises:
        QueryError: If a value cannot be represented in Extended JSON
    """
    _check_int_range(document)
    try:
        return json_util.dumps(document, json_options=CANONICAL_JSON_OPTIONS, separators=_SEPARATORS)
    except (TypeError, ValueError, BSONError) as e:
        raise QueryError(f"Failed to serialize filter: {str(e)}") from e


def build_filter(*values) -> str:
    """
    Build an equality filter from alternating key/value arguments

    build_filter("firstkey", "firstvalue", "nextkey", "nextvalue")
    gives '{"firstkey":"firstvalue","nextkey":"nextvalue"}'.

    Args:
        values: key1, value1, key2, value2, ...

    Returns:
        The canonical Extended JSON filter

    Raises:
        QueryError: If a key is not a string or the last key has no value
    """
    if len(values) % 2 != 0:
        raise QueryError(f"Missing value for filter key '{values[-1]}'")

    query = {}
    for i in range(0, len(values), 2):
        key = values[i]
        if not isinstance(key, str):
            raise QueryError(f"Invalid key type at position {i}: {type(key).__name__}")
        query[key] = values[i + 1]

    return dumps_canonical(query)


def build_operator_filter(key: str, operator: str, value: Any) -> str:
    """
    Build a single-field operator filter such as {"age": {"$gt": 25}}

    The operator is not checked; the server decides whether it is valid.
    """
    if not isinstance(key, str):
        raise QueryError(f"Invalid key type: {type(key).__name__}")
    if not isinstance(operator, str):
        raise QueryError(f"Invalid operator type: {type(operator).__name__}")

    return dumps_canonical({key: {operator: value}})


def build_document_filter(filter_document: Optional[Mapping]) -> str:
    """
    Serialize an already structured filter document

    Args:
        filter_document: Any nested query mapping, or None for match-all

    Returns:
        The canonical Extended JSON filter
    """
    if filter_document is None:
        return "{}"
    if not isinstance(filter_document, Mapping):
        raise QueryError(f"Filter must be a mapping, got {type(filter_document).__name__}")

    return dumps_canonical(filter_document)


def parse_filter(filter_query: Union[str, Mapping, None]) -> Dict[str, Any]:
    """
    Convert a filter into the query document handed to the driver

    Args:
        filter_query: Extended JSON text (canonical or relaxed), a mapping,
            or an empty value meaning match-all

    Returns:
        The query dictionary

    Raises:
        QueryError: If the text is malformed, is not a JSON object or holds
            an integer the driver cannot encode
    """
    if filter_query is None or filter_query == "":
        return {}
    if isinstance(filter_query, Mapping):
        _check_int_range(filter_query)
        return dict(filter_query)
    if not isinstance(filter_query, str):
        raise QueryError(f"Filter must be a string or a mapping, got {type(filter_query).__name__}")

    try:
        query = json_util.loads(filter_query, json_options=CANONICAL_JSON_OPTIONS)
    except (TypeError, ValueError, BSONError) as e:
        raise QueryError(f"Malformed filter '{filter_query}': {str(e)}") from e

    if not isinstance(query, dict):
        raise QueryError(f"Filter must be a JSON object: '{filter_query}'")

    _check_int_range(query)
    return query
