"""
Validation utilities for records and actions
"""
from collections.abc import Mapping

from mymongo.helpers.error import InvalidRecord, UnsupportedAction
from mymongo.models.action import Action


def validate_record(record, key_field: str = "uuid") -> str:
    """
    Validate that a record carries a string identifier

    Args:
        record: The record to validate
        key_field: The name of the identifier field

    Returns:
        The identifier value

    Raises:
        InvalidRecord: If the record is not a mapping or the identifier is
            missing or not a string
    """
    if not isinstance(record, Mapping):
        raise InvalidRecord(f"Record must be a mapping, got {type(record).__name__}")

    if key_field not in record:
        raise InvalidRecord(f"missing '{key_field}' key in received data")

    value = record[key_field]
    if not isinstance(value, str):
        raise InvalidRecord(f"invalid '{key_field}' key in received data: expected str, got {type(value).__name__}")

    return value


def validate_action(action) -> Action:
    """
    Coerce a value to an Action

    Args:
        action: An Action member or its integer value

    Returns:
        The matching Action

    Raises:
        UnsupportedAction: If the value is not a known action
    """
    # bool is an int subclass; True must not pass as DELETE
    if isinstance(action, bool) or not isinstance(action, int):
        raise UnsupportedAction(f"unsupported action: {action!r}")

    try:
        return Action(action)
    except ValueError as e:
        raise UnsupportedAction(f"unsupported action: {action!r}") from e
