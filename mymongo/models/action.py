"""Mutating actions supported by the database helpers."""

from enum import IntEnum


class Action(IntEnum):
    """A single mutation applied to one record identified by its uuid"""
    CREATE = 0
    DELETE = 1
    UPDATE = 2
