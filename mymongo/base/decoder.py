"""Decoding of raw documents into caller-requested types."""

import dataclasses
from functools import lru_cache, partial
from typing import Any, Mapping, Protocol, TypeVar, get_type_hints, runtime_checkable

from pydantic import ConfigDict, Field, TypeAdapter, ValidationError, create_model
from pydantic.dataclasses import is_pydantic_dataclass
from pydantic.errors import PydanticSchemaGenerationError

from mymongo.helpers.error import DecodeError

T = TypeVar("T")


@runtime_checkable
class Decodable(Protocol):
    """Types that know how to build themselves from a raw document."""

    @classmethod
    def from_document(cls, document: Mapping[str, Any]):  # pragma: no cover
        ...


def _type_name(target) -> str:
    return getattr(target, "__name__", repr(target))


def _is_stdlib_dataclass(target) -> bool:
    return isinstance(target, type) and dataclasses.is_dataclass(target) and not is_pydantic_dataclass(target)


def _strict_model_for(target):
    """Mirror the init fields of a stdlib dataclass as a strict pydantic model."""
    hints = get_type_hints(target)
    fields = {}
    for field in dataclasses.fields(target):
        if not field.init:
            continue
        if field.default is not dataclasses.MISSING:
            default = field.default
        elif field.default_factory is not dataclasses.MISSING:
            default = Field(default_factory=field.default_factory)
        else:
            default = ...
        fields[field.name] = (hints[field.name], default)
    return create_model(target.__name__, __config__=ConfigDict(strict=True), **fields)


@lru_cache(maxsize=256)
def _validator_for(target):
    if _is_stdlib_dataclass(target):
        model = _strict_model_for(target)

        def validate(document):
            validated = model.model_validate(document)
            return target(**{name: getattr(validated, name) for name in model.model_fields})

        return validate

    return partial(TypeAdapter(target).validate_python, strict=True)


def decode_document(document: Mapping[str, Any], target: type[T]) -> T:
    """Decode one document into ``target``.

    Decodable targets receive the raw document. Anything else pydantic can
    validate (dataclasses, models, TypedDicts, dict types) is validated in
    strict mode, so a stored bool or numeric string never becomes a float.
    The result is either fully decoded or an error.

    Raises:
        DecodeError: If the document's shape does not fit ``target``
    """
    if isinstance(target, type) and issubclass(target, Decodable):
        try:
            return target.from_document(document)
        except (AttributeError, LookupError, TypeError, ValueError) as e:
            raise DecodeError(
                f"Failed to decode document into {_type_name(target)}: {str(e)}",
                target=target,
                document=document
            ) from e

    try:
        validate = _validator_for(target)
    except PydanticSchemaGenerationError as e:
        raise DecodeError(f"Cannot decode into {_type_name(target)}: {str(e)}", target=target) from e

    try:
        return validate(document)
    except (TypeError, ValueError) as e:
        raise DecodeError(
            f"Failed to decode document into {_type_name(target)}: {str(e)}",
            target=target,
            document=document
        ) from e
