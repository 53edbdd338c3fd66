"""JSON decoding into caller-declared result types."""

from functools import lru_cache
from typing import Any, Type, TypeVar

from pydantic import TypeAdapter
from pydantic_core import to_json

T = TypeVar("T")


@lru_cache(maxsize=256)
def _adapter(result_type: Any) -> TypeAdapter:
    return TypeAdapter(result_type)


def decode_json(result_type: Type[T], data: bytes) -> T:
    """Decode ``data`` as JSON into ``result_type``.

    Raises ``pydantic.ValidationError`` for malformed JSON or a payload that
    does not fit the declared type. Validation is strict, so a JSON string
    is never coerced into a number field.
    """
    return _adapter(result_type).validate_json(data, strict=True)


def encode_json(value: Any) -> bytes:
    """Serialize ``value`` (models, dataclasses, plain data) to JSON bytes."""
    return to_json(value)
