"""Tests for JSON decoding into declared types."""

from typing import Any, Dict, List, Optional

import pytest
from pydantic import BaseModel, ValidationError

from courier.decoding import decode_json, encode_json


class Address(BaseModel):
    city: str
    zip: Optional[str] = None


class Person(BaseModel):
    id: int
    name: str
    addresses: List[Address] = []


def test_nested_model():
    person = decode_json(Person, b'{"id":1,"name":"Ann","addresses":[{"city":"Oslo"}]}')
    assert person.addresses[0].city == "Oslo"
    assert person.addresses[0].zip is None


def test_generic_containers():
    assert decode_json(Dict[str, int], b'{"a":1,"b":2}') == {"a": 1, "b": 2}
    assert decode_json(List[str], b'["x","y"]') == ["x", "y"]


def test_any_keeps_plain_data():
    assert decode_json(Any, b'{"k":[1,2,null]}') == {"k": [1, 2, None]}


def test_malformed_json():
    with pytest.raises(ValidationError) as exc_info:
        decode_json(Person, b'{"id":1,')
    assert exc_info.value.errors()[0]["type"] == "json_invalid"


def test_missing_field():
    with pytest.raises(ValidationError):
        decode_json(Person, b'{"id":1}')


def test_encode_model_round_trip():
    body = encode_json(Person(id=7, name="Bo", addresses=[Address(city="Rome", zip="00100")]))
    assert isinstance(body, bytes)
    assert decode_json(Person, body) == Person(id=7, name="Bo", addresses=[Address(city="Rome", zip="00100")])


def test_string_is_not_coerced_into_int():
    with pytest.raises(ValidationError) as exc_info:
        decode_json(Person, b'{"id":"42","name":"Ann"}')
    assert exc_info.value.errors()[0]["loc"] == ("id",)


def test_number_is_not_coerced_into_str():
    with pytest.raises(ValidationError):
        decode_json(List[str], b'["x", 1]')
