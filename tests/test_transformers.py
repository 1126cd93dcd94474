"""Tests for schemarpc.transformers — JSON and tagged payload encodings."""

import datetime
import math
import uuid
from decimal import Decimal

import pytest
from pydantic import BaseModel

from schemarpc.errors import TransformError
from schemarpc.transformers import JSON, TAGGED, Transformer


class Point(BaseModel):
    x: int
    y: int


class TestJSONTransformer:
    def test_is_transformer(self) -> None:
        assert isinstance(JSON, Transformer)
        assert JSON.media_type == "application/json"

    def test_compact_output(self) -> None:
        assert JSON.serialize({"a": [1, 2]}) == '{"a":[1,2]}'

    def test_round_trip(self) -> None:
        value = {"name": "ada", "tags": ["x"], "n": 1.5, "ok": True, "none": None}
        assert JSON.deserialize(JSON.serialize(value)) == value

    def test_models_dumped(self) -> None:
        assert JSON.deserialize(JSON.serialize(Point(x=1, y=2))) == {"x": 1, "y": 2}

    def test_rich_values_reduced(self) -> None:
        text = JSON.serialize({"at": datetime.date(2024, 1, 2)})
        assert JSON.deserialize(text) == {"at": "2024-01-02"}

    def test_invalid_payload(self) -> None:
        with pytest.raises(TransformError):
            JSON.deserialize("{not json")

    def test_unserializable(self) -> None:
        with pytest.raises(TransformError):
            JSON.serialize(object())


class TestTaggedTransformer:
    def test_plain_values_have_no_meta(self) -> None:
        assert TAGGED.serialize({"a": 1}) == '{"json":{"a":1}}'

    def test_rich_round_trip(self) -> None:
        value = {
            "at": datetime.datetime(2024, 1, 2, 3, 4, 5),
            "day": datetime.date(2024, 1, 2),
            "price": Decimal("10.50"),
            "id": uuid.UUID("12345678-1234-5678-1234-567812345678"),
            "tags": {"a", "b"},
            "pair": (1, "x"),
            "raw": b"\x00\x01",
            "wait": datetime.timedelta(seconds=90),
            "big": math.inf,
        }
        assert TAGGED.deserialize(TAGGED.serialize(value)) == value

    def test_meta_paths(self) -> None:
        text = TAGGED.serialize({"events": [{"at": datetime.date(2024, 1, 1)}]})
        assert TAGGED.deserialize(text) == {"events": [{"at": datetime.date(2024, 1, 1)}]}
        assert '"events.0.at":"date"' in text

    def test_dotted_keys_escaped(self) -> None:
        value = {"a.b": datetime.date(2024, 1, 1)}
        assert TAGGED.deserialize(TAGGED.serialize(value)) == value

    def test_nested_containers(self) -> None:
        value = {"pairs": ((1, 2), (3, 4)), "frozen": frozenset({(1, 2)})}
        assert TAGGED.deserialize(TAGGED.serialize(value)) == value

    def test_tagged_root(self) -> None:
        value = datetime.datetime(2024, 5, 6, 7, 8, 9)
        assert TAGGED.deserialize(TAGGED.serialize(value)) == value

    def test_root_tag_kept_apart_from_empty_key(self) -> None:
        value = {"": datetime.date(2024, 1, 1)}
        text = TAGGED.serialize(value)
        assert '"root"' not in text
        assert TAGGED.deserialize(text) == value

    def test_tagged_root_with_empty_key_child(self) -> None:
        value = ({"": datetime.date(2024, 1, 1)},)
        text = TAGGED.serialize(value)
        assert '"root":"tuple"' in text
        assert TAGGED.deserialize(text) == value

    def test_nan_survives(self) -> None:
        assert math.isnan(TAGGED.deserialize(TAGGED.serialize(math.nan)))

    def test_missing_envelope(self) -> None:
        with pytest.raises(TransformError):
            TAGGED.deserialize('{"a":1}')

    def test_unknown_tag(self) -> None:
        with pytest.raises(TransformError):
            TAGGED.deserialize('{"json":1,"meta":{"values":{"":"mystery"}}}')
