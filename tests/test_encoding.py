"""Tests for the value encoder."""

import array
import datetime
import decimal
import enum
import json
import uuid

import pytest

pytestmark = pytest.mark.unit

from modelscheme.encoding import ValueKind, classify_value, encode_binary, encode_to_json
from modelscheme.exceptions import EncodingError
from tests.models import Author


class Status(enum.Enum):
    DRAFT = 1
    PUBLISHED = (2, "live")


class Color(str, enum.Enum):
    RED = "red"


class Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y
        self._cache = "hidden"


class TestClassifyValue:
    """Tests for value kind detection."""

    @pytest.mark.parametrize(
        "value,kind",
        [
            (None, ValueKind.NULL),
            ("text", ValueKind.SCALAR),
            (3, ValueKind.SCALAR),
            (2.5, ValueKind.SCALAR),
            (True, ValueKind.SCALAR),
            ([1, 2], ValueKind.ARRAY),
            ((1, 2), ValueKind.ARRAY),
            (array.array("i", [1, 2]), ValueKind.ARRAY),
            (datetime.date(2024, 1, 2), ValueKind.DATETIME),
            (datetime.datetime(2024, 1, 2, 3, 4, 5), ValueKind.DATETIME),
            (b"\x00", ValueKind.BINARY),
            (bytearray(b"\x00"), ValueKind.BINARY),
            ({"a": 1}, ValueKind.GENERIC_OBJECT),
            (Point(1, 2), ValueKind.GENERIC_OBJECT),
            (lambda: None, ValueKind.UNSUPPORTED),
            (object, ValueKind.UNSUPPORTED),
        ],
    )
    def test_kinds(self, value, kind):
        """Test each value maps to its kind."""
        assert classify_value(value) is kind

    def test_record_kind(self):
        """Test mapped instances are records, not generic objects."""
        assert classify_value(Author(id=1, name="Ann")) is ValueKind.RECORD

    def test_custom_predicates(self):
        """Test a custom predicate table is consulted in order."""
        predicates = [(lambda v: isinstance(v, complex), ValueKind.SCALAR)]
        assert classify_value(1j, predicates) is ValueKind.SCALAR
        assert classify_value("text", predicates) is ValueKind.UNSUPPORTED


class TestEncodeToJson:
    """Tests for encode_to_json."""

    def test_scalars_unchanged(self):
        """Test primitive values are returned as-is."""
        for value in ("a", 1, 1.5, False, None):
            assert encode_to_json(value) is value

    def test_nested_structures(self):
        """Test lists and mappings are encoded recursively."""
        value = {"when": datetime.date(2024, 3, 1), "items": [1, (2, 3)], "raw": b"\x00\x01\x02"}
        assert encode_to_json(value) == {
            "when": "2024-03-01",
            "items": [1, [2, 3]],
            "raw": "AAEC",
        }

    def test_datetime_iso_format(self):
        """Test datetimes keep their timezone offset."""
        value = datetime.datetime(2024, 3, 1, 12, 30, tzinfo=datetime.timezone.utc)
        assert encode_to_json(value) == "2024-03-01T12:30:00+00:00"

    def test_typed_array(self):
        """Test array.array becomes a plain list."""
        assert encode_to_json(array.array("d", [1.0, 2.5])) == [1.0, 2.5]

    def test_plain_object_public_attributes(self):
        """Test plain objects expose only public instance attributes."""
        assert encode_to_json(Point(1, [2])) == {"x": 1, "y": [2]}

    def test_record_columns(self):
        """Test a record inside a structure is encoded as its columns."""
        encoded = encode_to_json({"author": Author(id=1, name="Ann")})
        assert encoded["author"]["id"] == 1
        assert encoded["author"]["name"] == "Ann"
        assert "posts" not in encoded["author"]

    def test_blob_encoding_option(self):
        """Test the configured binary encoding is used."""
        assert encode_to_json(b"\x00\x01\x02", {"blob_encoding": "hex"}) == "000102"

    def test_unsupported_value(self):
        """Test functions can't be encoded."""
        def handler():
            pass

        with pytest.raises(EncodingError) as exc_info:
            encode_to_json({"callback": handler})
        assert exc_info.value.type_name == "function"

    @pytest.mark.parametrize(
        "fixture",
        [
            "plain",
            42,
            [1, "two", 3.5, None, True],
            {"a": {"b": [1, {"c": None}]}, "d": "e"},
            [],
            {},
        ],
    )
    def test_json_round_trip(self, fixture):
        """Test encoded values survive json.dumps/json.loads unchanged."""
        encoded = encode_to_json(fixture)
        assert json.loads(json.dumps(encoded)) == fixture


class TestColumnScalars:
    """Tests for scalar types returned by Enum, Numeric and Uuid columns."""

    def test_enum_encodes_its_value(self):
        assert encode_to_json(Status.DRAFT) == 1
        assert encode_to_json(Status.PUBLISHED) == [2, "live"]

    def test_str_enum_becomes_plain_string(self):
        encoded = encode_to_json(Color.RED)
        assert encoded == "red"
        assert type(encoded) is str

    def test_decimal(self):
        """Test decimals become JSON numbers."""
        assert encode_to_json(decimal.Decimal("1.50")) == 1.5
        assert encode_to_json(decimal.Decimal("12")) == 12
        assert type(encode_to_json(decimal.Decimal("12.00"))) is int

    def test_uuid(self):
        value = uuid.UUID("12345678-1234-5678-1234-567812345678")
        assert encode_to_json(value) == "12345678-1234-5678-1234-567812345678"

    def test_kinds(self):
        for value in (Status.DRAFT, decimal.Decimal("1"), uuid.uuid4()):
            assert classify_value(value) is ValueKind.SCALAR

    def test_json_safe_inside_structures(self):
        value = {"status": Status.DRAFT, "price": decimal.Decimal("9.99"), "tags": [Color.RED]}
        encoded = encode_to_json(value)
        assert json.loads(json.dumps(encoded)) == {"status": 1, "price": 9.99, "tags": ["red"]}


class TestEncodeBinary:
    """Tests for binary payload encodings."""

    def test_base64(self):
        assert encode_binary(bytes([0, 1, 2])) == "AAEC"

    def test_base64url(self):
        assert encode_binary(b"\xfb\xff", "base64url") == "-_8="

    def test_codec(self):
        assert encode_binary(b"caf\xe9", "latin-1") == "café"

    def test_unknown_encoding(self):
        """Test unknown encodings raise EncodingError."""
        with pytest.raises(EncodingError):
            encode_binary(b"\x00", "no-such-codec")
