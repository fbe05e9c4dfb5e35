"""Conversion of runtime values into JSON-safe equivalents."""

import array
import base64
import datetime
import decimal
import types
import uuid
from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from typing import Any

from modelscheme.exceptions import EncodingError
from modelscheme.inspection import column_values, is_record


class ValueKind(str, Enum):
    """Kinds of values the encoder knows how to handle."""

    NULL = "null"
    SCALAR = "scalar"
    ARRAY = "array"
    DATETIME = "datetime"
    BINARY = "binary"
    RECORD = "record"
    GENERIC_OBJECT = "generic_object"
    UNSUPPORTED = "unsupported"


def _is_generic_object(value: Any) -> bool:
    if isinstance(value, Mapping):
        return True
    if callable(value) or isinstance(value, (type, types.ModuleType)):
        return False
    return hasattr(value, "__dict__")


# Checked in order; the first matching predicate decides the kind
VALUE_KIND_PREDICATES: list[tuple[Callable[[Any], bool], ValueKind]] = [
    (lambda v: v is None, ValueKind.NULL),
    (lambda v: isinstance(v, Enum), ValueKind.SCALAR),
    (lambda v: isinstance(v, (str, int, float, bool, decimal.Decimal, uuid.UUID)), ValueKind.SCALAR),
    (lambda v: isinstance(v, (bytes, bytearray, memoryview)), ValueKind.BINARY),
    (lambda v: isinstance(v, (list, tuple, set, frozenset, array.array)), ValueKind.ARRAY),
    (lambda v: isinstance(v, (datetime.datetime, datetime.date, datetime.time)), ValueKind.DATETIME),
    (is_record, ValueKind.RECORD),
    (_is_generic_object, ValueKind.GENERIC_OBJECT),
]


def classify_value(
    value: Any,
    predicates: Sequence[tuple[Callable[[Any], bool], ValueKind]] | None = None,
) -> ValueKind:
    """
    Determine the kind of a runtime value.

    Args:
        value: Value to classify
        predicates: Ordered (predicate, kind) pairs. Defaults to VALUE_KIND_PREDICATES.

    Returns:
        The kind of the first matching predicate, or UNSUPPORTED
    """
    for predicate, kind in predicates or VALUE_KIND_PREDICATES:
        if predicate(value):
            return kind
    return ValueKind.UNSUPPORTED


def encode_binary(data: bytes | bytearray | memoryview, encoding: str = "base64") -> str:
    """
    Encode binary data as text.

    Args:
        data: Binary payload
        encoding: 'base64', 'base64url', 'hex' or any Python text codec name

    Returns:
        Encoded text

    Raises:
        EncodingError: If the encoding is unknown or the data can't be decoded with it
    """
    data = bytes(data)
    if encoding == "base64":
        return base64.b64encode(data).decode("ascii")
    if encoding == "base64url":
        return base64.urlsafe_b64encode(data).decode("ascii")
    if encoding == "hex":
        return data.hex()
    try:
        return data.decode(encoding)
    except (LookupError, UnicodeDecodeError) as e:
        raise EncodingError("bytes", f"Can't encode bytes as {encoding}: {e}") from e


def _plain_scalar(value: Any, options: Mapping[str, Any]) -> Any:
    # Enum members are replaced by their values, which may need encoding themselves
    if isinstance(value, Enum):
        return encode_to_json(value.value, options)
    if isinstance(value, decimal.Decimal):
        if value.is_finite() and value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, uuid.UUID):
        return str(value)
    return value


def encode_to_json(value: Any, options: Mapping[str, Any] | None = None) -> Any:
    """
    Convert a value into something json.dumps accepts without a custom encoder.

    Recognized options:
        blob_encoding: text encoding for binary values (default: base64)
        value_kinds: ordered (predicate, kind) pairs replacing VALUE_KIND_PREDICATES

    Args:
        value: Value to convert
        options: Encoder options

    Returns:
        JSON-safe value

    Raises:
        EncodingError: If the value has no JSON representation
    """
    options = options or {}
    kind = classify_value(value, options.get("value_kinds"))

    if kind is ValueKind.NULL:
        return value
    if kind is ValueKind.SCALAR:
        return _plain_scalar(value, options)
    if kind is ValueKind.ARRAY:
        return [encode_to_json(item, options) for item in value]
    if kind is ValueKind.DATETIME:
        return value.isoformat()
    if kind is ValueKind.BINARY:
        return encode_binary(value, options.get("blob_encoding", "base64"))
    if kind is ValueKind.RECORD:
        return {key: encode_to_json(item, options) for key, item in column_values(value).items()}
    if kind is ValueKind.GENERIC_OBJECT:
        if isinstance(value, Mapping):
            return {str(key): encode_to_json(item, options) for key, item in value.items()}
        # Plain objects expose their public instance attributes only
        return {
            key: encode_to_json(item, options)
            for key, item in vars(value).items()
            if not key.startswith("_")
        }
    raise EncodingError(type(value).__name__)
