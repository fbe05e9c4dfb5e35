"""Scheme-driven serialization of SQLAlchemy records into JSON-safe data."""

from modelscheme.encoding import VALUE_KIND_PREDICATES, ValueKind, classify_value, encode_to_json
from modelscheme.exceptions import (
    CircularReferenceError,
    ConfigurationError,
    EncodingError,
    SerializerError,
    TypeMismatchError,
    UndefinedAttributeError,
)
from modelscheme.inspection import UNDEFINED, FieldInfo
from modelscheme.options import (
    FAIL,
    SET_NULL,
    SKIP,
    SerializerOptions,
    UndefinedPolicy,
    get_default_options,
    reset_default_options,
)
from modelscheme.schemes import ModelConfig, SchemeRegistry, get_registry, register_model
from modelscheme.serializer import Serializer, serialize, serialize_many

__all__ = [
    "Serializer",
    "serialize",
    "serialize_many",
    "encode_to_json",
    "classify_value",
    "ValueKind",
    "VALUE_KIND_PREDICATES",
    "SerializerOptions",
    "UndefinedPolicy",
    "FAIL",
    "SKIP",
    "SET_NULL",
    "get_default_options",
    "reset_default_options",
    "ModelConfig",
    "SchemeRegistry",
    "get_registry",
    "register_model",
    "FieldInfo",
    "UNDEFINED",
    "SerializerError",
    "ConfigurationError",
    "TypeMismatchError",
    "UndefinedAttributeError",
    "EncodingError",
    "CircularReferenceError",
]
