"""Scheme-driven serialization of SQLAlchemy records.

A Serializer compiles the plan for one (model, scheme) pair when it is
constructed: scheme resolution, option merging, attribute classification and
selector compilation all happen once. serialize() then applies that plan to
records, handing relationships to child serializers that are looked up in a
cache keyed by association path ('author', 'author.posts', ...).

Usage:
    serializer = Serializer(Post, "summary")
    data = serializer.serialize(post)

    data = Serializer.serialize_many(posts, Post, ["summary", "stats"])
"""

import datetime
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from modelscheme.attributes import classify_attributes, compile_attribute_list
from modelscheme.encoding import ValueKind, classify_value
from modelscheme.exceptions import (
    CircularReferenceError,
    ConfigurationError,
    TypeMismatchError,
    UndefinedAttributeError,
)
from modelscheme.inspection import (
    UNDEFINED,
    is_model,
    is_record,
    model_name,
    model_of,
    read_field,
    read_property,
)
from modelscheme.options import SerializerOptions, UndefinedPolicy, get_default_options
from modelscheme.schemes import SchemeRegistry, get_registry, resolve_options, resolve_scheme

logger = logging.getLogger(__name__)

SerializerCache = dict[str, "Serializer"]


class Serializer:
    """Serializer for records of one model under one scheme.

    Instances are not modified after construction and can be reused for any
    number of records. A cache passed to serialize() belongs to a single run
    and must not be shared between concurrent runs.
    """

    FAIL = UndefinedPolicy.FAIL
    SKIP = UndefinedPolicy.SKIP
    SET_NULL = UndefinedPolicy.SET_NULL

    def __init__(
        self,
        model: type,
        scheme: Any = None,
        options: Mapping[str, Any] | None = None,
        *,
        registry: SchemeRegistry | None = None,
        defaults: SerializerOptions | None = None,
        path: str = "",
    ):
        """
        Build the serialization plan for a model.

        Args:
            model: Mapped class whose records this serializer handles
            scheme: Scheme dict, scheme name, list of scheme names to merge, or None
                    for the model's default scheme
            options: Option overrides; these take precedence over scheme, model and
                     default options and are passed on to child serializers
            registry: Registry holding model configuration. Defaults to the global one.
            defaults: Default options. Defaults to get_default_options().
            path: Association path from the root record; empty for the root

        Raises:
            ConfigurationError: If model is not a mapped class, the scheme does not
                                resolve to a mapping, or the options are invalid
        """
        if not is_model(model):
            raise ConfigurationError(f"{model!r} is not a valid SQLAlchemy model")

        self.registry = registry or get_registry()
        self.defaults = defaults or get_default_options()
        self.config = self.registry.get(model)

        resolved = resolve_scheme(model, scheme, self.config)
        self.model = model
        self.scheme = resolved.scheme
        self.scheme_name = resolved.name
        self.path = path

        self._orig_options = options
        self.options = resolve_options(options, self.scheme, self.config, self.defaults)

        self.attributes = classify_attributes(model, self.options.attr_filter)
        self.attribute_list = compile_attribute_list(self.scheme, self.attributes)

        logger.debug(
            f"Compiled serializer for {model.__name__} "
            f"(scheme={self.scheme_name!r}, path={path!r}, attributes={len(self.attribute_list)})"
        )

    def __repr__(self) -> str:
        return f"<Serializer(model={self.model.__name__}, scheme={self.scheme_name!r}, path={self.path!r})>"

    def serialize(self, record: Any, cache: SerializerCache | None = None) -> dict[str, Any]:
        """
        Serialize one record.

        Args:
            record: Instance of this serializer's model
            cache: Optional mapping of association path to serializer, filled in
                   as relationships are visited and reused on later visits

        Returns:
            JSON-safe dictionary

        Raises:
            TypeMismatchError: If record is not an instance of the model
            UndefinedAttributeError: If an attribute has no value under the FAIL policy
            CircularReferenceError: If a record is reached again through its own relationships
            EncodingError: If a value can't be represented in JSON
        """
        return self._serialize(record, cache, ())

    def _serialize(self, record: Any, cache: SerializerCache | None, ancestors: tuple) -> dict[str, Any]:
        if not isinstance(record, self.model) or not is_record(record):
            raise TypeMismatchError(self.model.__name__, type(record).__name__)

        ancestors = ancestors + (record,)
        rename = self.scheme.get("as") or {}
        output: dict[str, Any] = {}

        for entry in self.attribute_list:
            if entry.is_field:
                value = read_field(record, entry.name)
            else:
                value = read_property(record, entry.name)

            key = rename.get(entry.name) or entry.name

            if value is UNDEFINED:
                policy = self.options.undefined_policy
                if policy == UndefinedPolicy.SKIP:
                    continue
                elif policy == UndefinedPolicy.SET_NULL:
                    output[key] = None
                elif policy == UndefinedPolicy.FAIL:
                    raise UndefinedAttributeError(self.model.__name__, entry.name)
                else:
                    raise ConfigurationError(f"Invalid undefined_policy setting: {policy!r}")
            else:
                output[key] = self._serialize_value(entry.name, value, cache, ancestors)

        if self.config is not None and self.config.post_serialize is not None:
            output = self.config.post_serialize(output, record, self.scheme_name, self.scheme)

        hook = self.scheme.get("post_serialize")
        if hook is not None:
            output = hook(output, record)

        return output

    def _serialize_value(self, name: str, value: Any, cache: SerializerCache | None, ancestors: tuple) -> Any:
        info = self.attributes.fields.get(name)
        options = self.options

        # JSON columns already hold JSON-safe data
        if info is not None and info.is_document and options.copy_json_fields:
            return value

        kind = classify_value(value, options.encoder_options.get("value_kinds"))

        if kind is ValueKind.ARRAY:
            return [self._serialize_value(name, item, cache, ancestors) for item in value]

        # Keyed collections such as attribute_keyed_dict relationships
        if kind is ValueKind.GENERIC_OBJECT and isinstance(value, Mapping):
            return {
                str(key): self._serialize_value(name, item, cache, ancestors)
                for key, item in value.items()
            }

        if kind is ValueKind.RECORD:
            return self._serialize_assoc(name, value, cache, ancestors)

        if (
            options.simple_dates
            and info is not None
            and info.is_date_only
            and isinstance(value, datetime.date)
        ):
            value = f"{value.year:04d}-{value.month:02d}-{value.day:02d}"

        return options.encoder(value, options.encoder_options)

    def _serialize_assoc(self, name: str, record: Any, cache: SerializerCache | None, ancestors: tuple) -> dict[str, Any]:
        path = f"{self.path}.{name}" if self.path else name

        if any(ancestor is record for ancestor in ancestors):
            raise CircularReferenceError(model_name(model_of(record)), path)

        serializer = cache.get(path) if cache is not None else None
        if serializer is None:
            assoc = self.scheme.get("assoc") or {}
            serializer = Serializer(
                model_of(record),
                assoc.get(name),
                self._orig_options,
                registry=self.registry,
                defaults=self.defaults,
                path=path,
            )
            if cache is not None:
                cache[path] = serializer
        else:
            logger.debug(f"Reusing serializer for path {path!r}")

        return serializer._serialize(record, cache, ancestors)

    @staticmethod
    def serialize_many(
        data: Iterable[Any],
        model: type,
        scheme: Any = None,
        options: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> list[dict[str, Any]]:
        """
        Serialize a collection of records of one model.

        One serializer and one cache are built and shared by every record.
        The first failing record aborts the whole call.

        Args:
            data: Records to serialize
            model: Mapped class of the records
            scheme: Scheme reference, as for Serializer()
            options: Option overrides, as for Serializer()
            **kwargs: registry and defaults, as for Serializer()

        Returns:
            Serialized records in input order
        """
        serializer = Serializer(model, scheme, options, **kwargs)
        cache: SerializerCache = {}
        result = [serializer.serialize(record, cache) for record in data]
        logger.debug(
            f"Serialized {len(result)} {model.__name__} records using {len(cache)} child serializers"
        )
        return result


def serialize_many(
    data: Iterable[Any],
    model: type,
    scheme: Any = None,
    options: Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> list[dict[str, Any]]:
    """Serialize a collection of records of one model. See Serializer.serialize_many()."""
    return Serializer.serialize_many(data, model, scheme, options, **kwargs)


def serialize(
    entity_or_collection: Any,
    scheme: Any = None,
    options: Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> dict[str, Any] | list[dict[str, Any]]:
    """
    Serialize a record or a collection of records, taking the model from the records.

    An empty collection gives an empty list without building a serializer.

    Args:
        entity_or_collection: A record, or an iterable of records of one model
        scheme: Scheme reference, as for Serializer()
        options: Option overrides, as for Serializer()

    Returns:
        Serialized record, or list of serialized records

    Raises:
        TypeMismatchError: If the input is neither a record nor a collection
    """
    if is_record(entity_or_collection):
        model = model_of(entity_or_collection)
        return Serializer(model, scheme, options, **kwargs).serialize(entity_or_collection)

    if isinstance(entity_or_collection, (str, bytes, Mapping)) or not isinstance(entity_or_collection, Iterable):
        raise TypeMismatchError("a mapped record", type(entity_or_collection).__name__)

    records = list(entity_or_collection)
    if not records:
        return []
    if not is_record(records[0]):
        raise TypeMismatchError("a mapped record", type(records[0]).__name__)
    return serialize_many(records, model_of(records[0]), scheme, options, **kwargs)
