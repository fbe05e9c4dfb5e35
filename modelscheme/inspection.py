"""SQLAlchemy metadata access used by the serializer.

Everything the serializer needs to know about models and records goes
through this module: mapped-class checks, field descriptors, relationship
names and attribute reads.
"""

from dataclasses import dataclass
from typing import Any

from sqlalchemy import BINARY, JSON, Column, Date, Integer, LargeBinary, VARBINARY
from sqlalchemy import inspect
from sqlalchemy.dialects.postgresql import HSTORE
from sqlalchemy.ext.hybrid import HybridExtensionType
from sqlalchemy.orm import InstanceState, Mapper
from sqlalchemy.types import TypeEngine


class _Undefined:
    """Marker for attributes that have no value on a record."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


@dataclass(frozen=True)
class FieldInfo:
    """Descriptor of one data field of a mapped class."""

    name: str
    type: TypeEngine | None
    primary_key: bool = False
    foreign_key: bool = False
    auto_generated: bool = False
    # 'column', 'expression' (column_property over a SQL expression) or 'hybrid'
    kind: str = "column"

    @property
    def is_virtual(self) -> bool:
        return self.kind != "column"

    @property
    def is_binary(self) -> bool:
        return isinstance(self.type, (LargeBinary, BINARY, VARBINARY))

    @property
    def is_document(self) -> bool:
        return isinstance(self.type, (JSON, HSTORE))

    @property
    def is_date_only(self) -> bool:
        return isinstance(self.type, Date)


def is_model(obj: Any) -> bool:
    """Check whether obj is a mapped class."""
    return isinstance(obj, type) and isinstance(inspect(obj, raiseerr=False), Mapper)


def is_record(obj: Any) -> bool:
    """Check whether obj is an instance of any mapped class."""
    if obj is None or isinstance(obj, type):
        return False
    return isinstance(inspect(obj, raiseerr=False), InstanceState)


def model_of(record: Any) -> type:
    """Get the mapped class a record belongs to."""
    return inspect(record).mapper.class_


def model_name(model: Any) -> str:
    return getattr(model, "__name__", repr(model))


def _is_auto_generated(column: Column) -> bool:
    if column.server_default is not None or column.onupdate is not None:
        return True
    if column.server_onupdate is not None:
        return True
    if not column.primary_key or column.foreign_keys:
        return False
    if column.autoincrement is True:
        return True
    return (
        column.autoincrement == "auto"
        and isinstance(column.type, Integer)
        and len(column.table.primary_key.columns) == 1
    )


def describe_fields(model: type) -> list[FieldInfo]:
    """
    Describe the data fields of a mapped class in declaration order.

    Column attributes come first, followed by hybrid properties. Relationships
    are not fields; see describe_associations().

    Args:
        model: Mapped class

    Returns:
        List of field descriptors
    """
    mapper = inspect(model)
    fields = []

    for prop in mapper.column_attrs:
        column = prop.columns[0]
        if isinstance(column, Column):
            fields.append(
                FieldInfo(
                    name=prop.key,
                    type=column.type,
                    primary_key=column.primary_key,
                    foreign_key=bool(column.foreign_keys),
                    auto_generated=_is_auto_generated(column),
                )
            )
        else:
            fields.append(FieldInfo(name=prop.key, type=column.type, kind="expression"))

    for key, descriptor in mapper.all_orm_descriptors.items():
        if descriptor.extension_type is HybridExtensionType.HYBRID_PROPERTY:
            fields.append(FieldInfo(name=key, type=None, kind="hybrid"))

    return fields


def describe_associations(model: type) -> list[str]:
    """Get relationship names of a mapped class."""
    return list(inspect(model).relationships.keys())


def _is_unavailable(state: InstanceState, name: str) -> bool:
    # Detached records cannot load anything; unloaded attributes have no value
    return state.detached and name in state.unloaded


def _is_declared(record: Any, name: str) -> bool:
    # Static lookup: never runs descriptors
    if name in getattr(record, "__dict__", {}):
        return True
    return any(name in vars(cls) for cls in type(record).__mro__)


def read_field(record: Any, name: str) -> Any:
    """Read a mapped attribute, returning UNDEFINED when it can't be loaded."""
    if _is_unavailable(inspect(record), name):
        return UNDEFINED
    return getattr(record, name)


def read_property(record: Any, name: str) -> Any:
    """
    Read an arbitrary attribute of a record.

    Callables are invoked without arguments and their result is returned.
    Missing attributes and relationships that can't be loaded give UNDEFINED.
    Errors raised by property getters propagate.
    """
    if _is_unavailable(inspect(record), name):
        return UNDEFINED
    try:
        value = getattr(record, name)
    except AttributeError:
        if _is_declared(record, name):
            raise
        return UNDEFINED
    if callable(value):
        value = value()
    return value


def column_values(record: Any) -> dict[str, Any]:
    """Get the loaded column attribute values of a record."""
    state = inspect(record)
    return {
        prop.key: getattr(record, prop.key)
        for prop in state.mapper.column_attrs
        if not _is_unavailable(state, prop.key)
    }
