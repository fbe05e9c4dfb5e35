"""Serializer options and process-wide defaults."""

from collections.abc import Callable, Mapping
from enum import IntEnum
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from modelscheme.config import get_settings
from modelscheme.encoding import encode_to_json
from modelscheme.exceptions import ConfigurationError
from modelscheme.inspection import FieldInfo
from modelscheme.utils import defaults_deep


class UndefinedPolicy(IntEnum):
    """What to do with an attribute that has no value on a record."""

    FAIL = 1
    SKIP = 2
    SET_NULL = 3


FAIL = UndefinedPolicy.FAIL
SKIP = UndefinedPolicy.SKIP
SET_NULL = UndefinedPolicy.SET_NULL


class SerializerOptions(BaseModel):
    """Effective options of one serializer.

    Instances are immutable; build a new one to change a setting.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="forbid")

    encoder: Callable[[Any, Mapping[str, Any]], Any] = encode_to_json
    undefined_policy: UndefinedPolicy = UndefinedPolicy.SKIP
    copy_json_fields: bool = True
    simple_dates: bool = True
    encoder_options: dict[str, Any] = Field(default_factory=lambda: {"blob_encoding": "base64"})
    attr_filter: Callable[[FieldInfo, type], bool] | None = None

    @field_validator("undefined_policy", mode="before")
    @classmethod
    def _parse_policy(cls, value: Any) -> Any:
        """Accept policy names such as 'skip' or 'SET_NULL'."""
        if isinstance(value, str):
            try:
                return UndefinedPolicy[value.strip().upper()]
            except KeyError:
                raise ValueError(f"Invalid undefined_policy setting: {value!r}")
        return value


def build_options(*sources: Mapping[str, Any] | None) -> SerializerOptions:
    """
    Merge option mappings into a SerializerOptions instance.

    Args:
        *sources: Option mappings, highest precedence first

    Returns:
        Validated options

    Raises:
        ConfigurationError: If the merged options are invalid
    """
    merged = defaults_deep(*sources)
    try:
        return SerializerOptions.model_validate(merged)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid serializer options: {e}", e) from e


@lru_cache()
def get_default_options() -> SerializerOptions:
    """Get the process-wide default options, built from settings on first use."""
    settings = get_settings()
    return build_options(
        {
            "undefined_policy": settings.undefined_policy,
            "copy_json_fields": settings.copy_json_fields,
            "simple_dates": settings.simple_dates,
            "encoder_options": {"blob_encoding": settings.blob_encoding},
        }
    )


def reset_default_options() -> None:
    """Drop cached defaults so the next serializer re-reads settings (useful for testing)."""
    get_default_options.cache_clear()
    get_settings.cache_clear()
