"""Configuration management for modelscheme.

This module provides the process-wide settings the default serializer
options are built from. All values can be overridden via environment
variables or .env file.

Environment Variables:
    MODELSCHEME_UNDEFINED_POLICY: What to do with attributes that have no value
                                  (default: skip). One of skip, set_null, fail.
    MODELSCHEME_COPY_JSON_FIELDS: Pass JSON/JSONB/HSTORE column values through
                                  unchanged (default: true)
    MODELSCHEME_SIMPLE_DATES: Render Date columns as YYYY-MM-DD (default: true)
    MODELSCHEME_BLOB_ENCODING: Text encoding for binary values (default: base64)
                               Examples: base64, base64url, hex, latin-1
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for modelscheme defaults.

    All configuration values can be set via environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="MODELSCHEME_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    undefined_policy: str = "skip"
    copy_json_fields: bool = True
    simple_dates: bool = True
    blob_encoding: str = "base64"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    return Settings()
