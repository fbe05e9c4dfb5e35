"""Registry of per-model serializer configuration."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from modelscheme.exceptions import ConfigurationError
from modelscheme.inspection import is_model

logger = logging.getLogger(__name__)


@dataclass
class ModelConfig:
    """Serializer configuration declared for one model.

    Attributes:
        schemes: Named schemes available to the model
        default_scheme: Name of the scheme used when none is requested
        options: Model-wide option overrides
        post_serialize: Hook called as post_serialize(output, record, scheme_name, scheme)
                        for every record of the model; returns the output to use
    """

    schemes: dict[str, Any] = field(default_factory=dict)
    default_scheme: str | None = None
    options: dict[str, Any] = field(default_factory=dict)
    post_serialize: Callable[..., dict[str, Any]] | None = None


class SchemeRegistry:
    """Side table mapping mapped classes to their ModelConfig."""

    def __init__(self):
        self._configs: dict[type, ModelConfig] = {}

    def register(self, model: type, config: ModelConfig | None = None, **kwargs: Any) -> ModelConfig:
        """
        Register serializer configuration for a model.

        Args:
            model: Mapped class
            config: Complete configuration. If None, one is built from kwargs.
            **kwargs: ModelConfig fields (schemes, default_scheme, options, post_serialize)

        Returns:
            The registered configuration

        Raises:
            ConfigurationError: If model is not a mapped class
        """
        if not is_model(model):
            raise ConfigurationError(f"{model!r} is not a valid SQLAlchemy model")
        if config is None:
            config = ModelConfig(**kwargs)
        self._configs[model] = config
        logger.debug(f"Registered serializer config for {model.__name__}: schemes={list(config.schemes)}")
        return config

    def get(self, model: type) -> ModelConfig | None:
        """Get the configuration of a model, falling back to its mapped base classes."""
        for cls in getattr(model, "__mro__", ()):
            config = self._configs.get(cls)
            if config is not None:
                return config
        return None

    def unregister(self, model: type) -> None:
        self._configs.pop(model, None)

    def clear(self) -> None:
        self._configs.clear()

    def __contains__(self, model: type) -> bool:
        return self.get(model) is not None


_registry = SchemeRegistry()


def get_registry() -> SchemeRegistry:
    """Get the process-wide registry."""
    return _registry


def register_model(
    schemes: dict[str, Any] | None = None,
    default_scheme: str | None = None,
    options: dict[str, Any] | None = None,
    post_serialize: Callable[..., dict[str, Any]] | None = None,
    registry: SchemeRegistry | None = None,
) -> Callable[[type], type]:
    """
    Class decorator registering serializer configuration for a model.

    Usage:
        @register_model(schemes={"short": {"include": ["id", "title"]}})
        class Post(Base):
            ...
    """

    def decorator(model: type) -> type:
        (registry or _registry).register(
            model,
            schemes=schemes or {},
            default_scheme=default_scheme,
            options=options or {},
            post_serialize=post_serialize,
        )
        return model

    return decorator
