"""Scheme registry and resolution."""

from modelscheme.schemes.registry import (
    ModelConfig,
    SchemeRegistry,
    get_registry,
    register_model,
)
from modelscheme.schemes.resolver import ResolvedScheme, resolve_options, resolve_scheme

__all__ = [
    "ModelConfig",
    "SchemeRegistry",
    "get_registry",
    "register_model",
    "ResolvedScheme",
    "resolve_options",
    "resolve_scheme",
]
