"""Resolution of scheme references and effective options."""

from collections.abc import Mapping
from typing import Any, NamedTuple

from modelscheme.exceptions import ConfigurationError
from modelscheme.inspection import model_name
from modelscheme.options import SerializerOptions, build_options
from modelscheme.schemes.registry import ModelConfig
from modelscheme.utils import deep_merge

DEFAULT_SCHEME_NAME = "default"


class ResolvedScheme(NamedTuple):
    name: str | None
    scheme: Mapping[str, Any]


def _lookup(config: ModelConfig | None, name: str) -> Any:
    if config is None or not isinstance(config.schemes, Mapping):
        return None
    return config.schemes.get(name)


def resolve_scheme(model: type, reference: Any, config: ModelConfig | None) -> ResolvedScheme:
    """
    Find the scheme a reference points to.

    A list of names merges the named schemes into one composite scheme named
    after them joined by '_'. A single name is looked up among the model's
    schemes. None selects the model's default scheme, then its scheme
    named 'default', then an empty scheme. Anything else is used as the
    scheme itself.

    Args:
        model: Mapped class the scheme applies to
        reference: Scheme dict, scheme name, list of scheme names or None
        config: Registered configuration of the model, if any

    Returns:
        Scheme name and scheme

    Raises:
        ConfigurationError: If the result is not a mapping
    """
    name = None

    if isinstance(reference, (list, tuple)):
        name = "_".join(reference)
        if config is not None and isinstance(config.schemes, Mapping):
            scheme = deep_merge(config.schemes.get(n) for n in reference)
        else:
            scheme = None
    elif isinstance(reference, str):
        name = reference
        scheme = _lookup(config, reference)
    elif reference is None:
        if config is not None and config.default_scheme:
            name = config.default_scheme
            scheme = _lookup(config, name)
        elif _lookup(config, DEFAULT_SCHEME_NAME) is not None:
            name = DEFAULT_SCHEME_NAME
            scheme = _lookup(config, name)
        else:
            scheme = {}
    else:
        scheme = reference

    if not isinstance(scheme, Mapping):
        raise ConfigurationError(
            f"Invalid serialization scheme for {model_name(model)}: {reference!r}"
        )
    return ResolvedScheme(name, scheme)


def resolve_options(
    options: Mapping[str, Any] | None,
    scheme: Mapping[str, Any],
    config: ModelConfig | None,
    defaults: SerializerOptions,
) -> SerializerOptions:
    """
    Merge options from every level, highest precedence first.

    Caller options win over scheme options, which win over model-wide
    options, which win over the defaults.
    """
    return build_options(
        options,
        scheme.get("options"),
        config.options if config is not None else None,
        defaults.model_dump(),
    )
