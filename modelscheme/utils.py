"""Merging helpers shared by the scheme resolver and option handling."""

import copy
from collections.abc import Hashable, Iterable, Mapping
from typing import Any


def deep_merge(sources: Iterable[Mapping[str, Any] | None]) -> dict[str, Any]:
    """
    Merge mappings left to right into a new dict.

    Lists found under the same key are concatenated, nested mappings are
    merged key-wise, and any other value is deep-copied over the previous one.

    Args:
        sources: Mappings to merge; ``None`` entries are skipped

    Returns:
        Merged dictionary
    """
    result: dict[str, Any] = {}
    for source in sources:
        if source is None:
            continue
        for key, value in source.items():
            current = result.get(key)
            if isinstance(value, list) and isinstance(current, list):
                result[key] = current + copy.deepcopy(value)
            elif isinstance(value, Mapping) and isinstance(current, Mapping):
                result[key] = deep_merge([current, value])
            else:
                result[key] = copy.deepcopy(value)
    return result


def defaults_deep(*sources: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Fill in missing keys from each source in turn, recursing into mappings.

    The first source has the highest precedence: a key set there is never
    replaced by a later source.
    """
    result: dict[str, Any] = {}
    for source in sources:
        if source is None:
            continue
        for key, value in source.items():
            if key not in result:
                result[key] = dict(value) if isinstance(value, Mapping) else value
            elif isinstance(result[key], Mapping) and isinstance(value, Mapping):
                result[key] = defaults_deep(result[key], value)
    return result


def unique(items: Iterable[Hashable]) -> list:
    """Drop repeated items, keeping the first occurrence of each."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
