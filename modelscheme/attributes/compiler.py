"""Compilation of include/exclude selectors into an attribute list."""

from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple

from modelscheme.attributes.classifier import AttributeGroups
from modelscheme.utils import unique

GROUP_MARKER = "@"
LITERAL_MARKER = "."


class AttributeEntry(NamedTuple):
    """One attribute to emit.

    is_field is True when the value is read as a mapped field; otherwise it is
    read as a plain property of the record (calling it if it is a method).
    """

    name: str
    is_field: bool


def expand_selectors(selectors: Iterable[str], groups: AttributeGroups) -> list[str]:
    """
    Expand '@group' selectors into field names.

    Args:
        selectors: Field names, '.name' literals and '@group' selectors
        groups: Attribute groups of the owning model

    Returns:
        Deduplicated names in first-occurrence order
    """
    result = []
    for selector in selectors:
        if selector.startswith(GROUP_MARKER):
            result.extend(groups.group(selector[len(GROUP_MARKER):]))
        else:
            result.append(selector)
    return unique(result)


def compile_attribute_list(scheme: Mapping[str, Any], groups: AttributeGroups) -> list[AttributeEntry]:
    """
    Compile a scheme's include/exclude rules into the ordered list of attributes to emit.

    Exclusions always win over inclusions. Names that are neither model fields
    nor relationships, and names written with the '.' literal marker, are
    compiled as plain properties.

    Args:
        scheme: Scheme with optional 'include' and 'exclude' lists
        groups: Attribute groups of the owning model

    Returns:
        Compiled attribute list
    """
    include = scheme.get("include")
    if include is None:
        include = [GROUP_MARKER + "all"]
    include = expand_selectors(include, groups)
    exclude = set(expand_selectors(scheme.get("exclude") or [], groups))

    fields = set(groups.all)
    entries = []
    for name in include:
        if name in exclude:
            continue
        if name.startswith(LITERAL_MARKER):
            entries.append(AttributeEntry(name[len(LITERAL_MARKER):], False))
        else:
            entries.append(AttributeEntry(name, name in fields))
    return unique(entries)
