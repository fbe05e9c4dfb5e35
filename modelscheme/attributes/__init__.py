"""Attribute classification and selector compilation."""

from modelscheme.attributes.classifier import AttributeGroups, classify_attributes
from modelscheme.attributes.compiler import (
    AttributeEntry,
    compile_attribute_list,
    expand_selectors,
)

__all__ = [
    "AttributeGroups",
    "classify_attributes",
    "AttributeEntry",
    "compile_attribute_list",
    "expand_selectors",
]
