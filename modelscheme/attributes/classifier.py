"""Grouping of model fields into selector groups."""

from collections.abc import Callable
from dataclasses import dataclass, field

from modelscheme.inspection import FieldInfo, describe_associations, describe_fields


@dataclass
class AttributeGroups:
    """Field names of one model, bucketed by the groups '@name' selectors refer to."""

    all: list[str] = field(default_factory=list)
    pk: list[str] = field(default_factory=list)
    fk: list[str] = field(default_factory=list)
    assoc: list[str] = field(default_factory=list)
    blob: list[str] = field(default_factory=list)
    doc: list[str] = field(default_factory=list)
    virtual: list[str] = field(default_factory=list)
    auto: list[str] = field(default_factory=list)
    fields: dict[str, FieldInfo] = field(default_factory=dict)

    GROUP_NAMES = ("all", "pk", "fk", "assoc", "blob", "doc", "virtual", "auto")

    def group(self, name: str) -> list[str]:
        """Get a group by selector name; unknown names give an empty group."""
        if name not in self.GROUP_NAMES:
            return []
        return getattr(self, name)


def classify_attributes(
    model: type,
    attr_filter: Callable[[FieldInfo, type], bool] | None = None,
) -> AttributeGroups:
    """
    Classify the fields and relationships of a model.

    Args:
        model: Mapped class
        attr_filter: Optional predicate; fields it rejects with False are left out of every group

    Returns:
        Attribute groups for the model
    """
    groups = AttributeGroups()

    for info in describe_fields(model):
        if attr_filter is not None and attr_filter(info, model) is False:
            continue

        groups.all.append(info.name)
        groups.fields[info.name] = info

        if info.primary_key:
            groups.pk.append(info.name)
        if info.foreign_key:
            groups.fk.append(info.name)
        if info.auto_generated:
            groups.auto.append(info.name)

        if info.is_virtual:
            groups.virtual.append(info.name)
        elif info.is_binary:
            groups.blob.append(info.name)
        elif info.is_document:
            groups.doc.append(info.name)

    groups.assoc.extend(describe_associations(model))
    return groups
