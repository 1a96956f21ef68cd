from copy import deepcopy
from typing import Any, TypeAlias

from PyCatalog.CatalogFile import Catalog

DEFAULT_GROUP = "default"

# Group holding a nested mapping whose own key is "default", named so that no catalog key can collide with it
NESTED_DEFAULT_GROUP = "\0default"

GroupedContent: TypeAlias = dict[str, dict[str, Any]]

def GroupCatalog(catalog : Catalog) -> GroupedContent:
    """
    Partition a catalog into translation groups.

    Each nested mapping becomes a group named by its key. Top-level scalar values are
    collected into the "default" group. Deeper levels of nesting are carried inside their
    group without further partitioning.
    """
    groups : GroupedContent = {}

    for key, value in catalog.items():
        if isinstance(value, dict):
            groups[NESTED_DEFAULT_GROUP if key == DEFAULT_GROUP else key] = value
        else:
            groups.setdefault(DEFAULT_GROUP, {})[key] = value

    return groups

def MergeGroups(groups : GroupedContent) -> Catalog:
    """
    Reassemble a catalog from its groups (the inverse of GroupCatalog).

    Entries of the default group are promoted to the top level, other groups are attached under their name.
    """
    catalog : Catalog = {}

    for group_name, group in groups.items():
        if group_name == DEFAULT_GROUP:
            catalog.update(group)
        else:
            catalog[GetGroupKey(group_name)] = group

    return catalog

def GetGroupKey(group_name : str) -> str:
    """ The catalog key a group is stored under, which is also its display name """
    return DEFAULT_GROUP if group_name == NESTED_DEFAULT_GROUP else group_name

def GroupTranslatableContent(content : Catalog) -> GroupedContent:
    """
    Group a translatable-content view, copying values so that the groups do not alias the source catalog
    """
    return deepcopy(GroupCatalog(content))

def CountGroupEntries(groups : GroupedContent) -> int:
    return sum(len(group) for group in groups.values() if isinstance(group, dict))
