import logging
from copy import deepcopy

from PyCatalog.CatalogFile import Catalog, LoadCatalog, SaveCatalog
from PyCatalog.CatalogGroups import GroupCatalog, GroupedContent, MergeGroups

def UpdateCatalog(existing : Catalog, new_groups : GroupedContent) -> Catalog:
    """
    Merge newly translated groups into an existing catalog.

    A group that does not exist yet is inserted as-is. If the key set of an existing group
    differs from the incoming group the whole group is replaced, so that it never ends up
    with a mix of old and new structure. Otherwise only the incoming keys are overwritten.
    Groups that are not mentioned are left untouched.
    """
    groups : GroupedContent = deepcopy(GroupCatalog(existing))

    for group_name, new_group in new_groups.items():
        existing_group = groups.get(group_name)

        if existing_group is None:
            groups[group_name] = deepcopy(new_group)

        elif existing_group.keys() != new_group.keys():
            logging.debug(f"Structure of group '{group_name}' has changed, replacing it")
            groups[group_name] = deepcopy(new_group)

        else:
            existing_group.update(deepcopy(new_group))

    return MergeGroups(groups)

def UpdateCatalogFile(filepath : str, new_groups : GroupedContent, indent : int = 2) -> Catalog:
    """
    Merge translated groups into a catalog file and save it.
    Raises PersistenceError if the file cannot be written.
    """
    existing = LoadCatalog(filepath)
    updated = UpdateCatalog(existing, new_groups)
    SaveCatalog(filepath, updated, indent=indent)
    return updated
