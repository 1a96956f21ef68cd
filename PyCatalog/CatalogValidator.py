from PyCatalog.CatalogFile import Catalog
from PyCatalog.Helpers.Localization import _

def ValidateCatalogStructure(source : Catalog, target : Catalog) -> list[str]:
    """
    Report keys of the source catalog that are missing from a target catalog.

    Top-level keys are reported by name, keys missing inside a group as group.key.
    A group that is present in the target as a plain value is reported as a type mismatch.
    """
    issues : list[str] = []

    for key, value in source.items():
        if key not in target:
            issues.append(_("Missing top-level key: {key}").format(key=key))
            continue

        if not isinstance(value, dict):
            continue

        target_value = target[key]
        if not isinstance(target_value, dict):
            issues.append(_("Expected a group of entries for key: {key}").format(key=key))
            continue

        for nested_key in value:
            if nested_key not in target_value:
                issues.append(_("Missing nested key: {key}.{nested_key}").format(key=key, nested_key=nested_key))

    return issues
