import json
from dataclasses import dataclass, field
from typing import Any

from PyCatalog.CatalogFile import Catalog, LoadCatalog

@dataclass
class DiffResult:
    """
    Classification of the top-level keys of a baseline and a current catalog.

    Keys that are in neither list are unchanged.
    """
    added : list[str] = field(default_factory=list)
    changed : list[str] = field(default_factory=list)
    missing : list[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.changed or self.missing)

    @property
    def needs_translation(self) -> bool:
        return bool(self.added or self.changed)

    def unchanged(self, baseline : Catalog, current : Catalog) -> list[str]:
        """ Keys present in both catalogs with identical values """
        modified = set(self.changed)
        return [key for key in current if key in baseline and key not in modified]

def _canonical(value : Any) -> str:
    return json.dumps(value, ensure_ascii=False, sort_keys=True, separators=(',', ':'))

def DiffCatalogs(baseline : Catalog, current : Catalog) -> DiffResult:
    """
    Compare the top-level keys of two catalogs.

    Values are compared in full, so any edit inside a nested group marks the whole group as changed.
    """
    result = DiffResult()

    for key, old_value in baseline.items():
        if key not in current:
            result.missing.append(key)
        elif _canonical(old_value) != _canonical(current[key]):
            result.changed.append(key)

    result.added = [key for key in current if key not in baseline]

    return result

def DiffFiles(baseline_path : str, current_path : str) -> DiffResult:
    """
    Compare two catalog files (a missing or unreadable file is an empty catalog)
    """
    return DiffCatalogs(LoadCatalog(baseline_path), LoadCatalog(current_path))

def GetTranslatableContent(current : Catalog, diff : DiffResult) -> Catalog:
    """
    Extract the current values of added and changed keys, in catalog order
    """
    keys = set(diff.added) | set(diff.changed)
    return {key: value for key, value in current.items() if key in keys}
