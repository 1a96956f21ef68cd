import logging
from dataclasses import dataclass, field
from enum import Enum

from PyCatalog.CatalogDiff import DiffResult, DiffCatalogs, GetTranslatableContent
from PyCatalog.CatalogError import StructuralError
from PyCatalog.CatalogFile import Catalog, CatalogExists, LoadCatalog
from PyCatalog.CatalogGroups import CountGroupEntries, GroupedContent, GroupTranslatableContent
from PyCatalog.Helpers.Localization import _

class RunKind(Enum):
    FIRST_RUN = "first-run"
    INCREMENTAL = "incremental"
    DELETION_ONLY = "deletion-only"
    NO_WORK = "no-work"

@dataclass
class RunPlan:
    """
    What a synchronisation run has to do
    """
    kind : RunKind
    source : Catalog = field(default_factory=dict)
    diff : DiffResult|None = None
    content : GroupedContent = field(default_factory=dict)

    @property
    def removed_keys(self) -> list[str]:
        return list(self.diff.missing) if self.diff else []

    @property
    def needs_deletion(self) -> bool:
        return bool(self.removed_keys)

    @property
    def needs_translation(self) -> bool:
        return self.kind in (RunKind.FIRST_RUN, RunKind.INCREMENTAL) and CountGroupEntries(self.content) > 0

    @property
    def entry_count(self) -> int:
        return CountGroupEntries(self.content)

def LoadBaseline(baseline_path : str) -> Catalog|None:
    """
    Load the baseline snapshot. Returns None if it does not exist, an empty catalog if it cannot be read.
    """
    if not CatalogExists(baseline_path):
        return None

    try:
        return LoadCatalog(baseline_path, strict=True)

    except StructuralError as e:
        logging.warning(_("Unable to read the baseline, treating this as a first run: {error}").format(error=str(e)))
        return {}

def ClassifyCatalogs(source : Catalog, baseline : Catalog|None, force : bool = False) -> RunPlan:
    """
    Decide what needs doing by comparing the source catalog with the baseline snapshot.

    No baseline, an empty baseline or a forced run means everything is translated.
    Otherwise only added and changed top-level keys are translated, and removed keys are
    reported so that they can be deleted from the other catalogs.
    """
    if force or not baseline:
        return RunPlan(RunKind.FIRST_RUN, source=source, content=GroupTranslatableContent(source))

    diff = DiffCatalogs(baseline, source)

    if not diff.has_changes:
        return RunPlan(RunKind.NO_WORK, source=source, diff=diff)

    if not diff.needs_translation:
        return RunPlan(RunKind.DELETION_ONLY, source=source, diff=diff)

    content = GroupTranslatableContent(GetTranslatableContent(source, diff))
    return RunPlan(RunKind.INCREMENTAL, source=source, diff=diff, content=content)

def ClassifyRun(source_path : str, baseline_path : str, force : bool = False) -> RunPlan:
    """
    Classify a run from the source catalog file and the baseline snapshot file
    """
    source = LoadCatalog(source_path)
    baseline = LoadBaseline(baseline_path)

    if baseline is None:
        logging.info(_("No baseline found, translating all content"))
    elif not baseline:
        logging.info(_("Baseline is empty, translating all content"))

    return ClassifyCatalogs(source, baseline, force=force)
