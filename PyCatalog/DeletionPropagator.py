import logging
from dataclasses import dataclass, field

from PyCatalog.CatalogDiscovery import LanguageFile
from PyCatalog.CatalogError import CatalogError
from PyCatalog.CatalogFile import DeleteFieldFromCatalogFile
from PyCatalog.Helpers.Localization import _

BASELINE_TARGET = "baseline"

@dataclass
class DeletionOutcome:
    """ Result of deleting one key from one catalog """
    target : str
    key : str
    deleted : bool
    error : str|None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

@dataclass
class DeletionResult:
    outcomes : list[DeletionOutcome] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """ True if no deletion raised an error (absent keys are not errors) """
        return not any(outcome.failed for outcome in self.outcomes)

    @property
    def failures(self) -> list[DeletionOutcome]:
        return [outcome for outcome in self.outcomes if outcome.failed]

    @property
    def deleted_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.deleted)

    def ForTarget(self, target : str) -> list[DeletionOutcome]:
        return [outcome for outcome in self.outcomes if outcome.target == target]

def PropagateDeletions(removed_keys : list[str], targets : list[LanguageFile], baseline_path : str|None, source_language : str = 'en', indent : int = 2) -> DeletionResult:
    """
    Delete keys that were removed from the source catalog from every target catalog and from the baseline.

    Each deletion is independent: a key that is already absent is a no-op, and a failure
    for one catalog does not prevent the remaining deletions.
    """
    result = DeletionResult()

    if not removed_keys:
        return result

    catalogs : list[tuple[str, str]] = [ (target.code, target.path) for target in targets if target.code != source_language and target.exists ]
    if baseline_path:
        catalogs.append((BASELINE_TARGET, baseline_path))

    for target, path in catalogs:
        for key in removed_keys:
            try:
                deleted = DeleteFieldFromCatalogFile(path, [key], indent=indent)
                result.outcomes.append(DeletionOutcome(target, key, deleted))

            except CatalogError as e:
                logging.warning(_("Unable to delete '{key}' from {target}: {error}").format(key=key, target=target, error=str(e)))
                result.outcomes.append(DeletionOutcome(target, key, False, error=str(e)))

    logging.info(_("Removed {count} deleted keys from {catalogs} catalogs").format(count=result.deleted_count, catalogs=len(catalogs)))

    return result
