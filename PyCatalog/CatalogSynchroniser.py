import logging
from dataclasses import dataclass, field
from enum import Enum

from PyCatalog.CatalogDiff import DiffResult
from PyCatalog.CatalogDiscovery import GetLanguageFiles, GetSourceFile, LanguageFile
from PyCatalog.CatalogError import CatalogError, DiscoveryError, LanguageTranslationError, PersistenceError, ProviderConfigurationError
from PyCatalog.CatalogFile import BackupFile, SaveCatalog
from PyCatalog.CatalogGroups import GetGroupKey
from PyCatalog.CatalogTranslator import CatalogTranslator, GroupCallback
from PyCatalog.DeletionPropagator import DeletionResult, PropagateDeletions
from PyCatalog.Helpers.Localization import GetLanguageName, _
from PyCatalog.Options import Options
from PyCatalog.RunClassifier import RunKind, RunPlan, ClassifyRun
from PyCatalog.TranslationClient import TranslationClient
from PyCatalog.TranslationProvider import TranslationProvider

class RunOutcome(Enum):
    NO_WORK = "no-work"
    TRANSLATED = "translated"
    FAILED = "failed"

@dataclass
class SyncResult:
    """
    Summary of a synchronisation run
    """
    outcome : RunOutcome = RunOutcome.FAILED
    run_kind : RunKind|None = None
    diff : DiffResult|None = None
    target_languages : list[str] = field(default_factory=list)
    translated_languages : list[str] = field(default_factory=list)
    skipped_languages : list[str] = field(default_factory=list)
    failed_languages : list[str] = field(default_factory=list)
    errors : list[str] = field(default_factory=list)
    deletion : DeletionResult|None = None
    baseline_saved : bool = False
    dry_run : bool = False

    @property
    def success(self) -> bool:
        return self.outcome != RunOutcome.FAILED and not self.errors

    @property
    def total_count(self) -> int:
        return len(self.target_languages)

    @property
    def translated_count(self) -> int:
        return len(self.translated_languages)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_languages)

    @property
    def error_count(self) -> int:
        return len(self.failed_languages)

class CatalogSynchroniser:
    """
    Brings every language catalog in the workspace up to date with the source catalog.

    The run is classified against the baseline snapshot, keys removed from the source are deleted
    from every catalog, then the added and changed content is translated one language at a time.
    The baseline is only replaced when at least one language was translated.
    """
    def __init__(self, options : Options, translation_provider : TranslationProvider|None = None, client : TranslationClient|None = None, on_group_translated : GroupCallback|None = None):
        self.options : Options = options
        self.translation_provider : TranslationProvider|None = translation_provider
        self.client : TranslationClient|None = client
        self.on_group_translated : GroupCallback|None = on_group_translated
        self.translator : CatalogTranslator|None = None
        self.aborted : bool = False

    @property
    def force(self) -> bool:
        return self.options.get_bool('force', False)

    @property
    def dry_run(self) -> bool:
        return self.options.get_bool('dry_run', False)

    @property
    def write_backup(self) -> bool:
        return self.options.get_bool('write_backup', False)

    def StopTranslating(self):
        self.aborted = True
        if self.translator:
            self.translator.StopTranslating()

    def Synchronise(self) -> SyncResult:
        """
        Run a complete synchronisation pass
        """
        result = SyncResult(dry_run=self.dry_run)
        source_language = self.options.source_language

        try:
            language_files = GetLanguageFiles(self.options.workspace_dir, source_language, exclude=[self.options.baseline_path])
            source_file = GetSourceFile(language_files, source_language)

        except DiscoveryError as e:
            logging.error(str(e))
            result.errors.append(str(e))
            return result

        targets : list[LanguageFile] = [ file for file in language_files if file.code != source_language ]
        result.target_languages = [ target.code for target in targets ]

        plan : RunPlan = ClassifyRun(source_file.path, self.options.baseline_path, force=self.force)
        result.run_kind = plan.kind
        result.diff = plan.diff

        logging.info(_("Run type: {kind}, {count} entries to translate into {languages} languages").format(
            kind=plan.kind.value, count=plan.entry_count, languages=len(targets)))

        if plan.needs_deletion:
            if self.dry_run:
                logging.info(_("Dry run: would remove {keys} from every catalog").format(keys=", ".join(plan.removed_keys)))
            else:
                result.deletion = PropagateDeletions(plan.removed_keys, targets, self.options.baseline_path, source_language, indent=self.options.indent)

        if not targets:
            logging.warning(_("No target language catalogs found"))
            result.outcome = RunOutcome.NO_WORK
            return result

        if not plan.needs_translation:
            logging.info(_("Nothing to translate"))
            result.skipped_languages = list(result.target_languages)
            result.outcome = RunOutcome.NO_WORK
            return result

        if self.dry_run:
            logging.info(_("Dry run: would translate {groups} into {languages}").format(
                groups=", ".join(GetGroupKey(group) for group in plan.content), languages=", ".join(result.target_languages)))
            result.skipped_languages = list(result.target_languages)
            result.outcome = RunOutcome.NO_WORK
            return result

        try:
            self.translator = self._create_translator()

        except CatalogError as e:
            logging.error(_("Unable to start translation: {error}").format(error=str(e)))
            result.errors.append(str(e))
            return result

        self._translate_languages(targets, plan, result)

        if result.translated_count > 0:
            result.baseline_saved = self._save_baseline(plan, result)
            result.outcome = RunOutcome.TRANSLATED
        else:
            logging.error(_("No languages were translated, the baseline has not been updated"))
            result.outcome = RunOutcome.FAILED

        return result

    def _translate_languages(self, targets : list[LanguageFile], plan : RunPlan, result : SyncResult) -> None:
        for index, target in enumerate(targets):
            if self.aborted:
                result.skipped_languages.extend(t.code for t in targets[index:])
                break

            try:
                self.translator.TranslateLanguage(target, plan.content)   # type: ignore[union-attr]
                result.translated_languages.append(target.code)

            except LanguageTranslationError as e:
                logging.error(str(e))
                result.failed_languages.append(target.code)
                result.errors.append(str(e))

                if e.provider_failure:
                    remaining = [t.code for t in targets[index+1:]]
                    if remaining:
                        logging.error(_("Stopping translation, skipping {languages}").format(languages=", ".join(remaining)))
                        result.skipped_languages.extend(remaining)
                    break

    def _save_baseline(self, plan : RunPlan, result : SyncResult) -> bool:
        baseline_path = self.options.baseline_path
        try:
            if self.write_backup:
                BackupFile(baseline_path, self.options.backup_dir)

            SaveCatalog(baseline_path, plan.source, indent=self.options.indent)
            logging.info(_("Updated baseline {path}").format(path=baseline_path))
            return True

        except PersistenceError as e:
            logging.error(str(e))
            result.errors.append(str(e))
            return False

    def _create_translator(self) -> CatalogTranslator:
        if not self.client and not self.translation_provider:
            self.translation_provider = TranslationProvider.get_provider(self.options)

        if self.translation_provider and not self.translation_provider.ValidateSettings():
            raise ProviderConfigurationError(self.translation_provider.validation_message or _("Invalid provider settings"), self.translation_provider)

        return CatalogTranslator(self.options, translation_provider=self.translation_provider, client=self.client, on_group_translated=self.on_group_translated)

def FormatSyncSummary(result : SyncResult) -> str:
    """
    Human-readable report of a synchronisation run
    """
    lines : list[str] = []

    if result.outcome == RunOutcome.NO_WORK:
        lines.append(_("Nothing to translate") if not result.dry_run else _("Dry run, nothing was changed"))
    elif result.success:
        lines.append(_("Translation complete"))
    else:
        lines.append(_("Translation finished with problems"))

    lines.append(_("Total languages: {count}").format(count=result.total_count))
    lines.append(_("Translated: {count}").format(count=result.translated_count))
    lines.append(_("Skipped: {count}").format(count=result.skipped_count))
    lines.append(_("Errors: {count}").format(count=result.error_count))

    if result.deletion and result.deletion.deleted_count:
        lines.append(_("Removed keys: {count}").format(count=result.deletion.deleted_count))

    if result.translated_languages:
        lines.append("")
        lines.append(_("Translated languages:"))
        lines.extend(f"  {code} ({GetLanguageName(code)})" for code in result.translated_languages)

    if result.skipped_languages:
        lines.append("")
        lines.append(_("Skipped languages:"))
        lines.extend(f"  {code} ({GetLanguageName(code)})" for code in result.skipped_languages)

    if result.errors:
        lines.append("")
        lines.append(_("Errors:"))
        lines.extend(f"  {error}" for error in result.errors)

    return "\n".join(lines)
