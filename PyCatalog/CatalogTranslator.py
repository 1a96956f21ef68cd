import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from PyCatalog.CatalogDiscovery import LanguageFile
from PyCatalog.CatalogError import (
    CatalogError,
    LanguageTranslationError,
    NoProviderError,
    PersistenceError,
    ProviderAccessError,
    ProviderError,
    TranslationAbortedError,
)
from PyCatalog.CatalogGroups import GetGroupKey, GroupedContent
from PyCatalog.CatalogMerger import UpdateCatalogFile
from PyCatalog.Helpers import FormatErrorMessages
from PyCatalog.Helpers.Localization import _
from PyCatalog.Options import Options
from PyCatalog.SettingsType import SettingsType
from PyCatalog.TranslationClient import TranslationClient
from PyCatalog.TranslationPrompt import GetGroupContext
from PyCatalog.TranslationProvider import TranslationProvider

GroupCallback = Callable[[str, str], Any]

@dataclass
class LanguageResult:
    """
    Outcome of translating the pending groups for one language
    """
    language : str
    translated_groups : list[str] = field(default_factory=list)
    failed_groups : dict[str, str] = field(default_factory=dict)

    @property
    def succeeded(self) -> int:
        return len(self.translated_groups)

    @property
    def errors(self) -> int:
        return len(self.failed_groups)

    @property
    def error_rate(self) -> float:
        attempted = self.succeeded + self.errors
        return self.errors / attempted if attempted else 0.0

class CatalogTranslator:
    """
    Translates grouped catalog content into one language at a time, group by group,
    and merges the translated groups into the language's catalog.
    """
    def __init__(self, options : Options, translation_provider : TranslationProvider|None = None, client : TranslationClient|None = None, on_group_translated : GroupCallback|None = None):
        self.aborted : bool = False
        self.on_group_translated : GroupCallback|None = on_group_translated

        max_group_error_rate = options.get_float('max_group_error_rate')
        min_group_errors = options.get_int('min_group_errors')
        self.max_group_error_rate : float = 0.5 if max_group_error_rate is None else max_group_error_rate
        self.min_group_errors : int = 2 if min_group_errors is None else min_group_errors
        self.indent : int = options.indent

        self.settings = SettingsType({
            'instructions': options.get_str('instructions'),
            'source_language': options.source_language,
            'max_retries': options.get_int('max_retries'),
            'backoff_time': options.get_float('backoff_time'),
            'rate_limit': options.get_float('rate_limit'),
            'temperature': options.get_float('temperature'),
        })

        self.translation_provider : TranslationProvider|None = translation_provider

        if client:
            self.client : TranslationClient = client
            return

        if not self.translation_provider:
            raise NoProviderError()

        try:
            self.client = self.translation_provider.GetTranslationClient(self.settings)

        except CatalogError:
            raise

        except Exception as e:
            raise ProviderError(_("Unable to create provider client: {error}").format(error=str(e)), translation_provider)

        if not self.client:
            raise ProviderError(_("Unable to create translation client"), translation_provider)

    def StopTranslating(self):
        self.aborted = True
        self.client.AbortTranslation()

    def TranslateLanguage(self, target : LanguageFile, content : GroupedContent) -> LanguageResult:
        """
        Translate every group for the target language and merge the results into its catalog.

        Group failures are counted, and the language is abandoned when the error rate trips the circuit breaker.
        Raises LanguageTranslationError if that happens, if no group could be translated, if the provider refused
        access or if the catalog cannot be written.
        """
        result = LanguageResult(target.code)
        translated : GroupedContent = {}

        logging.info(_("Translating {groups} groups into {language}").format(groups=len(content), language=target.code))

        for group_name, entries in content.items():
            if self.aborted:
                raise LanguageTranslationError(_("Translation aborted"), target.code, provider_failure=True)

            if not entries:
                continue

            try:
                translated[group_name] = self.TranslateGroup(group_name, entries, target.code)
                result.translated_groups.append(group_name)

                if self.on_group_translated:
                    self.on_group_translated(target.code, GetGroupKey(group_name))

            except TranslationAbortedError as e:
                raise LanguageTranslationError(_("Translation aborted"), target.code, provider_failure=True, error=e)

            except ProviderAccessError as e:
                raise LanguageTranslationError(_("Provider refused to translate {language}: {error}").format(
                    language=target.code, error=str(e)), target.code, provider_failure=True, error=e)

            except ProviderError as e:
                logging.warning(_("Error translating group {group} into {language}: {error}").format(
                    group=GetGroupKey(group_name), language=target.code, error=str(e)))
                result.failed_groups[group_name] = str(e)

                if self._should_stop(result):
                    raise LanguageTranslationError(_("Error rate too high translating {language} ({errors} of {attempted} groups failed)").format(
                        language=target.code, errors=result.errors, attempted=result.succeeded + result.errors),
                        target.code, provider_failure=True, error=e)

        if not translated:
            errors = FormatErrorMessages(list(result.failed_groups.values())) or _("nothing to translate")
            raise LanguageTranslationError(_("No groups were translated into {language}: {errors}").format(
                language=target.code, errors=errors), target.code)

        try:
            UpdateCatalogFile(target.path, translated, indent=self.indent)

        except PersistenceError as e:
            raise LanguageTranslationError(_("Unable to save {language}: {error}").format(
                language=target.code, error=str(e)), target.code, error=e)

        if result.failed_groups:
            logging.warning(_("Translated {succeeded} groups into {language}, {errors} groups failed: {groups}").format(
                succeeded=result.succeeded, language=target.code, errors=result.errors, groups=", ".join(GetGroupKey(group) for group in result.failed_groups)))
        else:
            logging.info(_("Translated {succeeded} groups into {language}").format(succeeded=result.succeeded, language=target.code))

        return result

    def TranslateGroup(self, group_name : str, entries : dict[str, Any], target_language : str) -> dict[str, Any]:
        """
        Request translation of a single group
        """
        group_key = GetGroupKey(group_name)
        logging.debug(f"Translating group {group_key} ({len(entries)} entries) into {target_language}")
        context = GetGroupContext(group_key)
        return self.client.TranslateGroup(entries, target_language, context=context, group_name=group_key)

    def _should_stop(self, result : LanguageResult) -> bool:
        return result.error_rate > self.max_group_error_rate and result.errors >= self.min_group_errors
