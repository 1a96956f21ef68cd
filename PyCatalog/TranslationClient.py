import logging
import time
from typing import Any

from PyCatalog.CatalogError import NoTranslationError, TranslationAbortedError, TranslationError
from PyCatalog.Helpers.Settings import GetBoolSetting, GetFloatSetting, GetIntSetting, GetStrSetting
from PyCatalog.SettingsType import SettingsType
from PyCatalog.Translation import Translation
from PyCatalog.TranslationParser import TranslationParser
from PyCatalog.TranslationPrompt import GetGroupContext, TranslationPrompt

class TranslationClient:
    """
    Handles communication with the translation provider
    """
    def __init__(self, settings : SettingsType|dict):
        self.settings : SettingsType = SettingsType(settings)
        self.aborted : bool = False

    @property
    def instructions(self) -> str|None:
        return GetStrSetting(self.settings, 'instructions')

    @property
    def source_language(self) -> str:
        return GetStrSetting(self.settings, 'source_language') or 'en'

    @property
    def supports_system_messages(self) -> bool:
        return GetBoolSetting(self.settings, 'supports_system_messages', True)

    @property
    def rate_limit(self) -> float|None:
        return GetFloatSetting(self.settings, 'rate_limit')

    @property
    def temperature(self) -> float:
        return GetFloatSetting(self.settings, 'temperature') or 0.0

    @property
    def max_retries(self) -> int:
        max_retries = GetIntSetting(self.settings, 'max_retries', None)
        return 2 if max_retries is None else max_retries

    @property
    def backoff_time(self) -> float:
        return GetFloatSetting(self.settings, 'backoff_time') or 3.0

    def BuildTranslationPrompt(self, entries : dict[str, Any], target_language : str, context : str|None) -> TranslationPrompt:
        """
        Generate a translation prompt for a group of entries
        """
        prompt = TranslationPrompt(self.instructions, self.supports_system_messages)
        prompt.source_language = self.source_language
        prompt.GenerateMessages(entries, target_language, context)
        return prompt

    def TranslateGroup(self, entries : dict[str, Any], target_language : str, context : str|None = None, group_name : str|None = None) -> dict[str, Any]:
        """
        Translate the values of a group of entries, preserving the keys.

        Keys the provider does not return keep their original text.
        Raises a TranslationError (or subclass) if the request or the response fails.
        """
        if not entries:
            raise TranslationError("No entries to translate")

        context = context or GetGroupContext(group_name or "default")
        prompt = self.BuildTranslationPrompt(entries, target_language, context)

        translation = self.RequestTranslation(prompt)

        if self.aborted:
            raise TranslationAbortedError()

        if not translation or not translation.has_translation:
            raise NoTranslationError(f"No translation returned for group {group_name or ''}".strip(), translation=translation.text if translation else None)

        if translation.reached_token_limit:
            raise TranslationError("Response was truncated by the token limit", translation=translation)

        parser = self.GetParser()
        return parser.ProcessTranslation(translation, entries)

    def RequestTranslation(self, prompt : TranslationPrompt, temperature : float|None = None) -> Translation|None:
        """
        Send the prompt to the provider, respecting the rate limit
        """
        start_time = time.monotonic()

        translation = self._request_translation(prompt, temperature)

        if self.aborted or translation is None:
            return None

        if translation.text:
            logging.debug(f"Response:\n{translation.text}")

        # If a rate limit is specified ensure a minimum duration for each request
        rate_limit = self.rate_limit
        if rate_limit and rate_limit > 0.0:
            minimum_duration = 60.0 / rate_limit

            elapsed_time = time.monotonic() - start_time
            if elapsed_time < minimum_duration:
                sleep_time = minimum_duration - elapsed_time
                logging.debug(f"Sleeping for {sleep_time:.2f} seconds to respect rate limit")
                time.sleep(sleep_time)

        return translation

    def GetParser(self) -> TranslationParser:
        """
        Return a parser that can process the provider's response
        """
        return TranslationParser()

    def AbortTranslation(self) -> None:
        self.aborted = True
        self._abort()

    def _request_translation(self, prompt : TranslationPrompt, temperature : float|None = None) -> Translation|None:
        """
        Make a request to the API to provide a translation
        """
        raise NotImplementedError

    def _abort(self) -> None:
        # Try to terminate ongoing requests
        pass
