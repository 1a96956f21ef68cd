import json
from copy import deepcopy
from typing import Any

from PyCatalog.CatalogError import ProviderAccessError, TranslationError, TranslationImpossibleError
from PyCatalog.SettingsType import SettingsType
from PyCatalog.Translation import Translation
from PyCatalog.TranslationClient import TranslationClient
from PyCatalog.TranslationPrompt import TranslationPrompt
from PyCatalog.TranslationProvider import TranslationProvider

def DummyTranslate(value : Any, language : str) -> Any:
    """
    Predictable "translation": prefix every text value with the language code
    """
    if isinstance(value, dict):
        return { key: DummyTranslate(item, language) for key, item in value.items() }
    if isinstance(value, str):
        return f"[{language}] {value}"
    return value

class DummyProvider(TranslationProvider):
    name = "Dummy Provider"

    def __init__(self, data : dict|None = None):
        super().__init__("Dummy Provider", SettingsType({
            "model": "dummy",
            "data": data or {},
        }))

    def GetTranslationClient(self, settings : SettingsType) -> TranslationClient:
        client_settings : dict = deepcopy(self.settings)
        client_settings.update(settings)
        return DummyTranslationClient(settings=client_settings)

class DummyTranslationClient(TranslationClient):
    """
    Translation client that answers locally.

    data options:
        fail : {language: [groups]} groups that raise a TranslationError ("*" for every group)
        impossible : {language: [groups]} groups that raise TranslationImpossibleError ("*" for every group)
        rejected : [languages] languages where the provider refuses access (ProviderAccessError)
        responses : {language: {group: text}} raw response text to return instead of the dummy translation
    """
    def __init__(self, settings : SettingsType|dict):
        super().__init__(settings)
        self.data : dict[str, Any] = self.settings.get('data') or {}     # type: ignore[assignment]
        self.requests : list[tuple[str, str]] = []
        self.prompts : list[TranslationPrompt] = []
        self.target_language : str|None = None
        self.group_name : str|None = None

    def TranslateGroup(self, entries : dict[str, Any], target_language : str, context : str|None = None, group_name : str|None = None) -> dict[str, Any]:
        self.requests.append((target_language, group_name or ""))
        self.target_language = target_language
        self.group_name = group_name

        if target_language in self.data.get('rejected', []):
            raise ProviderAccessError(f"Credentials rejected translating {target_language}")

        impossible_groups = self.data.get('impossible', {}).get(target_language, [])
        if impossible_groups == "*" or group_name in impossible_groups:
            raise TranslationImpossibleError(f"Unable to reach the provider for {group_name} in {target_language}")

        failing_groups = self.data.get('fail', {}).get(target_language, [])
        if failing_groups == "*" or group_name in failing_groups:
            raise TranslationError(f"Failed to translate {group_name} into {target_language}")

        return super().TranslateGroup(entries, target_language, context=context, group_name=group_name)

    def _request_translation(self, prompt : TranslationPrompt, temperature : float|None = None) -> Translation|None:
        self.prompts.append(prompt)

        responses = self.data.get('responses', {}).get(self.target_language, {})
        if self.group_name in responses:
            return Translation({'text': responses[self.group_name], 'finish_reason': 'stop'})

        content = self._extract_content(prompt.user_prompt or "")
        translated = DummyTranslate(content, self.target_language or "xx")
        text = "```json\n" + json.dumps(translated, ensure_ascii=False, indent=2) + "\n```"
        return Translation({'text': text, 'finish_reason': 'stop'})

    def _extract_content(self, user_prompt : str) -> dict[str, Any]:
        start = user_prompt.find("```json")
        end = user_prompt.find("```", start + 7)
        return json.loads(user_prompt[start + 7:end])
