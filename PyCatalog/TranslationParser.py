import json
import logging
from typing import Any

import regex

from PyCatalog.CatalogError import TranslationParseError
from PyCatalog.Helpers.Localization import _
from PyCatalog.Translation import Translation

fence_pattern = regex.compile(r"^\s*```(?:json|JSON)?\s*\n?(?P<body>[\s\S]*?)\n?\s*```\s*$")

# "key": "value", or key: value
line_pattern = regex.compile(r'^\s*"?(?P<key>[^"\n]+?)"?\s*:\s*(?P<value>.*?)\s*,?\s*$')

class TranslationParser:
    """
    Extract the translated key/value mapping from a provider response.

    The response should be a JSON object, possibly wrapped in a markdown code block. If it cannot
    be decoded, a line-based "key: value" recovery is attempted for the expected keys. The recovery
    is a best-effort heuristic: it only understands flat groups and cannot detect a value that
    happens to contain a quote followed by a comma.
    """
    def __init__(self):
        self.text : str|None = None
        self.missing_keys : list[str] = []
        self.unexpected_keys : list[str] = []
        self.recovered : bool = False

    def ProcessTranslation(self, translation : Translation|str, originals : dict[str, Any]) -> dict[str, Any]:
        """
        Parse the response and match it against the original entries.
        Keys missing from the response keep their original text, keys that were not requested are dropped.
        """
        self.text = translation.text if isinstance(translation, Translation) else str(translation or "").strip()

        if not self.text:
            raise TranslationParseError(_("No translated text provided"), translation=translation)

        parsed = self.ParseJson(self.text)

        if parsed is None:
            logging.warning(_("Unable to parse the response as JSON, trying to recover key/value lines"))
            parsed = self.RecoverKeyValueLines(self.text, originals)
            self.recovered = True

        if not parsed:
            raise TranslationParseError(_("No translations found in the response"), translation=translation)

        self.missing_keys = []
        self.unexpected_keys = [key for key in parsed if key not in originals]

        result = self.MatchTranslations(originals, parsed)

        if self.missing_keys:
            logging.warning(_("{count} keys were not translated and keep their original text: {keys}").format(
                count=len(self.missing_keys), keys=", ".join(self.missing_keys)))

        if self.unexpected_keys:
            logging.debug(f"Ignoring unexpected keys in the response: {', '.join(self.unexpected_keys)}")

        return result

    def ParseJson(self, text : str) -> dict[str, Any]|None:
        """
        Decode a JSON object from the text, stripping a markdown code block if present
        """
        match = fence_pattern.match(text)
        if match:
            text = match.group('body')

        for candidate in self._json_candidates(text):
            try:
                data = json.loads(candidate)
            except json.JSONDecodeError:
                continue

            if isinstance(data, dict):
                return data

        return None

    def RecoverKeyValueLines(self, text : str, originals : dict[str, Any]) -> dict[str, Any]:
        """
        Extract "key": "value" pairs line by line, only accepting keys that were requested
        """
        recovered : dict[str, Any] = {}
        for line in text.splitlines():
            match = line_pattern.match(line)
            if not match:
                continue

            key = match.group('key').strip()
            if key not in originals or isinstance(originals[key], dict):
                continue

            recovered[key] = self._unquote(match.group('value'))

        return recovered

    def MatchTranslations(self, originals : dict[str, Any], translated : dict[str, Any], prefix : str = "") -> dict[str, Any]:
        """
        Build the translated group with exactly the keys of the originals
        """
        result : dict[str, Any] = {}
        for key, original in originals.items():
            value = translated.get(key)
            path = f"{prefix}{key}"

            if isinstance(original, dict):
                if isinstance(value, dict):
                    result[key] = self.MatchTranslations(original, value, prefix=f"{path}.")
                else:
                    self.missing_keys.append(path)
                    result[key] = original

            elif isinstance(original, str):
                if isinstance(value, str) and value.strip():
                    result[key] = value
                else:
                    self.missing_keys.append(path)
                    result[key] = original

            else:
                # Numbers, booleans and nulls are not translated
                result[key] = original

        return result

    def _json_candidates(self, text : str) -> list[str]:
        candidates = [text.strip()]
        start = text.find('{')
        end = text.rfind('}')
        if start >= 0 and end > start:
            candidates.append(text[start:end+1])
        return candidates

    def _unquote(self, value : str) -> str:
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] == '"':
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return value[1:-1]
        return value
