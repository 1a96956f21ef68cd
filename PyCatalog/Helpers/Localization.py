"""
Localization utilities using Python's gettext.

Messages shown to the user are wrapped in _() so that the tool itself can be
localized. Language display names (used in prompts and summaries) come from Babel.
"""
from __future__ import annotations

import gettext
import os
from typing import Optional

from babel import Locale, UnknownLocaleError

from PyCatalog.Helpers.Resources import GetResourcePath

_translator: Optional[gettext.NullTranslations] = None
_domain = 'catalog-sync'


def _get_locale_dir() -> str:
    return GetResourcePath('locales')


def initialize_localization(language_code: Optional[str] = None) -> None:
    """
    Initialize the gettext translation system.

    Falls back to NullTranslations when no compiled catalog exists for the language.
    """
    global _translator

    language_code = language_code or os.getenv('UI_LANGUAGE', 'en')

    try:
        _translator = gettext.translation(_domain, localedir=_get_locale_dir(), languages=[language_code])
    except OSError:
        _translator = gettext.NullTranslations()


def _(text: str) -> str:
    """Return translated string for the active language."""
    if _translator:
        return _translator.gettext(text)
    return text


def GetLanguageName(language_code: str, display_language: str = 'en') -> str:
    """
    Get the human-readable name of a catalog language code, e.g. 'zh-CN' -> 'Chinese (Simplified, China)'.
    Falls back to the code itself if Babel does not recognise it.
    """
    if not language_code:
        return language_code

    try:
        locale = Locale.parse(language_code.replace('-', '_'))
        return locale.get_display_name(display_language) or language_code
    except (UnknownLocaleError, ValueError, TypeError):
        return language_code
