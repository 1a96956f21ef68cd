import logging
import os
from dataclasses import dataclass

from PyCatalog.CatalogError import DiscoveryError
from PyCatalog.Helpers.Localization import _

@dataclass
class LanguageFile:
    code : str
    path : str
    exists : bool = True

def GetLanguageFiles(workspace_dir : str, source_language : str = 'en', exclude : list[str]|None = None) -> list[LanguageFile]:
    """
    List the language catalogs (<code>.json) in the workspace directory.

    The source language is sorted first, the rest alphabetically by code.
    Files in the exclude list (e.g. the baseline snapshot) are not language catalogs.
    """
    excluded = { os.path.normcase(os.path.abspath(path)) for path in exclude or [] }
    fullpath = os.path.abspath(workspace_dir)
    if not os.path.isdir(fullpath):
        logging.error(_("Catalog directory does not exist: {path}").format(path=fullpath))
        return []

    language_files : list[LanguageFile] = []
    for filename in os.listdir(fullpath):
        code, ext = os.path.splitext(filename)
        if ext.lower() != '.json' or not code:
            continue

        filepath = os.path.join(fullpath, filename)
        if not os.path.isfile(filepath):
            continue

        if os.path.normcase(filepath) in excluded:
            logging.debug(f"Skipping {filepath}, it is not a language catalog")
            continue

        language_files.append(LanguageFile(code=code, path=filepath, exists=True))

    language_files.sort(key=lambda file: (file.code != source_language, file.code))

    return language_files

def GetSourceFile(language_files : list[LanguageFile], source_language : str = 'en') -> LanguageFile:
    """
    Find the source catalog, raising DiscoveryError if there isn't one
    """
    source = next((file for file in language_files if file.code == source_language), None)
    if not source or not source.exists:
        raise DiscoveryError(_("Source catalog {language}.json not found").format(language=source_language))

    return source

def GetTargetLanguages(language_files : list[LanguageFile], source_language : str = 'en') -> list[str]:
    """
    Codes of every catalog except the source
    """
    return [file.code for file in language_files if file.code != source_language]
