import json
import logging
import os
from datetime import datetime
from typing import Any, TypeAlias

from PyCatalog.CatalogError import PersistenceError, StructuralError
from PyCatalog.Helpers.Localization import _

Catalog: TypeAlias = dict[str, Any]

default_encoding = os.getenv('DEFAULT_ENCODING', 'utf-8')

def LoadCatalog(filepath : str, strict : bool = False) -> Catalog:
    """
    Read a catalog from a JSON file.

    A missing file is an empty catalog. An unreadable or malformed file raises StructuralError
    if strict is set, otherwise it is logged and treated as an empty catalog.
    """
    if not os.path.exists(filepath):
        return {}

    try:
        with open(filepath, "r", encoding=default_encoding) as catalog_file:
            data = json.load(catalog_file)

        if not isinstance(data, dict):
            raise StructuralError(_("Catalog {path} does not contain a JSON object").format(path=filepath), path=filepath)

        return data

    except StructuralError as e:
        if strict:
            raise
        logging.error(str(e))

    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        error = StructuralError(_("Unable to read catalog {path}: {error}").format(path=filepath, error=str(e)), path=filepath, error=e)
        if strict:
            raise error
        logging.error(str(error))

    return {}

def SaveCatalog(filepath : str, catalog : Catalog, indent : int = 2) -> None:
    """
    Write a catalog to a JSON file, creating the parent directory if necessary.
    Raises PersistenceError if the file cannot be written.
    """
    try:
        directory = os.path.dirname(filepath)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(filepath, "w", encoding=default_encoding) as catalog_file:
            json.dump(catalog, catalog_file, ensure_ascii=False, indent=indent)

    except (OSError, TypeError, ValueError) as e:
        raise PersistenceError(_("Unable to save catalog {path}: {error}").format(path=filepath, error=str(e)), path=filepath, error=e)

def CatalogExists(filepath : str) -> bool:
    return os.path.isfile(filepath)

def BackupFile(filepath : str, backup_dir : str) -> str|None:
    """
    Save a timestamped copy of a catalog in the backup directory.
    Returns the backup path, or None if there was nothing to back up.
    """
    if not CatalogExists(filepath):
        return None

    catalog = LoadCatalog(filepath)
    basename = os.path.splitext(os.path.basename(filepath))[0]
    timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S-%f")
    backup_path = os.path.join(backup_dir, f"{basename}_{timestamp}.json")

    SaveCatalog(backup_path, catalog)
    logging.debug(f"Backed up {filepath} to {backup_path}")
    return backup_path

def GetValueByPath(catalog : Catalog, path : list[str]) -> Any:
    """
    Return the value at a key path, or None if any part of the path is missing
    """
    current : Any = catalog
    for key in path:
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current

def SetValueByPath(catalog : Catalog, path : list[str], value : Any) -> None:
    """
    Set the value at a key path, creating intermediate mappings as needed.
    Raises ValueError if an intermediate key holds a non-mapping value.
    """
    if not path:
        raise ValueError("Empty key path")

    current : Any = catalog
    for key in path[:-1]:
        if key not in current:
            current[key] = {}
        elif not isinstance(current[key], dict):
            raise ValueError(f"Cannot set {'.'.join(path)}: '{key}' is not a mapping")
        current = current[key]

    current[path[-1]] = value

def DeleteValueByPath(catalog : Catalog, path : list[str]) -> bool:
    """
    Delete the value at a key path.
    Returns False (and leaves the catalog unchanged) if the path does not exist.
    """
    if not path:
        return False

    parent = GetValueByPath(catalog, path[:-1]) if len(path) > 1 else catalog
    if not isinstance(parent, dict) or path[-1] not in parent:
        return False

    del parent[path[-1]]
    return True

def DeleteFieldFromCatalogFile(filepath : str, path : list[str], indent : int = 2) -> bool:
    """
    Delete a key path from a catalog file, saving the file only if something was deleted.
    Raises StructuralError if the file is unreadable and PersistenceError if it cannot be saved.
    """
    catalog = LoadCatalog(filepath, strict=True)

    if not DeleteValueByPath(catalog, path):
        return False

    SaveCatalog(filepath, catalog, indent=indent)
    return True
