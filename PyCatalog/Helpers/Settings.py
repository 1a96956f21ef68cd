"""
Type-safe settings retrieval and coercion functions.

Settings arrive from the command line, the environment and provider defaults,
so values are frequently strings that need coercing to the expected type.
"""

from typing import Any, Mapping, overload

class SettingsError(Exception):
    """Raised when a setting cannot be coerced to the expected type."""
    pass

@overload
def GetBoolSetting(settings: Mapping[str, Any], key: str) -> bool: ...

@overload
def GetBoolSetting(settings: Mapping[str, Any], key: str, default: bool|None) -> bool: ...

def GetBoolSetting(settings: Mapping[str, Any], key: str, default: bool|None = False) -> bool:
    """
    Safely retrieve a boolean setting from a settings dictionary.

    Raises:
        SettingsError: If the setting cannot be converted to bool
    """
    value = settings.get(key, default)
    if value is None:
        return False

    if isinstance(value, bool):
        return value
    elif isinstance(value, str):
        lower_val = value.lower()
        if lower_val in ('true', 'yes', '1'):
            return True
        elif lower_val in ('false', 'no', '0', ''):
            return False

    raise SettingsError(f"Cannot convert setting '{key}' of type {type(value).__name__} with value {repr(value)} to bool")

def GetIntSetting(settings: Mapping[str, Any], key: str, default: int|None = 0) -> int|None:
    """
    Safely retrieve an integer setting from a settings dictionary.

    Raises:
        SettingsError: If the setting cannot be converted to int
    """
    value = settings.get(key, default)
    if value is None:
        return None

    if isinstance(value, bool):
        raise SettingsError(f"Cannot convert setting '{key}' of type bool to int")

    if isinstance(value, (int,float)):
        return int(value)
    elif isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass

    raise SettingsError(f"Cannot convert setting '{key}' of type {type(value).__name__} with value {repr(value)} to int")

def GetFloatSetting(settings: Mapping[str, Any], key: str, default: float|None = None) -> float|None:
    """
    Safely retrieve a float setting from a settings dictionary.

    Raises:
        SettingsError: If the setting cannot be converted to float
    """
    value = settings.get(key, default)
    if value is None:
        return None

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    elif isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            pass

    raise SettingsError(f"Cannot convert setting '{key}' of type {type(value).__name__} with value {repr(value)} to float")

def GetStrSetting(settings: Mapping[str, Any], key: str, default: str|None = None) -> str|None:
    """
    Safely retrieve a string setting from a settings dictionary.
    """
    value = settings.get(key, default)
    if value is None:
        return None
    elif isinstance(value, str):
        return value
    elif isinstance(value, list):
        return ', '.join(str(v) for v in value)

    return str(value)
