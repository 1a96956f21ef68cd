from __future__ import annotations
import os
from collections.abc import Mapping
from typing import TypeAlias

from PyCatalog.Helpers.Settings import GetBoolSetting, GetFloatSetting, GetIntSetting, GetStrSetting, SettingsError

ScalarSetting: TypeAlias = str | int | float | bool | None
SettingType: TypeAlias = ScalarSetting | list[str] | dict[str, 'SettingType']

class SettingsType(dict[str, SettingType]):
    """
    Synchronisation and provider settings.

    Values arrive from the command line, the environment and provider defaults, so the getters
    coerce them to the type the caller expects. Updating with None never replaces a setting,
    so an option that was not given on the command line leaves the default in place.
    """
    def __init__(self, settings : Mapping[str, SettingType]|None = None):
        super().__init__(settings or {})

    def get_bool(self, key : str, default : bool = False) -> bool:
        return GetBoolSetting(self, key, default)

    def get_int(self, key : str, default : int|None = None) -> int|None:
        return GetIntSetting(self, key, default)

    def get_float(self, key : str, default : float|None = None) -> float|None:
        return GetFloatSetting(self, key, default)

    def get_str(self, key : str, default : str|None = None) -> str|None:
        return GetStrSetting(self, key, default)

    def get_path(self, key : str, default : str) -> str:
        """
        A file or directory setting with the user directory expanded
        """
        path = self.get_str(key) or default
        return os.path.normpath(os.path.expanduser(path))

    def get_section(self, key : str) -> SettingsType:
        """
        A nested group of settings, such as the settings for each provider.
        The section is stored back so that changes made through it are kept.
        """
        value = self.get(key)
        if isinstance(value, SettingsType):
            return value

        if value is None:
            section = SettingsType()
        elif isinstance(value, Mapping):
            section = SettingsType(value)
        else:
            raise SettingsError(f"Expected a group of settings for '{key}', got {type(value).__name__}")

        self[key] = section
        return section

    def update(self, other=(), /, **kwargs) -> None:
        """
        Merge settings, ignoring None values
        """
        settings = dict(other, **kwargs)
        super().update({ key: value for key, value in settings.items() if value is not None })
