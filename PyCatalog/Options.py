from __future__ import annotations
from collections.abc import Mapping
from copy import deepcopy
import os
from typing import Any
import dotenv

from PyCatalog.SettingsType import SettingType, SettingsType
from PyCatalog.version import __version__

# Load environment variables from .env file
dotenv.load_dotenv()

def env_bool(key : str, default : bool = False) -> bool:
    var = os.getenv(key, default)
    return True if var and str(var).lower() in ('true', 'yes', '1') else False

def env_int(key : str, default : int|None = None) -> int|None:
    value = os.getenv(key, default)
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return int(value)

def env_float(key : str, default : float|None = None) -> float|None:
    value = os.getenv(key, default)
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return float(value)

def env_str(key : str, default : str|None = None) -> str|None:
    value = os.getenv(key, default)
    return str(value) if value is not None else None

default_settings = {
    'version': __version__,
    'provider': env_str('PROVIDER', None),
    'provider_settings': SettingsType({}),
    'workspace_dir': env_str('WORKSPACE_DIR', 'message'),
    'baseline_dir': env_str('BASELINE_DIR', os.path.join('message', 'temp')),
    'baseline_name': env_str('BASELINE_NAME', 'en_old.json'),
    'backup_dir': env_str('BACKUP_DIR', os.path.join('message', 'backups')),
    'source_language': env_str('SOURCE_LANGUAGE', 'en'),
    'instructions': env_str('INSTRUCTIONS', None),
    'max_group_error_rate': env_float('MAX_GROUP_ERROR_RATE', 0.5),
    'min_group_errors': env_int('MIN_GROUP_ERRORS', 2),
    'max_retries': env_int('MAX_RETRIES', 2),
    'backoff_time': env_float('BACKOFF_TIME', 3.0),
    'rate_limit': env_float('RATE_LIMIT', None),
    'temperature': env_float('TEMPERATURE', None),
    'write_backup': env_bool('WRITE_BACKUP_FILE', False),
    'indent': env_int('CATALOG_INDENT', 2),
    'force': False,
    'dry_run': False,
    'ui_language': env_str('UI_LANGUAGE', 'en'),
}

class Options(SettingsType):
    def __init__(self, settings : SettingsType|Mapping[str, SettingType]|None = None, **kwargs : SettingType):
        """ Initialise the Options object with default options and any provided options. """
        super().__init__()

        self.update(deepcopy(default_settings))

        settings = SettingsType(settings)

        if settings:
            # Remove None values from options and merge with defaults
            filtered_settings = {k: deepcopy(v) for k, v in settings.items() if v is not None}
            self.update(filtered_settings)

        # Apply any explicit parameters
        self.update(kwargs)

    @property
    def version(self) -> str:
        return self.get_str('version') or ''

    @property
    def provider(self) -> str:
        """ the name of the translation provider """
        return self.get_str('provider') or ''

    @provider.setter
    def provider(self, value: str):
        self['provider'] = value

    @property
    def provider_settings(self) -> SettingsType:
        return self.get_section('provider_settings')

    @property
    def current_provider_settings(self) -> SettingsType|None:
        if not self.provider or not self.provider in self.provider_settings:
            return None

        return SettingsType(self.provider_settings.get(self.provider)) # type: ignore[arg-type]

    @property
    def workspace_dir(self) -> str:
        """ Directory containing one <language>.json catalog per language """
        return self.get_path('workspace_dir', str(default_settings['workspace_dir']))

    @property
    def baseline_dir(self) -> str:
        return self.get_path('baseline_dir', str(default_settings['baseline_dir']))

    @property
    def baseline_path(self) -> str:
        """ Snapshot of the source catalog as of the last successful synchronisation """
        baseline_name = self.get_str('baseline_name') or str(default_settings['baseline_name'])
        return os.path.normpath(os.path.join(self.baseline_dir, baseline_name))

    @property
    def backup_dir(self) -> str:
        return self.get_path('backup_dir', str(default_settings['backup_dir']))

    @property
    def source_language(self) -> str:
        return self.get_str('source_language') or 'en'

    @property
    def indent(self) -> int:
        indent = self.get_int('indent')
        return 2 if indent is None else indent

    def GetProviderSettings(self, provider : str) -> SettingsType:
        """ Get the settings for a specific provider """
        if not provider:
            return SettingsType()

        return SettingsType(deepcopy(self.provider_settings.get(provider, {}))) # type: ignore[arg-type]

    def GetSettings(self) -> SettingsType:
        """
        Get a copy of the settings dictionary with only the default keys included
        """
        return SettingsType({ key: deepcopy(super(Options, self).get(key)) for key in self.keys() & default_settings.keys() })

    def InitialiseProviderSettings(self, provider : str, settings : Mapping[str, Any]) -> None:
        """
        Create or update the settings for a provider
        """
        if provider not in self.provider_settings:
            self.provider_settings[provider] = SettingsType(deepcopy(dict(settings)))

        self.MoveSettingsToProvider(provider, list(settings.keys()))

    def MoveSettingsToProvider(self, provider : str, keys : list[str]) -> None:
        """
        Move settings from the main options to a provider's settings
        """
        if provider not in self.provider_settings:
            self.provider_settings[provider] = SettingsType()

        settings_to_move : dict[str,SettingType] = {key: self.pop(key) for key in keys if key in self and key not in default_settings}
        if settings_to_move:
            provider_settings = SettingsType(self.provider_settings[provider]) # type: ignore[arg-type]
            provider_settings.update(settings_to_move)
            self.provider_settings[provider] = provider_settings
