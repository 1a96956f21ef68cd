import importlib
import logging
import pkgutil
from typing import cast

from PyCatalog.CatalogError import NoProviderError, ProviderError
from PyCatalog.Helpers.Localization import _
from PyCatalog.Options import Options
from PyCatalog.SettingsType import SettingsType
from PyCatalog.TranslationClient import TranslationClient

class TranslationProvider:
    """
    Base class for translation service providers.
    """
    _providers_imported : bool = False

    def __init__(self, name : str, settings : SettingsType|dict):
        self.name : str = name
        self.settings : SettingsType = SettingsType(settings)
        self.validation_message : str|None = None

    @property
    def selected_model(self) -> str|None:
        """
        The currently selected model for the provider
        """
        name = self.settings.get_str('model')
        return name.strip() if name else None

    def GetTranslationClient(self, settings : SettingsType) -> TranslationClient:
        """
        Returns a new instance of the translation client for this provider
        """
        raise NotImplementedError

    def ValidateSettings(self) -> bool:
        """
        Validate the settings for the provider
        """
        return True

    def UpdateSettings(self, settings : SettingsType|Options):
        """
        Update the settings for the provider
        """
        if isinstance(settings, Options):
            settings.InitialiseProviderSettings(self.name, self.settings)
            settings = settings.GetProviderSettings(self.name)

        for k, v in settings.items():
            if k in self.settings and v is not None:
                self.settings[k] = v

    @classmethod
    def get_providers(cls) -> dict:
        """
        Return a dictionary of all available providers
        """
        if not cls._providers_imported:
            cls._providers_imported = True
            try:
                cls.import_providers(f"{__package__}.Providers")

            except ImportError as e:
                logging.error(f"Error importing providers: {str(e)}")

        providers = { cast(TranslationProvider, provider).name : provider for provider in cls.__subclasses__() }

        return providers

    @classmethod
    def get_provider(cls, options : Options):
        """
        Create a new instance of the provider named in the options
        """
        if not isinstance(options, Options):
            raise ValueError("Options object required")

        if not options.provider:
            raise NoProviderError()

        provider_settings = options.current_provider_settings or SettingsType()

        translation_provider : TranslationProvider = cls.create_provider(options.provider, provider_settings)
        if not translation_provider:
            raise ProviderError(_("Unable to create translation provider {provider}").format(provider=options.provider))

        translation_provider.UpdateSettings(options)

        return translation_provider

    @classmethod
    def create_provider(cls, name, provider_settings):
        providers = cls.get_providers().items()
        for provider_name, provider in providers:
            if provider_name == name:
                return provider(provider_settings)

        raise ProviderError(_("Unknown translation provider: {provider}").format(provider=name))

    @classmethod
    def import_providers(cls, package_name):
        """
        Dynamically import all modules in the providers package.
        """
        package = importlib.import_module(package_name)
        for loader, module_name, is_pkg in pkgutil.iter_modules(package.__path__, package.__name__ + '.'): # type: ignore[ignore-unused]
            if is_pkg:
                continue
            logging.debug(f"Importing provider: {module_name}")
            importlib.import_module(module_name)
