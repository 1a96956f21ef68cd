import importlib.util
import logging
import os

from PyCatalog.Helpers.Localization import _

if not importlib.util.find_spec("openai"):
    logging.info(_("OpenAI SDK is not installed. OpenAI provider will not be available"))
else:
    from PyCatalog.Options import env_float
    from PyCatalog.Providers.OpenAI.OpenAIClient import OpenAIClient
    from PyCatalog.SettingsType import SettingsType
    from PyCatalog.TranslationClient import TranslationClient
    from PyCatalog.TranslationProvider import TranslationProvider

    class OpenAiProvider(TranslationProvider):
        """
        OpenAI chat models, or any service with an OpenAI-compatible API (set api_base, e.g. https://api.deepseek.com)
        """
        name = "OpenAI"

        def __init__(self, settings : SettingsType):
            settings = SettingsType(settings)
            super().__init__(self.name, {
                "api_key": settings.get_str('api_key', os.getenv('OPENAI_API_KEY')),
                "api_base": settings.get_str('api_base', os.getenv('OPENAI_API_BASE')),
                "model": settings.get_str('model', os.getenv('OPENAI_MODEL', "gpt-4o-mini")),
                'temperature': settings.get_float('temperature', env_float('OPENAI_TEMPERATURE', 0.0)),
                'rate_limit': settings.get_float('rate_limit', env_float('OPENAI_RATE_LIMIT')),
            })

        @property
        def api_key(self) -> str|None:
            return self.settings.get_str('api_key')

        def GetTranslationClient(self, settings : SettingsType) -> TranslationClient:
            client_settings = SettingsType(self.settings.copy())
            client_settings.update(settings)
            return OpenAIClient(client_settings)

        def ValidateSettings(self) -> bool:
            if not self.api_key:
                self.validation_message = _("API Key is required")
                return False

            if not self.selected_model:
                self.validation_message = _("A model must be selected")
                return False

            return True
