import os
from copy import deepcopy

from PyCatalog.Helpers.Localization import _
from PyCatalog.Options import env_bool, env_float, env_int
from PyCatalog.Providers.Custom.CustomClient import CustomClient
from PyCatalog.SettingsType import SettingsType
from PyCatalog.TranslationClient import TranslationClient
from PyCatalog.TranslationProvider import TranslationProvider

class Provider_CustomServer(TranslationProvider):
    """
    Any server with an OpenAI-compatible chat completions endpoint, e.g. a local LM Studio
    or a hosted service such as GLM (https://open.bigmodel.cn/api/paas/v4, endpoint /chat/completions).
    """
    name = "Custom Server"

    def __init__(self, settings : SettingsType):
        settings = SettingsType(settings)
        super().__init__(self.name, SettingsType({
            'server_address': settings.get_str('server_address', os.getenv('CUSTOM_SERVER_ADDRESS', "http://localhost:1234")),
            'endpoint': settings.get_str('endpoint', os.getenv('CUSTOM_ENDPOINT', "/v1/chat/completions")),
            'supports_system_messages': settings.get_bool('supports_system_messages', env_bool('CUSTOM_SUPPORTS_SYSTEM_MESSAGES', True)),
            'disable_thinking': settings.get_bool('disable_thinking', env_bool('CUSTOM_DISABLE_THINKING', False)),
            'temperature': settings.get_float('temperature', env_float('CUSTOM_TEMPERATURE', 0.0)),
            'max_tokens': settings.get_int('max_tokens', env_int('CUSTOM_MAX_TOKENS', 0)),
            'timeout': settings.get_int('timeout', env_int('CUSTOM_TIMEOUT', 300)),
            "api_key": settings.get_str('api_key', os.getenv('CUSTOM_API_KEY')),
            "model": settings.get_str('model', os.getenv('CUSTOM_MODEL')),
            }))

    @property
    def server_address(self) -> str|None:
        return self.settings.get_str('server_address')

    @property
    def endpoint(self) -> str|None:
        return self.settings.get_str('endpoint')

    def GetTranslationClient(self, settings : SettingsType) -> TranslationClient:
        client_settings : dict = deepcopy(self.settings)
        client_settings.update(settings)
        return CustomClient(client_settings)

    def ValidateSettings(self) -> bool:
        if not self.server_address:
            self.validation_message = _("Server address must be provided")
            return False

        if not self.endpoint:
            self.validation_message = _("Endpoint must be provided")
            return False

        return True
