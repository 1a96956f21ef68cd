from json import JSONDecodeError
import logging
import time
from typing import Any

import openai
from openai.types.chat import ChatCompletion

from PyCatalog.CatalogError import ProviderAccessError, TranslationError, TranslationImpossibleError, TranslationResponseError
from PyCatalog.Helpers import FormatMessages
from PyCatalog.Helpers.Localization import _
from PyCatalog.Helpers.Parse import ParseDelayFromHeader
from PyCatalog.Helpers.Settings import GetStrSetting
from PyCatalog.SettingsType import SettingsType
from PyCatalog.Translation import Translation
from PyCatalog.TranslationClient import TranslationClient
from PyCatalog.TranslationPrompt import TranslationPrompt

class OpenAIClient(TranslationClient):
    """
    Handles chat communication with OpenAI or an OpenAI-compatible service (e.g. DeepSeek) to request translations
    """
    def __init__(self, settings : SettingsType|dict):
        super().__init__(settings)

        if not self.api_key:
            raise TranslationImpossibleError(_("API key must be set in .env or provided as an argument"))

        logging.info(_("Translating with model {model}, Using API Base: {api_base}").format(
            model=self.model or _("default"),
            api_base=self.api_base or "https://api.openai.com/v1"
        ))

        self.client : openai.OpenAI|None = None

    @property
    def api_key(self) -> str|None:
        return GetStrSetting(self.settings, 'api_key')

    @property
    def api_base(self) -> str|None:
        return GetStrSetting(self.settings, 'api_base')

    @property
    def model(self) -> str|None:
        return GetStrSetting(self.settings, 'model')

    def _request_translation(self, prompt : TranslationPrompt, temperature : float|None = None) -> Translation|None:
        """
        Request a translation based on the provided prompt
        """
        logging.debug(f"Messages:\n{FormatMessages(prompt.messages)}")

        temperature = temperature or self.temperature

        response = self._try_send_messages(prompt, temperature)

        translation = Translation(response) if response else None

        if translation and translation.quota_reached:
            raise ProviderAccessError(_("Account quota reached, please upgrade your plan or wait until it renews"))

        return translation

    def _create_client(self) -> None:
        self.client = openai.OpenAI(api_key=self.api_key, base_url=self.api_base or None)

    def _abort(self) -> None:
        if self.client:
            self.client.close()
        return super()._abort()

    def _try_send_messages(self, prompt : TranslationPrompt, temperature : float) -> dict[str, Any]|None:
        for retry in range(self.max_retries + 1):
            if self.aborted:
                return None

            backoff_time = self.backoff_time * 2.0**retry

            try:
                if not self.client:
                    self._create_client()

                return self._send_messages(prompt, temperature)

            except TranslationResponseError as e:
                if retry < self.max_retries and not self.aborted:
                    logging.warning(_("Translation response error: {error}, retrying in {backoff_time} seconds...").format(
                        error=str(e), backoff_time=backoff_time
                    ))
                    time.sleep(backoff_time)
                    continue
                raise

            except openai.RateLimitError as e:
                retry_after = e.response.headers.get('x-ratelimit-reset-requests') or e.response.headers.get('Retry-After')
                if retry_after and retry < self.max_retries and not self.aborted:
                    backoff_time = ParseDelayFromHeader(retry_after)
                    logging.warning(_("Rate limit hit, retrying in {backoff_time} seconds...").format(backoff_time=backoff_time))
                    time.sleep(backoff_time)
                    continue
                raise ProviderAccessError(_("Account quota reached, please upgrade your plan"), error=e)

            except openai.APITimeoutError as e:
                if retry < self.max_retries and not self.aborted:
                    logging.warning(_("API Timeout, retrying in {backoff_time} seconds...").format(backoff_time=backoff_time))
                    time.sleep(backoff_time)
                    continue
                raise TranslationError(_("API Timeout"), error=e)

            except JSONDecodeError as e:
                if retry < self.max_retries and not self.aborted:
                    logging.warning(_("Invalid response received, retrying in {backoff_time} seconds...").format(backoff_time=backoff_time))
                    time.sleep(backoff_time)
                    continue
                raise TranslationError(_("Invalid response received"), error=e)

            except openai.AuthenticationError as e:
                raise ProviderAccessError(_("API key was rejected by the provider"), error=e)

            except openai.APIConnectionError as e:
                if retry < self.max_retries and not self.aborted:
                    logging.warning(_("Network error, retrying in {backoff_time} seconds...").format(backoff_time=backoff_time))
                    time.sleep(backoff_time)
                    continue
                raise TranslationError(_("Network error communicating with the provider: {error}").format(error=str(e)), error=e)

            except openai.APIError as e:
                raise TranslationError(_("API error: {error}").format(error=str(e)), error=e)

        return None

    def _send_messages(self, prompt : TranslationPrompt, temperature : float|None) -> dict[str, Any]|None:
        """
        Make a chat completion request
        """
        response = {}

        if not self.client:
            raise TranslationError(_("Client is not initialized"))

        if not self.model:
            raise TranslationError(_("No model specified"))

        result : ChatCompletion = self.client.chat.completions.create(
            model=self.model,
            messages=prompt.messages,   # type: ignore[arg-type]
            temperature=temperature,
        )

        if self.aborted:
            return None

        if not isinstance(result, ChatCompletion):
            raise TranslationResponseError(_("Unexpected response type: {response_type}").format(
                response_type=type(result).__name__
            ), response=result)

        if not result.choices:
            raise TranslationResponseError(_("No choices returned in the response"), response=result)

        if result.usage:
            response['prompt_tokens'] = getattr(result.usage, 'prompt_tokens')
            response['output_tokens'] = getattr(result.usage, 'completion_tokens')
            response['total_tokens'] = getattr(result.usage, 'total_tokens')

        choice = result.choices[0]
        response['finish_reason'] = getattr(choice, 'finish_reason', None)
        response['text'] = getattr(choice.message, 'content', None)

        return response
