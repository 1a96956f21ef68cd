import logging
import time
from typing import Any

import httpx

from PyCatalog.CatalogError import ProviderAccessError, TranslationError, TranslationImpossibleError, TranslationResponseError
from PyCatalog.Helpers import FormatMessages
from PyCatalog.Helpers.Localization import _
from PyCatalog.Helpers.Parse import ParseErrorMessageFromText
from PyCatalog.Helpers.Settings import GetBoolSetting, GetIntSetting, GetStrSetting
from PyCatalog.SettingsType import SettingsType
from PyCatalog.Translation import Translation
from PyCatalog.TranslationClient import TranslationClient
from PyCatalog.TranslationPrompt import TranslationPrompt

class CustomClient(TranslationClient):
    """
    Handles communication with a server exposing an OpenAI-compatible chat completions endpoint
    """
    def __init__(self, settings : SettingsType|dict):
        super().__init__(settings)
        self.client : httpx.Client|None = None
        self.headers : dict[str, str] = {'Content-Type': 'application/json'}
        self._add_additional_headers(self.settings)

        if self.api_key:
            self.headers['Authorization'] = f"Bearer {self.api_key}"

        logging.info(_("Translating with server at {server_address}{endpoint}").format(
            server_address=self.server_address, endpoint=self.endpoint
        ))
        if self.model:
            logging.info(_("Using model: {model}").format(model=self.model))

    @property
    def server_address(self) -> str|None:
        return GetStrSetting(self.settings, 'server_address')

    @property
    def endpoint(self) -> str|None:
        return GetStrSetting(self.settings, 'endpoint')

    @property
    def api_key(self) -> str|None:
        return GetStrSetting(self.settings, 'api_key')

    @property
    def model(self) -> str|None:
        return GetStrSetting(self.settings, 'model')

    @property
    def disable_thinking(self) -> bool:
        return GetBoolSetting(self.settings, 'disable_thinking', False)

    @property
    def max_tokens(self) -> int|None:
        max_tokens = GetIntSetting(self.settings, 'max_tokens', 0)
        return max_tokens if max_tokens != 0 else None

    @property
    def timeout(self) -> int:
        return GetIntSetting(self.settings, 'timeout') or 300

    def _request_translation(self, prompt : TranslationPrompt, temperature : float|None = None) -> Translation|None:
        """
        Request a translation based on the provided prompt
        """
        logging.debug(f"Messages:\n{FormatMessages(prompt.messages)}")

        temperature = temperature or self.temperature
        response = self._make_request(prompt, temperature)

        translation = Translation(response) if response else None

        return translation

    def _abort(self) -> None:
        if self.client:
            self.client.close()
        return super()._abort()

    def _make_request(self, prompt : TranslationPrompt, temperature : float|None) -> dict[str, Any]|None:
        """
        Post the request to the server, retrying on network errors
        """
        if self.server_address is None or self.endpoint is None:
            raise TranslationImpossibleError(_("Server address or endpoint is not set"))

        request_body = self._generate_request_body(prompt, temperature)
        logging.debug(f"Request Body:\n{request_body}")

        for retry in range(self.max_retries + 1):
            if self.aborted:
                return None

            try:
                self.client = httpx.Client(base_url=self.server_address, follow_redirects=True, timeout=self.timeout, headers=self.headers)

                result : httpx.Response = self.client.post(self.endpoint, json=request_body)

                if self.aborted:
                    return None

                if result.is_error:
                    parsed_message = ParseErrorMessageFromText(result.text)
                    summary_text = parsed_message if parsed_message else result.text
                    if result.status_code in (401, 403):
                        raise ProviderAccessError(_("Server rejected the credentials: {status_code} {text}").format(
                            status_code=result.status_code, text=summary_text
                        ))
                    if result.is_client_error:
                        raise TranslationResponseError(_("Client error: {status_code} {text}").format(
                            status_code=result.status_code, text=summary_text
                        ), response=result)
                    raise TranslationResponseError(_("Server error: {status_code} {text}").format(
                        status_code=result.status_code, text=summary_text
                    ), response=result)

                logging.debug(f"Response:\n{result.text}")

                return self._parse_response(result)

            except (TranslationResponseError, ProviderAccessError):
                raise

            except httpx.ConnectError as e:
                if not self.aborted:
                    logging.error(_("Failed to connect to server at {server_address}{endpoint}").format(
                        server_address=self.server_address, endpoint=self.endpoint
                    ))

            except httpx.NetworkError as e:
                if not self.aborted:
                    logging.error(_("Network error communicating with server: {error}").format(error=str(e)))

            except httpx.TimeoutException as e:
                if not self.aborted:
                    logging.error(_("Request to server timed out: {error}").format(error=str(e)))

            except httpx.HTTPError as e:
                raise TranslationError(_("Unexpected error communicating with server"), error=e)

            finally:
                if self.client:
                    self.client.close()

            if self.aborted:
                return None

            if retry == self.max_retries:
                raise TranslationError(_("Failed to communicate with server after {max_retries} retries").format(
                    max_retries=self.max_retries
                ))

            sleep_time = self.backoff_time * 2.0**retry
            logging.warning(_("Retrying in {sleep_time} seconds...").format(sleep_time=sleep_time))
            time.sleep(sleep_time)

        return None

    def _parse_response(self, result : httpx.Response) -> dict[str, Any]:
        try:
            content = result.json()
        except ValueError as e:
            raise TranslationResponseError(_("Server returned invalid JSON"), response=result) from e

        response : dict[str, Any] = {}
        response['model'] = content.get('model')
        response['response_time'] = content.get('response_ms', 0)

        usage = content.get('usage') or {}
        response['prompt_tokens'] = usage.get('prompt_tokens')
        response['output_tokens'] = usage.get('completion_tokens')
        response['total_tokens'] = usage.get('total_tokens')

        choices = content.get('choices')
        if not choices:
            raise TranslationResponseError(_("No choices returned in the response"), response=result)

        choice = choices[0]
        response['finish_reason'] = choice.get('finish_reason')
        if 'message' in choice:
            response['text'] = (choice.get('message') or {}).get('content')
        else:
            response['text'] = choice.get('text')

        if not response.get('text'):
            raise TranslationResponseError(_("No text returned in the response"), response=result)

        return response

    def _generate_request_body(self, prompt : TranslationPrompt, temperature : float|None) -> dict[str, Any]:
        request_body : dict[str, Any] = {
            'messages': prompt.messages,
            'temperature': temperature,
            'stream': False
        }

        if self.max_tokens:
            request_body['max_tokens'] = self.max_tokens

        if self.model:
            request_body['model'] = self.model

        if self.disable_thinking:
            request_body['thinking'] = {'type': 'disabled'}

        return request_body

    def _add_additional_headers(self, settings : SettingsType):
        additional_headers = settings.get('additional_headers', {})
        if isinstance(additional_headers, dict):
            for key, value in additional_headers.items():
                if isinstance(value, str):
                    self.headers[key] = value
