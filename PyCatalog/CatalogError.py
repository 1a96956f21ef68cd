from typing import Any

from PyCatalog.Helpers.Localization import _

class CatalogError(Exception):
    def __init__(self, message : str|None = None, error : Exception|None = None):
        super().__init__(message)
        self.error = error
        self.message = message

    def __str__(self) -> str:
        if self.error:
            return str(self.error)
        elif self.message:
            return self.message
        return super().__str__()

class DiscoveryError(CatalogError):
    """ No source catalog could be found - the run cannot continue """
    def __init__(self, message : str, workspace_dir : str|None = None):
        super().__init__(message)
        self.workspace_dir = workspace_dir

class StructuralError(CatalogError):
    """ A catalog file is unreadable or is not a JSON object """
    def __init__(self, message : str, path : str|None = None, error : Exception|None = None):
        super().__init__(message, error)
        self.path = path

    def __str__(self) -> str:
        return self.message or super().__str__()

class PersistenceError(CatalogError):
    """ A catalog file could not be written """
    def __init__(self, message : str, path : str|None = None, error : Exception|None = None):
        super().__init__(message, error)
        self.path = path

    def __str__(self) -> str:
        return self.message or super().__str__()

class NoProviderError(CatalogError):
    def __init__(self):
        super().__init__(_("Provider not specified in options"))

class ProviderError(CatalogError):
    def __init__(self, message : str|None = None, provider : Any = None):
        super().__init__(message)
        self.provider = provider

class ProviderConfigurationError(ProviderError):
    def __init__(self, message : str, provider : Any, error : Exception|None = None):
        super().__init__(message, provider)
        self.error = error

class TranslationError(ProviderError):
    def __init__(self, message : str, translation : Any = None, error : Exception|None = None):
        super().__init__(message)
        self.translation = translation
        self.error = error

class TranslationAbortedError(TranslationError):
    def __init__(self):
        super().__init__(_("Translation aborted"))

class TranslationImpossibleError(TranslationError):
    """ No chance of retry succeeding """
    def __init__(self, message : str, error : Exception|None = None):
        super().__init__(message, error=error)

class ProviderAccessError(TranslationImpossibleError):
    """ The provider refused the request (rejected credentials or exhausted quota), no later request can succeed """

class TranslationResponseError(TranslationError):
    def __init__(self, message : str, response : Any):
        super().__init__(message)
        self.response = response

class NoTranslationError(TranslationError):
    def __init__(self, message : str, translation : str|None = None):
        super().__init__(message=message, translation=translation)

class TranslationParseError(TranslationError):
    """ The response could not be interpreted as a key/value mapping """
    def __init__(self, message : str, translation : Any = None):
        super().__init__(message, translation=translation)

class LanguageTranslationError(CatalogError):
    """
    Translation of a whole language failed.

    provider_failure indicates a problem that is unlikely to be specific to the language,
    so there is no point trying the remaining languages.
    """
    def __init__(self, message : str, language : str, provider_failure : bool = False, error : Exception|None = None):
        super().__init__(message, error)
        self.language = language
        self.provider_failure = provider_failure

    def __str__(self) -> str:
        return self.message or super().__str__()
