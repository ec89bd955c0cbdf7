class LLMError(Exception):
    """Anything that stops us from getting a usable evaluation out of the model."""

class LLMUnavailable(LLMError):
    """Provider not configured or the call itself failed."""

class LLMResponseError(LLMError):
    """The model answered, but not with the JSON shape we asked for."""
