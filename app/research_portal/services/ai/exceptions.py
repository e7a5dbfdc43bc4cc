"""
Shared exceptions for AI service modules.
"""


class AIServiceError(Exception):
    """Raised when AI service operations fail."""

    pass


class ConfigurationError(AIServiceError):
    """Raised when the completion client has no usable configuration (e.g. no API key)."""

    pass


class UpstreamError(AIServiceError):
    """
    Raised when a completion call to the LLM provider fails.

    Attributes:
        status_code: HTTP status reported by the provider, or None when the
            request never got a response (connection failure).
        message: Provider error message.
    """

    def __init__(self, status_code: int | None, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"LLM API error: {status_code} - {message}")
