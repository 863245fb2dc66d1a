from __future__ import annotations

EMPTY_TEXT_MESSAGE = "Please enter some text to analyze"
DETECTION_FAILED_MESSAGE = "An error occurred while analyzing the text"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"
HUMANIZE_FAILED_MESSAGE = "Failed to humanize text"


class HumanlabError(Exception):
    """Base class for errors raised by humanlab services."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TextValidationError(HumanlabError):
    """Input text was rejected before any network call was made."""

    def __init__(self, message: str = EMPTY_TEXT_MESSAGE) -> None:
        super().__init__(message)


class ProviderError(HumanlabError):
    """An external provider failed or answered with a non-success status."""

    def __init__(self, message: str, *, provider: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class DetectionError(ProviderError):
    def __init__(self, message: str = DETECTION_FAILED_MESSAGE, *, status_code: int | None = None) -> None:
        super().__init__(message, provider="winston", status_code=status_code)
