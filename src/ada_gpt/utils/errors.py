"""Exception hierarchy for AdaGPT.

Every failure a run can hit is one of these. Nothing here is retried by the
core: the entry point logs the error and exits non-zero.
"""

from __future__ import annotations


class AdaGPTError(Exception):
    """Base exception for all AdaGPT errors."""


class ConfigurationError(AdaGPTError):
    """Configuration is missing or invalid."""


class UnclassifiableEvent(AdaGPTError):
    """Subject data was requested from an event that cannot provide it.

    Raised when extraction is attempted on an ``UNRECOGNIZED`` event; callers
    are expected to check the classification first.
    """


class IncompleteCompletion(AdaGPTError):
    """The model returned filtered, truncated or empty output.

    Attributes:
        stop_reason: The stop reason reported for the candidate, if any.
    """

    def __init__(self, stop_reason: str | None, message: str | None = None) -> None:
        super().__init__(message or f"API return incomplete: {stop_reason}")
        self.stop_reason = stop_reason


class CompletionError(AdaGPTError):
    """Base class for failures calling the completion service."""


class RateLimited(CompletionError):
    """The completion service answered HTTP 429.

    Attributes:
        message: Error message from the service.
    """

    status = 429

    def __init__(self, message: str = "") -> None:
        super().__init__(message or "Rate limit exceeded")
        self.message = message


class UpstreamError(CompletionError):
    """The completion service answered with a non-429 HTTP error.

    Attributes:
        status: HTTP status code.
        message: Error message from the service.
    """

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"Request failed with status {status}: {message}")
        self.status = status
        self.message = message


class TransportError(CompletionError):
    """The request never produced an HTTP response."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PlatformError(AdaGPTError):
    """The code-hosting platform API returned an error.

    Attributes:
        status: HTTP status code, or None for transport failures.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
