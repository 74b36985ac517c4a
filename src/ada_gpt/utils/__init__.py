"""Utility functions and helpers.

This module provides various utilities for AdaGPT:
- errors: Exception hierarchy
- security: Secret redaction, input validation
- async_helpers: Retry of transient platform failures
- logging: Structured logging with secret sanitization
"""

from ada_gpt.utils.errors import (
    AdaGPTError,
    CompletionError,
    ConfigurationError,
    IncompleteCompletion,
    PlatformError,
    RateLimited,
    TransportError,
    UnclassifiableEvent,
    UpstreamError,
)
from ada_gpt.utils.logging import (
    LogFormat,
    LogLevel,
    bind_context,
    clear_context,
    configure_logging,
)
from ada_gpt.utils.security import (
    RedactionError,
    SecretRedactor,
    SecurityError,
)

__all__ = [
    # Errors
    "AdaGPTError",
    "CompletionError",
    "ConfigurationError",
    "IncompleteCompletion",
    "PlatformError",
    "RateLimited",
    "TransportError",
    "UnclassifiableEvent",
    "UpstreamError",
    # Logging
    "LogFormat",
    "LogLevel",
    "bind_context",
    "clear_context",
    "configure_logging",
    # Security
    "RedactionError",
    "SecretRedactor",
    "SecurityError",
]
