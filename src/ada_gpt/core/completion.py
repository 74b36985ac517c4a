"""Interpretation of completion responses and failures.

Both functions here are pure mappings. The adapters call the completion
service; this module decides what the outcome means.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from ada_gpt.core.provenance import encode
from ada_gpt.models.completion import CompletionResponse
from ada_gpt.utils.errors import (
    CompletionError,
    IncompleteCompletion,
    RateLimited,
    TransportError,
    UpstreamError,
)

log = structlog.get_logger()

# "stop" for OpenAI, "end_turn"/"stop_sequence" for Anthropic
NATURAL_STOP_REASONS = frozenset({"stop", "end_turn", "stop_sequence"})

RATE_LIMIT_GUIDANCE = (
    "Request to the completion service failed with status 429. This is due to "
    "incorrect billing setup or excessive quota usage. Please follow this guide "
    "to fix it: https://help.openai.com/en/articles/6891831-error-code-429-you-exceeded-"
    "your-current-quota-please-check-your-plan-and-billing-details"
)


def interpret(response: CompletionResponse) -> str:
    """Validate a completion response and return the reply, marked.

    The response must hold exactly one candidate that stopped naturally
    with non-empty content.

    Args:
        response: Provider-neutral completion response

    Returns:
        The reply content wrapped with the provenance marker

    Raises:
        IncompleteCompletion: If the reply was filtered, truncated or empty
    """
    if len(response.choices) != 1:
        raise IncompleteCompletion(
            None,
            f"API return incomplete: expected 1 choice, got {len(response.choices)}",
        )

    choice = response.choices[0]
    if choice.stop_reason not in NATURAL_STOP_REASONS or not choice.content:
        log.debug("completion_incomplete", stop_reason=choice.stop_reason)
        raise IncompleteCompletion(choice.stop_reason)

    return encode(choice.content)


def _status_of(error: BaseException) -> int | None:
    """HTTP status carried by an SDK or httpx error, if any."""
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    status = getattr(error, "status_code", None)
    return status if isinstance(status, int) else None


def _message_of(error: BaseException) -> str:
    """Best error message: the API's own ``error.message`` when present."""
    body: Any = getattr(error, "body", None)
    if isinstance(body, dict):
        inner = body.get("error", body)
        if isinstance(inner, dict) and isinstance(inner.get("message"), str):
            return inner["message"]
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(error) or type(error).__name__


def classify_failure(error: BaseException) -> CompletionError:
    """Map a failure raised by a completion client to the error taxonomy.

    Args:
        error: Exception raised by the SDK or HTTP client

    Returns:
        ``RateLimited`` for HTTP 429, ``UpstreamError`` for any other HTTP
        status, ``TransportError`` when no HTTP response was received
    """
    if isinstance(error, CompletionError):
        return error

    status = _status_of(error)
    message = _message_of(error)
    if status == 429:
        return RateLimited(message)
    if status is not None:
        return UpstreamError(status, message)
    return TransportError(message)
