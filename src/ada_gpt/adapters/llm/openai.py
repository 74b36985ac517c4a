"""OpenAI chat completion adapter.

This module implements the CompletionProvider protocol for OpenAI's chat
completion API. One candidate is requested per call; the raw outcome is
returned as a ``CompletionResponse`` and validated by the core.
"""

from __future__ import annotations

from typing import Any

import openai
import structlog

from ...config.schema import OpenAIConfig
from ...core.completion import classify_failure
from ...core.conversation import escape_user
from ...models.completion import CompletionChoice, CompletionOptions, CompletionResponse
from ...models.conversation import Conversation, Role

log = structlog.get_logger()


def to_openai_messages(conversation: Conversation) -> list[dict[str, Any]]:
    """Render a conversation as chat completion messages."""
    messages: list[dict[str, Any]] = []
    for message in conversation:
        payload: dict[str, Any] = {"role": message.role.value, "content": message.content}
        if message.role is Role.USER and message.author_name:
            payload["name"] = escape_user(message.author_name)
        messages.append(payload)
    return messages


def merge_options(defaults: CompletionOptions, overrides: CompletionOptions | None) -> CompletionOptions:
    """Overlay the options that are set in ``overrides`` on ``defaults``."""
    if overrides is None:
        return defaults
    return CompletionOptions(
        temperature=overrides.temperature if overrides.temperature is not None else defaults.temperature,
        top_p=overrides.top_p if overrides.top_p is not None else defaults.top_p,
        max_tokens=overrides.max_tokens if overrides.max_tokens is not None else defaults.max_tokens,
    )


class OpenAIAdapter:
    """OpenAI adapter implementing the CompletionProvider protocol.

    Example:
        config = OpenAIConfig(api_key="sk-...")
        adapter = OpenAIAdapter(config)

        response = await adapter.complete(conversation)
    """

    def __init__(self, config: OpenAIConfig, client: openai.AsyncOpenAI | None = None) -> None:
        """Initialize the OpenAI adapter.

        Args:
            config: OpenAI-specific configuration.
            client: SDK client to use. If None, creates one from the config.
        """
        self._config = config
        self._client = client or openai.AsyncOpenAI(api_key=config.api_key, base_url=config.base_url)

    @property
    def model_name(self) -> str:
        """Return the model identifier being used."""
        return self._config.model

    async def complete(
        self,
        conversation: Conversation,
        options: CompletionOptions | None = None,
    ) -> CompletionResponse:
        """Request one chat completion for the conversation.

        Raises:
            RateLimited: If OpenAI answered HTTP 429.
            UpstreamError: If OpenAI answered another HTTP error.
            TransportError: If no HTTP response was received.
        """
        effective = merge_options(self._config.options(), options)
        request: dict[str, Any] = {
            "model": self._config.model,
            "messages": to_openai_messages(conversation),
            "n": 1,
            "stream": False,
        }
        if effective.temperature is not None:
            request["temperature"] = effective.temperature
        if effective.top_p is not None:
            request["top_p"] = effective.top_p
        if effective.max_tokens is not None:
            request["max_tokens"] = effective.max_tokens

        log.debug("openai_request_start", model=self._config.model, messages=len(conversation))

        try:
            completion = await self._client.chat.completions.create(**request)
        except openai.APIError as e:
            error = classify_failure(e)
            log.error("openai_request_failed", error_type=type(error).__name__, error=str(error))
            raise error from e

        choices = tuple(
            CompletionChoice(
                content=choice.message.content if choice.message else None,
                stop_reason=choice.finish_reason,
            )
            for choice in completion.choices
        )
        log.debug(
            "openai_request_complete",
            model=completion.model,
            stop_reasons=[choice.stop_reason for choice in choices],
        )
        return CompletionResponse(choices=choices, model=completion.model)
