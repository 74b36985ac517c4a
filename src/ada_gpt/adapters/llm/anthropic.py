"""Anthropic Claude completion adapter.

This module implements the CompletionProvider protocol for Anthropic's
messages API.

The messages API takes the system prompt apart from the dialogue and needs
strictly alternating user/assistant turns starting with a user turn, so the
conversation is reshaped before sending:
- Leading system messages form the system prompt
- Later system messages become user turns
- Consecutive turns with the same role are merged
- When the dialogue is empty or opens with an assistant turn, the last
  leading system message becomes the first user turn
"""

from __future__ import annotations

from typing import Any

import anthropic
import structlog

from ...config.schema import AnthropicConfig
from ...core.completion import classify_failure
from ...core.conversation import escape_user
from ...models.completion import CompletionChoice, CompletionOptions, CompletionResponse
from ...models.conversation import Conversation, ConversationMessage, Role
from .openai import merge_options

log = structlog.get_logger()

DEFAULT_MAX_TOKENS = 4096


def _turn_text(message: ConversationMessage) -> str:
    """Text of a dialogue turn, with the author named for user messages."""
    if message.role is Role.USER and message.author_name:
        return f"{escape_user(message.author_name)}: {message.content}"
    return message.content


def to_anthropic_request(conversation: Conversation) -> tuple[str, list[dict[str, Any]]]:
    """Split a conversation into a system prompt and alternating turns.

    Returns:
        (system prompt, messages) for the messages API
    """
    messages = list(conversation)

    leading = 0
    while leading < len(messages) and messages[leading].role is Role.SYSTEM:
        leading += 1
    system_parts = [message.content for message in messages[:leading]]
    dialogue = messages[leading:]

    if system_parts and (not dialogue or dialogue[0].role is Role.ASSISTANT):
        dialogue.insert(0, ConversationMessage(role=Role.USER, content=system_parts.pop()))

    turns: list[dict[str, Any]] = []
    for message in dialogue:
        role = "assistant" if message.role is Role.ASSISTANT else "user"
        text = _turn_text(message)
        if turns and turns[-1]["role"] == role:
            turns[-1]["content"] += f"\n\n{text}"
        else:
            turns.append({"role": role, "content": text})

    return "\n\n".join(system_parts), turns


class AnthropicAdapter:
    """Anthropic adapter implementing the CompletionProvider protocol.

    Example:
        config = AnthropicConfig(api_key="sk-ant-...")
        adapter = AnthropicAdapter(config)

        response = await adapter.complete(conversation)
    """

    def __init__(
        self,
        config: AnthropicConfig,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        """Initialize the Anthropic adapter.

        Args:
            config: Anthropic-specific configuration.
            client: SDK client to use. If None, creates one from the config.
        """
        self._config = config
        self._client = client or anthropic.AsyncAnthropic(api_key=config.api_key)

    @property
    def model_name(self) -> str:
        """Return the model identifier being used."""
        return self._config.model

    async def complete(
        self,
        conversation: Conversation,
        options: CompletionOptions | None = None,
    ) -> CompletionResponse:
        """Request one reply for the conversation.

        Raises:
            RateLimited: If Anthropic answered HTTP 429.
            UpstreamError: If Anthropic answered another HTTP error.
            TransportError: If no HTTP response was received.
        """
        effective = merge_options(self._config.options(), options)
        system, messages = to_anthropic_request(conversation)

        request: dict[str, Any] = {
            "model": self._config.model,
            "max_tokens": effective.max_tokens or DEFAULT_MAX_TOKENS,
            "messages": messages,
        }
        if system:
            request["system"] = system
        if effective.temperature is not None:
            request["temperature"] = effective.temperature
        if effective.top_p is not None:
            request["top_p"] = effective.top_p

        log.debug("anthropic_request_start", model=self._config.model, turns=len(messages))

        try:
            response = await self._client.messages.create(**request)
        except anthropic.APIError as e:
            error = classify_failure(e)
            log.error("anthropic_request_failed", error_type=type(error).__name__, error=str(error))
            raise error from e

        # Extract text from response
        response_text = ""
        for block in response.content:
            if hasattr(block, "text"):
                response_text += block.text

        log.debug("anthropic_request_complete", model=response.model, stop_reason=response.stop_reason)
        return CompletionResponse(
            choices=(CompletionChoice(content=response_text, stop_reason=response.stop_reason),),
            model=response.model,
        )
