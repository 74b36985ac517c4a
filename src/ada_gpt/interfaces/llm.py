"""Abstract interface for completion service integrations."""

from typing import Protocol

from ..models.completion import CompletionOptions, CompletionResponse
from ..models.conversation import Conversation


class CompletionProvider(Protocol):
    """Abstract interface for completion service integrations.

    This protocol defines the contract that all completion adapters
    (OpenAI, Anthropic, etc.) must implement.
    """

    async def complete(
        self,
        conversation: Conversation,
        options: CompletionOptions | None = None,
    ) -> CompletionResponse:
        """
        Request a reply to the conversation.

        The response is returned as-is; validating it is the caller's job.

        Args:
            conversation: Ordered messages to send
            options: Sampling options overriding the configured defaults

        Returns:
            Provider-neutral completion response

        Raises:
            RateLimited: If the service answered HTTP 429
            UpstreamError: If the service answered another HTTP error
            TransportError: If no HTTP response was received
        """
        ...

    @property
    def model_name(self) -> str:
        """
        Return the model identifier being used.

        Examples:
            - "gpt-3.5-turbo"
            - "claude-3-5-sonnet-20241022"
        """
        ...
