"""Data models for completion requests and responses."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CompletionOptions:
    """Sampling options forwarded to the completion service.

    ``None`` leaves the provider default in place.
    """

    temperature: float | None = None
    top_p: float | None = None
    max_tokens: int | None = None


@dataclass(frozen=True)
class CompletionChoice:
    """One candidate reply."""

    content: str | None
    stop_reason: str | None


@dataclass(frozen=True)
class CompletionResponse:
    """Provider-neutral view of a completion response."""

    choices: tuple[CompletionChoice, ...]
    model: str | None = None
