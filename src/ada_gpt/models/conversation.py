"""Data models for the conversation sent to the completion service."""

from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    """Speaker of a conversation message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ConversationMessage:
    """One turn of the conversation."""

    role: Role
    content: str
    author_name: str | None = None  # only set on USER messages

    def __post_init__(self) -> None:
        if self.author_name is not None and self.role is not Role.USER:
            raise ValueError(f"author_name is only allowed on user messages, not {self.role.value}")


# Insertion order is the dialogue order; never re-sorted.
Conversation = tuple[ConversationMessage, ...]


@dataclass(frozen=True)
class AssistantIdentity:
    """Display name and mention handle of the assistant."""

    name: str = "AdaGPT"
    handle: str = "@AdaGPT"
