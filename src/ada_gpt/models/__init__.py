"""Data models and transfer objects."""

from .completion import CompletionChoice, CompletionOptions, CompletionResponse
from .conversation import AssistantIdentity, Conversation, ConversationMessage, Role
from .event import RawEvent, TriggerKind
from .subject import CommentRecord, Subject

__all__ = [
    # Event models
    "RawEvent",
    "TriggerKind",
    # Subject models
    "Subject",
    "CommentRecord",
    # Conversation models
    "AssistantIdentity",
    "Conversation",
    "ConversationMessage",
    "Role",
    # Completion models
    "CompletionChoice",
    "CompletionOptions",
    "CompletionResponse",
]
