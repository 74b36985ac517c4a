"""Core business logic components.

This module exports the core of the assistant:
- classify / extract_*: Event classification
- assemble: Conversation assembly
- interpret / classify_failure: Completion result interpretation
- encode / decode / is_assistant_authored: Provenance codec
- Bot: Orchestrator for a single run
"""

from ada_gpt.core.bot import Bot, RunResult
from ada_gpt.core.completion import classify_failure, interpret
from ada_gpt.core.conversation import assemble, comments_before
from ada_gpt.core.event_classifier import (
    classify,
    extract_activation_entity,
    extract_activation_text,
    extract_subject_number,
    extract_triggering_comment,
)
from ada_gpt.core.mention import mentions_assistant
from ada_gpt.core.provenance import decode, encode, is_assistant_authored

__all__ = [
    "Bot",
    "RunResult",
    "assemble",
    "classify",
    "classify_failure",
    "comments_before",
    "decode",
    "encode",
    "extract_activation_entity",
    "extract_activation_text",
    "extract_subject_number",
    "extract_triggering_comment",
    "interpret",
    "is_assistant_authored",
    "mentions_assistant",
]
