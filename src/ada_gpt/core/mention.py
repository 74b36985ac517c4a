"""Detection of mentions of the assistant's handle."""

from __future__ import annotations

import re

from ada_gpt.models.conversation import AssistantIdentity


def mention_pattern(identity: AssistantIdentity) -> re.Pattern[str]:
    """Compile a case-insensitive pattern matching the assistant's handle.

    The handle must not be followed by another handle character, so
    ``@AdaGPT`` does not match inside ``@AdaGPT2``.
    """
    return re.compile(rf"{re.escape(identity.handle)}(?![\w-])", re.IGNORECASE)


def mentions_assistant(text: str | None, identity: AssistantIdentity) -> bool:
    """Return True if ``text`` mentions the assistant."""
    if not text:
        return False
    return mention_pattern(identity).search(text) is not None
