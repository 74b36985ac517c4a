"""Marker codec that lets the assistant recognize its own comments.

Replies are wrapped between two HTML comment lines. GitHub Markdown does not
render HTML comments, so the marker leaves no visible trace, and no state has
to be kept between runs to tell assistant replies apart from human text.
"""

from __future__ import annotations

import re

BEGIN_MARKER = "<!-- ada-gpt:begin -->"
END_MARKER = "<!-- ada-gpt:end -->"

# GitHub may hand back edited comment bodies with CRLF line endings; both
# marker lines must use the same separator.
_MARKED_PATTERN = re.compile(
    rf"\A{re.escape(BEGIN_MARKER)}(?P<newline>\r?\n)(?P<content>.*)(?P=newline){re.escape(END_MARKER)}\Z",
    re.DOTALL,
)


def encode(text: str) -> str:
    """Wrap assistant-generated text with the provenance marker."""
    return f"{BEGIN_MARKER}\n{text}\n{END_MARKER}"


def is_assistant_authored(text: str | None) -> bool:
    """Return True if the text carries the provenance marker."""
    if not text:
        return False
    return _MARKED_PATTERN.match(text) is not None


def decode(text: str | None) -> str:
    """Strip the provenance marker.

    Text without the marker is returned unchanged; ``None`` becomes "".
    """
    if text is None:
        return ""
    match = _MARKED_PATTERN.match(text)
    if match is None:
        return text
    return match.group("content")
