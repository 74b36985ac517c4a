"""Data models for platform events."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

ISSUE_OPENED = "issue-opened"
PULL_REQUEST_OPENED = "pull-request-opened"
COMMENT_CREATED = "comment-created"

# (GitHub event name, action) -> canonical kind tag
_GITHUB_EVENT_KINDS: dict[tuple[str, str], str] = {
    ("issues", "opened"): ISSUE_OPENED,
    ("pull_request", "opened"): PULL_REQUEST_OPENED,
    ("issue_comment", "created"): COMMENT_CREATED,
}


class TriggerKind(Enum):
    """Canonical kind of event that started a run."""

    ISSUE_OPENED = "issue_opened"
    PULL_REQUEST_OPENED = "pull_request_opened"
    ISSUE_COMMENT_ON_ISSUE = "issue_comment_on_issue"
    ISSUE_COMMENT_ON_PULL_REQUEST = "issue_comment_on_pull_request"
    UNRECOGNIZED = "unrecognized"

    @property
    def is_comment(self) -> bool:
        """True for the two comment variants."""
        return self in (
            TriggerKind.ISSUE_COMMENT_ON_ISSUE,
            TriggerKind.ISSUE_COMMENT_ON_PULL_REQUEST,
        )

    @property
    def is_pull_request(self) -> bool:
        """True when the subject of the event is a pull request."""
        return self in (
            TriggerKind.PULL_REQUEST_OPENED,
            TriggerKind.ISSUE_COMMENT_ON_PULL_REQUEST,
        )


@dataclass(frozen=True)
class RawEvent:
    """A webhook-style event as delivered by the platform.

    The payload is exposed read-only; nothing in the bot mutates it.
    """

    kind: str
    payload: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.payload, dict):
            object.__setattr__(self, "payload", MappingProxyType(self.payload))

    @classmethod
    def from_github(cls, event_name: str, payload: Mapping[str, Any]) -> RawEvent:
        """Build an event from a GitHub event name and webhook payload.

        Events the bot does not react to keep the GitHub event name as kind.
        """
        action = payload.get("action", "") if isinstance(payload, Mapping) else ""
        kind = _GITHUB_EVENT_KINDS.get((event_name, str(action)), event_name)
        return cls(kind=kind, payload=payload)
