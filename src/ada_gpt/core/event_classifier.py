"""Classification of raw platform events.

The payload shape is inspected here and nowhere else: the rest of the bot
works from the ``TriggerKind`` this module produces.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

import structlog

from ada_gpt.models.event import COMMENT_CREATED, ISSUE_OPENED, PULL_REQUEST_OPENED, RawEvent, TriggerKind
from ada_gpt.models.subject import CommentRecord
from ada_gpt.utils.errors import UnclassifiableEvent

log = structlog.get_logger()


def _section(payload: Any, key: str) -> Mapping[str, Any] | None:
    """Return ``payload[key]`` if both are mappings, else None."""
    if not isinstance(payload, Mapping):
        return None
    value = payload.get(key)
    return value if isinstance(value, Mapping) else None


def _has_pull_request_link(issue: Mapping[str, Any] | None) -> bool:
    """An issue payload links to a pull request when ``pull_request`` is set."""
    return issue is not None and issue.get("pull_request") is not None


def classify(event: RawEvent) -> TriggerKind:
    """Map a raw event to its trigger kind.

    Total: any event, whatever its payload, yields exactly one kind, with
    ``UNRECOGNIZED`` as the catch-all.
    """
    if event.kind == ISSUE_OPENED:
        kind = TriggerKind.ISSUE_OPENED
    elif event.kind == PULL_REQUEST_OPENED:
        kind = TriggerKind.PULL_REQUEST_OPENED
    elif event.kind == COMMENT_CREATED:
        if _has_pull_request_link(_section(event.payload, "issue")):
            kind = TriggerKind.ISSUE_COMMENT_ON_PULL_REQUEST
        else:
            kind = TriggerKind.ISSUE_COMMENT_ON_ISSUE
    else:
        kind = TriggerKind.UNRECOGNIZED

    log.debug("event_classified", event_kind=event.kind, trigger=kind.value)
    return kind


def extract_activation_entity(event: RawEvent, kind: TriggerKind) -> Mapping[str, Any] | None:
    """Return the object that activated the run.

    The issue for ``ISSUE_OPENED``, the pull request for
    ``PULL_REQUEST_OPENED``, the comment for either comment kind, and None
    for ``UNRECOGNIZED`` or a payload missing that object.
    """
    if kind == TriggerKind.ISSUE_OPENED:
        return _section(event.payload, "issue")
    if kind == TriggerKind.PULL_REQUEST_OPENED:
        return _section(event.payload, "pull_request")
    if kind.is_comment:
        return _section(event.payload, "comment")
    return None


def extract_activation_text(event: RawEvent, kind: TriggerKind) -> str | None:
    """Return the text to check for a mention of the assistant.

    Issue body, pull request body or comment body depending on the kind;
    None for ``UNRECOGNIZED`` or when the body is absent.
    """
    entity = extract_activation_entity(event, kind)
    if entity is None:
        return None
    body = entity.get("body")
    return body if isinstance(body, str) else None


def extract_subject_number(event: RawEvent, kind: TriggerKind) -> int:
    """Return the number of the issue or pull request the event is about.

    Raises:
        UnclassifiableEvent: If ``kind`` is ``UNRECOGNIZED`` or the payload
            carries no number for the subject.
    """
    if kind == TriggerKind.UNRECOGNIZED:
        raise UnclassifiableEvent(f'Could not determine issue number from event "{event.kind}"')

    if kind == TriggerKind.PULL_REQUEST_OPENED:
        subject = _section(event.payload, "pull_request")
    else:
        subject = _section(event.payload, "issue")

    number = subject.get("number") if subject is not None else None
    # bool is an int subclass; a boolean number is a malformed payload
    if not isinstance(number, int) or isinstance(number, bool):
        raise UnclassifiableEvent(f'Event "{event.kind}" carries no {kind.value} subject number')
    return number


def _parse_timestamp(value: Any) -> datetime:
    """Parse an ISO 8601 timestamp as sent by GitHub (``Z`` suffix)."""
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            log.debug("comment_timestamp_unparsable", value=value)
    return datetime.fromtimestamp(0, tz=timezone.utc)


def comment_from_payload(data: Mapping[str, Any]) -> CommentRecord:
    """Build a ``CommentRecord`` from a REST or webhook comment object."""
    user = data.get("user")
    author = user.get("login", "") if isinstance(user, Mapping) else ""
    body = data.get("body")
    return CommentRecord(
        id=int(data.get("id", 0)),
        author_login=str(author),
        body=body if isinstance(body, str) else None,
        created_at=_parse_timestamp(data.get("created_at")),
        url=data.get("html_url"),
    )


def extract_triggering_comment(event: RawEvent, kind: TriggerKind) -> CommentRecord | None:
    """Return the comment that caused the run, for the comment kinds only."""
    if not kind.is_comment:
        return None
    comment = _section(event.payload, "comment")
    if comment is None:
        return None
    return comment_from_payload(comment)
