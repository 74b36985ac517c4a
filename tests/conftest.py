"""Shared test fixtures for AdaGPT."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import pytest

from ada_gpt.core.provenance import encode
from ada_gpt.models.conversation import AssistantIdentity
from ada_gpt.models.event import RawEvent
from ada_gpt.models.subject import CommentRecord, Subject

BASE_TIME = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def identity() -> AssistantIdentity:
    """Return the default assistant identity."""
    return AssistantIdentity(name="AdaGPT", handle="@AdaGPT")


@pytest.fixture
def issue_subject() -> Subject:
    """Return a plain issue."""
    return Subject(
        number=42,
        title="Example Issue",
        body="This is an example issue.",
        author_login="johndoe",
        is_pull_request=False,
        repository="octocat/Hello-World",
        url="https://github.com/octocat/Hello-World/issues/42",
    )


@pytest.fixture
def pr_subject() -> Subject:
    """Return a pull request."""
    return Subject(
        number=43,
        title="Example Pull Request",
        body="This is an example pull request.",
        author_login="janedoe",
        is_pull_request=True,
        repository="octocat/Hello-World",
        url="https://github.com/octocat/Hello-World/pull/43",
    )


@pytest.fixture
def make_comment() -> Callable[..., CommentRecord]:
    """Return a factory for comments, one minute apart by id."""

    def factory(comment_id: int, body: str | None, author: str = "alice", by_assistant: bool = False) -> CommentRecord:
        return CommentRecord(
            id=comment_id,
            author_login="github-actions[bot]" if by_assistant else author,
            body=encode(body or "") if by_assistant else body,
            created_at=BASE_TIME + timedelta(minutes=comment_id),
            url=f"https://github.com/octocat/Hello-World/issues/42#issuecomment-{comment_id}",
        )

    return factory


@pytest.fixture
def comment_event() -> RawEvent:
    """Return a comment-created event on a plain issue mentioning the assistant."""
    return RawEvent(
        kind="comment-created",
        payload={
            "action": "created",
            "issue": {"number": 42, "title": "Example Issue"},
            "comment": {
                "id": 1003,
                "body": "@AdaGPT can you explain this?",
                "user": {"login": "alice"},
                "created_at": "2024-03-01T12:03:00Z",
                "html_url": "https://github.com/octocat/Hello-World/issues/42#issuecomment-1003",
            },
        },
    )
