"""Assembly of the conversation sent to the completion service.

The order of messages is fixed:

1. Introduction of the assistant (system)
2. Description of the issue or pull request (system)
3. The pull request diff, announced then verbatim (system, optional)
4. Previous comments, announced then one message each (optional)
5. The comment that activated the assistant, followed by an instruction to
   answer it (optional)

Everything here is pure: no network, no clock.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from ada_gpt.core.provenance import decode, is_assistant_authored
from ada_gpt.models.conversation import AssistantIdentity, Conversation, ConversationMessage, Role
from ada_gpt.models.subject import CommentRecord, Subject

# Characters accepted in the ``name`` field of chat-completion messages
_NAME_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9_-]")
_NAME_MAX_LENGTH = 64


def escape_user(login: str) -> str:
    """Escape a login into the alphabet accepted for message author names."""
    escaped = _NAME_INVALID_CHARS.sub("_", login)[:_NAME_MAX_LENGTH]
    return escaped or "user"


def introduce_assistant(identity: AssistantIdentity) -> ConversationMessage:
    """System message introducing the assistant."""
    return ConversationMessage(
        role=Role.SYSTEM,
        content="\n".join(
            [
                "You are a helpful assistant for GitHub issues and pull requests.",
                f"Your name is {identity.name} and your handle is {identity.handle}.",
                "You respond to comments when someone mentions you.",
            ]
        ),
    )


def describe_subject(subject: Subject) -> ConversationMessage:
    """System message describing the issue or pull request."""
    label = subject.kind_label
    created_by = f"The current {label} was created by {escape_user(subject.author_login)}"
    if subject.repository:
        created_by += f" in repository {subject.repository}"

    return ConversationMessage(
        role=Role.SYSTEM,
        content="\n".join(
            [
                f"{created_by}.",
                f"{label.capitalize()} number: {subject.number}",
                f"{label.capitalize()} title: `{subject.title}`",
                f"{label.capitalize()} description:",
                "```",
                subject.body or "",
                "```",
            ]
        ),
    )


def present_diff(diff: str) -> list[ConversationMessage]:
    """System messages announcing and carrying the pull request diff."""
    return [
        ConversationMessage(
            role=Role.SYSTEM,
            content="I will provide you with the git diff of the pull request.",
        ),
        ConversationMessage(role=Role.SYSTEM, content=diff),
    ]


def comment_message(comment: CommentRecord) -> ConversationMessage:
    """Turn a comment into an assistant or user message by its provenance."""
    if is_assistant_authored(comment.body):
        return ConversationMessage(role=Role.ASSISTANT, content=decode(comment.body))
    return ConversationMessage(
        role=Role.USER,
        author_name=comment.author_login,
        content=decode(comment.body),
    )


def present_comments(subject: Subject, comments: Sequence[CommentRecord]) -> list[ConversationMessage]:
    """Messages for the previous comments, in the order given.

    Empty when there are no comments: no announcement is emitted either.
    """
    if not comments:
        return []
    return [
        ConversationMessage(
            role=Role.SYSTEM,
            content=(
                "I will provide you with a list of previous comments "
                f"that were already made on the {subject.kind_label}."
            ),
        ),
        *(comment_message(comment) for comment in comments),
    ]


def present_request(subject: Subject, comment: CommentRecord) -> list[ConversationMessage]:
    """Messages for the comment that activated the assistant."""
    return [
        ConversationMessage(
            role=Role.USER,
            author_name=comment.author_login,
            content=decode(comment.body),
        ),
        ConversationMessage(
            role=Role.SYSTEM,
            content="\n".join(
                [
                    f"The last comment was made by {escape_user(comment.author_login)}.",
                    "This comment activated you, so you should respond to it.",
                    f"Consider the current {subject.kind_label} and the previous comments when you respond.",
                ]
            ),
        ),
    ]


def assemble(
    identity: AssistantIdentity,
    subject: Subject,
    diff: str | None = None,
    prior_comments: Iterable[CommentRecord] = (),
    triggering_comment: CommentRecord | None = None,
) -> Conversation:
    """Build the conversation for a run.

    Args:
        identity: Name and handle of the assistant
        subject: Issue or pull request under discussion
        diff: Raw unified diff of a pull request, sent verbatim
        prior_comments: Comments made before the triggering one, already in
            chronological order; they are never re-sorted
        triggering_comment: The comment that caused this run, if any

    Returns:
        The ordered conversation
    """
    messages: list[ConversationMessage] = [
        introduce_assistant(identity),
        describe_subject(subject),
    ]

    if diff is not None:
        messages.extend(present_diff(diff))

    messages.extend(present_comments(subject, tuple(prior_comments)))

    if triggering_comment is not None:
        messages.extend(present_request(subject, triggering_comment))

    return tuple(messages)


def comments_before(comments: Sequence[CommentRecord], marker_id: int) -> list[CommentRecord]:
    """Return the comments listed before the one with id ``marker_id``.

    The position of the marker in the listing decides, not timestamps. When
    the marker is not in the listing, comments with a smaller id are kept.
    """
    for index, comment in enumerate(comments):
        if comment.id == marker_id:
            return list(comments[:index])
    return [comment for comment in comments if comment.id < marker_id]
