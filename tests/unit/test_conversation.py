"""Tests for conversation assembly."""

from collections.abc import Callable

import pytest

from ada_gpt.core.conversation import (
    assemble,
    comments_before,
    describe_subject,
    escape_user,
    introduce_assistant,
)
from ada_gpt.models.conversation import AssistantIdentity, ConversationMessage, Role
from ada_gpt.models.subject import CommentRecord, Subject

MakeComment = Callable[..., CommentRecord]


class TestEscapeUser:
    """Test escape_user()."""

    @pytest.mark.parametrize(
        "login,expected",
        [
            ("alice", "alice"),
            ("john-doe_2", "john-doe_2"),
            ("github-actions[bot]", "github-actions_bot_"),
            ("dr. who", "dr__who"),
            ("", "user"),
        ],
    )
    def test_escape(self, login: str, expected: str) -> None:
        """Test logins are reduced to the accepted alphabet."""
        assert escape_user(login) == expected

    def test_truncated(self) -> None:
        """Test long logins are truncated."""
        assert len(escape_user("a" * 100)) == 64


class TestIntroduction:
    """Test the fixed leading messages."""

    def test_introduction_names_assistant(self, identity: AssistantIdentity) -> None:
        """Test the introduction carries name and handle."""
        message = introduce_assistant(identity)
        assert message.role is Role.SYSTEM
        assert "AdaGPT" in message.content
        assert "@AdaGPT" in message.content

    def test_description_of_issue(self, issue_subject: Subject) -> None:
        """Test the issue description lists number, title and body."""
        message = describe_subject(issue_subject)
        assert message.role is Role.SYSTEM
        assert "The current issue was created by johndoe" in message.content
        assert "Issue number: 42" in message.content
        assert "Issue title: `Example Issue`" in message.content
        assert "This is an example issue." in message.content

    def test_description_of_pull_request(self, pr_subject: Subject) -> None:
        """Test the pull request description uses the pull request label."""
        message = describe_subject(pr_subject)
        assert "The current pull request was created by janedoe" in message.content
        assert "Pull request number: 43" in message.content

    def test_description_without_body(self, issue_subject: Subject) -> None:
        """Test an absent body renders as an empty block."""
        subject = Subject(
            number=1,
            title="t",
            body=None,
            author_login="bob",
            is_pull_request=False,
        )
        message = describe_subject(subject)
        assert message.content.endswith("```\n\n```")
        assert "None" not in message.content


class TestAssemble:
    """Test assemble()."""

    def test_issue_without_comments(self, identity: AssistantIdentity, issue_subject: Subject) -> None:
        """Test an opened issue gives only the two leading messages."""
        conversation = assemble(identity, issue_subject)
        assert conversation == (introduce_assistant(identity), describe_subject(issue_subject))

    def test_empty_comments_emit_no_preamble(self, identity: AssistantIdentity, issue_subject: Subject) -> None:
        """Test an empty comment list adds no announcement."""
        conversation = assemble(identity, issue_subject, prior_comments=[])
        assert len(conversation) == 2
        assert not any("previous comments" in m.content for m in conversation)

    def test_comments_add_preamble_and_one_message_each(
        self,
        identity: AssistantIdentity,
        issue_subject: Subject,
        make_comment: MakeComment,
    ) -> None:
        """Test N comments add N+1 messages."""
        comments = [make_comment(i, f"comment {i}") for i in range(1, 6)]
        conversation = assemble(identity, issue_subject, prior_comments=comments)
        assert len(conversation) == 2 + 1 + 5
        assert conversation[2].role is Role.SYSTEM
        assert "previous comments" in conversation[2].content
        assert [m.content for m in conversation[3:]] == [f"comment {i}" for i in range(1, 6)]

    def test_comment_order_is_preserved(
        self,
        identity: AssistantIdentity,
        issue_subject: Subject,
        make_comment: MakeComment,
    ) -> None:
        """Test comments are never re-sorted."""
        comments = [make_comment(3, "third"), make_comment(1, "first"), make_comment(2, "second")]
        conversation = assemble(identity, issue_subject, prior_comments=comments)
        assert [m.content for m in conversation[3:]] == ["third", "first", "second"]

    def test_roles_follow_provenance(
        self,
        identity: AssistantIdentity,
        issue_subject: Subject,
        make_comment: MakeComment,
    ) -> None:
        """Test marked comments become assistant turns and others user turns."""
        comments = [
            make_comment(1, "Hello @AdaGPT", author="alice"),
            make_comment(2, "Hello!", by_assistant=True),
        ]
        conversation = assemble(identity, issue_subject, prior_comments=comments)

        assert conversation[3] == ConversationMessage(role=Role.USER, content="Hello @AdaGPT", author_name="alice")
        assert conversation[4] == ConversationMessage(role=Role.ASSISTANT, content="Hello!")

    def test_human_comment_by_bot_account_is_user(
        self,
        identity: AssistantIdentity,
        issue_subject: Subject,
        make_comment: MakeComment,
    ) -> None:
        """Test provenance comes from the body, not the author."""
        comment = make_comment(1, "manual note", author="github-actions[bot]")
        conversation = assemble(identity, issue_subject, prior_comments=[comment])
        assert conversation[3].role is Role.USER

    def test_absent_comment_body(
        self,
        identity: AssistantIdentity,
        issue_subject: Subject,
        make_comment: MakeComment,
    ) -> None:
        """Test a comment without a body becomes an empty user turn."""
        conversation = assemble(identity, issue_subject, prior_comments=[make_comment(1, None)])
        assert conversation[3].role is Role.USER
        assert conversation[3].content == ""

    def test_pull_request_with_diff(self, identity: AssistantIdentity, pr_subject: Subject) -> None:
        """Test the diff is announced then sent verbatim."""
        diff = "diff --git a/x b/x\n+added line\n"
        conversation = assemble(identity, pr_subject, diff=diff)

        assert len(conversation) == 4
        assert conversation[2].role is Role.SYSTEM
        assert "git diff" in conversation[2].content
        assert conversation[3] == ConversationMessage(role=Role.SYSTEM, content=diff)

    def test_diff_comes_before_comments(
        self,
        identity: AssistantIdentity,
        pr_subject: Subject,
        make_comment: MakeComment,
    ) -> None:
        """Test the diff block precedes the comment block."""
        conversation = assemble(identity, pr_subject, diff="d", prior_comments=[make_comment(1, "c")])
        assert conversation[3].content == "d"
        assert "previous comments" in conversation[4].content
        assert conversation[5].content == "c"

    def test_triggering_comment_is_last(
        self,
        identity: AssistantIdentity,
        issue_subject: Subject,
        make_comment: MakeComment,
    ) -> None:
        """Test the triggering comment and the instruction close the conversation."""
        prior = [make_comment(1, "first")]
        trigger = make_comment(2, "@AdaGPT what now?", author="bob")
        conversation = assemble(identity, issue_subject, prior_comments=prior, triggering_comment=trigger)

        assert len(conversation) == 2 + 2 + 2
        assert conversation[-2] == ConversationMessage(
            role=Role.USER, content="@AdaGPT what now?", author_name="bob"
        )
        assert conversation[-1].role is Role.SYSTEM
        assert "The last comment was made by bob." in conversation[-1].content

    def test_scenario_hello(self, identity: AssistantIdentity, make_comment: MakeComment) -> None:
        """Test an issue with one human comment and one assistant reply."""
        subject = Subject(
            number=1,
            title="Greeting",
            body="Please say hi",
            author_login="alice",
            is_pull_request=False,
        )
        comments = [
            make_comment(1, "Hello @AdaGPT", author="alice"),
            make_comment(2, "Hello!", by_assistant=True),
        ]
        conversation = assemble(identity, subject, prior_comments=comments)

        assert [m.role for m in conversation] == [
            Role.SYSTEM,
            Role.SYSTEM,
            Role.SYSTEM,
            Role.USER,
            Role.ASSISTANT,
        ]
        assert conversation[3].author_name == "alice"
        assert conversation[4].content == "Hello!"

    def test_deterministic(
        self,
        identity: AssistantIdentity,
        pr_subject: Subject,
        make_comment: MakeComment,
    ) -> None:
        """Test equal inputs give equal conversations."""
        comments = [make_comment(1, "a"), make_comment(2, "b", by_assistant=True)]
        first = assemble(identity, pr_subject, diff="d", prior_comments=comments)
        second = assemble(identity, pr_subject, diff="d", prior_comments=list(comments))
        assert first == second


class TestCommentsBefore:
    """Test comments_before()."""

    def test_cut_at_marker_position(self, make_comment: MakeComment) -> None:
        """Test comments listed after the marker are dropped."""
        comments = [make_comment(i, str(i)) for i in (1, 2, 3, 4)]
        assert [c.id for c in comments_before(comments, 3)] == [1, 2]

    def test_position_wins_over_id(self, make_comment: MakeComment) -> None:
        """Test the listing position decides, not the id value."""
        comments = [make_comment(5, "a"), make_comment(2, "b"), make_comment(9, "c")]
        assert [c.id for c in comments_before(comments, 2)] == [5]

    def test_marker_first(self, make_comment: MakeComment) -> None:
        """Test nothing precedes the first comment."""
        comments = [make_comment(1, "a"), make_comment(2, "b")]
        assert comments_before(comments, 1) == []

    def test_marker_missing_falls_back_to_ids(self, make_comment: MakeComment) -> None:
        """Test smaller ids are kept when the marker is not listed."""
        comments = [make_comment(1, "a"), make_comment(4, "b"), make_comment(7, "c")]
        assert [c.id for c in comments_before(comments, 5)] == [1, 4]
