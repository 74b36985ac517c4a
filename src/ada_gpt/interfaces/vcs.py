"""Abstract interface for code-hosting platform integrations."""

from typing import Protocol

from ..models.subject import CommentRecord, Subject


class PlatformProvider(Protocol):
    """Abstract interface for code-hosting platform integrations.

    This protocol defines the contract that platform adapters
    (GitHub, GitLab, etc.) must implement. All calls are scoped to the
    repository the adapter was configured for.
    """

    async def get_subject(self, number: int) -> Subject:
        """
        Fetch the issue or pull request with the given number.

        Args:
            number: Issue or pull request number

        Returns:
            The subject, flagged as pull request when it is one

        Raises:
            PlatformError: If the request fails
        """
        ...

    async def get_diff(self, number: int) -> str:
        """
        Fetch the unified diff of a pull request.

        Args:
            number: Pull request number

        Returns:
            Raw diff text

        Raises:
            PlatformError: If the request fails
        """
        ...

    async def list_comments_before(self, number: int, marker_comment_id: int) -> list[CommentRecord]:
        """
        List the comments made before a given comment.

        Args:
            number: Issue or pull request number
            marker_comment_id: Id of the comment that triggered the run

        Returns:
            Comments in listing order, excluding the marker comment and
            everything after it

        Raises:
            PlatformError: If the request fails
        """
        ...

    async def add_comment(self, number: int, body: str) -> CommentRecord:
        """
        Post a comment on an issue or pull request.

        Args:
            number: Issue or pull request number
            body: Markdown comment body

        Returns:
            The created comment

        Raises:
            PlatformError: If the request fails
        """
        ...
