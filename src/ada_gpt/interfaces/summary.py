"""Abstract interface for run summary sinks."""

from collections.abc import Mapping
from typing import Any, Protocol

from ..models.subject import CommentRecord, Subject


class SummaryWriter(Protocol):
    """Sink for a human-readable summary of a run.

    Writing is best effort: callers log and ignore failures.
    """

    async def write(
        self,
        subject: Subject,
        trigger: Mapping[str, Any] | None,
        response: CommentRecord,
    ) -> None:
        """
        Record the request and the posted response.

        Args:
            subject: Issue or pull request the run was about
            trigger: Raw issue, pull request or comment that activated the run
            response: Comment posted by the assistant
        """
        ...
