"""Data models for issues, pull requests and their comments."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Subject:
    """The issue or pull request under discussion."""

    number: int
    title: str
    body: str | None
    author_login: str
    is_pull_request: bool
    repository: str | None = None  # "owner/repo", when known
    url: str | None = None

    @property
    def kind_label(self) -> str:
        """Human label used in prompts: "issue" or "pull request"."""
        return "pull request" if self.is_pull_request else "issue"


@dataclass(frozen=True)
class CommentRecord:
    """A comment on an issue or pull request."""

    id: int
    author_login: str
    body: str | None
    created_at: datetime
    url: str | None = None
