"""GitHub platform adapter using the REST API.

This module implements the PlatformProvider protocol for GitHub on top of
an httpx ``AsyncClient``.

Behavior:
- All calls are scoped to the configured repository
- Comment listings are paginated through the ``Link`` header
- Transient transport failures are retried; HTTP errors are not
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from ...config.schema import GitHubConfig, RetryConfig
from ...core.conversation import comments_before
from ...core.event_classifier import comment_from_payload
from ...models.event import RawEvent
from ...models.subject import CommentRecord, Subject
from ...utils.async_helpers import create_retry
from ...utils.errors import ConfigurationError, PlatformError

if TYPE_CHECKING:
    from types import TracebackType

log = structlog.get_logger()

API_VERSION = "2022-11-28"
JSON_MEDIA_TYPE = "application/vnd.github+json"
DIFF_MEDIA_TYPE = "application/vnd.github.diff"
PER_PAGE = 100


class GitHubAdapter:
    """GitHub adapter implementing the PlatformProvider protocol.

    Example:
        config = GitHubConfig(token="ghp_...", repository="owner/repo")
        async with GitHubAdapter(config) as github:
            subject = await github.get_subject(42)
            comments = await github.list_comments_before(42, 1234567)
    """

    def __init__(
        self,
        config: GitHubConfig,
        retry_config: RetryConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the GitHub adapter.

        Args:
            config: GitHub-specific configuration.
            retry_config: Retry policy for transport failures. If None, uses defaults.
            client: HTTP client to use. If None, creates one from the config.
        """
        self._config = config
        retry_config = retry_config or RetryConfig()
        self._retry = create_retry(
            max_attempts=retry_config.max_attempts,
            min_wait=retry_config.initial_delay,
            max_wait=retry_config.max_delay,
        )
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=config.api_url,
            timeout=config.timeout,
        )
        self._headers = {
            "Accept": JSON_MEDIA_TYPE,
            "Authorization": f"Bearer {config.token}",
            "X-GitHub-Api-Version": API_VERSION,
        }

    async def __aenter__(self) -> GitHubAdapter:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this adapter created it."""
        if self._owns_client:
            await self._client.aclose()

    def _repo_path(self, suffix: str) -> str:
        return f"/repos/{self._config.repository}/{suffix}"

    async def _request(
        self,
        method: str,
        url: str,
        *,
        accept: str = JSON_MEDIA_TYPE,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request, retrying transport failures.

        Raises:
            PlatformError: If the request fails or GitHub answers an error.
        """
        headers = {**self._headers, "Accept": accept}

        @self._retry
        async def attempt() -> httpx.Response:
            return await self._client.request(method, url, headers=headers, params=params, json=json_body)

        try:
            response = await attempt()
        except httpx.HTTPError as e:
            log.error("github_request_failed", method=method, url=url, error=str(e))
            raise PlatformError(f"GitHub request {method} {url} failed: {e}") from e

        if response.is_error:
            message = self._error_message(response)
            log.error(
                "github_api_error",
                method=method,
                url=url,
                status=response.status_code,
                error=message,
            )
            raise PlatformError(
                f"GitHub request {method} {url} failed with status {response.status_code}: {message}",
                status=response.status_code,
            )

        return response

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract GitHub's error message from a response."""
        try:
            data = response.json()
        except ValueError:
            return response.text[:200]
        if isinstance(data, dict) and isinstance(data.get("message"), str):
            return data["message"]
        return response.reason_phrase

    @staticmethod
    def _json(response: httpx.Response, expected: type) -> Any:
        """Decode a successful response body.

        Raises:
            PlatformError: If the body is not JSON of the expected type.
        """
        try:
            data = response.json()
        except ValueError as e:
            raise PlatformError(f"GitHub returned an invalid JSON body: {e}", status=response.status_code) from e
        if not isinstance(data, expected):
            raise PlatformError(
                f"GitHub returned {type(data).__name__}, expected {expected.__name__}",
                status=response.status_code,
            )
        return data

    def _parse_subject(self, data: dict[str, Any]) -> Subject:
        """Parse issue JSON from the REST API into a Subject."""
        user = data.get("user") or {}
        return Subject(
            number=data["number"],
            title=data.get("title", ""),
            body=data.get("body"),
            author_login=user.get("login", "unknown"),
            is_pull_request=data.get("pull_request") is not None,
            repository=self._config.repository,
            url=data.get("html_url"),
        )

    async def get_subject(self, number: int) -> Subject:
        """Fetch the issue or pull request with the given number."""
        # Pull requests are issues too; the issues endpoint serves both
        response = await self._request("GET", self._repo_path(f"issues/{number}"))
        subject = self._parse_subject(self._json(response, dict))
        log.debug("subject_fetched", number=number, is_pull_request=subject.is_pull_request)
        return subject

    async def get_diff(self, number: int) -> str:
        """Fetch the unified diff of a pull request."""
        response = await self._request(
            "GET",
            self._repo_path(f"pulls/{number}"),
            accept=DIFF_MEDIA_TYPE,
        )
        log.debug("diff_fetched", number=number, size=len(response.text))
        return response.text

    async def list_comments(self, number: int) -> list[CommentRecord]:
        """List every comment on an issue or pull request, in listing order."""
        comments: list[CommentRecord] = []
        url: str | None = self._repo_path(f"issues/{number}/comments")
        params: dict[str, Any] | None = {"per_page": PER_PAGE}

        while url:
            response = await self._request("GET", url, params=params)
            comments.extend(comment_from_payload(item) for item in self._json(response, list))
            # The next link already carries the query string
            url = response.links.get("next", {}).get("url")
            params = None

        log.debug("comments_listed", number=number, count=len(comments))
        return comments

    async def list_comments_before(self, number: int, marker_comment_id: int) -> list[CommentRecord]:
        """List the comments made before the given comment."""
        return comments_before(await self.list_comments(number), marker_comment_id)

    async def add_comment(self, number: int, body: str) -> CommentRecord:
        """Post a comment on an issue or pull request."""
        response = await self._request(
            "POST",
            self._repo_path(f"issues/{number}/comments"),
            json_body={"body": body},
        )
        comment = comment_from_payload(self._json(response, dict))
        log.info("comment_posted", number=number, comment_id=comment.id, url=comment.url)
        return comment


def load_github_event(env: Mapping[str, str] | None = None) -> RawEvent:
    """Read the event that triggered the workflow run.

    Args:
        env: Environment mapping (defaults to os.environ)

    Returns:
        The event built from GITHUB_EVENT_NAME and the JSON payload at
        GITHUB_EVENT_PATH

    Raises:
        ConfigurationError: If the variables are missing or the payload is unreadable
    """
    env = os.environ if env is None else env

    event_name = env.get("GITHUB_EVENT_NAME")
    event_path = env.get("GITHUB_EVENT_PATH")
    if not event_name or not event_path:
        raise ConfigurationError("GITHUB_EVENT_NAME and GITHUB_EVENT_PATH must be set")

    try:
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Could not read event payload {event_path}: {e}") from e

    if not isinstance(payload, dict):
        raise ConfigurationError(f"Event payload {event_path} is not a JSON object")

    return RawEvent.from_github(event_name, payload)
