"""GitHub Actions job summary writer.

Appends a Markdown report of the run to the file named by
``GITHUB_STEP_SUMMARY``. See
https://github.blog/2022-05-09-supercharging-github-actions-with-job-summaries/
"""

from __future__ import annotations

import asyncio
import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog

from ...core.provenance import decode
from ...models.subject import CommentRecord, Subject

log = structlog.get_logger()


def _link(label: str, url: str | None) -> str:
    return f"[{label}]({url})" if url else label


def render_summary(
    subject: Subject,
    trigger: Mapping[str, Any] | None,
    response: CommentRecord,
    event_payload: Mapping[str, Any] | None = None,
) -> str:
    """Render the Markdown summary of a run."""
    trigger = trigger or {}
    lines = [
        _link(f"{subject.kind_label.capitalize()} #{subject.number}", subject.url),
        "",
        "### Request",
        "",
        str(trigger.get("body") or ""),
        "",
        _link("Comment", trigger.get("html_url")),
        "",
        "### Response",
        "",
        decode(response.body),
        "",
        _link("Comment", response.url),
        "",
    ]
    if event_payload is not None:
        lines += [
            "### GitHub Context",
            "",
            "```json",
            json.dumps(dict(event_payload), indent=2, default=str),
            "```",
            "",
        ]
    return "\n".join(lines)


class StepSummaryWriter:
    """SummaryWriter that appends to the GitHub Actions job summary.

    When no summary file is configured the writer does nothing.
    """

    def __init__(
        self,
        path: Path | None = None,
        event_payload: Mapping[str, Any] | None = None,
    ) -> None:
        """Initialize the writer.

        Args:
            path: Summary file. If None, read from GITHUB_STEP_SUMMARY.
            event_payload: Raw event payload to include in the report.
        """
        if path is None:
            env_path = os.environ.get("GITHUB_STEP_SUMMARY")
            path = Path(env_path) if env_path else None
        self._path = path
        self._event_payload = event_payload

    @staticmethod
    def _append(path: Path, text: str) -> None:
        with path.open("a", encoding="utf-8") as f:
            f.write(text)

    async def write(
        self,
        subject: Subject,
        trigger: Mapping[str, Any] | None,
        response: CommentRecord,
    ) -> None:
        """Append the run report to the summary file."""
        if self._path is None:
            log.debug("step_summary_disabled")
            return

        text = render_summary(subject, trigger, response, self._event_payload)
        await asyncio.to_thread(self._append, self._path, text)
        log.debug("step_summary_written", path=str(self._path))
