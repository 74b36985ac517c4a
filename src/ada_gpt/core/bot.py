"""Run orchestrator.

This module implements the Bot class that drives a single run:
1. Classify the event
2. Check that the assistant was mentioned
3. Fetch the issue or pull request, its diff and the previous comments
4. Assemble the conversation
5. Request a completion and validate it
6. Post the reply
7. Write the run summary (best effort)
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any

import structlog

from ada_gpt.core.completion import RATE_LIMIT_GUIDANCE, interpret
from ada_gpt.core.conversation import assemble
from ada_gpt.core.event_classifier import (
    classify,
    extract_activation_entity,
    extract_activation_text,
    extract_subject_number,
    extract_triggering_comment,
)
from ada_gpt.core.mention import mentions_assistant
from ada_gpt.core.provenance import is_assistant_authored
from ada_gpt.models.event import TriggerKind
from ada_gpt.utils.errors import RateLimited
from ada_gpt.utils.logging import bind_context

if TYPE_CHECKING:
    from ada_gpt.interfaces.llm import CompletionProvider
    from ada_gpt.interfaces.summary import SummaryWriter
    from ada_gpt.interfaces.vcs import PlatformProvider
    from ada_gpt.models.completion import CompletionOptions
    from ada_gpt.models.conversation import AssistantIdentity
    from ada_gpt.models.event import RawEvent
    from ada_gpt.models.subject import CommentRecord, Subject

log = structlog.get_logger()


class RunResult(Enum):
    """Outcome of a run."""

    UNRECOGNIZED = "unrecognized"
    NOT_MENTIONED = "not_mentioned"
    SELF_AUTHORED = "self_authored"
    REPLIED = "replied"


class Bot:
    """Answers issues and pull requests that mention the assistant.

    Failures of the platform or the completion service are not retried
    here and propagate to the caller; nothing is posted in that case.

    Example:
        bot = Bot(platform, llm, AssistantIdentity())
        result = await bot.handle(event)
    """

    def __init__(
        self,
        platform: PlatformProvider,
        llm: CompletionProvider,
        identity: AssistantIdentity,
        options: CompletionOptions | None = None,
        summary: SummaryWriter | None = None,
    ) -> None:
        """Initialize the Bot.

        Args:
            platform: Platform provider for issues, diffs and comments
            llm: Completion provider
            identity: Name and handle of the assistant
            options: Sampling options for the completion request
            summary: Optional sink for the run summary
        """
        self._platform = platform
        self._llm = llm
        self._identity = identity
        self._options = options
        self._summary = summary

    async def handle(self, event: RawEvent) -> RunResult:
        """Process one event.

        Args:
            event: Event that started the run

        Returns:
            RunResult indicating what happened
        """
        start_time = time.monotonic()

        kind = classify(event)
        bind_context(event_kind=event.kind, trigger=kind.value)

        if kind == TriggerKind.UNRECOGNIZED:
            log.info("event_not_supported")
            return RunResult.UNRECOGNIZED

        if not mentions_assistant(extract_activation_text(event, kind), self._identity):
            log.info("assistant_not_mentioned", handle=self._identity.handle)
            return RunResult.NOT_MENTIONED

        triggering_comment = extract_triggering_comment(event, kind)
        if triggering_comment is not None and is_assistant_authored(triggering_comment.body):
            log.info("skipping_own_comment", comment_id=triggering_comment.id)
            return RunResult.SELF_AUTHORED

        number = extract_subject_number(event, kind)
        bind_context(subject_number=number)

        subject = await self._platform.get_subject(number)
        diff = await self._platform.get_diff(number) if kind.is_pull_request else None
        prior_comments: list[CommentRecord] = []
        if triggering_comment is not None:
            prior_comments = await self._platform.list_comments_before(number, triggering_comment.id)

        conversation = assemble(
            self._identity,
            subject,
            diff=diff,
            prior_comments=prior_comments,
            triggering_comment=triggering_comment,
        )
        log.info(
            "conversation_assembled",
            messages=len(conversation),
            prior_comments=len(prior_comments),
            has_diff=diff is not None,
        )

        try:
            response = await self._llm.complete(conversation, self._options)
        except RateLimited:
            log.warning("completion_rate_limited", guidance=RATE_LIMIT_GUIDANCE)
            raise

        reply = interpret(response)
        log.info("completion_received", model=response.model, length=len(reply))

        comment = await self._platform.add_comment(number, reply)

        await self._write_summary(subject, extract_activation_entity(event, kind), comment)

        log.info(
            "run_completed",
            comment_id=comment.id,
            duration_ms=round((time.monotonic() - start_time) * 1000),
        )
        return RunResult.REPLIED

    async def _write_summary(
        self,
        subject: Subject,
        trigger: Mapping[str, Any] | None,
        comment: CommentRecord,
    ) -> None:
        """Write the run summary; failures are logged, never raised."""
        if self._summary is None:
            return
        try:
            await self._summary.write(subject, trigger, comment)
        except Exception as e:
            log.warning("run_summary_failed", error=str(e))
