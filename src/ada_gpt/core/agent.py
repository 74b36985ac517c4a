"""Wiring of configuration, adapters and the Bot for one run."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from ada_gpt.core.bot import Bot, RunResult
from ada_gpt.utils.errors import ConfigurationError

if TYPE_CHECKING:
    from ada_gpt.config.schema import BotConfig
    from ada_gpt.interfaces.llm import CompletionProvider
    from ada_gpt.models.event import RawEvent

log = structlog.get_logger()


async def run_event(config: BotConfig, event: RawEvent) -> RunResult:
    """Handle one event with adapters built from the configuration.

    Args:
        config: Application configuration
        event: Event that started the run

    Returns:
        Outcome of the run

    Raises:
        ConfigurationError: If the configured provider is not usable
        AdaGPTError: If any step of the run fails
    """
    from ada_gpt.adapters.summary.actions import StepSummaryWriter
    from ada_gpt.adapters.vcs.github import GitHubAdapter

    llm = _create_llm_adapter(config)
    log.debug("llm_adapter_created", provider=config.llm.provider, model=llm.model_name)

    async with GitHubAdapter(config.github, config.retry) as platform:
        bot = Bot(
            platform,
            llm,
            config.assistant.identity(),
            summary=StepSummaryWriter(event_payload=event.payload),
        )
        return await bot.handle(event)


def _create_llm_adapter(config: BotConfig) -> CompletionProvider:
    """Create a completion adapter based on configuration.

    Args:
        config: Application configuration

    Returns:
        Completion provider instance

    Raises:
        ConfigurationError: If provider is not supported or not configured
    """
    provider = config.llm.provider

    if provider == "openai":
        if not config.llm.openai:
            raise ConfigurationError("OpenAI configuration required when provider is 'openai'")
        # Import here to avoid loading unnecessary dependencies
        from ada_gpt.adapters.llm.openai import OpenAIAdapter

        return OpenAIAdapter(config.llm.openai)

    if provider == "anthropic":
        if not config.llm.anthropic:
            raise ConfigurationError("Anthropic configuration required when provider is 'anthropic'")
        from ada_gpt.adapters.llm.anthropic import AnthropicAdapter

        return AnthropicAdapter(config.llm.anthropic)

    raise ConfigurationError(f"Unsupported LLM provider: {provider}")
