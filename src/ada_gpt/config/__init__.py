"""Configuration loading and validation."""

from .loader import load_config, load_config_from_action_env
from .schema import (
    AnthropicConfig,
    AssistantConfig,
    BotConfig,
    GitHubConfig,
    LLMConfig,
    LoggingConfig,
    OpenAIConfig,
    RetryConfig,
)

__all__ = [
    # Loaders
    "load_config",
    "load_config_from_action_env",
    # Root config
    "BotConfig",
    # Top-level configs
    "AssistantConfig",
    "GitHubConfig",
    "LLMConfig",
    "LoggingConfig",
    "RetryConfig",
    # Provider-specific configs
    "OpenAIConfig",
    "AnthropicConfig",
]
