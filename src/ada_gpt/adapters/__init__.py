"""Concrete implementations of provider interfaces."""

from .llm.anthropic import AnthropicAdapter
from .llm.openai import OpenAIAdapter
from .summary.actions import StepSummaryWriter
from .vcs.github import GitHubAdapter

__all__ = [
    "AnthropicAdapter",
    "GitHubAdapter",
    "OpenAIAdapter",
    "StepSummaryWriter",
]
