"""Protocol definitions for pluggable adapters."""

from .llm import CompletionProvider
from .summary import SummaryWriter
from .vcs import PlatformProvider

__all__ = ["CompletionProvider", "PlatformProvider", "SummaryWriter"]
