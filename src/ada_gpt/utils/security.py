"""Security utilities for secret redaction and input validation.

Redaction is fail-closed: if a pattern cannot be applied, an exception is
raised instead of letting the unredacted text through. The redactor is used
to scrub every log entry, since the bot handles a GitHub token and a model
API key and logs payloads at debug level.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import structlog

from .errors import AdaGPTError

if TYPE_CHECKING:
    from collections.abc import Sequence

log = structlog.get_logger()


class SecurityError(AdaGPTError):
    """Base exception for security-related errors."""


class RedactionError(SecurityError):
    """Raised when secret redaction fails."""


# owner/repo, as in GITHUB_REPOSITORY
REPO_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_.-]+/[a-zA-Z0-9_.-]+$")


class SecretRedactor:
    """Replaces credentials in text with a placeholder.

    Covers the credentials a run can hold (the GitHub token and the
    completion service key) plus a few common formats that may show up in
    issue bodies or diffs.

    Usage:
        redactor = SecretRedactor()
        safe_text = redactor.redact(comment_body)
    """

    DEFAULT_PATTERNS: tuple[tuple[str, str], ...] = (
        # key=value and header forms
        (
            r"(?i)(api[_-]?key|secret|token|password|credential)\s*[=:]\s*[\"']?[\w-]{16,}",
            "Generic secret",
        ),
        (r"(?i)(authorization)\s*[=:]\s*[\"']?(bearer|token)\s+[\w.-]+", "Authorization header"),
        # GitHub: personal, OAuth, app installation and refresh tokens
        (r"gh[pousr]_[a-zA-Z0-9]{36}", "GitHub token"),
        (r"github_pat_[a-zA-Z0-9_]{22,}", "GitHub fine-grained PAT"),
        # Completion services
        (r"sk-[a-zA-Z0-9]{48}", "OpenAI legacy API key"),
        (r"sk-proj-[\w-]{20,}", "OpenAI project API key"),
        (r"sk-ant-[\w-]{20,}", "Anthropic API key"),
        # Often pasted into issues
        (r"AKIA[0-9A-Z]{16}", "AWS access key ID"),
        (r"-----BEGIN (?:RSA |EC |DSA |OPENSSH )?PRIVATE KEY-----", "Private key header"),
        (r"eyJ[a-zA-Z0-9_-]*\.eyJ[a-zA-Z0-9_-]*\.[a-zA-Z0-9_-]*", "JWT token"),
    )

    def __init__(
        self,
        placeholder: str = "[REDACTED]",
        custom_patterns: Sequence[tuple[str, str]] | None = None,
    ) -> None:
        """Compile the default patterns and any extra (pattern, name) pairs.

        Raises:
            RedactionError: If any pattern fails to compile.
        """
        self.placeholder = placeholder
        self._patterns: list[re.Pattern[str]] = []

        for pattern, name in (*self.DEFAULT_PATTERNS, *(custom_patterns or ())):
            try:
                self._patterns.append(re.compile(pattern))
            except re.error as e:
                log.error("secret_pattern_invalid", name=name, error=str(e))
                raise RedactionError(f"Invalid secret pattern {name!r}: {e}") from e

    def redact(self, text: str) -> str:
        """Return ``text`` with every match replaced by the placeholder.

        Raises:
            RedactionError: If a pattern cannot be applied.
        """
        if not text:
            return text
        try:
            for pattern in self._patterns:
                text = pattern.sub(self.placeholder, text)
        except (re.error, TypeError) as e:
            raise RedactionError(f"Redaction failed: {e}") from e
        return text


def validate_repo_name(repo: str) -> bool:
    """Return True if ``repo`` is a safe ``owner/repo`` name.

    Both parts may hold letters, digits, ``_``, ``-`` and ``.``; ``..`` is
    rejected anywhere.
    """
    if not repo or ".." in repo:
        return False
    return REPO_NAME_PATTERN.match(repo) is not None


def mask_secret(value: str) -> str:
    """Mask a secret for display, keeping only its first and last characters."""
    if len(value) > 8:
        return f"{value[:4]}...{value[-4:]}"
    return "***"
