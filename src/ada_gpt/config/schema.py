"""Pydantic models for configuration schema."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.completion import CompletionOptions
from ..models.conversation import AssistantIdentity


class AssistantConfig(BaseModel):
    """Identity of the assistant."""

    name: str = "AdaGPT"
    handle: str = "@AdaGPT"

    @field_validator("handle")
    @classmethod
    def validate_handle(cls, v: str) -> str:
        """Validate mention handle format."""
        if not v.startswith("@") or len(v) < 2:
            raise ValueError("Handle must start with @")
        return v

    def identity(self) -> AssistantIdentity:
        """Return the immutable identity used by the core."""
        return AssistantIdentity(name=self.name, handle=self.handle)


class GitHubConfig(BaseModel):
    """GitHub-specific configuration."""

    token: str
    repository: str
    api_url: str = "https://api.github.com"
    timeout: float = Field(30.0, gt=0.0, le=300.0)

    @field_validator("repository")
    @classmethod
    def validate_repository(cls, v: str) -> str:
        """Validate repository name format."""
        from ..utils.security import validate_repo_name

        if not validate_repo_name(v):
            raise ValueError(f"Invalid repository format: {v}. Expected: owner/repo")
        return v

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Strip the trailing slash so paths can be appended."""
        if not v.startswith(("https://", "http://")):
            raise ValueError(f"Invalid API URL: {v}")
        return v.rstrip("/")


class _SamplingConfig(BaseModel):
    """Sampling options shared by completion providers."""

    temperature: float | None = Field(None, ge=0.0, le=2.0)
    top_p: float | None = Field(None, ge=0.0, le=1.0)
    max_tokens: int | None = Field(None, ge=1)

    def options(self) -> CompletionOptions:
        """Return the sampling options as a core value object."""
        return CompletionOptions(
            temperature=self.temperature,
            top_p=self.top_p,
            max_tokens=self.max_tokens,
        )


class OpenAIConfig(_SamplingConfig):
    """OpenAI-specific configuration."""

    api_key: str
    model: str = "gpt-3.5-turbo"
    temperature: float | None = Field(0.8, ge=0.0, le=2.0)
    base_url: str | None = None


class AnthropicConfig(_SamplingConfig):
    """Anthropic-specific configuration."""

    api_key: str
    model: str = "claude-3-5-sonnet-20241022"
    # Anthropic requires max_tokens on every request
    max_tokens: int | None = Field(4096, ge=1)


class LLMConfig(BaseModel):
    """Completion provider configuration."""

    provider: Literal["openai", "anthropic"] = "openai"
    openai: OpenAIConfig | None = None
    anthropic: AnthropicConfig | None = None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "console"


class RetryConfig(BaseModel):
    """Retry configuration for transient platform failures."""

    max_attempts: int = Field(3, ge=1, le=10)
    initial_delay: float = Field(1.0, ge=0.1, le=10.0)
    max_delay: float = Field(30.0, ge=1.0, le=300.0)


class BotConfig(BaseSettings):
    """Root configuration for AdaGPT."""

    github: GitHubConfig
    llm: LLMConfig
    assistant: AssistantConfig = AssistantConfig()
    logging: LoggingConfig = LoggingConfig()
    retry: RetryConfig = RetryConfig()

    model_config = SettingsConfigDict(
        env_prefix="ADA_GPT_",
        env_file=".env",
        env_nested_delimiter="__",
    )
