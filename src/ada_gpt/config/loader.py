"""Configuration loaders.

Two sources are supported:
- a YAML file with ${VAR_NAME} environment variable substitution
- GitHub Actions inputs (INPUT_* environment variables)
"""

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..utils.errors import ConfigurationError
from .schema import BotConfig


def substitute_env_vars(text: str) -> str:
    """
    Replace ${VAR_NAME} patterns with environment variable values.

    Args:
        text: Text containing ${VAR_NAME} patterns

    Returns:
        Text with environment variables substituted

    Raises:
        ValueError: If a referenced environment variable is not found
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        value = os.environ.get(var_name)
        if value is None:
            raise ValueError(f"Environment variable {var_name} not found")
        return value

    return re.sub(r"\$\{([^}]+)\}", replacer, text)


def load_config(path: Path) -> BotConfig:
    """
    Load configuration from YAML file with environment variable substitution.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated BotConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If environment variables are missing
        ConfigurationError: If config doesn't match schema
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with path.open() as f:
        raw_yaml = f.read()

    # Substitute environment variables
    yaml_with_env = substitute_env_vars(raw_yaml)

    config_dict = yaml.safe_load(yaml_with_env) or {}

    try:
        config = BotConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    validate_config(config)
    return config


def _input(env: Mapping[str, str], name: str) -> str:
    """Read a GitHub Actions input (INPUT_<NAME>), stripped."""
    return env.get(f"INPUT_{name.upper()}", "").strip()


def _optional_number(env: Mapping[str, str], name: str, kind: type[float] | type[int]) -> Any:
    """Parse an optional numeric input; blank means unset."""
    raw = _input(env, name)
    if not raw:
        return None
    try:
        return kind(raw)
    except ValueError as e:
        raise ConfigurationError(f"Input {name} is not a valid {kind.__name__}: {raw!r}") from e


def load_config_from_action_env(env: Mapping[str, str] | None = None) -> BotConfig:
    """
    Build configuration from GitHub Actions inputs.

    Args:
        env: Environment mapping (defaults to os.environ)

    Returns:
        Validated BotConfig instance using the OpenAI provider

    Raises:
        ConfigurationError: If a required input is missing or invalid
    """
    env = os.environ if env is None else env

    github_token = _input(env, "github_token")
    openai_key = _input(env, "openai_key")
    if not github_token:
        raise ConfigurationError("Input required and not supplied: github_token")
    if not openai_key:
        raise ConfigurationError("Input required and not supplied: openai_key")

    openai: dict[str, Any] = {"api_key": openai_key}
    for name, key, kind in (
        ("openai_temperature", "temperature", float),
        ("openai_top_p", "top_p", float),
        ("openai_max_tokens", "max_tokens", int),
    ):
        value = _optional_number(env, name, kind)
        if value is not None:
            openai[key] = value
    model = _input(env, "openai_model")
    if model:
        openai["model"] = model

    config_dict: dict[str, Any] = {
        "github": {
            "token": github_token,
            "repository": env.get("GITHUB_REPOSITORY", ""),
            "api_url": env.get("GITHUB_API_URL", "https://api.github.com"),
        },
        "llm": {"provider": "openai", "openai": openai},
    }

    try:
        config = BotConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid action inputs: {e}") from e

    validate_config(config)
    return config


def validate_config(config: BotConfig) -> None:
    """
    Perform additional cross-field validation.

    Ensures that provider-specific configuration is present when
    a provider is selected.

    Args:
        config: Configuration to validate

    Raises:
        ConfigurationError: If provider-specific config is missing
    """
    if config.llm.provider == "openai" and config.llm.openai is None:
        raise ConfigurationError("OpenAI provider selected but openai config missing")
    elif config.llm.provider == "anthropic" and config.llm.anthropic is None:
        raise ConfigurationError("Anthropic provider selected but anthropic config missing")
