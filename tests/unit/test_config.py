"""Tests for configuration loading and validation."""

import os
from pathlib import Path
from tempfile import NamedTemporaryFile

import pytest
from pydantic import ValidationError

from ada_gpt.config.loader import (
    load_config,
    load_config_from_action_env,
    substitute_env_vars,
    validate_config,
)
from ada_gpt.config.schema import (
    AnthropicConfig,
    AssistantConfig,
    BotConfig,
    GitHubConfig,
    LLMConfig,
    OpenAIConfig,
    RetryConfig,
)
from ada_gpt.models.completion import CompletionOptions
from ada_gpt.models.conversation import AssistantIdentity
from ada_gpt.utils.errors import ConfigurationError


class TestSubstituteEnvVars:
    """Test environment variable substitution."""

    def test_substitute_single_var(self):
        """Test substituting a single environment variable."""
        os.environ["TEST_VAR"] = "test_value"
        result = substitute_env_vars("Value is ${TEST_VAR}")
        assert result == "Value is test_value"
        del os.environ["TEST_VAR"]

    def test_substitute_multiple_vars(self):
        """Test substituting multiple environment variables."""
        os.environ["VAR1"] = "value1"
        os.environ["VAR2"] = "value2"
        result = substitute_env_vars("${VAR1} and ${VAR2}")
        assert result == "value1 and value2"
        del os.environ["VAR1"]
        del os.environ["VAR2"]

    def test_missing_env_var_raises(self):
        """Test that missing environment variables raise ValueError."""
        with pytest.raises(ValueError, match="Environment variable MISSING not found"):
            substitute_env_vars("Value is ${MISSING}")

    def test_no_substitution_needed(self):
        """Test text without environment variables passes through unchanged."""
        result = substitute_env_vars("plain text without vars")
        assert result == "plain text without vars"


class TestAssistantConfig:
    """Test AssistantConfig validation."""

    def test_defaults(self):
        """Test the default identity."""
        config = AssistantConfig()
        assert config.identity() == AssistantIdentity(name="AdaGPT", handle="@AdaGPT")

    def test_custom_identity(self):
        """Test a custom name and handle."""
        config = AssistantConfig(name="Helper", handle="@helper-bot")
        assert config.identity().handle == "@helper-bot"

    @pytest.mark.parametrize("handle", ["AdaGPT", "@", ""])
    def test_invalid_handle_rejected(self, handle):
        """Test that handles without @ are rejected."""
        with pytest.raises(ValidationError, match="Handle must start with @"):
            AssistantConfig(handle=handle)


class TestGitHubConfig:
    """Test GitHubConfig validation."""

    def test_valid_github_config(self):
        """Test creating valid GitHub config."""
        config = GitHubConfig(token="ghp_test", repository="octocat/Hello-World")
        assert config.repository == "octocat/Hello-World"
        assert config.api_url == "https://api.github.com"
        assert config.timeout == 30.0

    def test_invalid_repo_name_rejected(self):
        """Test that invalid repository names are rejected."""
        with pytest.raises(ValidationError, match="Invalid repository format"):
            GitHubConfig(token="ghp_test", repository="not-a-repo")

        with pytest.raises(ValidationError, match="Invalid repository format"):
            GitHubConfig(token="ghp_test", repository="../../etc/passwd")

    def test_api_url_trailing_slash_stripped(self):
        """Test the API URL is normalized for GitHub Enterprise hosts."""
        config = GitHubConfig(
            token="ghp_test",
            repository="owner/repo",
            api_url="https://github.example.com/api/v3/",
        )
        assert config.api_url == "https://github.example.com/api/v3"

    def test_invalid_api_url_rejected(self):
        """Test that non-HTTP API URLs are rejected."""
        with pytest.raises(ValidationError, match="Invalid API URL"):
            GitHubConfig(token="ghp_test", repository="owner/repo", api_url="ftp://example.com")


class TestProviderConfigs:
    """Test completion provider configuration."""

    def test_openai_defaults(self):
        """Test default OpenAI configuration values."""
        config = OpenAIConfig(api_key="sk-test")
        assert config.model == "gpt-3.5-turbo"
        assert config.options() == CompletionOptions(temperature=0.8, top_p=None, max_tokens=None)

    def test_openai_sampling_bounds(self):
        """Test that sampling options are bounded."""
        OpenAIConfig(api_key="sk-test", temperature=0.0, top_p=1.0, max_tokens=1)

        with pytest.raises(ValidationError):
            OpenAIConfig(api_key="sk-test", temperature=2.5)
        with pytest.raises(ValidationError):
            OpenAIConfig(api_key="sk-test", top_p=1.5)
        with pytest.raises(ValidationError):
            OpenAIConfig(api_key="sk-test", max_tokens=0)

    def test_anthropic_defaults(self):
        """Test default Anthropic configuration values."""
        config = AnthropicConfig(api_key="sk-ant-test")
        assert config.max_tokens == 4096
        assert config.options().temperature is None

    def test_retry_bounds(self):
        """Test that retry settings are bounded."""
        RetryConfig(max_attempts=1, initial_delay=0.1, max_delay=1.0)

        with pytest.raises(ValidationError):
            RetryConfig(max_attempts=0)
        with pytest.raises(ValidationError):
            RetryConfig(max_attempts=11)


class TestLoadConfig:
    """Test configuration loading from YAML."""

    def test_load_valid_config(self):
        """Test loading a valid configuration file."""
        os.environ["TEST_GITHUB_TOKEN"] = "ghp_test123"
        os.environ["TEST_ANTHROPIC_KEY"] = "sk-ant-test"

        yaml_content = """
github:
  token: ${TEST_GITHUB_TOKEN}
  repository: "octocat/Hello-World"

llm:
  provider: anthropic
  anthropic:
    api_key: ${TEST_ANTHROPIC_KEY}
    model: "claude-3-5-haiku-20241022"

assistant:
  name: Ada
  handle: "@ada"

logging:
  level: DEBUG
  format: json
"""

        with NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write(yaml_content)
            f.flush()

            try:
                config = load_config(Path(f.name))
                assert config.github.token == "ghp_test123"
                assert config.github.repository == "octocat/Hello-World"
                assert config.llm.provider == "anthropic"
                assert config.llm.anthropic.api_key == "sk-ant-test"
                assert config.llm.anthropic.model == "claude-3-5-haiku-20241022"
                assert config.assistant.identity() == AssistantIdentity(name="Ada", handle="@ada")
                assert config.logging.level == "DEBUG"
                assert config.logging.format == "json"
                assert config.retry.max_attempts == 3
            finally:
                Path(f.name).unlink()
                del os.environ["TEST_GITHUB_TOKEN"]
                del os.environ["TEST_ANTHROPIC_KEY"]

    def test_load_config_missing_file(self):
        """Test loading non-existent config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(Path("/nonexistent/config.yaml"))

    def test_load_config_missing_env_var(self, tmp_path):
        """Test loading config with missing environment variable."""
        path = tmp_path / "config.yaml"
        path.write_text("github:\n  token: ${NONEXISTENT_VAR}\n")

        with pytest.raises(ValueError, match="Environment variable NONEXISTENT_VAR not found"):
            load_config(path)

    def test_load_config_schema_error(self, tmp_path):
        """Test schema violations are reported as ConfigurationError."""
        path = tmp_path / "config.yaml"
        path.write_text("github:\n  token: ghp_test\n  repository: bad\nllm:\n  provider: openai\n")

        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(path)

    def test_load_config_missing_provider_section(self, tmp_path):
        """Test cross-field validation runs after loading."""
        path = tmp_path / "config.yaml"
        path.write_text("github:\n  token: ghp_test\n  repository: owner/repo\nllm:\n  provider: openai\n")

        with pytest.raises(ConfigurationError, match="openai config missing"):
            load_config(path)


class TestLoadConfigFromActionEnv:
    """Test configuration from GitHub Actions inputs."""

    def _env(self, **extra):
        env = {
            "INPUT_GITHUB_TOKEN": "ghs_test",
            "INPUT_OPENAI_KEY": "sk-test",
            "GITHUB_REPOSITORY": "octocat/Hello-World",
        }
        env.update(extra)
        return env

    def test_required_inputs(self):
        """Test the minimal set of inputs."""
        config = load_config_from_action_env(self._env())
        assert config.github.token == "ghs_test"
        assert config.github.repository == "octocat/Hello-World"
        assert config.github.api_url == "https://api.github.com"
        assert config.llm.provider == "openai"
        assert config.llm.openai.api_key == "sk-test"
        assert config.llm.openai.temperature == 0.8

    def test_optional_inputs(self):
        """Test sampling options and the model are read when set."""
        env = self._env(
            INPUT_OPENAI_TEMPERATURE="0.2",
            INPUT_OPENAI_TOP_P="0.9",
            INPUT_OPENAI_MAX_TOKENS="512",
            INPUT_OPENAI_MODEL="gpt-4o-mini",
            GITHUB_API_URL="https://github.example.com/api/v3",
        )
        config = load_config_from_action_env(env)
        assert config.llm.openai.options() == CompletionOptions(temperature=0.2, top_p=0.9, max_tokens=512)
        assert config.llm.openai.model == "gpt-4o-mini"
        assert config.github.api_url == "https://github.example.com/api/v3"

    def test_blank_optional_inputs_are_unset(self):
        """Test blank inputs keep the defaults."""
        config = load_config_from_action_env(self._env(INPUT_OPENAI_TOP_P="  ", INPUT_OPENAI_MODEL=""))
        assert config.llm.openai.top_p is None
        assert config.llm.openai.model == "gpt-3.5-turbo"

    @pytest.mark.parametrize("name", ["INPUT_GITHUB_TOKEN", "INPUT_OPENAI_KEY"])
    def test_missing_required_input(self, name):
        """Test a missing required input is a configuration error."""
        env = self._env()
        del env[name]
        with pytest.raises(ConfigurationError, match="Input required and not supplied"):
            load_config_from_action_env(env)

    def test_invalid_number(self):
        """Test a non-numeric sampling input is rejected."""
        with pytest.raises(ConfigurationError, match="openai_temperature"):
            load_config_from_action_env(self._env(INPUT_OPENAI_TEMPERATURE="warm"))

    def test_out_of_range_number(self):
        """Test an out-of-range sampling input is rejected."""
        with pytest.raises(ConfigurationError, match="Invalid action inputs"):
            load_config_from_action_env(self._env(INPUT_OPENAI_TEMPERATURE="3"))

    def test_missing_repository(self):
        """Test the repository must be known."""
        env = self._env()
        del env["GITHUB_REPOSITORY"]
        with pytest.raises(ConfigurationError):
            load_config_from_action_env(env)


class TestValidateConfig:
    """Test cross-field configuration validation."""

    def _github(self):
        return GitHubConfig(token="ghp_test", repository="owner/repo")

    def test_openai_provider_without_openai_config(self):
        """Test that OpenAI provider requires OpenAI config."""
        config = BotConfig(github=self._github(), llm=LLMConfig(provider="openai"))
        with pytest.raises(ConfigurationError, match="OpenAI provider selected"):
            validate_config(config)

    def test_anthropic_provider_without_anthropic_config(self):
        """Test that Anthropic provider requires Anthropic config."""
        config = BotConfig(
            github=self._github(),
            llm=LLMConfig(provider="anthropic", openai=OpenAIConfig(api_key="sk-test")),
        )
        with pytest.raises(ConfigurationError, match="Anthropic provider selected"):
            validate_config(config)

    def test_valid_config_passes(self):
        """Test that valid configuration passes validation."""
        config = BotConfig(
            github=self._github(),
            llm=LLMConfig(provider="openai", openai=OpenAIConfig(api_key="sk-test")),
        )
        validate_config(config)
