"""
Configuration Management
========================

Centralized configuration for Switchboard. All environment variables are
read, typed and defaulted here.

Providers are optional: a provider whose API key is missing is simply not
configured, and any call addressed to it fails with a ConfigurationError
instead of failing at startup.

Usage:
    from switchboard.utils.config import load_config

    config = load_config()
    print(config.models.default_work_model)
    print(config.agent.max_iterations)

The configuration is loaded once by the application context
(switchboard.context.AppContext) and passed to the components that need it.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from switchboard.types import ModelProvider, ProviderConfig
from switchboard.utils.logger import Logger

logger = Logger("Config")


def _optional(name: str, default: str | None) -> str | None:
    """Get an optional environment variable with a default."""
    return os.getenv(name) or default


def _optional_int(name: str, default: int, minimum: int | None = None) -> int:
    """Get an optional integer environment variable, at least `minimum` if given."""
    value = os.getenv(name)
    if not value:
        return default
    try:
        number = int(value)
    except ValueError:
        logger.warning(f"{name} is not a valid integer, using default: {default}")
        return default
    if minimum is not None and number < minimum:
        logger.warning(f"{name} must be at least {minimum}, using default: {default}")
        return default
    return number


def _optional_float(name: str, default: float, positive: bool = False) -> float:
    """Get an optional float environment variable."""
    value = os.getenv(name)
    if not value:
        return default
    try:
        number = float(value)
    except ValueError:
        logger.warning(f"{name} is not a valid number, using default: {default}")
        return default
    if positive and not number > 0:
        logger.warning(f"{name} must be greater than 0, using default: {default}")
        return default
    return number


def _optional_bool(name: str, default: bool) -> bool:
    """True if the value is 'true' (case-insensitive)."""
    value = os.getenv(name)
    if not value:
        return default
    return value.lower() == "true"


# ==============================================================================
# Configuration Dataclasses
# ==============================================================================

@dataclass(frozen=True)
class OpenAIConfig:
    """OpenAI API configuration."""
    api_key: str | None     # sk-... API key
    base_url: str | None    # Override for proxies / compatible gateways


@dataclass(frozen=True)
class AnthropicConfig:
    """Anthropic API configuration."""
    api_key: str | None


@dataclass(frozen=True)
class LocalModelsConfig:
    """OpenAI-compatible local servers."""
    lmstudio_enabled: bool
    lmstudio_base_url: str
    ollama_enabled: bool
    ollama_base_url: str


@dataclass(frozen=True)
class ModelsConfig:
    """Default model ids ("provider:name") per task type."""
    default_work_model: str | None
    default_personal_model: str | None


@dataclass(frozen=True)
class AgentSettings:
    """Execution engine limits."""
    max_iterations: int = 10        # Completion requests per task
    history_window: int = 10        # Prior history messages sent with a task
    max_tokens: int = 4096
    temperature: float = 0.7
    provider_timeout: float = 60.0  # Seconds per provider call (per fragment when streaming)
    tool_timeout: float = 30.0      # Seconds per tool call


@dataclass(frozen=True)
class Config:
    """
    Root configuration object.

    Access via:
        config = load_config()
        config.openai.api_key
        config.agent.tool_timeout
    """
    openai: OpenAIConfig
    anthropic: AnthropicConfig
    local: LocalModelsConfig
    models: ModelsConfig
    agent: AgentSettings
    log_level: str

    def provider_configs(self) -> list[ProviderConfig]:
        """
        Build one ProviderConfig per known provider.

        Returns:
            Configs for openai, anthropic, lmstudio and ollama. Cloud
            providers without an API key are marked disabled.
        """
        return [
            ProviderConfig(
                provider=ModelProvider.OPENAI,
                api_key=self.openai.api_key,
                base_url=self.openai.base_url,
                is_enabled=self.openai.api_key is not None,
            ),
            ProviderConfig(
                provider=ModelProvider.ANTHROPIC,
                api_key=self.anthropic.api_key,
                is_enabled=self.anthropic.api_key is not None,
            ),
            ProviderConfig(
                provider=ModelProvider.LMSTUDIO,
                base_url=self.local.lmstudio_base_url,
                is_enabled=self.local.lmstudio_enabled,
            ),
            ProviderConfig(
                provider=ModelProvider.OLLAMA,
                base_url=self.local.ollama_base_url,
                is_enabled=self.local.ollama_enabled,
            ),
        ]

    def configured_model_ids(self) -> list[str]:
        """Default model ids that are set, in work/personal order."""
        return [
            model_id
            for model_id in (self.models.default_work_model, self.models.default_personal_model)
            if model_id
        ]


def load_config() -> Config:
    """
    Load and validate all configuration from environment.

    1. Loads the .env file (searching up the directory tree)
    2. Sets defaults for optional configuration
    3. Returns a fully typed Config object

    Returns:
        Config: The validated configuration
    """
    load_dotenv()

    return Config(
        openai=OpenAIConfig(
            api_key=os.getenv("OPENAI_API_KEY") or None,
            base_url=os.getenv("OPENAI_BASE_URL") or None,
        ),
        anthropic=AnthropicConfig(
            api_key=os.getenv("ANTHROPIC_API_KEY") or None,
        ),
        local=LocalModelsConfig(
            lmstudio_enabled=_optional_bool("LMSTUDIO_ENABLED", False),
            lmstudio_base_url=_optional("LMSTUDIO_BASE_URL", "http://localhost:1234/v1"),
            ollama_enabled=_optional_bool("OLLAMA_ENABLED", False),
            ollama_base_url=_optional("OLLAMA_BASE_URL", "http://localhost:11434/v1"),
        ),
        models=ModelsConfig(
            default_work_model=_optional("DEFAULT_WORK_MODEL", None),
            default_personal_model=_optional("DEFAULT_PERSONAL_MODEL", None),
        ),
        agent=AgentSettings(
            max_iterations=_optional_int("AGENT_MAX_ITERATIONS", 10, minimum=1),
            history_window=_optional_int("AGENT_HISTORY_WINDOW", 10, minimum=0),
            max_tokens=_optional_int("AGENT_MAX_TOKENS", 4096, minimum=1),
            temperature=_optional_float("AGENT_TEMPERATURE", 0.7),
            provider_timeout=_optional_float("PROVIDER_TIMEOUT_SECONDS", 60.0, positive=True),
            tool_timeout=_optional_float("TOOL_TIMEOUT_SECONDS", 30.0, positive=True),
        ),
        log_level=_optional("LOG_LEVEL", "info"),
    )
