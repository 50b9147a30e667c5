"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.

Grouped views (``settings.environment``, ``settings.agent_loop``,
``settings.reasoning_model``) are built from the flat, aliased fields so every
value keeps a single environment variable name.
"""

from typing import Optional

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class EnvironmentConfig(BaseModel):
    """Connection parameters handed to the environment session factory."""

    host: str = Field(default="localhost", alias="MINEBOT_HOST", description="Environment server host")
    port: int = Field(default=25565, alias="MINEBOT_PORT", description="Environment server port")
    username: str = Field(default="Claude", alias="MINEBOT_USERNAME", description="Identity the bot joins with")
    auth: str = Field(default="offline", alias="MINEBOT_AUTH", description="Authentication mode (offline, microsoft)")
    session_factory: Optional[str] = Field(
        default=None,
        alias="MINEBOT_SESSION_FACTORY",
        description="Import path ('module:callable') of the environment session factory",
    )

    model_config = {"populate_by_name": True}


class AgentLoopConfig(BaseModel):
    """Agent control loop and tracking loop parameters."""

    operator: str = Field(default="eepyalex", alias="MINEBOT_OPERATOR", description="The only identity allowed to command the bot")
    command_prefix: str = Field(default="@claude", alias="MINEBOT_COMMAND_PREFIX", description="Chat prefix that triggers the agent")
    step_budget: int = Field(default=10, ge=1, alias="MINEBOT_STEP_BUDGET", description="Maximum reasoning steps per command")
    engine_timeout: float = Field(
        default=60.0,
        ge=0,
        alias="MINEBOT_ENGINE_TIMEOUT",
        description="Wall-clock timeout in seconds for one reasoning engine call (0 disables it)",
    )
    max_chat_length: int = Field(default=256, ge=4, alias="MINEBOT_MAX_CHAT_LENGTH", description="Maximum chat message length")
    tracking_interval: float = Field(
        default=0.05, gt=0, alias="MINEBOT_TRACKING_INTERVAL", description="Seconds between target tracking ticks"
    )

    model_config = {"populate_by_name": True}


class ReasoningModelConfig(BaseModel):
    """Reasoning engine model configuration."""

    provider: str = Field(default="openrouter", alias="MINEBOT_MODEL_PROVIDER", description="openrouter, openai or anthropic")
    model: str = Field(default="anthropic/claude-sonnet-4", alias="MINEBOT_MODEL", description="Model identifier")
    openrouter_api_key: Optional[SecretStr] = Field(
        default=None, alias="OPENROUTER_API_KEY", description="OpenRouter API key for authentication"
    )
    openai_api_key: Optional[SecretStr] = Field(
        default=None, alias="OPENAI_API_KEY", description="OpenAI API key for authentication"
    )
    openai_base_url: Optional[str] = Field(
        default=None, alias="OPENAI_BASE_URL", description="Custom OpenAI API base URL (optional)"
    )
    anthropic_api_key: Optional[SecretStr] = Field(
        default=None, alias="ANTHROPIC_API_KEY", description="Anthropic API key for authentication"
    )
    temperature: Optional[float] = Field(default=None, ge=0, le=2, alias="MINEBOT_TEMPERATURE")
    max_tokens: Optional[int] = Field(default=None, ge=1, alias="MINEBOT_MAX_TOKENS")

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
        protected_namespaces=(),
    )

    # =====================================================================
    # Environment Connection
    # =====================================================================
    host: str = Field(default="localhost", alias="MINEBOT_HOST")
    port: int = Field(default=25565, alias="MINEBOT_PORT")
    username: str = Field(default="Claude", alias="MINEBOT_USERNAME")
    auth: str = Field(default="offline", alias="MINEBOT_AUTH")
    session_factory: Optional[str] = Field(default=None, alias="MINEBOT_SESSION_FACTORY")

    # =====================================================================
    # Agent Loop
    # =====================================================================
    operator: str = Field(default="eepyalex", alias="MINEBOT_OPERATOR")
    command_prefix: str = Field(default="@claude", alias="MINEBOT_COMMAND_PREFIX")
    step_budget: int = Field(default=10, ge=1, alias="MINEBOT_STEP_BUDGET")
    engine_timeout: float = Field(default=60.0, ge=0, alias="MINEBOT_ENGINE_TIMEOUT")
    max_chat_length: int = Field(default=256, ge=4, alias="MINEBOT_MAX_CHAT_LENGTH")
    tracking_interval: float = Field(default=0.05, gt=0, alias="MINEBOT_TRACKING_INTERVAL")

    # =====================================================================
    # Reasoning Model
    # =====================================================================
    model_provider: str = Field(default="openrouter", alias="MINEBOT_MODEL_PROVIDER")
    model: str = Field(default="anthropic/claude-sonnet-4", alias="MINEBOT_MODEL")
    openrouter_api_key: Optional[SecretStr] = Field(default=None, alias="OPENROUTER_API_KEY")
    openai_api_key: Optional[SecretStr] = Field(default=None, alias="OPENAI_API_KEY")
    openai_base_url: Optional[str] = Field(default=None, alias="OPENAI_BASE_URL")
    anthropic_api_key: Optional[SecretStr] = Field(default=None, alias="ANTHROPIC_API_KEY")
    temperature: Optional[float] = Field(default=None, ge=0, le=2, alias="MINEBOT_TEMPERATURE")
    max_tokens: Optional[int] = Field(default=None, ge=1, alias="MINEBOT_MAX_TOKENS")

    # =====================================================================
    # Logging
    # =====================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="MINEBOT_LOG_LEVEL",
    )
    log_format: str = Field(default="detailed", description="simple, detailed or json", alias="MINEBOT_LOG_FORMAT")
    log_file_dir: str = Field(default="logs", alias="MINEBOT_LOG_FILE_DIR")
    enable_file_logging: bool = Field(default=False, alias="MINEBOT_ENABLE_FILE_LOGGING")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def environment(self) -> EnvironmentConfig:
        """Get environment connection configuration."""
        return EnvironmentConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def agent_loop(self) -> AgentLoopConfig:
        """Get agent loop configuration."""
        return AgentLoopConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def reasoning_model(self) -> ReasoningModelConfig:
        """Get reasoning model configuration."""
        return ReasoningModelConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
