"""Model provider for the reasoning engine.

Creates the Pydantic AI model described by ``ReasoningModelConfig``. OpenRouter
is the default provider; it speaks the OpenAI chat completions protocol, so it
shares the OpenAI chat model class with a dedicated provider.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import SecretStr
from pydantic_ai.models import Model
from pydantic_ai.settings import ModelSettings

from minebot.core.config import ReasoningModelConfig
from minebot.core.logging_config import get_logger

from ..errors import ConfigurationError

logger = get_logger(__name__)


def get_supported_providers() -> List[str]:
    """Get list of supported providers."""
    return ["openrouter", "openai", "anthropic"]


def _require_key(secret: Optional[SecretStr], env_name: str) -> str:
    api_key: Optional[str] = secret.get_secret_value() if secret else None
    if not api_key:
        raise ConfigurationError(f"{env_name} environment variable is not set")
    return api_key


def create_model(config: ReasoningModelConfig) -> Model:
    """Create the Pydantic AI model for the configured provider.

    Raises:
        ConfigurationError: If the provider is unsupported or its API key is missing
    """
    provider = config.provider.lower()

    if provider == "openrouter":
        from pydantic_ai.models.openai import OpenAIChatModel
        from pydantic_ai.providers.openrouter import OpenRouterProvider

        api_key = _require_key(config.openrouter_api_key, "OPENROUTER_API_KEY")
        logger.debug(f"Creating OpenRouter model: {config.model}")
        return OpenAIChatModel(config.model, provider=OpenRouterProvider(api_key=api_key))

    if provider == "openai":
        from pydantic_ai.models.openai import OpenAIChatModel
        from pydantic_ai.providers.openai import OpenAIProvider

        api_key = _require_key(config.openai_api_key, "OPENAI_API_KEY")
        logger.debug(f"Creating OpenAI model: {config.model}")
        return OpenAIChatModel(config.model, provider=OpenAIProvider(api_key=api_key, base_url=config.openai_base_url))

    if provider == "anthropic":
        from pydantic_ai.models.anthropic import AnthropicModel
        from pydantic_ai.providers.anthropic import AnthropicProvider

        api_key = _require_key(config.anthropic_api_key, "ANTHROPIC_API_KEY")
        logger.debug(f"Creating Anthropic model: {config.model}")
        return AnthropicModel(config.model, provider=AnthropicProvider(api_key=api_key))

    raise ConfigurationError(
        f"Unsupported model provider: {config.provider} (expected one of {', '.join(get_supported_providers())})"
    )


def create_model_settings(config: ReasoningModelConfig) -> Optional[ModelSettings]:
    """Build model settings from the optional sampling parameters."""
    settings = ModelSettings()
    if config.temperature is not None:
        settings["temperature"] = config.temperature
    if config.max_tokens is not None:
        settings["max_tokens"] = config.max_tokens
    return settings or None
