"""
LLM factory for provider-agnostic judge creation.

Maps the configured provider name to a concrete LLMProvider and builds its
LLMConfig from the validator configuration. Providers are created without
a health check; a failing judge is handled by the checks themselves.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Type

from response_validator.config.settings import ValidatorConfig
from response_validator.exceptions import ConfigurationError

from .base import LLMConfig, LLMProvider
from .claude_provider import ClaudeProvider
from .openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)


class ProviderType(Enum):
    """Enumeration of supported judge providers."""
    OPENAI = "openai"
    CLAUDE = "claude"


class LLMFactory:
    """Factory for creating judge providers from a ValidatorConfig."""

    PROVIDER_CLASSES: Dict[str, Type[LLMProvider]] = {
        ProviderType.OPENAI.value: OpenAIProvider,
        ProviderType.CLAUDE.value: ClaudeProvider,
    }

    def __init__(self, config: ValidatorConfig):
        self.config = config
        self.configs: Dict[str, LLMConfig] = {}
        self._load_configurations()

    def _load_configurations(self) -> None:
        """Create an LLMConfig for every provider that has a credential."""
        if self.config.openai_api_key:
            self.configs[ProviderType.OPENAI.value] = LLMConfig(
                api_key=self.config.openai_api_key,
                model=self.config.openai_model,
                provider=ProviderType.OPENAI.value,
            )
        if self.config.claude_api_key:
            self.configs[ProviderType.CLAUDE.value] = LLMConfig(
                api_key=self.config.claude_api_key,
                model=self.config.claude_model,
                provider=ProviderType.CLAUDE.value,
            )
        for name, llm_config in self.configs.items():
            logger.info(f"Configured {name} provider with model {llm_config.model}")

    def create_provider(self, provider: Optional[str] = None) -> LLMProvider:
        """
        Create a specific judge provider.

        Args:
            provider: Provider name (openai, claude); defaults to the
                configured provider

        Returns:
            LLMProvider instance

        Raises:
            ConfigurationError: If the provider is unsupported or has no credential
        """
        provider = provider or self.config.provider
        if provider not in self.PROVIDER_CLASSES:
            raise ConfigurationError(f"Unsupported provider: {provider}. "
                                     f"Supported: {list(self.PROVIDER_CLASSES.keys())}")

        provider_config = self.configs.get(provider)
        if not provider_config:
            raise ConfigurationError(f"No API key configured for provider {provider}",
                                     missing=[f"{provider}_api_key"])

        provider_class = self.PROVIDER_CLASSES[provider]
        return provider_class(provider_config)

    def get_available_providers(self) -> List[str]:
        """Providers that have a credential configured."""
        return list(self.configs.keys())


def create_judge(config: ValidatorConfig) -> LLMProvider:
    """Create the judge provider selected by the configuration."""
    return LLMFactory(config).create_provider()
