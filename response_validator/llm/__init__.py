"""
Judge LLM integration for the response validator.

Provides a provider-agnostic judge interface with OpenAI and Claude
backends, selected through ValidatorConfig.provider.
"""

from .base import LLMConfig, LLMProvider, LLMResponse
from .claude_provider import ClaudeProvider
from .factory import LLMFactory, ProviderType, create_judge
from .openai_provider import OpenAIProvider

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "LLMConfig",
    "OpenAIProvider",
    "ClaudeProvider",
    "LLMFactory",
    "ProviderType",
    "create_judge",
]
