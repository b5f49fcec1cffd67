"""
Abstract base class for judge LLM providers.

This module defines the judge capability consumed by the accuracy and
hallucination checks: given a prompt (and optional system instruction),
return the model's raw text. Concrete backends exist per vendor and are
selected by configuration, so the checks never branch on the vendor.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from response_validator.config.constants import JUDGE_MAX_TOKENS, JUDGE_TEMPERATURE

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """
    Structured response from LLM providers.
    """
    content: str
    model: str
    provider: str
    tokens_used: int = 0
    response_time_ms: float = 0.0
    finish_reason: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class LLMConfig:
    """
    Configuration for LLM providers.

    Judge calls are deterministic and short: temperature 0 and a 500 token
    output cap by default. timeout bounds a single request in seconds.
    """
    api_key: str
    model: str

    provider: Optional[str] = None
    base_url: Optional[str] = None
    max_tokens: int = JUDGE_MAX_TOKENS
    temperature: float = JUDGE_TEMPERATURE
    timeout: int = 30
    metadata: Dict[str, Any] = field(default_factory=dict)


class LLMProvider(ABC):
    """
    Abstract base class for all judge providers.

    Providers perform exactly one request per generate() call and never
    retry; a failed call raises an LLMError subclass.
    """

    def __init__(self, config: LLMConfig):
        """
        Initialize the LLM provider.

        Args:
            config: LLM configuration including API key and model settings
        """
        self.config = config
        self.provider_name = config.provider or "unknown"
        self.model = config.model
        self._validate_config()

    @abstractmethod
    def _validate_config(self) -> None:
        """
        Validate provider-specific configuration.

        Raises:
            ValueError: If configuration is invalid
        """

    @abstractmethod
    async def generate(self, prompt: str, system_prompt: Optional[str] = None,
                       **kwargs) -> LLMResponse:
        """
        Generate a response from the LLM.

        Args:
            prompt: User prompt
            system_prompt: Optional system instruction
            **kwargs: model, temperature, max_tokens, json_mode

        Returns:
            LLMResponse with generated content and metadata

        Raises:
            LLMError: If generation fails
        """

    async def close(self):
        """Close any open connections (optional, override if needed)."""
        pass
