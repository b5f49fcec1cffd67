"""
Validator configuration.

ValidatorConfig collects every option the validation pipeline recognises:
the pass/fail threshold, per-stage toggles, the judge backend selection,
per-backend model identifiers and credentials, and the scoring weights and
thresholds. Values can be passed directly or loaded from the environment
(optionally through a .env file).
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from response_validator.config.constants import (
    DEFAULT_CLAUDE_MODEL,
    DEFAULT_OPENAI_MODEL,
    ScoringThresholds,
    ScoringWeights,
)
from response_validator.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("openai", "claude")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {value!r}")


@dataclass
class ValidatorConfig:
    """
    Configuration for ResponseValidator.

    Credentials and model identifiers are opaque strings passed through to
    the judge backend.

    llm_provider and confidence_threshold stay None unless the caller sets
    them. The effective values are resolved on read (provider,
    pass_threshold) so that a copy made with dataclasses.replace picks up
    changed credentials or thresholds.
    """

    confidence_threshold: Optional[float] = None
    enable_query_classification: bool = True
    enable_accuracy_check: bool = True
    enable_hallucination_detection: bool = True
    llm_provider: Optional[str] = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    claude_model: str = DEFAULT_CLAUDE_MODEL
    openai_api_key: Optional[str] = None
    claude_api_key: Optional[str] = None
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    thresholds: ScoringThresholds = field(default_factory=ScoringThresholds)

    def __post_init__(self):
        if self.llm_provider:
            self.llm_provider = self.llm_provider.strip().lower()
        else:
            self.llm_provider = None

    @property
    def provider(self) -> str:
        """Selected provider; OpenAI wins when both credentials are present."""
        if self.llm_provider:
            return self.llm_provider
        return "openai" if self.openai_api_key else "claude"

    @property
    def pass_threshold(self) -> float:
        """Minimum confidence for a valid response."""
        if self.confidence_threshold is None:
            return self.thresholds.DEFAULT_CONFIDENCE_THRESHOLD
        return self.confidence_threshold

    @property
    def model(self) -> str:
        """Model identifier for the selected provider."""
        if self.provider == "openai":
            return self.openai_model or DEFAULT_OPENAI_MODEL
        return self.claude_model or DEFAULT_CLAUDE_MODEL

    @property
    def api_key(self) -> Optional[str]:
        """Credential for the selected provider."""
        if self.provider == "openai":
            return self.openai_api_key
        return self.claude_api_key

    def validate(self) -> None:
        """
        Validate the configuration.

        Raises:
            ConfigurationError: If no credential is supplied, the selected
                provider is unknown or lacks its credential, or the
                confidence threshold lies outside [0,1]
        """
        if not self.openai_api_key and not self.claude_api_key:
            raise ConfigurationError(
                "At least one API key (OpenAI or Claude) must be provided",
                missing=["openai_api_key", "claude_api_key"],
            )

        provider = self.provider
        if provider not in SUPPORTED_PROVIDERS:
            raise ConfigurationError(
                f"Unsupported LLM provider: {provider}. "
                f"Supported: {list(SUPPORTED_PROVIDERS)}"
            )

        if provider == "openai" and not self.openai_api_key:
            raise ConfigurationError(
                "OpenAI API key is required when using OpenAI provider",
                missing=["openai_api_key"],
            )

        if provider == "claude" and not self.claude_api_key:
            raise ConfigurationError(
                "Claude API key is required when using Claude provider",
                missing=["claude_api_key"],
            )

        if not 0 <= self.pass_threshold <= 1:
            raise ConfigurationError(
                f"confidence_threshold must be in [0,1], got {self.pass_threshold}"
            )

    def configured_providers(self) -> List[str]:
        """Providers that have a credential."""
        providers = []
        if self.openai_api_key:
            providers.append("openai")
        if self.claude_api_key:
            providers.append("claude")
        return providers

    @classmethod
    def from_env(cls, env_file: Optional[str] = ".env", **overrides) -> "ValidatorConfig":
        """
        Build a configuration from environment variables.

        Args:
            env_file: Path to a .env file loaded first if it exists
            **overrides: Explicit values that win over the environment

        Returns:
            ValidatorConfig populated from the environment

        Raises:
            ConfigurationError: If VALIDATOR_CONFIDENCE_THRESHOLD is not a number
        """
        if env_file and os.path.exists(env_file):
            load_dotenv(env_file)
            logger.info(f"Loaded environment variables from {env_file}")

        values = {
            "confidence_threshold": _env_float("VALIDATOR_CONFIDENCE_THRESHOLD"),
            "enable_query_classification": _env_bool("VALIDATOR_ENABLE_QUERY_CLASSIFICATION", True),
            "enable_accuracy_check": _env_bool("VALIDATOR_ENABLE_ACCURACY_CHECK", True),
            "enable_hallucination_detection": _env_bool("VALIDATOR_ENABLE_HALLUCINATION_DETECTION", True),
            "llm_provider": os.getenv("LLM_PROVIDER"),
            "openai_model": os.getenv("OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
            "claude_model": os.getenv("CLAUDE_MODEL", DEFAULT_CLAUDE_MODEL),
            "openai_api_key": os.getenv("OPENAI_API_KEY"),
            "claude_api_key": os.getenv("CLAUDE_API_KEY") or os.getenv("ANTHROPIC_API_KEY"),
        }
        values.update(overrides)
        return cls(**values)
