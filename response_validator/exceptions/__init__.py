"""Exception classes for the response validator."""

from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    JudgeParseError,
    LLMError,
    LLMTimeoutError,
    ModelNotFoundError,
    RateLimitError,
)

__all__ = [
    "ConfigurationError",
    "LLMError",
    "RateLimitError",
    "LLMTimeoutError",
    "AuthenticationError",
    "ModelNotFoundError",
    "JudgeParseError",
]
