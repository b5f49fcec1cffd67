"""
Custom exceptions for the response validator.

This module defines the error taxonomy used throughout the validation
pipeline:

- ConfigurationError: fatal, raised at construction time only
- LLMError and subclasses: judge invocation failures, recovered per check
- JudgeParseError: judge output that is not structured data

Only ConfigurationError is ever visible to callers of validate(); every
other failure is turned into a pessimistic result.
"""

from datetime import datetime, timezone
from typing import List, Optional


class ConfigurationError(ValueError):
    """
    Raised when the validator is constructed with an unusable configuration.

    Typical causes are missing credentials for every judge backend, a
    missing credential for the selected backend, or out-of-range
    thresholds.
    """

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        """
        Initialize configuration error.

        Args:
            message: Error message
            missing: Names of the configuration options that were missing
        """
        super().__init__(message)
        self.missing = missing or []
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self):
        base = super().__str__()
        if self.missing:
            return f"{base} | Missing: {', '.join(self.missing)}"
        return base


class LLMError(Exception):
    """Base exception for judge backend errors."""

    def __init__(self, message: str, provider: str, model: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.provider = provider
        self.model = model
        self.error_code = error_code
        self.timestamp = datetime.now(timezone.utc).isoformat()


class RateLimitError(LLMError):
    """Exception raised when rate limit is exceeded."""
    pass


class LLMTimeoutError(LLMError):
    """Exception raised when a judge request times out."""
    pass


class AuthenticationError(LLMError):
    """Exception raised when authentication fails."""
    pass


class ModelNotFoundError(LLMError):
    """Exception raised when specified model is not available."""
    pass


class JudgeParseError(Exception):
    """
    Raised when judge output cannot be parsed as a JSON object.

    Only raised in strict parsing mode; the default parsing path falls
    back to an empty object instead.
    """

    def __init__(self, message: str, raw_content: str):
        """
        Initialize judge parse error.

        Args:
            message: Error message
            raw_content: The unparseable judge output
        """
        super().__init__(message)
        self.raw_content = raw_content
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self):
        preview = self.raw_content[:80]
        return f"{super().__str__()} | Raw: {preview!r}"
