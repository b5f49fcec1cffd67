"""
Claude judge provider.

Uses the Anthropic messages endpoint: a top-level system instruction and a
single user message. The judge text is taken from the first content block
whose type is "text".
"""

import asyncio
import json
import logging
import time
from typing import Any, Dict, List, Optional

import aiohttp

from response_validator.config.constants import DEFAULT_CLAUDE_MODEL
from response_validator.exceptions import (
    AuthenticationError,
    LLMError,
    LLMTimeoutError,
    ModelNotFoundError,
    RateLimitError,
)

from .base import LLMConfig, LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class ClaudeProvider(LLMProvider):
    """Anthropic provider for Claude models."""

    BASE_URL = "https://api.anthropic.com/v1"
    API_VERSION = "2023-06-01"
    DEFAULT_MODEL = DEFAULT_CLAUDE_MODEL

    def __init__(self, config: LLMConfig):
        self.session: Optional[aiohttp.ClientSession] = None
        self.base_url = (config.base_url or self.BASE_URL).rstrip("/")
        self.api_key = config.api_key
        super().__init__(config)

    def _validate_config(self) -> None:
        if not self.config.api_key:
            raise ValueError("Claude API key is required")
        if not self.config.model:
            self.config.model = self.DEFAULT_MODEL
            self.model = self.DEFAULT_MODEL

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if not self.session or self.session.closed:
            headers = {
                "x-api-key": self.api_key,
                "anthropic-version": self.API_VERSION,
                "content-type": "application/json"
            }
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            self.session = aiohttp.ClientSession(headers=headers, timeout=timeout)
        return self.session

    @staticmethod
    def _extract_text(blocks: List[Dict[str, Any]]) -> str:
        for block in blocks or []:
            if isinstance(block, dict) and block.get("type") == "text":
                return block.get("text") or "{}"
        return "{}"

    async def generate(self, prompt: str, system_prompt: Optional[str] = None,
                       **kwargs) -> LLMResponse:
        """Generate a completion using the messages API."""
        start_time = time.perf_counter()
        model = kwargs.get("model") or self.config.model

        # json_mode has no request-side switch here; the system prompt asks for JSON
        payload: Dict[str, Any] = {
            "model": model,
            "max_tokens": kwargs.get("max_tokens", self.config.max_tokens),
            "temperature": kwargs.get("temperature", self.config.temperature),
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            payload["system"] = system_prompt

        try:
            session = await self._get_session()

            async with session.post(f"{self.base_url}/messages", json=payload) as response:
                response_data = await response.json(content_type=None)

                if response.status == 401:
                    raise AuthenticationError("Invalid Claude API key", "claude", model)
                elif response.status == 404:
                    raise ModelNotFoundError(f"Model {model} not found", "claude", model)
                elif response.status == 429:
                    raise RateLimitError("Claude rate limit exceeded", "claude", model)
                elif response.status != 200:
                    error_msg = (response_data or {}).get("error", {}).get("message", "Unknown error")
                    raise LLMError(f"Claude API error: {error_msg}", "claude", model,
                                   error_code=str(response.status))

                usage = response_data.get("usage", {})
                input_tokens = usage.get("input_tokens", 0)
                output_tokens = usage.get("output_tokens", 0)

                return LLMResponse(
                    content=self._extract_text(response_data.get("content")),
                    model=model,
                    provider="claude",
                    tokens_used=input_tokens + output_tokens,
                    response_time_ms=(time.perf_counter() - start_time) * 1000,
                    finish_reason=response_data.get("stop_reason") or "",
                    metadata={
                        "prompt_tokens": input_tokens,
                        "completion_tokens": output_tokens,
                        "request_id": response.headers.get("request-id", ""),
                    }
                )

        except asyncio.TimeoutError as e:
            raise LLMTimeoutError(f"Claude request timed out after {self.config.timeout}s",
                                  "claude", model) from e
        except aiohttp.ClientError as e:
            raise LLMError(f"Network error: {e}", "claude", model) from e
        except json.JSONDecodeError as e:
            raise LLMError(f"Invalid JSON response: {e}", "claude", model) from e
        except LLMError:
            raise
        except (KeyError, TypeError, AttributeError) as e:
            raise LLMError(f"Unexpected response format: {e}", "claude", model) from e

    async def close(self):
        """Close the HTTP session."""
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None
