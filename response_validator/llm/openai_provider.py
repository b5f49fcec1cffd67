"""
OpenAI judge provider.

Uses the chat completions endpoint with a system + user message pair and,
for judge calls, the enforced JSON output mode.
"""

import asyncio
import json
import logging
import time
from typing import Any, Dict, Optional

import aiohttp

from response_validator.config.constants import DEFAULT_OPENAI_MODEL
from response_validator.exceptions import (
    AuthenticationError,
    LLMError,
    LLMTimeoutError,
    ModelNotFoundError,
    RateLimitError,
)

from .base import LLMConfig, LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """
    OpenAI provider for GPT models.

    Reasoning models (gpt-5, o1, o3) take max_completion_tokens and do not
    accept a custom temperature; every other model gets both max_tokens and
    temperature.
    """

    BASE_URL = "https://api.openai.com/v1"
    DEFAULT_MODEL = DEFAULT_OPENAI_MODEL

    def __init__(self, config: LLMConfig):
        self.session: Optional[aiohttp.ClientSession] = None
        self.base_url = (config.base_url or self.BASE_URL).rstrip("/")
        self.api_key = config.api_key
        super().__init__(config)

    def _validate_config(self) -> None:
        if not self.config.api_key:
            raise ValueError("OpenAI API key is required")
        if not self.config.model:
            self.config.model = self.DEFAULT_MODEL
            self.model = self.DEFAULT_MODEL

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if not self.session or self.session.closed:
            headers = {
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json"
            }
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            self.session = aiohttp.ClientSession(headers=headers, timeout=timeout)
        return self.session

    def _build_payload(self, prompt: str, system_prompt: Optional[str], **kwargs) -> Dict[str, Any]:
        model = kwargs.get("model") or self.config.model
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload: Dict[str, Any] = {
            "model": model,
            "messages": messages,
            "stream": False
        }

        max_tokens_value = kwargs.get("max_tokens", self.config.max_tokens)
        temperature_value = kwargs.get("temperature", self.config.temperature)

        model_lower = model.lower()
        if "gpt-5" in model_lower or model_lower.startswith(("o1", "o3")):
            payload["max_completion_tokens"] = max_tokens_value
        else:
            payload["max_tokens"] = max_tokens_value
            payload["temperature"] = temperature_value

        if kwargs.get("json_mode"):
            payload["response_format"] = {"type": "json_object"}

        return payload

    async def generate(self, prompt: str, system_prompt: Optional[str] = None,
                       **kwargs) -> LLMResponse:
        """Generate a completion using the chat completions API."""
        start_time = time.perf_counter()
        payload = self._build_payload(prompt, system_prompt, **kwargs)
        model = payload["model"]

        try:
            session = await self._get_session()

            async with session.post(f"{self.base_url}/chat/completions", json=payload) as response:
                response_data = await response.json(content_type=None)

                if response.status == 401:
                    raise AuthenticationError("Invalid OpenAI API key", "openai", model)
                elif response.status == 404:
                    raise ModelNotFoundError(f"Model {model} not found", "openai", model)
                elif response.status == 429:
                    raise RateLimitError("OpenAI rate limit exceeded", "openai", model)
                elif response.status != 200:
                    error_msg = (response_data or {}).get("error", {}).get("message", "Unknown error")
                    raise LLMError(f"OpenAI API error: {error_msg}", "openai", model,
                                   error_code=str(response.status))

                choice = response_data["choices"][0]
                content = choice["message"].get("content") or "{}"
                usage = response_data.get("usage", {})

                return LLMResponse(
                    content=content,
                    model=model,
                    provider="openai",
                    tokens_used=usage.get("total_tokens", 0),
                    response_time_ms=(time.perf_counter() - start_time) * 1000,
                    finish_reason=choice.get("finish_reason") or "",
                    metadata={
                        "prompt_tokens": usage.get("prompt_tokens", 0),
                        "completion_tokens": usage.get("completion_tokens", 0),
                        "request_id": response.headers.get("x-request-id", ""),
                    }
                )

        except asyncio.TimeoutError as e:
            raise LLMTimeoutError(f"OpenAI request timed out after {self.config.timeout}s",
                                  "openai", model) from e
        except aiohttp.ClientError as e:
            raise LLMError(f"Network error: {e}", "openai", model) from e
        except json.JSONDecodeError as e:
            raise LLMError(f"Invalid JSON response: {e}", "openai", model) from e
        except LLMError:
            raise
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise LLMError(f"Unexpected response format: {e}", "openai", model) from e

    async def close(self):
        """Close the HTTP session."""
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None
