# tests/conftest.py
import asyncio
import json
from typing import List, Optional

import pytest

from response_validator.llm.base import LLMConfig, LLMProvider, LLMResponse
from response_validator.utils.trace import PipelineTracer
from response_validator.validation.models import Source


class FakeJudge(LLMProvider):
    """Judge double returning canned replies and recording every call."""

    def __init__(self, replies: Optional[List[str]] = None, error: Optional[Exception] = None):
        super().__init__(LLMConfig(api_key="test-key", model="fake-model", provider="fake"))
        self.replies = list(replies or [])
        self.error = error
        self.calls = []
        self.closed = False

    def _validate_config(self) -> None:
        pass

    async def generate(self, prompt, system_prompt=None, **kwargs):
        self.calls.append({"prompt": prompt, "system_prompt": system_prompt, **kwargs})
        if self.error is not None:
            raise self.error
        content = self.replies.pop(0) if self.replies else "{}"
        return LLMResponse(content=content, model=kwargs.get("model") or self.model, provider="fake")

    async def close(self):
        self.closed = True

    @property
    def call_count(self) -> int:
        return len(self.calls)


class RoutingJudge(FakeJudge):
    """Judge double that answers by which check is asking."""

    def __init__(self, accuracy: dict, hallucination: dict):
        super().__init__()
        self.accuracy = accuracy
        self.hallucination = hallucination

    async def generate(self, prompt, system_prompt=None, **kwargs):
        self.calls.append({"prompt": prompt, "system_prompt": system_prompt, **kwargs})
        if "hallucination detector" in (system_prompt or ""):
            return LLMResponse(content=json.dumps(self.hallucination), model=self.model, provider="fake")
        return LLMResponse(content=json.dumps(self.accuracy), model=self.model, provider="fake")


class SlowJudge(RoutingJudge):
    """Routing judge that holds every call open for `delay` seconds."""

    def __init__(self, accuracy: dict, hallucination: dict, delay: float = 0.05):
        super().__init__(accuracy, hallucination)
        self.delay = delay
        self.in_flight = 0
        self.peak_in_flight = 0
        self.cancelled = 0

    async def generate(self, prompt, system_prompt=None, **kwargs):
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        finally:
            self.in_flight -= 1
        return await super().generate(prompt, system_prompt, **kwargs)


@pytest.fixture
def water_sources():
    return [
        Source(
            content="Water boils at 100 degrees Celsius at sea level. "
                    "At higher altitudes the boiling point of water decreases "
                    "because atmospheric pressure is lower.",
            title="Boiling point of water",
        )
    ]


@pytest.fixture
def tracer():
    return PipelineTracer(max_traces=50)


@pytest.fixture
def make_judge():
    return FakeJudge


@pytest.fixture
def make_routing_judge():
    return RoutingJudge


@pytest.fixture
def make_slow_judge():
    return SlowJudge
