"""
Shared shape of the judge-backed checks.

AccuracyChecker and HallucinationDetector differ only in their prompt, how
they read the judge's JSON, and their fixed pessimistic results. The
control flow lives here:

1. no sources -> fixed pessimistic result, no judge call
2. one judge call with the sources joined by blank lines
3. parse through parse_judge_json (as-is, de-fenced, else {})
4. any exception -> fixed pessimistic failure result, no retry
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, Sequence, TypeVar

from response_validator.config.constants import JUDGE_MAX_TOKENS, JUDGE_TEMPERATURE
from response_validator.exceptions import LLMError
from response_validator.llm.base import LLMProvider
from response_validator.utils.json_parsing import parse_judge_json
from response_validator.validation.models import Source

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")

SOURCE_SEPARATOR = "\n\n"


class JudgeCheck(ABC, Generic[ResultT]):
    """Base class for checks that ask an external judge for a verdict."""

    check_name = "judge_check"
    system_prompt = ""

    def __init__(self, max_tokens: int = JUDGE_MAX_TOKENS, temperature: float = JUDGE_TEMPERATURE):
        self.max_tokens = max_tokens
        self.temperature = temperature

    @abstractmethod
    def build_prompt(self, response: str, source_text: str) -> str:
        """Render the judge prompt."""

    @abstractmethod
    def from_judge(self, data: Dict[str, Any]) -> ResultT:
        """Convert parsed judge JSON into a result; missing fields default to false/0."""

    @abstractmethod
    def no_sources_result(self) -> ResultT:
        """Result used when there is nothing to check against."""

    @abstractmethod
    def failure_result(self, error: Exception) -> ResultT:
        """Result used when the judge call fails."""

    async def check(
        self,
        response: str,
        sources: Sequence[Source],
        judge: Optional[LLMProvider],
        model: Optional[str] = None,
    ) -> ResultT:
        """
        Run the check.

        Args:
            response: Response under review
            sources: Retrieved sources
            judge: Judge provider; None counts as an unavailable backend
            model: Optional model identifier overriding the provider default

        Returns:
            The check result; never raises
        """
        if not sources:
            logger.info(f"{self.check_name}: no sources provided, skipping judge call")
            return self.no_sources_result()

        source_text = SOURCE_SEPARATOR.join(source.content for source in sources)

        try:
            if judge is None:
                raise LLMError("LLM provider not available", "unknown", model or "unknown")

            logger.info(f"{self.check_name} ({judge.provider_name} - {model or judge.model})")

            llm_response = await judge.generate(
                self.build_prompt(response, source_text),
                system_prompt=self.system_prompt,
                model=model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                json_mode=True,
            )
            data = parse_judge_json(llm_response.content)
            return self.from_judge(data)

        except Exception as e:
            logger.error(f"{self.check_name} failed: {e}")
            return self.failure_result(e)
