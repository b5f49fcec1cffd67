"""Hallucination check: risk that the response adds unsupported content."""

import logging
from typing import Any, Dict

from response_validator.config.constants import PESSIMISTIC_DEFAULTS
from response_validator.llm.prompts import HALLUCINATION_SYSTEM_PROMPT, build_hallucination_prompt
from response_validator.utils.json_parsing import coerce_bool, coerce_rate, coerce_str_list
from response_validator.validation.judge_check import JudgeCheck
from response_validator.validation.models import HallucinationResult

logger = logging.getLogger(__name__)

NO_SOURCES_PART = "entire_response"
FAILED_CHECK_PART = "hallucination_check_failed"


class HallucinationDetector(JudgeCheck[HallucinationResult]):
    """Asks the judge whether the response strays from the sources."""

    check_name = "Hallucination detection"
    system_prompt = HALLUCINATION_SYSTEM_PROMPT

    def build_prompt(self, response: str, source_text: str) -> str:
        return build_hallucination_prompt(response, source_text)

    def from_judge(self, data: Dict[str, Any]) -> HallucinationResult:
        result = HallucinationResult(
            detected=coerce_bool(data.get("detected")),
            risk=coerce_rate(data.get("risk")),
            hallucinated_parts=coerce_str_list(data.get("hallucinated_parts")),
        )
        logger.info(f"Detected: {result.detected} | Risk: {result.risk}")
        return result

    def no_sources_result(self) -> HallucinationResult:
        return HallucinationResult(
            detected=True,
            risk=PESSIMISTIC_DEFAULTS.NO_SOURCES_HALLUCINATION_RISK,
            hallucinated_parts=[NO_SOURCES_PART],
        )

    def failure_result(self, error: Exception) -> HallucinationResult:
        return HallucinationResult(
            detected=True,
            risk=PESSIMISTIC_DEFAULTS.FAILED_CHECK_HALLUCINATION_RISK,
            hallucinated_parts=[FAILED_CHECK_PART],
        )
