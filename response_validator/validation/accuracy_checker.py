"""Accuracy check: what fraction of the response the sources can verify."""

import logging
from typing import Any, Dict

from response_validator.llm.prompts import ACCURACY_SYSTEM_PROMPT, build_accuracy_prompt
from response_validator.utils.json_parsing import coerce_bool, coerce_rate
from response_validator.validation.judge_check import JudgeCheck
from response_validator.validation.models import AccuracyResult

logger = logging.getLogger(__name__)

NO_SOURCES_REASON = "no_sources_provided"
FAILURE_REASON_PREFIX = "accuracy_check_failed"


class AccuracyChecker(JudgeCheck[AccuracyResult]):
    """Asks the judge whether the response is verifiable against the sources."""

    check_name = "Accuracy check"
    system_prompt = ACCURACY_SYSTEM_PROMPT

    def build_prompt(self, response: str, source_text: str) -> str:
        return build_accuracy_prompt(response, source_text)

    def from_judge(self, data: Dict[str, Any]) -> AccuracyResult:
        reason = data.get("reason")
        result = AccuracyResult(
            verified=coerce_bool(data.get("verified")),
            verification_rate=coerce_rate(data.get("verification_rate")),
            reason=str(reason) if reason is not None else None,
        )
        logger.info(f"Verified: {result.verified} | Rate: {result.verification_rate}")
        return result

    def no_sources_result(self) -> AccuracyResult:
        return AccuracyResult(verified=False, verification_rate=0.0, reason=NO_SOURCES_REASON)

    def failure_result(self, error: Exception) -> AccuracyResult:
        message = str(error) or type(error).__name__
        return AccuracyResult(
            verified=False,
            verification_rate=0.0,
            reason=f"{FAILURE_REASON_PREFIX}: {message}",
        )
