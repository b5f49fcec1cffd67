"""
Response Validator - top-level validation pipeline.

Sequencing for one validate() call:

1. classify the query; conversational filler short-circuits as valid
2. run accuracy, context relevance and hallucination checks concurrently
3. score the three results plus source quality
4. valid = score >= pass threshold
5. collect warnings

Failures inside a check are absorbed by that check. Any other failure
returns a single pessimistic result. Only configuration errors raised
by the constructor ever reach the caller.
"""

import asyncio
import dataclasses
import logging
from typing import Any, Awaitable, List, Mapping, Optional, Sequence, Union

from response_validator.config.constants import PESSIMISTIC_DEFAULTS
from response_validator.config.settings import ValidatorConfig
from response_validator.llm.base import LLMProvider
from response_validator.llm.factory import create_judge
from response_validator.routing.query_classifier import QueryClassifier
from response_validator.safety.context_relevance import ContextRelevanceEstimator
from response_validator.utils.trace import PipelineTracer, get_tracer
from response_validator.validation.accuracy_checker import AccuracyChecker
from response_validator.validation.confidence_scorer import ConfidenceScorer
from response_validator.validation.hallucination_detector import HallucinationDetector
from response_validator.validation.models import (
    AccuracyResult,
    ContextResult,
    HallucinationResult,
    QueryClassificationResult,
    Source,
    ValidationInput,
    ValidationResult,
)

logger = logging.getLogger(__name__)

MODULE = "response_validator"

WARNING_NO_SOURCES = "No sources provided - high hallucination risk"
WARNING_LOW_ACCURACY = "Low accuracy verification rate"
WARNING_LOW_RELEVANCE = "Low context relevance"
WARNING_HIGH_RISK = "High hallucination risk detected"
WARNING_HALLUCINATION = "Hallucination detected in response"

ValidationRequest = Union[ValidationInput, Mapping[str, Any]]


class ResponseValidator:
    """
    Validates AI responses against their retrieved sources.

    The validator holds only configuration fixed at construction, so one
    instance can run many validate() calls concurrently.
    """

    def __init__(
        self,
        config: Optional[ValidatorConfig] = None,
        judge: Optional[LLMProvider] = None,
        tracer: Optional[PipelineTracer] = None,
        **options: Any,
    ):
        """
        Initialize the validator.

        Args:
            config: Validator configuration; built from options if omitted
            judge: Judge provider; created from the configuration if omitted
            tracer: Observability hook; defaults to the shared tracer
            **options: ValidatorConfig fields overriding config

        Raises:
            ConfigurationError: If credentials are missing or invalid
        """
        if config is None:
            config = ValidatorConfig(**options)
        elif options:
            config = dataclasses.replace(config, **options)

        config.validate()
        self.config = config

        self.tracer = tracer or get_tracer()
        self.judge = judge or create_judge(config)

        self.query_classifier = QueryClassifier()
        self.accuracy_checker = AccuracyChecker()
        self.hallucination_detector = HallucinationDetector()
        self.context_estimator = ContextRelevanceEstimator(config.thresholds.CONTEXT_RELEVANCE)
        self.confidence_scorer = ConfidenceScorer(config.weights, config.thresholds)

        logger.info(
            f"ResponseValidator initialized with provider={config.provider}, "
            f"model={self.get_model()}, threshold={config.pass_threshold}"
        )

    def get_model(self) -> str:
        """Model identifier for the selected provider."""
        return self.config.model

    async def validate(self, request: ValidationRequest) -> ValidationResult:
        """
        Validate a response against its sources.

        Args:
            request: ValidationInput, or a mapping with query, response, sources

        Returns:
            ValidationResult; never raises
        """
        trace_id = None
        try:
            trace_id = self.tracer.start_trace()
            validation_input = (
                request if isinstance(request, ValidationInput)
                else ValidationInput.from_dict(request)
            )
            sources = list(validation_input.sources)

            self.tracer.trace_info(trace_id, MODULE, "validate",
                                   query_length=len(validation_input.query),
                                   response_length=len(validation_input.response),
                                   source_count=len(sources))

            # Step 1: Query classification
            if self.config.enable_query_classification:
                classification = self.query_classifier.classify(validation_input.query)
                self.tracer.trace_info(trace_id, MODULE, "classify",
                                       query_type=classification.type.value,
                                       confidence=classification.confidence,
                                       skip_validation=classification.skip_validation)

                if classification.skip_validation:
                    logger.info(f"Skipping validation for {classification.type.value} query")
                    self.tracer.trace_info(trace_id, MODULE, "skip_validation",
                                           query_type=classification.type.value)
                    return self.skip_result(classification, trace_id)

            # Step 2: Run checks concurrently
            accuracy, context, hallucination = await self._gather_checks(
                self._run_accuracy(validation_input.response, sources),
                self._run_context(validation_input.query, validation_input.response, sources),
                self._run_hallucination(validation_input.response, sources),
            )
            self.tracer.trace_info(trace_id, MODULE, "checks_complete",
                                   verification_rate=accuracy.verification_rate,
                                   source_relevance=context.source_relevance,
                                   hallucination_risk=hallucination.risk)

            # Step 3: Confidence
            confidence = self.confidence_scorer.score(accuracy, context, hallucination, sources)

            # Step 4: Pass/fail
            valid = confidence.confidence_score >= self.config.pass_threshold

            # Step 5: Warnings
            warnings = self.generate_warnings(accuracy, context, hallucination, sources)

            self.tracer.trace_info(trace_id, MODULE, "scored",
                                   confidence=confidence.confidence_score,
                                   level=confidence.level.value,
                                   valid=valid,
                                   warning_count=len(warnings))

            return ValidationResult(
                confidence=confidence.confidence_score,
                valid=valid,
                accuracy=accuracy,
                context=context,
                hallucination=hallucination,
                warnings=warnings,
                confidence_details=confidence,
                trace_id=trace_id,
            )

        except Exception as e:
            logger.error(f"Response validation error: {e}", exc_info=True)
            if trace_id:
                try:
                    self.tracer.trace_error(trace_id, MODULE, "validate", e)
                except Exception as trace_exc:
                    logger.warning(f"Could not record validation error in trace: {trace_exc}")
            return self.error_result(e, trace_id)

    async def validate_batch(self, requests: Sequence[ValidationRequest]) -> List[ValidationResult]:
        """Validate several inputs concurrently; results keep input order."""
        return list(await asyncio.gather(*(self.validate(request) for request in requests)))

    @staticmethod
    async def _gather_checks(*checks: Awaitable[Any]) -> List[Any]:
        """Await every check; if one raises, cancel the rest and collect them."""
        tasks = [asyncio.ensure_future(check) for check in checks]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _run_accuracy(self, response: str, sources: List[Source]) -> AccuracyResult:
        if not self.config.enable_accuracy_check:
            return AccuracyResult(verified=True, verification_rate=1.0)
        return await self.accuracy_checker.check(response, sources, self.judge, self.get_model())

    async def _run_hallucination(self, response: str, sources: List[Source]) -> HallucinationResult:
        if not self.config.enable_hallucination_detection:
            return HallucinationResult(detected=False, risk=0.0)
        return await self.hallucination_detector.check(response, sources, self.judge, self.get_model())

    async def _run_context(self, query: str, response: str, sources: List[Source]) -> ContextResult:
        return self.context_estimator.estimate(query, response, sources)

    def generate_warnings(
        self,
        accuracy: AccuracyResult,
        context: ContextResult,
        hallucination: HallucinationResult,
        sources: Sequence[Source],
    ) -> List[str]:
        """Every applicable warning, in a fixed order."""
        thresholds = self.config.thresholds
        warnings: List[str] = []

        if not sources:
            warnings.append(WARNING_NO_SOURCES)

        if accuracy.verification_rate < thresholds.LOW_VERIFICATION_RATE:
            warnings.append(WARNING_LOW_ACCURACY)

        if context.source_relevance < thresholds.LOW_CONTEXT_RELEVANCE:
            warnings.append(WARNING_LOW_RELEVANCE)

        if hallucination.risk > thresholds.HIGH_HALLUCINATION_RISK:
            warnings.append(WARNING_HIGH_RISK)

        if hallucination.detected:
            warnings.append(WARNING_HALLUCINATION)

        return warnings

    @staticmethod
    def skip_result(classification: QueryClassificationResult,
                    trace_id: Optional[str] = None) -> ValidationResult:
        """Result for queries that do not need validation."""
        return ValidationResult(
            confidence=1.0,
            valid=True,
            accuracy=AccuracyResult(verified=True, verification_rate=1.0),
            context=ContextResult(source_relevance=1.0, source_usage_rate=1.0, valid=True),
            hallucination=HallucinationResult(detected=False, risk=0.0),
            warnings=[],
            query_type=classification.type,
            skip_validation=True,
            trace_id=trace_id,
        )

    @staticmethod
    def error_result(error: Exception, trace_id: Optional[str] = None) -> ValidationResult:
        """Global pessimistic result for a failed pipeline."""
        message = str(error) or "unknown error"
        return ValidationResult(
            confidence=0.0,
            valid=False,
            accuracy=AccuracyResult(verified=False, verification_rate=0.0, reason="validation_error"),
            context=ContextResult(source_relevance=0.0, source_usage_rate=0.0, valid=False),
            hallucination=HallucinationResult(
                detected=True,
                risk=PESSIMISTIC_DEFAULTS.PIPELINE_ERROR_HALLUCINATION_RISK,
            ),
            warnings=[f"Validation failed: {message}"],
            trace_id=trace_id,
        )

    async def close(self) -> None:
        """Release the judge's network resources."""
        await self.judge.close()

    async def __aenter__(self) -> "ResponseValidator":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
