"""
Unit tests for ResponseValidator.

Tests the end-to-end pipeline against judge doubles:
- construction and configuration errors
- the conversational short-circuit
- check orchestration, scoring, thresholds and warnings
- the global failure path and tracing
"""

from unittest.mock import AsyncMock, patch

import pytest

from response_validator.config.constants import DEFAULT_CLAUDE_MODEL, ScoringThresholds
from response_validator.config.settings import ValidatorConfig
from response_validator.exceptions import ConfigurationError, LLMError
from response_validator.llm.openai_provider import OpenAIProvider
from response_validator.validation.models import (
    ConfidenceLevel,
    QueryType,
    Source,
    ValidationInput,
)
from response_validator.validation.validator import (
    WARNING_HALLUCINATION,
    WARNING_HIGH_RISK,
    WARNING_LOW_ACCURACY,
    WARNING_LOW_RELEVANCE,
    WARNING_NO_SOURCES,
    ResponseValidator,
)

QUESTION = "What is the boiling point of water?"
GROUNDED_RESPONSE = "Water boils at 100 degrees Celsius at sea level."

CLEAN_ACCURACY = {"verified": True, "verification_rate": 1.0}
CLEAN_HALLUCINATION = {"detected": False, "risk": 0.0, "hallucinated_parts": []}


@pytest.fixture
def clean_judge(make_routing_judge):
    return make_routing_judge(CLEAN_ACCURACY, CLEAN_HALLUCINATION)


@pytest.fixture
def make_validator(tracer):
    def _make(judge, **options):
        options.setdefault("openai_api_key", "sk-test")
        return ResponseValidator(judge=judge, tracer=tracer, **options)
    return _make


class TestConstruction:

    def test_requires_an_api_key(self, make_judge):
        with pytest.raises(ConfigurationError) as exc_info:
            ResponseValidator(judge=make_judge())
        assert "openai_api_key" in exc_info.value.missing

    def test_selected_provider_needs_its_key(self, make_judge):
        with pytest.raises(ConfigurationError):
            ResponseValidator(judge=make_judge(), llm_provider="openai", claude_api_key="sk-ant")

    def test_unsupported_provider(self, make_judge):
        with pytest.raises(ConfigurationError):
            ResponseValidator(judge=make_judge(), llm_provider="gemini", openai_api_key="sk-test")

    def test_threshold_out_of_range(self, make_judge):
        with pytest.raises(ConfigurationError):
            ResponseValidator(judge=make_judge(), openai_api_key="sk-test", confidence_threshold=1.5)

    def test_defaults(self, make_validator, make_judge):
        validator = make_validator(make_judge())
        assert validator.config.pass_threshold == 0.7
        assert validator.config.provider == "openai"
        assert validator.get_model() == "gpt-4o"

    def test_claude_default_model(self, make_judge, tracer):
        validator = ResponseValidator(judge=make_judge(), tracer=tracer, claude_api_key="sk-ant")
        assert validator.config.provider == "claude"
        assert validator.get_model() == DEFAULT_CLAUDE_MODEL

    def test_options_override_config(self, make_judge, tracer):
        config = ValidatorConfig(openai_api_key="sk-test")
        validator = ResponseValidator(config=config, judge=make_judge(), tracer=tracer,
                                      confidence_threshold=0.5)
        assert validator.config.pass_threshold == 0.5
        assert config.pass_threshold == 0.7

    def test_dropping_a_key_reselects_the_provider(self, make_judge, tracer):
        """An unselected provider follows the credentials left after overrides."""
        config = ValidatorConfig(openai_api_key="sk-test", claude_api_key="sk-ant")
        validator = ResponseValidator(config=config, judge=make_judge(), tracer=tracer,
                                      openai_api_key=None)
        assert validator.config.provider == "claude"
        assert validator.get_model() == DEFAULT_CLAUDE_MODEL

    def test_explicit_provider_survives_overrides(self, make_judge, tracer):
        config = ValidatorConfig(llm_provider="openai", openai_api_key="sk-test", claude_api_key="sk-ant")
        with pytest.raises(ConfigurationError):
            ResponseValidator(config=config, judge=make_judge(), tracer=tracer, openai_api_key=None)

    def test_judge_created_from_config(self, tracer):
        validator = ResponseValidator(openai_api_key="sk-test", openai_model="gpt-4o-mini", tracer=tracer)
        assert isinstance(validator.judge, OpenAIProvider)
        assert validator.judge.model == "gpt-4o-mini"


class TestShortCircuit:

    @pytest.mark.asyncio
    async def test_greeting_skips_checks(self, make_validator, make_judge):
        """Conversational filler is valid without any judge call."""
        judge = make_judge()
        validator = make_validator(judge)

        result = await validator.validate(ValidationInput(query="hi", response="Hello! How can I help?"))

        assert judge.call_count == 0
        assert result.confidence == 1.0
        assert result.valid is True
        assert result.skip_validation is True
        assert result.query_type == QueryType.GREETING
        assert result.accuracy.verification_rate == 1.0
        assert result.context.valid is True
        assert result.hallucination.detected is False
        assert result.warnings == []
        assert result.level is None

    @pytest.mark.asyncio
    async def test_clarification_is_not_skipped(self, make_validator, clean_judge, water_sources):
        validator = make_validator(clean_judge)
        result = await validator.validate(ValidationInput(
            query="Can you explain the boiling point again?",
            response=GROUNDED_RESPONSE,
            sources=water_sources,
        ))
        assert result.skip_validation is False
        assert clean_judge.call_count == 2

    @pytest.mark.asyncio
    async def test_classification_disabled(self, make_validator, clean_judge, water_sources):
        """With classification off, even greetings run every check."""
        validator = make_validator(clean_judge, enable_query_classification=False)
        result = await validator.validate(ValidationInput(query="hi", response=GROUNDED_RESPONSE,
                                                          sources=water_sources))
        assert result.skip_validation is False
        assert result.query_type is None
        assert clean_judge.call_count == 2


class TestFullPipeline:

    @pytest.mark.asyncio
    async def test_grounded_response(self, make_validator, clean_judge, water_sources):
        """
        accuracy 1.0, relevance 1.0, risk 0.0, source quality 0.8
        -> 0.35 + 0.25 + 0.30 + 0.08 = 0.98
        """
        validator = make_validator(clean_judge)
        result = await validator.validate(ValidationInput(QUESTION, GROUNDED_RESPONSE, water_sources))

        assert result.confidence == pytest.approx(0.98)
        assert result.valid is True
        assert result.level == ConfidenceLevel.HIGH
        assert result.warnings == []
        assert result.context.source_relevance == 1.0
        assert result.confidence_details.breakdown.source_quality == pytest.approx(0.8)
        assert clean_judge.call_count == 2

    @pytest.mark.asyncio
    async def test_judge_checks_run_concurrently(self, make_validator, make_slow_judge, water_sources):
        """Both judge calls are in flight together and scoring waits for both."""
        judge = make_slow_judge(CLEAN_ACCURACY, CLEAN_HALLUCINATION, delay=0.05)
        validator = make_validator(judge)

        result = await validator.validate(ValidationInput(QUESTION, GROUNDED_RESPONSE, water_sources))

        assert judge.peak_in_flight == 2
        assert judge.in_flight == 0
        assert result.accuracy.verification_rate == 1.0
        assert result.hallucination.risk == 0.0
        assert result.confidence == pytest.approx(0.98)

    @pytest.mark.asyncio
    async def test_configured_model_reaches_judge(self, make_validator, clean_judge, water_sources):
        validator = make_validator(clean_judge, openai_model="gpt-4o-mini")
        await validator.validate(ValidationInput(QUESTION, GROUNDED_RESPONSE, water_sources))
        assert {call["model"] for call in clean_judge.calls} == {"gpt-4o-mini"}

    @pytest.mark.asyncio
    async def test_mapping_input(self, make_validator, clean_judge):
        validator = make_validator(clean_judge)
        result = await validator.validate({
            "query": QUESTION,
            "response": GROUNDED_RESPONSE,
            "sources": [{"content": "Water boils at 100 degrees Celsius at sea level.", "title": "Water"}],
        })
        assert result.valid is True
        assert clean_judge.call_count == 2

    @pytest.mark.asyncio
    async def test_no_sources(self, make_validator, make_judge):
        """No sources: pessimistic defaults, every warning, no judge call."""
        judge = make_judge()
        validator = make_validator(judge)

        result = await validator.validate(ValidationInput(QUESTION, GROUNDED_RESPONSE))

        assert judge.call_count == 0
        assert result.accuracy.verified is False
        assert result.accuracy.reason == "no_sources_provided"
        assert result.hallucination.detected is True
        assert result.hallucination.risk == 0.8
        assert result.confidence == pytest.approx(0.06)
        assert result.valid is False
        assert result.warnings == [
            WARNING_NO_SOURCES,
            WARNING_LOW_ACCURACY,
            WARNING_LOW_RELEVANCE,
            WARNING_HIGH_RISK,
            WARNING_HALLUCINATION,
        ]

    @pytest.mark.asyncio
    async def test_hallucinating_response(self, make_validator, make_routing_judge, water_sources):
        judge = make_routing_judge(
            {"verified": False, "verification_rate": 0.2},
            {"detected": True, "risk": 0.9, "hallucinated_parts": ["freezes at 10 degrees"]},
        )
        validator = make_validator(judge)
        result = await validator.validate(ValidationInput(
            QUESTION, "Water boils at 100 degrees and freezes at 10 degrees.", water_sources
        ))
        assert result.valid is False
        assert result.hallucination.hallucinated_parts == ["freezes at 10 degrees"]
        assert WARNING_LOW_ACCURACY in result.warnings
        assert WARNING_HIGH_RISK in result.warnings
        assert WARNING_HALLUCINATION in result.warnings
        assert WARNING_NO_SOURCES not in result.warnings

    @pytest.mark.asyncio
    async def test_failing_judge_is_absorbed(self, make_validator, make_judge, water_sources):
        """A judge outage degrades the checks, not the call."""
        judge = make_judge(error=LLMError("Network error: connection refused", "openai", "gpt-4o"))
        validator = make_validator(judge)

        result = await validator.validate(ValidationInput(QUESTION, GROUNDED_RESPONSE, water_sources))

        assert result.accuracy.reason.startswith("accuracy_check_failed")
        assert result.hallucination.risk == 0.9
        # 0.25 * 1.0 + 0.30 * 0.1 + 0.10 * 0.8
        assert result.confidence == pytest.approx(0.36)
        assert result.valid is False

    @pytest.mark.asyncio
    async def test_checks_disabled(self, make_validator, make_judge, water_sources):
        """Disabled checks contribute optimistic results."""
        judge = make_judge()
        validator = make_validator(judge, enable_accuracy_check=False,
                                   enable_hallucination_detection=False)

        result = await validator.validate(ValidationInput(QUESTION, GROUNDED_RESPONSE, water_sources))

        assert judge.call_count == 0
        assert result.accuracy.verified is True
        assert result.accuracy.verification_rate == 1.0
        assert result.hallucination.detected is False
        assert result.hallucination.risk == 0.0
        assert result.valid is True


class TestThreshold:

    @pytest.mark.asyncio
    async def test_score_below_threshold_is_invalid(self, make_validator, clean_judge, water_sources):
        validator = make_validator(clean_judge, confidence_threshold=0.99)
        result = await validator.validate(ValidationInput(QUESTION, GROUNDED_RESPONSE, water_sources))
        assert result.confidence == pytest.approx(0.98)
        assert result.valid is False

    @pytest.mark.asyncio
    async def test_score_at_threshold_is_valid(self, make_validator, clean_judge, water_sources):
        validator = make_validator(clean_judge, confidence_threshold=0.98)
        result = await validator.validate(ValidationInput(QUESTION, GROUNDED_RESPONSE, water_sources))
        assert result.valid is True

    @pytest.mark.asyncio
    async def test_zero_threshold_accepts_everything(self, make_validator, make_judge):
        validator = make_validator(make_judge(), confidence_threshold=0.0)
        result = await validator.validate(ValidationInput(QUESTION, GROUNDED_RESPONSE))
        assert result.valid is True

    @pytest.mark.asyncio
    async def test_threshold_from_scoring_thresholds(self, make_validator, clean_judge, water_sources):
        """Without an explicit threshold the configured scoring thresholds decide."""
        validator = make_validator(clean_judge,
                                   thresholds=ScoringThresholds(DEFAULT_CONFIDENCE_THRESHOLD=0.99))
        result = await validator.validate(ValidationInput(QUESTION, GROUNDED_RESPONSE, water_sources))
        assert validator.config.pass_threshold == 0.99
        assert result.confidence == pytest.approx(0.98)
        assert result.valid is False

    def test_explicit_threshold_wins(self, make_validator, make_judge):
        validator = make_validator(make_judge(), confidence_threshold=0.5,
                                   thresholds=ScoringThresholds(DEFAULT_CONFIDENCE_THRESHOLD=0.99))
        assert validator.config.pass_threshold == 0.5


class TestFailurePath:

    @pytest.mark.asyncio
    async def test_unexpected_failure_returns_error_result(self, make_validator, clean_judge,
                                                            water_sources, tracer):
        validator = make_validator(clean_judge)

        with patch.object(validator.confidence_scorer, "score",
                          side_effect=RuntimeError("scorer exploded")):
            result = await validator.validate(ValidationInput(QUESTION, GROUNDED_RESPONSE, water_sources))

        assert result.confidence == 0.0
        assert result.valid is False
        assert result.accuracy.reason == "validation_error"
        assert result.context.valid is False
        assert result.hallucination.detected is True
        assert result.hallucination.risk == 1.0
        assert result.warnings == ["Validation failed: scorer exploded"]

        summary = tracer.get_trace_summary(result.trace_id)
        assert summary["errors"] == ["scorer exploded"]

    @pytest.mark.asyncio
    async def test_bad_request_returns_error_result(self, make_validator, make_judge):
        validator = make_validator(make_judge())
        result = await validator.validate(None)
        assert result.valid is False
        assert result.warnings[0].startswith("Validation failed:")

    @pytest.mark.asyncio
    async def test_failed_check_cancels_pending_judge_calls(self, make_validator, make_slow_judge,
                                                             water_sources):
        """A check that raises cancels the judge calls still in flight."""
        judge = make_slow_judge(CLEAN_ACCURACY, CLEAN_HALLUCINATION, delay=10)
        validator = make_validator(judge)

        with patch.object(validator.context_estimator, "estimate",
                          side_effect=RuntimeError("estimator exploded")):
            result = await validator.validate(ValidationInput(QUESTION, GROUNDED_RESPONSE, water_sources))

        assert result.valid is False
        assert result.warnings == ["Validation failed: estimator exploded"]
        assert judge.in_flight == 0
        assert judge.cancelled == 2


class TestBatchAndLifecycle:

    @pytest.mark.asyncio
    async def test_batch_preserves_order(self, make_validator, clean_judge, water_sources):
        validator = make_validator(clean_judge)
        results = await validator.validate_batch([
            ValidationInput("hi", "Hello!"),
            ValidationInput(QUESTION, GROUNDED_RESPONSE, water_sources),
            ValidationInput(QUESTION, GROUNDED_RESPONSE),
        ])
        assert [r.skip_validation for r in results] == [True, False, False]
        assert results[1].valid is True
        assert results[2].valid is False

    @pytest.mark.asyncio
    async def test_async_context_manager_closes_judge(self, make_judge):
        judge = make_judge()
        async with ResponseValidator(judge=judge, openai_api_key="sk-test") as validator:
            await validator.validate(ValidationInput("hi", "Hello!"))
        assert judge.closed is True

    @pytest.mark.asyncio
    async def test_close_releases_judge(self, make_validator, make_judge):
        validator = make_validator(make_judge())
        validator.judge.close = AsyncMock()
        await validator.close()
        validator.judge.close.assert_awaited_once()


class TestTracing:

    @pytest.mark.asyncio
    async def test_pipeline_events(self, make_validator, clean_judge, water_sources, tracer):
        validator = make_validator(clean_judge)
        result = await validator.validate(ValidationInput(QUESTION, GROUNDED_RESPONSE, water_sources))

        functions = [event.function for event in tracer.get_events(result.trace_id)]
        assert functions == ["start_trace", "validate", "classify", "checks_complete", "scored"]

    @pytest.mark.asyncio
    async def test_skip_event(self, make_validator, make_judge, tracer):
        validator = make_validator(make_judge())
        result = await validator.validate(ValidationInput("hello", "Hi!"))

        events = tracer.get_events(result.trace_id)
        assert events[-1].function == "skip_validation"
        assert events[-1].details == {"query_type": "greeting"}

    @pytest.mark.asyncio
    async def test_listener_receives_events(self, make_validator, clean_judge, water_sources, tracer):
        received = []
        tracer.add_listener(received.append)
        validator = make_validator(clean_judge)

        result = await validator.validate(ValidationInput(QUESTION, GROUNDED_RESPONSE, water_sources))

        scored = [event for event in received if event.function == "scored"]
        assert len(scored) == 1
        assert scored[0].trace_id == result.trace_id
        assert scored[0].details["valid"] is True


class TestSerialization:

    @pytest.mark.asyncio
    async def test_skip_result_dict(self, make_validator, make_judge):
        validator = make_validator(make_judge())
        data = (await validator.validate(ValidationInput("hi", "Hello!"))).to_dict()
        assert data["query_type"] == "greeting"
        assert data["skip_validation"] is True
        assert data["confidence"] == 1.0

    @pytest.mark.asyncio
    async def test_full_result_dict(self, make_validator, clean_judge, water_sources):
        validator = make_validator(clean_judge)
        data = (await validator.validate(ValidationInput(QUESTION, GROUNDED_RESPONSE, water_sources))).to_dict()
        assert set(data) == {"confidence", "valid", "accuracy", "context", "hallucination", "warnings"}
        assert data["accuracy"] == {"verified": True, "verification_rate": 1.0}
        assert data["hallucination"] == {"detected": False, "risk": 0.0}


def test_source_from_dict():
    source = Source.from_dict({"content": "text", "title": "T"})
    assert source == Source(content="text", title="T")


def test_source_from_dict_coerces_title():
    assert Source.from_dict({"content": "text", "title": 7}).title == "7"


@pytest.mark.parametrize("content, title", [(None, None), (42, None), ("text", 3)])
def test_source_rejects_non_text_fields(content, title):
    with pytest.raises(TypeError):
        Source(content=content, title=title)
