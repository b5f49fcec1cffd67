"""Shared utilities: judge JSON parsing and pipeline tracing."""

from .json_parsing import parse_judge_json, strip_code_fences
from .trace import PipelineTracer, TraceEvent, get_tracer

__all__ = [
    "parse_judge_json",
    "strip_code_fences",
    "PipelineTracer",
    "TraceEvent",
    "get_tracer",
]
