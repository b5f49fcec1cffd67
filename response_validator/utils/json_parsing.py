"""
JSON parsing utilities for judge responses.

Both LLM-backed checks parse judge output through parse_judge_json so that
the fallback chain is identical for each:

1. parse the raw text as-is
2. strip markdown code fences (```json ... ```) and parse again
3. give up and return an empty object (or raise in strict mode)

The coercion helpers turn loosely-typed judge fields into the booleans,
rates and string lists the result dataclasses expect.
"""

import json
import logging
import math
import re
from typing import Any, Dict, List

from response_validator.exceptions import JudgeParseError

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"```json\s*", re.IGNORECASE)
_FENCE_ANY = re.compile(r"```\s*")


def strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers and surrounding whitespace."""
    cleaned = _FENCE_OPEN.sub("", text)
    cleaned = _FENCE_ANY.sub("", cleaned)
    return cleaned.strip()


def _load_object(text: str) -> Dict[str, Any]:
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def parse_judge_json(content: str, strict: bool = False) -> Dict[str, Any]:
    """
    Parse judge output into a dict.

    Args:
        content: Raw judge output
        strict: Raise JudgeParseError instead of returning {} on failure

    Returns:
        Parsed object, or {} when the content is not a JSON object

    Raises:
        JudgeParseError: In strict mode, when every parse attempt fails
    """
    content = content or ""
    try:
        return _load_object(content)
    except ValueError:
        pass

    try:
        return _load_object(strip_code_fences(content))
    except ValueError:
        if strict:
            raise JudgeParseError("Judge response is not a JSON object", content)
        logger.warning(f"Failed to parse LLM response as JSON: {content!r}")
        return {}


def coerce_bool(value: Any) -> bool:
    """Judge booleans; anything other than true/"true" is False."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def coerce_rate(value: Any) -> float:
    """Judge rates; non-numeric or NaN values become 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        rate = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(rate):
        return 0.0
    return max(0.0, min(1.0, rate))


def coerce_str_list(value: Any) -> List[str]:
    """Judge string lists; a bare string becomes a one-item list."""
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return []
