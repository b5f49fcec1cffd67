"""
Prompt templates for the judge checks.

Both templates place the concatenated sources before the response under
review and end with the exact JSON shape the judge must return. The rules
are shared in spirit: only topics and facts present in the sources count,
partial use of source material is acceptable, and unsupported topics,
unsupported facts or contradictions are failures.
"""

ACCURACY_SYSTEM_PROMPT = (
    "You are an accuracy checker. Always respond with valid JSON only. "
    "Never include markdown formatting or code blocks."
)

HALLUCINATION_SYSTEM_PROMPT = (
    "You are a hallucination detector. Always respond with valid JSON only. "
    "Never include markdown formatting or code blocks."
)

ACCURACY_PROMPT = """You are an accuracy checker. Decide whether the AI response is accurate with respect to the sources below.

Sources:
{sources}

AI Response:
{response}

Work through these questions:
1. Which statements in the response are supported by the sources?
2. Which statements cannot be verified from the sources?
3. What fraction of the response is verifiable?

Rules:
- A response that only discusses topics present in the sources and states correct facts from them is accurate.
- Partial use of the source material is fine: the response does not need to include every detail to be accurate.
- Topics the sources do not cover, facts the sources do not state, or statements that contradict the sources make the response inaccurate.

Respond with a JSON object in exactly this format:
{{"verified": true/false, "verification_rate": 0.0-1.0, "reason": "brief explanation"}}"""

HALLUCINATION_PROMPT = """You are a strict hallucination detector. Compare the AI response against the sources.

Sources:
{sources}

AI Response:
{response}

Rules:
1. The response discusses a topic or concept that is not in the sources: HALLUCINATED
2. The response states a fact that the sources do not mention: HALLUCINATED
3. The response contradicts the sources: HALLUCINATED
4. The response only uses information from the sources, even partially: NOT hallucinated

Examples:
- Source "GPT is a language model", response "GPT is a language model": NOT hallucinated
- Source "GPT is a language model", response "GPT is a model": NOT hallucinated (partial)
- Source "GPT is a language model", response "Machine learning uses algorithms": HALLUCINATED (different topic)
- Source "GPT uses transformers", response "GPT uses neural networks": HALLUCINATED (not in source)

Respond with a JSON object in exactly this format:
{{"detected": true/false, "risk": 0.0-1.0, "hallucinated_parts": ["unsupported text", ...]}}"""


def build_accuracy_prompt(response: str, source_text: str) -> str:
    return ACCURACY_PROMPT.format(sources=source_text, response=response)


def build_hallucination_prompt(response: str, source_text: str) -> str:
    return HALLUCINATION_PROMPT.format(sources=source_text, response=response)
