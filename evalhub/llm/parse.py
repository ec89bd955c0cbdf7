import json
import math
import re
from typing import List

from pydantic import BaseModel, Field, ValidationError, field_validator

from evalhub.llm.errors import LLMResponseError

_FENCE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)

class EvaluationResult(BaseModel):
    score: int
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    full_report: str

    @field_validator("score", mode="before")
    @classmethod
    def _clamp(cls, v):
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("score must be a number")
        if isinstance(v, float) and not math.isfinite(v):
            raise ValueError("score must be finite")
        return max(0, min(100, round(v)))

def _extract_object(text: str) -> str:
    cleaned = _FENCE.sub("", text).strip()
    if cleaned.startswith("{"):
        return cleaned
    # models sometimes wrap the object in prose
    start, end = cleaned.find("{"), cleaned.rfind("}")
    if start == -1 or end <= start:
        raise LLMResponseError("no JSON object in model response")
    return cleaned[start:end + 1]

def parse_evaluation(text: str | None) -> EvaluationResult:
    if not text or not text.strip():
        raise LLMResponseError("empty model response")
    try:
        data = json.loads(_extract_object(text))
    except json.JSONDecodeError as e:
        raise LLMResponseError(f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise LLMResponseError("model response is not a JSON object")
    try:
        return EvaluationResult.model_validate(data, strict=False)
    except ValidationError as e:
        raise LLMResponseError(f"invalid response format: {e.error_count()} error(s)") from e
