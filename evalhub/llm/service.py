import logging

from evalhub.llm.errors import LLMError
from evalhub.llm.fallback import fallback_evaluation
from evalhub.llm.parse import EvaluationResult, parse_evaluation
from evalhub.llm.prompts import build_prompt
from evalhub.llm.providers import get_provider

logger = logging.getLogger(__name__)

TIERS = ("free", "premium", "ultra")

def evaluate_task(
    title: str,
    description: str,
    code: str | None = None,
    tier: str = "free",
) -> EvaluationResult:
    """
    Ask the configured model for an evaluation of one task.

    Never raises on model trouble: a missing key, a failed call or an unparseable
    answer all degrade to a canned report shaped for `tier`.
    """
    if tier not in TIERS:
        tier = "free"
    prompt = build_prompt(title, description, code)
    try:
        provider = get_provider()
        text = provider.generate(prompt)
        result = parse_evaluation(text)
    except LLMError as e:
        logger.warning("LLM evaluation failed, using fallback (%s): %s", type(e).__name__, e)
        return fallback_evaluation(title, code, tier)
    logger.info("LLM evaluation via %s scored %s", provider.name, result.score)
    return result
