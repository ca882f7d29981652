"""
LLM-powered ingredient categorization into the fixed 8-category taxonomy.

The model only proposes a category; the reply is treated as untrusted and
normalized here:
- category outside the taxonomy (or missing) -> Other with confidence 0.5
- missing or non-numeric confidence -> 0.8; a numeric confidence is clamped
  to [0, 1] rather than passed through verbatim, and 0 stays 0
- missing suggestions -> [], suggestions outside the taxonomy dropped
- JSON that is not an object (array, string, null) is treated as {}
A parseable reply never fails; only undecodable JSON raises.
"""
import logging
import math
from typing import Any, List, Mapping, Optional, Sequence

from core.categories import (
    DEFAULT_CONFIDENCE,
    FALLBACK_CATEGORY,
    FALLBACK_CONFIDENCE,
    Category,
    format_category_list,
    to_category,
)
from core.config import DEFAULT_HISTORY_LIMIT
from core.errors import InvalidInput
from core.llm.base import CompletionProvider, parse_json_reply
from core.models.results import CategorizationResult

logger = logging.getLogger(__name__)

CATEGORIZE_TEMPERATURE = 0.1
CATEGORIZE_MAX_TOKENS = 200

_SYSTEM_PROMPT = """You are a helpful assistant that categorizes food ingredients into appropriate categories.

Available categories:
{categories}

Your task is to categorize the given ingredient and return a JSON response with:
- category: The most appropriate category from the list above
- confidence: A number from 0.0 to 1.0 indicating how confident you are
- suggestions: Optional array of alternative categories if confidence is low

Consider the user's history to maintain consistency with their preferences.{history}

Example response:
{{
  "category": "Vegetables",
  "confidence": 0.95,
  "suggestions": []
}}"""


def _format_history(history: Sequence[Mapping[str, Any]]) -> str:
    lines = []
    for item in history:
        if not isinstance(item, Mapping):
            continue
        name = item.get("name")
        if not isinstance(name, str) or not name:
            continue
        lines.append(f"- {name}: {item.get('category') or ''}")
    if not lines:
        return ""
    return "\n\nUser's categorization history for reference:\n" + "\n".join(lines)


def recent_history(
    history: Optional[Sequence[Mapping[str, Any]]],
    limit: int = DEFAULT_HISTORY_LIMIT,
) -> List[Mapping[str, Any]]:
    """Keep only the last `limit` entries (the most recent ones)."""
    if not history or limit <= 0:
        return []
    return list(history)[-limit:]


def build_system_prompt(history: Optional[Sequence[Mapping[str, Any]]] = None) -> str:
    return _SYSTEM_PROMPT.format(
        categories=format_category_list(),
        history=_format_history(history or []),
    )


def build_user_prompt(ingredient_name: str) -> str:
    return f'Categorize this ingredient: "{ingredient_name}"'


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _normalize_suggestions(raw: Any) -> List[Category]:
    if not isinstance(raw, list):
        return []
    out: List[Category] = []
    for item in raw:
        category = to_category(item)
        if category is not None:
            out.append(category)
    return out


def normalize_reply(data: Mapping[str, Any]) -> CategorizationResult:
    """Coerce a decoded model reply into a CategorizationResult."""
    category = to_category(data.get("category"))
    if category is None:
        logger.info("CATEGORIZE coercing out-of-taxonomy category=%r to Other", data.get("category"))
        category = FALLBACK_CATEGORY
        confidence = FALLBACK_CONFIDENCE
    else:
        raw_confidence = data.get("confidence")
        if _is_number(raw_confidence):
            confidence = min(1.0, max(0.0, float(raw_confidence)))
        else:
            confidence = DEFAULT_CONFIDENCE
    return CategorizationResult(
        category=category,
        confidence=confidence,
        suggestions=_normalize_suggestions(data.get("suggestions")),
    )


def categorize(
    provider: CompletionProvider,
    ingredient_name: Any,
    history: Optional[Sequence[Mapping[str, Any]]] = None,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> CategorizationResult:
    """
    Ask the model for the category of one ingredient.

    Raises InvalidInput before any upstream call when the name is not a
    non-empty string. Upstream errors from the provider propagate; an
    undecodable reply raises UpstreamFormatError.
    """
    if not isinstance(ingredient_name, str) or not ingredient_name:
        raise InvalidInput("Invalid ingredient name")

    context = recent_history(history, history_limit)
    logger.info("CATEGORIZE name=%r history=%d", ingredient_name, len(context))

    completion = provider.complete(
        build_system_prompt(context),
        build_user_prompt(ingredient_name),
        temperature=CATEGORIZE_TEMPERATURE,
        max_tokens=CATEGORIZE_MAX_TOKENS,
    )
    data = parse_json_reply(completion.content, require_object=False)
    if not isinstance(data, dict):
        logger.info("CATEGORIZE reply is %s, not an object; falling back", type(data).__name__)
        data = {}
    result = normalize_reply(data)
    result.usage = completion.usage

    logger.info(
        "CATEGORIZE name=%r category=%s confidence=%.2f suggestions=%s",
        ingredient_name, result.category.value, result.confidence,
        [s.value for s in result.suggestions],
    )
    return result
