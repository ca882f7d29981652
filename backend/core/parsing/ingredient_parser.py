"""
Turn a free-text ingredient description into structured pantry items via the LLM.

The model does the extraction (singular names, canonical units, defaults).
This module only validates its reply:
- the reply must be a JSON object with an "ingredients" list
- entries with a missing or mistyped field are dropped, never defaulted
- survivors are trimmed and quantity is floored at 0
Category strings pass through as given; they are not coerced to the taxonomy.
"""
import logging
import math
from typing import Any, List, Optional

from core.categories import CATEGORY_NAMES
from core.errors import InvalidInput, UpstreamFormatError
from core.llm.base import CompletionProvider, parse_json_reply
from core.models.results import ParsedIngredient, ParseResult

logger = logging.getLogger(__name__)

PARSE_TEMPERATURE = 0.2
PARSE_MAX_TOKENS = 1000

_SYSTEM_PROMPT = """You are a helpful assistant that parses natural language descriptions of food ingredients into structured JSON format.

Your task is to extract individual ingredients from the user's text and return them as a JSON object with an "ingredients" array.

Each ingredient should have:
- name: The ingredient name (capitalized, singular form when possible)
- quantity: A number (default to 1 if not specified)
- unit: The measurement unit (use standard units: g, kg, ml, l, cups, tbsp, tsp, pieces, cans, bottles, etc.)
- category: One of these categories: {categories}

Guidelines:
- Convert plural to singular when appropriate (e.g., "apples" -> "Apple")
- Normalize units (e.g., "liters" -> "l", "grams" -> "g")
- If no quantity is specified, use 1
- If no unit is specified, use "pieces"
- Choose the most appropriate category for each ingredient
- Handle common food items and their typical categories

Example input: "3 apples, 1kg flour, 2 cans of tuna"
Example output: {{
  "ingredients": [
    {{"name": "Apple", "quantity": 3, "unit": "pieces", "category": "Fruits"}},
    {{"name": "Flour", "quantity": 1, "unit": "kg", "category": "Grains"}},
    {{"name": "Tuna", "quantity": 2, "unit": "cans", "category": "Meat"}}
  ]
}}"""


def build_system_prompt() -> str:
    return _SYSTEM_PROMPT.format(categories=", ".join(f'"{c}"' for c in CATEGORY_NAMES))


def build_user_prompt(text: str) -> str:
    return f'Parse the following ingredient description into structured JSON format: "{text}"'


def sanitize_entry(entry: Any) -> Optional[ParsedIngredient]:
    """Return a trimmed/clamped ingredient, or None if the entry is malformed."""
    if not isinstance(entry, dict):
        return None
    name = entry.get("name")
    quantity = entry.get("quantity")
    unit = entry.get("unit")
    category = entry.get("category")

    if not isinstance(name, str) or not name.strip():
        return None
    # bool is an int subclass; JSON true/false is not a quantity
    if not isinstance(quantity, (int, float)) or isinstance(quantity, bool):
        return None
    if not math.isfinite(quantity):
        return None
    if not isinstance(unit, str) or not isinstance(category, str):
        return None

    return ParsedIngredient(
        name=name.strip(),
        quantity=max(0, quantity),
        unit=unit.strip(),
        category=category.strip(),
    )


def sanitize_ingredients(data: Any) -> List[ParsedIngredient]:
    """Validate the top-level reply shape and keep only well-formed entries, in order."""
    raw = data.get("ingredients") if isinstance(data, dict) else None
    if not isinstance(raw, list):
        logger.error("PARSE_INGREDIENTS reply has no ingredients list: keys=%s",
                     list(data.keys()) if isinstance(data, dict) else type(data).__name__)
        raise UpstreamFormatError("Invalid ingredients format in AI response")

    out: List[ParsedIngredient] = []
    for entry in raw:
        item = sanitize_entry(entry)
        if item is not None:
            out.append(item)
    dropped = len(raw) - len(out)
    if dropped:
        logger.info("PARSE_INGREDIENTS dropped %d malformed entries of %d", dropped, len(raw))
    return out


def parse_ingredients(provider: CompletionProvider, text: Any) -> ParseResult:
    """
    Extract structured ingredients from free text.

    Raises InvalidInput before any upstream call when text is not a non-empty
    string; UpstreamFormatError for undecodable JSON or a missing list.
    An empty result is not an error.
    """
    if not isinstance(text, str) or not text:
        raise InvalidInput("Invalid text input")

    logger.info("PARSE_INGREDIENTS chars=%d", len(text))
    completion = provider.complete(
        build_system_prompt(),
        build_user_prompt(text),
        temperature=PARSE_TEMPERATURE,
        max_tokens=PARSE_MAX_TOKENS,
    )
    ingredients = sanitize_ingredients(parse_json_reply(completion.content))
    logger.info("PARSE_INGREDIENTS parsed=%d names=%s", len(ingredients), [i.name for i in ingredients])
    return ParseResult(ingredients=ingredients, usage=completion.usage)
