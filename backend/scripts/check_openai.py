#!/usr/bin/env python3
"""
Check that the configured OpenAI credentials and model answer a categorization.
Run from backend: python scripts/check_openai.py
Exit 0 if the round trip works; 1 otherwise.
"""
import sys
from pathlib import Path
from typing import Tuple

# Add backend to path when run as script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# Short timeout for health check
HEALTH_TIMEOUT = 8


def check_categorize(settings) -> Tuple[bool, str]:
    """Return (success, message)."""
    if not settings.has_api_key:
        return False, "no API key (set OPENAI_API_KEY)"
    from core.categorizer import categorize
    from core.errors import PantryAIError
    from core.llm import OpenAIChatProvider

    provider = OpenAIChatProvider(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        base_url=settings.openai_api_base,
        timeout=HEALTH_TIMEOUT,
    )
    try:
        result = categorize(provider, "carrot")
    except PantryAIError as e:
        return False, f"{e.code}: {e.message}"
    return True, f"ok (carrot -> {result.category.value}, confidence={result.confidence:.2f})"


def main() -> int:
    from core.config import load_settings
    settings = load_settings()
    print(f"Checking OpenAI ({settings.openai_model} at {settings.openai_api_base})...")
    ok, msg = check_categorize(settings)
    print(f"  Categorize: {'OK' if ok else 'FAIL'} - {msg}")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
