"""
Fixed ingredient category taxonomy shared by the categorizer and the parser.
"""
from enum import Enum
from typing import Any, Optional


class Category(str, Enum):
    VEGETABLES = "Vegetables"
    FRUITS = "Fruits"
    MEAT = "Meat"
    DAIRY = "Dairy"
    GRAINS = "Grains"
    SPICES = "Spices"
    CONDIMENTS = "Condiments"
    OTHER = "Other"


# Shown to the model next to each category name
CATEGORY_DESCRIPTIONS = {
    Category.VEGETABLES: "Fresh vegetables, herbs, leafy greens",
    Category.FRUITS: "Fresh fruits, berries, citrus",
    Category.MEAT: "All meat, poultry, seafood, fish",
    Category.DAIRY: "Milk, cheese, yogurt, butter, cream",
    Category.GRAINS: "Rice, pasta, bread, flour, cereals, oats",
    Category.SPICES: "Herbs, spices, seasonings, extracts",
    Category.CONDIMENTS: "Sauces, dressings, oils, vinegars, spreads",
    Category.OTHER: "Items that don't fit other categories",
}

CATEGORY_NAMES = [c.value for c in Category]

FALLBACK_CATEGORY = Category.OTHER
FALLBACK_CONFIDENCE = 0.5
DEFAULT_CONFIDENCE = 0.8


def to_category(value: Any) -> Optional[Category]:
    """Exact, case-sensitive lookup. Returns None for anything outside the taxonomy."""
    if not isinstance(value, str):
        return None
    try:
        return Category(value)
    except ValueError:
        return None


def format_category_list() -> str:
    """Render the taxonomy as prompt lines ('- Name: description')."""
    return "\n".join(f"- {c.value}: {CATEGORY_DESCRIPTIONS[c]}" for c in Category)
