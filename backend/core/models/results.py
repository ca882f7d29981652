"""
Per-request result types for categorization and parsing. Never persisted.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from core.categories import Category

Number = Union[int, float]


@dataclass
class CategorizationResult:
    category: Category
    confidence: float
    suggestions: List[Category] = field(default_factory=list)
    usage: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "confidence": self.confidence,
            "suggestions": [s.value for s in self.suggestions],
            "usage": self.usage,
        }


@dataclass
class ParsedIngredient:
    name: str
    quantity: Number
    unit: str
    category: str  # not coerced to the taxonomy

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "category": self.category,
        }


@dataclass
class ParseResult:
    ingredients: List[ParsedIngredient] = field(default_factory=list)
    usage: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ingredients": [i.to_dict() for i in self.ingredients],
            "usage": self.usage,
        }
