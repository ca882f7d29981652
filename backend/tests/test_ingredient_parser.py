"""
Unit tests: free-text ingredient parsing and per-entry sanitization.
Run from backend: python -m pytest tests/test_ingredient_parser.py -v
"""
import pytest

from core.errors import InvalidInput, UpstreamFormatError
from core.parsing.ingredient_parser import parse_ingredients, sanitize_entry, sanitize_ingredients


def test_apples_and_flour_pass_through(stub_provider):
    """Well-formed reply survives unchanged."""
    reply = {"ingredients": [
        {"name": "Apple", "quantity": 3, "unit": "pieces", "category": "Fruits"},
        {"name": "Flour", "quantity": 1, "unit": "kg", "category": "Grains"},
    ]}
    result = parse_ingredients(stub_provider(reply), "3 apples, 1kg flour")
    assert result.to_dict()["ingredients"] == reply["ingredients"]


def test_negative_quantity_clamped_to_zero():
    item = sanitize_entry({"name": "Egg", "quantity": -5, "unit": "pieces", "category": "Dairy"})
    assert item.quantity == 0


def test_fields_trimmed():
    item = sanitize_entry({"name": "  Rice ", "quantity": 2.5, "unit": " cups\n", "category": " Grains "})
    assert item.name == "Rice"
    assert item.unit == "cups"
    assert item.category == "Grains"
    assert item.quantity == 2.5


def test_entry_missing_unit_dropped_siblings_kept_in_order():
    data = {"ingredients": [
        {"name": "Milk", "quantity": 1, "unit": "l", "category": "Dairy"},
        {"name": "Salt", "quantity": 1, "category": "Spices"},
        {"name": "Butter", "quantity": 200, "unit": "g", "category": "Dairy"},
    ]}
    assert [i.name for i in sanitize_ingredients(data)] == ["Milk", "Butter"]


@pytest.mark.parametrize("entry", [
    {"name": "", "quantity": 1, "unit": "g", "category": "Other"},
    {"name": "   ", "quantity": 1, "unit": "g", "category": "Other"},
    {"name": 5, "quantity": 1, "unit": "g", "category": "Other"},
    {"name": "Sugar", "quantity": "1", "unit": "g", "category": "Other"},
    {"name": "Sugar", "quantity": True, "unit": "g", "category": "Other"},
    {"name": "Sugar", "quantity": None, "unit": "g", "category": "Other"},
    {"name": "Sugar", "quantity": float("nan"), "unit": "g", "category": "Other"},
    {"name": "Sugar", "quantity": 1, "unit": None, "category": "Other"},
    {"name": "Sugar", "quantity": 1, "unit": "g", "category": ["Other"]},
    {"name": "Sugar", "quantity": 1, "unit": "g"},
    "Sugar",
    None,
])
def test_malformed_entries_dropped(entry):
    assert sanitize_entry(entry) is None


def test_out_of_taxonomy_category_not_coerced():
    item = sanitize_entry({"name": "Tofu", "quantity": 1, "unit": "block", "category": "Protein"})
    assert item.category == "Protein"


def test_all_invalid_gives_empty_list(stub_provider):
    reply = {"ingredients": [{"name": "Oil"}, {"quantity": 2}]}
    result = parse_ingredients(stub_provider(reply), "some oil")
    assert result.ingredients == []


@pytest.mark.parametrize("reply", [
    {},
    {"ingredients": None},
    {"ingredients": "Apple"},
    {"ingredients": {"name": "Apple"}},
])
def test_missing_ingredients_list_is_format_error(stub_provider, reply):
    with pytest.raises(UpstreamFormatError):
        parse_ingredients(stub_provider(reply), "apple")


def test_unparseable_reply_is_format_error(stub_provider):
    with pytest.raises(UpstreamFormatError):
        parse_ingredients(stub_provider("Here are your ingredients!"), "apple")


@pytest.mark.parametrize("text", ["", None, 3, {"text": "apple"}])
def test_invalid_text_rejected_without_upstream_call(stub_provider, text):
    provider = stub_provider({"ingredients": []})
    with pytest.raises(InvalidInput):
        parse_ingredients(provider, text)
    assert provider.calls == []


def test_prompts_and_sampling(stub_provider):
    provider = stub_provider({"ingredients": []})
    parse_ingredients(provider, "2 cans of tuna")
    call = provider.calls[0]
    assert call["user"] == 'Parse the following ingredient description into structured JSON format: "2 cans of tuna"'
    assert call["temperature"] == 0.2
    assert call["max_tokens"] == 1000
    assert '"Vegetables", "Fruits", "Meat", "Dairy", "Grains", "Spices", "Condiments", "Other"' in call["system"]
    assert 'use "pieces"' in call["system"]


def test_usage_forwarded(stub_provider):
    usage = {"total_tokens": 99}
    result = parse_ingredients(stub_provider({"ingredients": []}, usage=usage), "salt")
    assert result.to_dict() == {"ingredients": [], "usage": usage}
