"""Tests for keyword classification."""

import pytest

from shopsnap.categorization import (
    DEFAULT_TAXONOMY,
    StoreCategory,
    Taxonomy,
    categorize_items,
    classify,
)
from shopsnap.models import CATEGORY_SOURCE_CLASSIFIER, ShoppingItem


@pytest.mark.parametrize("text, expected", [
    ("Tomatoes", "Fresh Produce"),
    ("Milk", "Dairy"),
    ("Salmon fillets", "Meat & Fish"),
    ("Bagels", "Bakery"),
    ("Pizza", "Frozen"),
    ("Toothpaste", "Household"),
])
def test_single_category_match(text, expected):
    assert classify(ShoppingItem(id="x", text=text)) == expected


def test_matching_is_case_insensitive():
    assert classify("SEMI SKIMMED MILK") == "Dairy"


def test_higher_keyword_count_wins():
    # Dairy: cheese, butter; Meat & Fish: chicken
    assert classify("chicken with cheese and butter") == "Dairy"


def test_earlier_category_wins_ties():
    assert classify("cheese and bacon") == "Dairy"
    assert classify("bacon and cheese") == "Dairy"


def test_ice_cream_ties_between_dairy_and_frozen():
    # "cream" (Dairy) and "ice cream" (Frozen) score one each
    assert classify("ice cream") == "Dairy"
    assert classify("frozen ice cream") == "Frozen"


@pytest.mark.parametrize("text", ["Bleach", "", "   "])
def test_no_match_falls_back_to_household(text):
    assert classify(text) == "Household"


@pytest.mark.parametrize("text", [None, 42, ["milk"]])
def test_non_string_text_is_treated_as_empty(text):
    assert classify(text) == "Household"
    assert classify(ShoppingItem(id="x", text=text)) == "Household"


def test_custom_taxonomy_uses_its_last_entry_as_fallback():
    taxonomy = Taxonomy([
        StoreCategory(name="Drinks", aisle="A", keywords=("juice", "water")),
        StoreCategory(name="Other", aisle="B"),
    ])
    assert classify("orange juice", taxonomy) == "Drinks"
    assert classify("milk", taxonomy) == "Other"


def test_categorize_items_marks_classifier_source():
    items = [ShoppingItem(id="a", text="Milk"), ShoppingItem(id="b", text="Bread")]
    result = categorize_items(items, DEFAULT_TAXONOMY)

    assert [item.category for item in result] == ["Dairy", "Bakery"]
    assert all(item.category_source == CATEGORY_SOURCE_CLASSIFIER for item in result)
    # Inputs are left untouched
    assert items[0].category is None
