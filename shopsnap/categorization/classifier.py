"""
Keyword classifier mapping item text to a store category.
"""
from typing import List, Optional, Sequence, Union

from shopsnap.categorization.taxonomy import DEFAULT_TAXONOMY, Taxonomy
from shopsnap.models import CATEGORY_SOURCE_CLASSIFIER, ShoppingItem


def keyword_score(text: str, keywords: Sequence[str]) -> int:
    """Count how many keywords occur as substrings of the lower-cased text."""
    return sum(1 for keyword in keywords if keyword.lower() in text)


def classify(
    item: Union[ShoppingItem, str, None],
    taxonomy: Optional[Taxonomy] = None,
) -> str:
    """
    Pick the category whose keywords best match the item text.

    Categories are scanned in taxonomy order and only a strictly higher
    score replaces the current best, so earlier categories win ties.
    Text matching no keyword at all gets the fallback category.

    Args:
        item: A ShoppingItem or raw text; anything else counts as empty text
        taxonomy: Categories to choose from (defaults to the built-in one)

    Returns:
        The chosen category name
    """
    taxonomy = taxonomy or DEFAULT_TAXONOMY
    text = item.text if isinstance(item, ShoppingItem) else item
    if not isinstance(text, str):
        text = ""
    text = text.lower()

    best_category = taxonomy.fallback.name
    best_score = 0
    for category in taxonomy:
        score = keyword_score(text, category.keywords)
        if score > best_score:
            best_score = score
            best_category = category.name

    return best_category


def categorize_items(
    items: Sequence[ShoppingItem],
    taxonomy: Optional[Taxonomy] = None,
) -> List[ShoppingItem]:
    """Return copies of the items with classifier-assigned categories."""
    taxonomy = taxonomy or DEFAULT_TAXONOMY
    return [
        item.evolve(
            category=classify(item, taxonomy),
            category_source=CATEGORY_SOURCE_CLASSIFIER,
        )
        for item in items
    ]
