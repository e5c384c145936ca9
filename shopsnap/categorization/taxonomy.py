"""
Store category taxonomy.

The taxonomy is an ordered sequence of aisle categories. Its order is the
shelf-walk order used for route sorting and classifier tie-breaks, and its
last entry is the fallback category for items no keyword matches.
"""
import json
import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from shopsnap.errors import TaxonomyError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreCategory:
    """One aisle category with its matching keywords."""

    name: str
    aisle: str
    description: str = ""
    keywords: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'aisle': self.aisle,
            'description': self.description,
            'keywords': list(self.keywords),
        }


class Taxonomy:
    """Ordered, non-empty collection of store categories."""

    def __init__(self, categories: Sequence[StoreCategory]):
        categories = tuple(categories)
        if not categories:
            raise TaxonomyError("at least one category is required")

        names = [category.name for category in categories]
        if len(set(names)) != len(names):
            raise TaxonomyError("category names must be unique")

        self._categories = categories
        self._rank: Dict[str, int] = {name: index for index, name in enumerate(names)}

    def __iter__(self) -> Iterator[StoreCategory]:
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def __contains__(self, name) -> bool:
        return isinstance(name, str) and name in self._rank

    @property
    def names(self) -> List[str]:
        return [category.name for category in self._categories]

    @property
    def fallback(self) -> StoreCategory:
        return self._categories[-1]

    def get(self, name: str) -> Optional[StoreCategory]:
        index = self._rank.get(name)
        return self._categories[index] if index is not None else None

    def rank(self, name: Optional[str]) -> int:
        """Shelf-walk rank; unknown or missing names rank with the fallback."""
        if name in self._rank:
            return self._rank[name]
        return len(self._categories) - 1

    def resolve(self, name: Optional[str]) -> str:
        """Map a category name onto the taxonomy, defaulting to the fallback."""
        return name if name in self._rank else self.fallback.name

    def to_list(self) -> List[dict]:
        return [
            dict(category.to_dict(), rank=index)
            for index, category in enumerate(self._categories)
        ]

    @classmethod
    def from_list(cls, data) -> 'Taxonomy':
        """Build a taxonomy from a list of category objects."""
        if not isinstance(data, list):
            raise TaxonomyError("expected a list of categories")

        categories = []
        for index, entry in enumerate(data):
            if not isinstance(entry, dict):
                raise TaxonomyError(f"entry {index} is not an object")
            name = entry.get('name')
            if not isinstance(name, str) or not name.strip():
                raise TaxonomyError(f"entry {index} has no name")
            keywords = entry.get('keywords', [])
            if not isinstance(keywords, list) or not all(
                isinstance(keyword, str) for keyword in keywords
            ):
                raise TaxonomyError(f"keywords of '{name}' must be a list of strings")
            categories.append(StoreCategory(
                name=name.strip(),
                aisle=str(entry.get('aisle', '')),
                description=str(entry.get('description', '')),
                keywords=tuple(k.lower() for k in keywords if k.strip()),
            ))
        return cls(categories)


DEFAULT_CATEGORIES = (
    StoreCategory(
        name="Fresh Produce",
        aisle="Aisle 1-2",
        description="Start here",
        keywords=("apple", "banana", "orange", "tomato", "lettuce", "carrot",
                  "onion", "potato", "fruit", "vegetable"),
    ),
    StoreCategory(
        name="Dairy",
        aisle="Aisle 3",
        description="Refrigerated section",
        keywords=("milk", "cheese", "butter", "yogurt", "cream", "eggs"),
    ),
    StoreCategory(
        name="Meat & Fish",
        aisle="Aisle 4",
        description="Butcher counter",
        keywords=("chicken", "beef", "pork", "fish", "salmon", "meat", "turkey",
                  "lamb", "bacon", "sausage"),
    ),
    StoreCategory(
        name="Bakery",
        aisle="Aisle 5",
        description="Fresh baked goods",
        keywords=("bread", "roll", "cake", "pastry", "croissant", "muffin", "bagel"),
    ),
    StoreCategory(
        name="Frozen",
        aisle="Aisle 6",
        description="Frozen foods",
        keywords=("frozen", "ice cream", "frozen vegetables", "frozen fruit", "pizza"),
    ),
    StoreCategory(
        name="Household",
        aisle="Aisle 7-8",
        description="Cleaning & household",
        keywords=("detergent", "soap", "shampoo", "toothpaste", "toilet paper",
                  "kitchen roll", "cleaning"),
    ),
)

DEFAULT_TAXONOMY = Taxonomy(DEFAULT_CATEGORIES)


def load_taxonomy(path: Optional[str] = None) -> Taxonomy:
    """
    Load a taxonomy from a JSON file, or return the built-in one.

    Args:
        path: Path to a JSON list of {name, aisle, description, keywords}

    Returns:
        The loaded Taxonomy

    Raises:
        TaxonomyError: If the file cannot be read or is malformed
    """
    if not path:
        return DEFAULT_TAXONOMY

    try:
        with open(path, encoding='utf-8') as handle:
            data = json.load(handle)
    except (OSError, ValueError) as e:
        raise TaxonomyError(f"could not read {path}: {e}") from e

    taxonomy = Taxonomy.from_list(data)
    logger.info(f"Loaded taxonomy with {len(taxonomy)} categories from {path}")
    return taxonomy
