"""
Shopping Item Model
"""
from dataclasses import dataclass, replace
from typing import Optional

CATEGORY_SOURCE_CLASSIFIER = "classifier"
CATEGORY_SOURCE_USER = "user"


def clamp_confidence(value) -> float:
    """Clamp a confidence score to [0, 1]; non-numeric values become 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if value != value:  # NaN
        return 0.0
    return max(0.0, min(1.0, float(value)))


@dataclass(frozen=True)
class Position:
    """Bounding box reported by the OCR provider."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    def to_dict(self) -> dict:
        return {'x': self.x, 'y': self.y, 'width': self.width, 'height': self.height}

    @classmethod
    def from_dict(cls, data) -> Optional['Position']:
        if not isinstance(data, dict):
            return None
        try:
            return cls(
                x=float(data.get('x', 0)),
                y=float(data.get('y', 0)),
                width=float(data.get('width', 0)),
                height=float(data.get('height', 0)),
            )
        except (TypeError, ValueError):
            return None


@dataclass(frozen=True)
class ShoppingItem:
    """One line of a shopping list."""

    id: str = ""
    text: str = ""
    confidence: float = 1.0
    completed: bool = False
    category: Optional[str] = None
    category_source: Optional[str] = None
    position: Optional[Position] = None

    def __post_init__(self):
        object.__setattr__(self, 'confidence', clamp_confidence(self.confidence))

    @property
    def is_valid(self) -> bool:
        """Items need a non-empty string id and string text."""
        return isinstance(self.id, str) and bool(self.id) and isinstance(self.text, str)

    @property
    def is_user_categorized(self) -> bool:
        return self.category_source == CATEGORY_SOURCE_USER and self.category is not None

    def evolve(self, **changes) -> 'ShoppingItem':
        return replace(self, **changes)

    def to_dict(self) -> dict:
        """Convert shopping item to dictionary."""
        data = {
            'id': self.id,
            'text': self.text,
            'confidence': self.confidence,
            'completed': self.completed,
            'category': self.category,
            'categorySource': self.category_source,
        }
        if self.position is not None:
            data['position'] = self.position.to_dict()
        return data

    @classmethod
    def from_dict(cls, data) -> Optional['ShoppingItem']:
        """
        Create a ShoppingItem from a request payload.

        Missing fields keep whatever shape they arrived in so that
        validity can be judged by the caller; only non-dict input
        returns None.
        """
        if not isinstance(data, dict):
            return None

        source = data.get('categorySource', data.get('category_source'))
        category = data.get('category')
        return cls(
            id=data.get('id'),
            text=data.get('text'),
            confidence=data.get('confidence', 1.0),
            completed=bool(data.get('completed', False)),
            category=category if isinstance(category, str) and category else None,
            category_source=source if source in (
                CATEGORY_SOURCE_CLASSIFIER, CATEGORY_SOURCE_USER
            ) else None,
            position=Position.from_dict(data.get('position')),
        )


def items_from_payload(payload) -> list:
    """Parse a JSON list of items, silently skipping non-object entries."""
    if not isinstance(payload, list):
        return []
    items = []
    for entry in payload:
        item = ShoppingItem.from_dict(entry)
        if item is not None:
            items.append(item)
    return items
