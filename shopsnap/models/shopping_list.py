"""
Shopping List Model
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from shopsnap.models.shopping_item import ShoppingItem


@dataclass
class ShoppingList:
    """A named, ordered list of shopping items."""

    id: Optional[int] = None
    name: str = ""
    items: List[ShoppingItem] = field(default_factory=list)
    input_fingerprint: Optional[str] = None
    output_fingerprint: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Convert shopping list to dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'items': [item.to_dict() for item in self.items],
            'signature': {
                'input': self.input_fingerprint,
                'output': self.output_fingerprint,
            },
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
