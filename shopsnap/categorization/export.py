"""
Plain-text export and grouped route view of a categorized list.
"""
from datetime import date
from typing import Dict, List, Optional, Sequence

from shopsnap.categorization.taxonomy import DEFAULT_TAXONOMY, Taxonomy
from shopsnap.models import ShoppingItem

BULLET = "•"


def group_by_category(
    items: Sequence[ShoppingItem],
    taxonomy: Optional[Taxonomy] = None,
) -> List[Dict]:
    """
    Group items under their categories in shelf-walk order.

    Items with no category or one outside the taxonomy are listed under
    the fallback category. Empty categories are omitted.
    """
    taxonomy = taxonomy or DEFAULT_TAXONOMY
    buckets: Dict[str, List[ShoppingItem]] = {name: [] for name in taxonomy.names}
    for item in items:
        buckets[taxonomy.resolve(item.category)].append(item)

    groups = []
    for category in taxonomy:
        members = buckets[category.name]
        if not members:
            continue
        groups.append({
            'category': category,
            'items': members,
            'count': len(members),
            'completed': sum(1 for item in members if item.completed),
        })
    return groups


def export_list(
    items: Sequence[ShoppingItem],
    taxonomy: Optional[Taxonomy] = None,
) -> str:
    """Render the list as text, one block per non-empty category."""
    blocks = []
    for group in group_by_category(items, taxonomy):
        category = group['category']
        lines = [f"{category.name} ({category.aisle}):"]
        lines.extend(f"  {BULLET} {item.text}" for item in group['items'])
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def export_filename(day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"shopping-list-{day.isoformat()}.txt"
