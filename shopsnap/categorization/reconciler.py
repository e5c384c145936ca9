"""
List reconciliation.

Merges a freshly captured or edited batch of items into the canonical,
categorized list. Two fingerprints make repeated submissions cheap:

- the input fingerprint covers (id, text) of the incoming batch; when it
  matches the previous call nothing is reclassified
- the output fingerprint covers (id, text, category) of the result; only a
  different value counts as a change worth propagating

Callers hold the ReconcileSignature between calls.
"""
import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from shopsnap.categorization.classifier import classify
from shopsnap.categorization.taxonomy import DEFAULT_TAXONOMY, Taxonomy
from shopsnap.models import (
    CATEGORY_SOURCE_CLASSIFIER,
    CATEGORY_SOURCE_USER,
    ShoppingItem,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcileSignature:
    """Fingerprints remembered from the last reconciliation."""

    input_fingerprint: Optional[str] = None
    output_fingerprint: Optional[str] = None

    def to_dict(self) -> dict:
        return {'input': self.input_fingerprint, 'output': self.output_fingerprint}

    @classmethod
    def from_dict(cls, data) -> 'ReconcileSignature':
        if not isinstance(data, dict):
            return cls()
        input_fp = data.get('input')
        output_fp = data.get('output')
        return cls(
            input_fingerprint=input_fp if isinstance(input_fp, str) else None,
            output_fingerprint=output_fp if isinstance(output_fp, str) else None,
        )


@dataclass
class ReconcileResult:
    """Outcome of one reconcile call."""

    items: List[ShoppingItem]
    signature: ReconcileSignature
    recomputed: bool
    changed: bool

    def to_dict(self) -> dict:
        return {
            'items': [item.to_dict() for item in self.items],
            'signature': self.signature.to_dict(),
            'recomputed': self.recomputed,
            'changed': self.changed,
        }


def _digest(rows: Iterable[Sequence]) -> str:
    payload = json.dumps([list(row) for row in rows], ensure_ascii=False)
    return hashlib.sha1(payload.encode('utf-8')).hexdigest()


def input_fingerprint(items: Sequence[ShoppingItem]) -> str:
    """Order-sensitive fingerprint over (id, text) pairs."""
    return _digest((item.id, item.text) for item in items)


def output_fingerprint(items: Sequence[ShoppingItem]) -> str:
    """Order-sensitive fingerprint over (id, text, category) triples."""
    return _digest((item.id, item.text, item.category) for item in items)


def valid_items(items: Iterable) -> List[ShoppingItem]:
    """Drop malformed entries and repeated ids, keeping first occurrences."""
    seen = set()
    result = []
    for item in items:
        if not isinstance(item, ShoppingItem) or not item.is_valid:
            logger.debug(f"Dropping malformed item: {item!r}")
            continue
        if item.id in seen:
            logger.debug(f"Dropping duplicate item id: {item.id}")
            continue
        seen.add(item.id)
        result.append(item)
    return result


def route_order(items: Sequence[ShoppingItem], taxonomy: Taxonomy) -> List[ShoppingItem]:
    """Stable sort by shelf-walk rank of each item's category."""
    return sorted(items, key=lambda item: taxonomy.rank(item.category))


def _merge_item(
    incoming: ShoppingItem,
    previous: Optional[ShoppingItem],
    taxonomy: Taxonomy,
    reuse_category: bool = False,
) -> ShoppingItem:
    for source in (incoming, previous):
        if source is not None and source.is_user_categorized and source.category in taxonomy:
            return incoming.evolve(
                category=source.category,
                category_source=CATEGORY_SOURCE_USER,
            )

    # Text is unchanged since the last call, so the old category still holds
    if reuse_category and previous is not None and previous.category in taxonomy:
        return incoming.evolve(
            category=previous.category,
            category_source=previous.category_source,
        )

    return incoming.evolve(
        category=classify(incoming, taxonomy),
        category_source=CATEGORY_SOURCE_CLASSIFIER,
    )


def reconcile(
    previous: Sequence[ShoppingItem],
    incoming: Sequence[ShoppingItem],
    signature: Optional[ReconcileSignature] = None,
    taxonomy: Optional[Taxonomy] = None,
) -> ReconcileResult:
    """
    Merge incoming raw items into the previous canonical list.

    Incoming text, completion, confidence and position win. A category the
    user assigned explicitly survives; every other item is (re)classified.
    Items missing from the incoming batch are dropped.

    When the (id, text) fingerprint matches the signature, categories are
    carried over from the previous list instead of being reclassified and
    the result reports recomputed=False. Other incoming fields still apply.

    Args:
        previous: The canonical list returned by the last call
        incoming: The raw captured or edited items
        signature: Signature returned by the last call, if any
        taxonomy: Categories to classify into (defaults to the built-in one)

    Returns:
        ReconcileResult with the route-ordered items and the new signature
    """
    taxonomy = taxonomy or DEFAULT_TAXONOMY
    signature = signature or ReconcileSignature()
    previous = list(previous or [])
    incoming = valid_items(incoming or [])

    new_input = input_fingerprint(incoming)
    unchanged_input = (
        signature.input_fingerprint == new_input
        and signature.output_fingerprint == output_fingerprint(previous)
    )

    previous_by_id: Dict[str, ShoppingItem] = {
        item.id: item for item in previous if isinstance(item, ShoppingItem)
    }
    merged = [
        _merge_item(item, previous_by_id.get(item.id), taxonomy, unchanged_input)
        for item in incoming
    ]
    merged = route_order(merged, taxonomy)

    new_output = output_fingerprint(merged)
    changed = new_output != signature.output_fingerprint
    if changed:
        logger.debug(f"Reconciled {len(merged)} items (output {new_output[:8]})")

    return ReconcileResult(
        items=merged,
        signature=ReconcileSignature(new_input, new_output),
        recomputed=not unchanged_input,
        changed=changed,
    )


def _replace_item(items: Sequence[ShoppingItem], item_id: str, **changes) -> List[ShoppingItem]:
    result = []
    found = False
    for item in items:
        if item.id == item_id:
            found = True
            item = item.evolve(**changes)
        result.append(item)
    if not found:
        raise KeyError(item_id)
    return result


def move_to_category(
    items: Sequence[ShoppingItem],
    item_id: str,
    category: str,
    taxonomy: Optional[Taxonomy] = None,
) -> List[ShoppingItem]:
    """
    Record an explicit user category for one item and re-sort the list.

    Raises:
        KeyError: If no item has the given id
        ValueError: If the category is not part of the taxonomy
    """
    taxonomy = taxonomy or DEFAULT_TAXONOMY
    if category not in taxonomy:
        raise ValueError(f"Unknown category: {category}")
    updated = _replace_item(
        items, item_id, category=category, category_source=CATEGORY_SOURCE_USER
    )
    return route_order(updated, taxonomy)


def toggle_completed(items: Sequence[ShoppingItem], item_id: str) -> List[ShoppingItem]:
    """Flip the completed flag of one item. Raises KeyError if absent."""
    target = next((item for item in items if item.id == item_id), None)
    if target is None:
        raise KeyError(item_id)
    return _replace_item(items, item_id, completed=not target.completed)


def edit_item_text(
    items: Sequence[ShoppingItem],
    item_id: str,
    text: str,
    taxonomy: Optional[Taxonomy] = None,
) -> List[ShoppingItem]:
    """
    Replace the text of one item.

    Edited text counts as manual entry (confidence 1.0). A classifier
    category is re-derived from the new text; a user category is kept.
    """
    taxonomy = taxonomy or DEFAULT_TAXONOMY
    target = next((item for item in items if item.id == item_id), None)
    if target is None:
        raise KeyError(item_id)

    edited = target.evolve(text=text, confidence=1.0)
    if not edited.is_user_categorized:
        edited = edited.evolve(
            category=classify(edited, taxonomy),
            category_source=CATEGORY_SOURCE_CLASSIFIER,
        )
    updated = [edited if item.id == item_id else item for item in items]
    return route_order(updated, taxonomy)


def remove_item(items: Sequence[ShoppingItem], item_id: str) -> List[ShoppingItem]:
    """Drop one item. Raises KeyError if absent."""
    remaining = [item for item in items if item.id != item_id]
    if len(remaining) == len(items):
        raise KeyError(item_id)
    return remaining
