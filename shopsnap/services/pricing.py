"""
Price comparison and online ordering across supermarket chains
"""
from typing import Dict, List, Optional, Sequence
from urllib.parse import urlencode

from shopsnap.models import Product, SUPERMARKET_CHAINS, ShoppingItem, Store
from shopsnap.utils.helpers import format_currency

# Estimated basket cost per item before the chain multiplier (GBP)
ESTIMATED_ITEM_PRICE = 2.5

ONLINE_SERVICES = [
    {
        "id": "tesco-delivery",
        "name": "Tesco Groceries",
        "chain": "Tesco",
        "delivery_available": True,
        "click_collect_available": True,
        "delivery_slots": ["Today 18:00-20:00", "Tomorrow 10:00-12:00", "Tomorrow 14:00-16:00"],
        "min_order_value": 40.0,
        "delivery_fee": 4.50,
        "price_multiplier": 1.1,
        "url": "https://www.tesco.com/groceries",
    },
    {
        "id": "sainsburys-delivery",
        "name": "Sainsbury's Groceries",
        "chain": "Sainsbury's",
        "delivery_available": True,
        "click_collect_available": True,
        "delivery_slots": ["Today 19:00-21:00", "Tomorrow 09:00-11:00", "Tomorrow 15:00-17:00"],
        "min_order_value": 40.0,
        "delivery_fee": 5.00,
        "price_multiplier": 1.15,
        "url": "https://www.sainsburys.co.uk/groceries-api",
    },
    {
        "id": "asda-delivery",
        "name": "ASDA Groceries",
        "chain": "ASDA",
        "delivery_available": True,
        "click_collect_available": True,
        "delivery_slots": ["Tomorrow 11:00-13:00", "Tomorrow 16:00-18:00"],
        "min_order_value": 25.0,
        "delivery_fee": 3.50,
        "price_multiplier": 1.05,
        "url": "https://groceries.asda.com",
    },
]


def find_product(item: ShoppingItem, products: Sequence[Product]) -> Optional[Product]:
    """
    First product matching an item.

    A product matches when its name contains the item text, or when the
    item text contains the first word of the product name.
    """
    text = item.text.strip().lower() if isinstance(item.text, str) else ""
    if not text:
        return None
    for product in products:
        name = product.name.lower()
        first_word = name.split(" ")[0]
        if text in name or (first_word and first_word in text):
            return product
    return None


def best_price(product: Product, chains: Sequence[str] = None) -> Optional[Dict]:
    """Cheapest positive price for a product among the given chains."""
    best = None
    for chain in chains or SUPERMARKET_CHAINS:
        price = product.price_at(chain)
        if price is None or price <= 0:
            continue
        if best is None or price < best["price"]:
            best = {"chain": chain, "store": SUPERMARKET_CHAINS[chain], "price": price}
    return best


def compare_prices(
    items: Sequence[ShoppingItem],
    products: Sequence[Product],
    chains: Sequence[str] = None,
) -> Dict:
    """
    Price a shopping list at each chain.

    Args:
        items: Items of the list (completed items included)
        products: Catalogue to match against
        chains: Chain keys to compare; defaults to every tracked chain

    Returns:
        Dict with per-item matches, per-chain totals, and the cheapest chain
    """
    chains = [chain for chain in (chains or SUPERMARKET_CHAINS) if chain in SUPERMARKET_CHAINS]

    matches = []
    unmatched = []
    for item in items:
        product = find_product(item, products)
        if product is None:
            unmatched.append(item.id)
            continue
        matches.append({
            "item_id": item.id,
            "item_text": item.text,
            "product": product.to_dict(),
            "best": best_price(product, chains),
        })

    totals = {chain: 0.0 for chain in chains}
    for match in matches:
        for chain in chains:
            totals[chain] += match["product"]["prices"].get(chain) or 0.0
    totals = {chain: round(total, 2) for chain, total in totals.items()}

    positive = {chain: total for chain, total in totals.items() if total > 0}
    cheapest = min(positive, key=positive.get) if positive else None

    return {
        "matches": matches,
        "unmatched": unmatched,
        "totals": totals,
        "formatted_totals": {chain: format_currency(total) for chain, total in totals.items()},
        "best_chain": cheapest,
        "best_store": SUPERMARKET_CHAINS[cheapest] if cheapest else None,
        "best_total": positive[cheapest] if cheapest else None,
    }


def estimated_total(items: Sequence[ShoppingItem], multiplier: float) -> float:
    return round(len(items) * ESTIMATED_ITEM_PRICE * multiplier, 2)


def online_services(items: Sequence[ShoppingItem]) -> List[Dict]:
    """Online ordering options with an estimated basket total each."""
    services = []
    for service in ONLINE_SERVICES:
        entry = {k: v for k, v in service.items() if k != "price_multiplier"}
        entry["estimated_total"] = estimated_total(items, service["price_multiplier"])
        entry["meets_minimum"] = entry["estimated_total"] >= service["min_order_value"]
        services.append(entry)
    return services


def directions_url(store: Store) -> str:
    """Google Maps directions link to a store."""
    query = urlencode({
        "api": 1,
        "destination": f"{store.latitude},{store.longitude}",
    })
    return f"https://www.google.com/maps/dir/?{query}"
