"""
Models module for ShopSnap Backend
"""
from shopsnap.models.shopping_item import (
    CATEGORY_SOURCE_CLASSIFIER,
    CATEGORY_SOURCE_USER,
    Position,
    ShoppingItem,
    items_from_payload,
)
from shopsnap.models.shopping_list import ShoppingList
from shopsnap.models.store import Store
from shopsnap.models.product import Product, SUPERMARKET_CHAINS

__all__ = [
    'CATEGORY_SOURCE_CLASSIFIER',
    'CATEGORY_SOURCE_USER',
    'Position',
    'ShoppingItem',
    'items_from_payload',
    'ShoppingList',
    'Store',
    'Product',
    'SUPERMARKET_CHAINS',
]
