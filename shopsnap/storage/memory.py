"""
In-memory storage backend
"""
import threading
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional

from shopsnap.models import Product, ShoppingList, Store
from shopsnap.storage.base import Storage

UPDATABLE_LIST_FIELDS = ('name', 'items', 'input_fingerprint', 'output_fingerprint')


def _copy_list(shopping_list: ShoppingList) -> ShoppingList:
    return replace(shopping_list, items=list(shopping_list.items))


def _copy_product(product: Product) -> Product:
    return replace(product, prices=dict(product.prices))


class MemoryStorage(Storage):
    """Process-local storage keyed by incrementing integer ids."""

    def __init__(self):
        self._lock = threading.RLock()
        self._shopping_lists: Dict[int, ShoppingList] = {}
        self._stores: Dict[int, Store] = {}
        self._products: Dict[int, Product] = {}
        self._next_list_id = 1
        self._next_store_id = 1
        self._next_product_id = 1

    # Shopping lists

    def get_shopping_list(self, list_id: int) -> Optional[ShoppingList]:
        with self._lock:
            shopping_list = self._shopping_lists.get(list_id)
            return _copy_list(shopping_list) if shopping_list else None

    def get_all_shopping_lists(self) -> List[ShoppingList]:
        with self._lock:
            lists = [_copy_list(item) for item in self._shopping_lists.values()]
        # Ties on timestamp fall back to the later id
        return sorted(lists, key=lambda l: (l.created_at, l.id), reverse=True)

    def create_shopping_list(self, shopping_list: ShoppingList) -> ShoppingList:
        with self._lock:
            created = replace(
                shopping_list,
                id=self._next_list_id,
                items=list(shopping_list.items),
                created_at=datetime.utcnow(),
            )
            self._shopping_lists[created.id] = created
            self._next_list_id += 1
            return _copy_list(created)

    def update_shopping_list(
        self, list_id: int, updates: Dict[str, Any]
    ) -> Optional[ShoppingList]:
        with self._lock:
            existing = self._shopping_lists.get(list_id)
            if existing is None:
                return None
            changes = {k: v for k, v in updates.items() if k in UPDATABLE_LIST_FIELDS}
            if 'items' in changes:
                changes['items'] = list(changes['items'])
            updated = replace(existing, **changes)
            self._shopping_lists[list_id] = updated
            return _copy_list(updated)

    def delete_shopping_list(self, list_id: int) -> bool:
        with self._lock:
            return self._shopping_lists.pop(list_id, None) is not None

    # Stores

    def get_all_stores(self) -> List[Store]:
        with self._lock:
            return [replace(store) for store in self._stores.values()]

    def create_store(self, store: Store) -> Store:
        with self._lock:
            created = replace(store, id=self._next_store_id)
            self._stores[created.id] = created
            self._next_store_id += 1
            return replace(created)

    # Products

    def get_all_products(self) -> List[Product]:
        with self._lock:
            return [_copy_product(product) for product in self._products.values()]

    def create_product(self, product: Product) -> Product:
        with self._lock:
            created = replace(product, id=self._next_product_id, prices=dict(product.prices))
            self._products[created.id] = created
            self._next_product_id += 1
            return _copy_product(created)
