"""
Storage interface shared by the in-memory and SQLite backends
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from shopsnap.models import Product, ShoppingList, Store
from shopsnap.utils.helpers import haversine_km


class Storage(ABC):
    """CRUD over shopping lists, stores and products."""

    # Shopping lists

    @abstractmethod
    def get_shopping_list(self, list_id: int) -> Optional[ShoppingList]:
        pass

    @abstractmethod
    def get_all_shopping_lists(self) -> List[ShoppingList]:
        """All lists, newest first."""
        pass

    @abstractmethod
    def create_shopping_list(self, shopping_list: ShoppingList) -> ShoppingList:
        pass

    @abstractmethod
    def update_shopping_list(
        self, list_id: int, updates: Dict[str, Any]
    ) -> Optional[ShoppingList]:
        """
        Apply a partial update.

        Args:
            list_id: The list ID
            updates: Any of name, items, input_fingerprint, output_fingerprint

        Returns:
            The updated list, or None if it does not exist
        """
        pass

    @abstractmethod
    def delete_shopping_list(self, list_id: int) -> bool:
        pass

    # Stores

    @abstractmethod
    def get_all_stores(self) -> List[Store]:
        pass

    @abstractmethod
    def create_store(self, store: Store) -> Store:
        pass

    def get_stores_by_location(
        self, latitude: float, longitude: float, radius_km: float
    ) -> List[Tuple[Store, float]]:
        """
        Stores within radius_km of a point, nearest first.

        Returns:
            List of (store, distance_km) pairs
        """
        located = []
        for store in self.get_all_stores():
            distance = haversine_km(latitude, longitude, store.latitude, store.longitude)
            if distance <= radius_km:
                located.append((store, distance))
        located.sort(key=lambda pair: pair[1])
        return located

    # Products

    @abstractmethod
    def get_all_products(self) -> List[Product]:
        pass

    @abstractmethod
    def create_product(self, product: Product) -> Product:
        pass

    def get_product_by_name(self, name: str) -> Optional[Product]:
        """First product whose name contains the given text."""
        matches = self.search_products(name)
        return matches[0] if matches else None

    def search_products(self, query: str) -> List[Product]:
        lowered = query.lower()
        return [p for p in self.get_all_products() if lowered in p.name.lower()]

    def is_empty(self) -> bool:
        return not self.get_all_stores() and not self.get_all_products()

    def close(self) -> None:
        """Release any held resources."""
