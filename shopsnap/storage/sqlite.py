"""
SQLite storage backend
"""
import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

from shopsnap.models import (
    Product,
    SUPERMARKET_CHAINS,
    ShoppingList,
    Store,
    items_from_payload,
)
from shopsnap.storage.base import Storage

logger = logging.getLogger(__name__)

_LIST_COLUMNS = {
    'name': 'name',
    'items': 'items',
    'input_fingerprint': 'input_fingerprint',
    'output_fingerprint': 'output_fingerprint',
}


class SQLiteStorage(Storage):
    """SQLite database handler for lists, stores and products."""

    def __init__(self, db_path: str = 'shopsnap.db'):
        """
        Initialize database connection.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = db_path
        self._local = threading.local()
        self._ensure_tables()

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if getattr(self._local, 'connection', None) is None:
            self._local.connection = sqlite3.connect(
                self.db_path,
                check_same_thread=False
            )
            self._local.connection.row_factory = sqlite3.Row
        return self._local.connection

    @contextmanager
    def get_cursor(self):
        """Context manager for database cursor."""
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            yield cursor
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()

    def close(self) -> None:
        connection = getattr(self._local, 'connection', None)
        if connection is not None:
            connection.close()
            self._local.connection = None

    def _ensure_tables(self) -> None:
        """Create database tables if they don't exist."""
        with self.get_cursor() as cursor:
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS shopping_lists (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    items TEXT NOT NULL DEFAULT '[]',
                    input_fingerprint TEXT,
                    output_fingerprint TEXT,
                    created_at TIMESTAMP NOT NULL
                )
            ''')

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS stores (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    chain TEXT NOT NULL,
                    address TEXT NOT NULL,
                    postcode TEXT NOT NULL,
                    phone TEXT,
                    latitude REAL NOT NULL,
                    longitude REAL NOT NULL,
                    opening_hours TEXT NOT NULL
                )
            ''')

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS products (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    category TEXT NOT NULL,
                    tesco_price REAL,
                    sainsburys_price REAL,
                    asda_price REAL,
                    morrisons_price REAL
                )
            ''')

            cursor.execute('''
                CREATE INDEX IF NOT EXISTS idx_products_name
                ON products(name)
            ''')

    # Row mapping

    @staticmethod
    def _row_to_list(row: sqlite3.Row) -> ShoppingList:
        return ShoppingList(
            id=row['id'],
            name=row['name'],
            items=items_from_payload(json.loads(row['items'] or '[]')),
            input_fingerprint=row['input_fingerprint'],
            output_fingerprint=row['output_fingerprint'],
            created_at=datetime.fromisoformat(row['created_at']),
        )

    @staticmethod
    def _row_to_product(row: sqlite3.Row) -> Product:
        return Product(
            id=row['id'],
            name=row['name'],
            category=row['category'],
            prices={chain: row[f'{chain}_price'] for chain in SUPERMARKET_CHAINS},
        )

    # Shopping lists

    def get_shopping_list(self, list_id: int) -> Optional[ShoppingList]:
        with self.get_cursor() as cursor:
            cursor.execute('SELECT * FROM shopping_lists WHERE id = ?', (list_id,))
            row = cursor.fetchone()
            return self._row_to_list(row) if row else None

    def get_all_shopping_lists(self) -> List[ShoppingList]:
        with self.get_cursor() as cursor:
            cursor.execute('SELECT * FROM shopping_lists ORDER BY created_at DESC, id DESC')
            return [self._row_to_list(row) for row in cursor.fetchall()]

    def create_shopping_list(self, shopping_list: ShoppingList) -> ShoppingList:
        created_at = datetime.utcnow()
        with self.get_cursor() as cursor:
            cursor.execute('''
                INSERT INTO shopping_lists (
                    name, items, input_fingerprint, output_fingerprint, created_at
                ) VALUES (?, ?, ?, ?, ?)
            ''', (
                shopping_list.name,
                json.dumps([item.to_dict() for item in shopping_list.items]),
                shopping_list.input_fingerprint,
                shopping_list.output_fingerprint,
                created_at.isoformat(),
            ))
            list_id = cursor.lastrowid
        logger.debug(f"Created shopping list {list_id}")
        return self.get_shopping_list(list_id)

    def update_shopping_list(
        self, list_id: int, updates: Dict[str, Any]
    ) -> Optional[ShoppingList]:
        assignments = []
        values = []
        for field_name, value in updates.items():
            column = _LIST_COLUMNS.get(field_name)
            if column is None:
                continue
            if field_name == 'items':
                value = json.dumps([item.to_dict() for item in value])
            assignments.append(f'{column} = ?')
            values.append(value)

        with self.get_cursor() as cursor:
            if assignments:
                cursor.execute(
                    f'UPDATE shopping_lists SET {", ".join(assignments)} WHERE id = ?',
                    (*values, list_id)
                )
        return self.get_shopping_list(list_id)

    def delete_shopping_list(self, list_id: int) -> bool:
        with self.get_cursor() as cursor:
            cursor.execute('DELETE FROM shopping_lists WHERE id = ?', (list_id,))
            return cursor.rowcount > 0

    # Stores

    def get_all_stores(self) -> List[Store]:
        with self.get_cursor() as cursor:
            cursor.execute('SELECT * FROM stores ORDER BY id')
            return [Store.from_dict(dict(row)) for row in cursor.fetchall()]

    def create_store(self, store: Store) -> Store:
        with self.get_cursor() as cursor:
            cursor.execute('''
                INSERT INTO stores (
                    name, chain, address, postcode, phone,
                    latitude, longitude, opening_hours
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ''', (
                store.name,
                store.chain,
                store.address,
                store.postcode,
                store.phone,
                store.latitude,
                store.longitude,
                store.opening_hours,
            ))
            store_id = cursor.lastrowid
            cursor.execute('SELECT * FROM stores WHERE id = ?', (store_id,))
            return Store.from_dict(dict(cursor.fetchone()))

    # Products

    def get_all_products(self) -> List[Product]:
        with self.get_cursor() as cursor:
            cursor.execute('SELECT * FROM products ORDER BY id')
            return [self._row_to_product(row) for row in cursor.fetchall()]

    def search_products(self, query: str) -> List[Product]:
        with self.get_cursor() as cursor:
            cursor.execute(
                'SELECT * FROM products WHERE LOWER(name) LIKE ? ORDER BY id',
                (f'%{query.lower()}%',)
            )
            return [self._row_to_product(row) for row in cursor.fetchall()]

    def create_product(self, product: Product) -> Product:
        with self.get_cursor() as cursor:
            cursor.execute('''
                INSERT INTO products (
                    name, category, tesco_price, sainsburys_price,
                    asda_price, morrisons_price
                ) VALUES (?, ?, ?, ?, ?, ?)
            ''', (
                product.name,
                product.category,
                *(product.prices.get(chain) for chain in SUPERMARKET_CHAINS),
            ))
            product_id = cursor.lastrowid
            cursor.execute('SELECT * FROM products WHERE id = ?', (product_id,))
            return self._row_to_product(cursor.fetchone())
