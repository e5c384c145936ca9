#!/usr/bin/env python
"""
Database initialization script for ShopSnap Backend.
Run this script to create/reset the SQLite database.
"""

import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from shopsnap.storage import SQLiteStorage, seed_storage


def init_database(db_path: str = "shopsnap.db", reset: bool = False) -> SQLiteStorage:
    """
    Initialize the database.

    Args:
        db_path: Path to the database file
        reset: If True, delete existing database and create fresh
    """
    if reset and os.path.exists(db_path):
        print(f"Removing existing database: {db_path}")
        os.remove(db_path)

    print(f"Initializing database: {db_path}")
    storage = SQLiteStorage(db_path)
    print("Database initialized successfully!")
    return storage


def print_stats(storage: SQLiteStorage) -> None:
    print(f"  - Shopping lists: {len(storage.get_all_shopping_lists())}")
    print(f"  - Stores: {len(storage.get_all_stores())}")
    print(f"  - Products: {len(storage.get_all_products())}")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Initialize ShopSnap database")
    parser.add_argument(
        "--reset", action="store_true", help="Reset database (delete and recreate)"
    )
    parser.add_argument(
        "--seed", action="store_true", help="Add seed stores and products"
    )
    parser.add_argument(
        "--db-path",
        default="shopsnap.db",
        help="Path to database file (default: shopsnap.db)",
    )

    args = parser.parse_args()

    storage = init_database(args.db_path, args.reset)

    if args.seed:
        print("\nAdding seed data...")
        if not seed_storage(storage):
            print("  - Database already contains data, skipped")

    print("\nDatabase now has:")
    print_stats(storage)
    storage.close()
    print("\nDone!")
