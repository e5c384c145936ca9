"""
Storage backends for ShopSnap Backend
"""
from shopsnap.storage.base import Storage
from shopsnap.storage.memory import MemoryStorage
from shopsnap.storage.sqlite import SQLiteStorage
from shopsnap.storage.seed import seed_storage


def _sqlite_path(database_url: str) -> str:
    # Extract path from sqlite:/// URL
    if database_url and database_url.startswith('sqlite:///'):
        return database_url[10:]
    return 'shopsnap.db'


def create_storage(config) -> Storage:
    """Build the storage backend named by STORAGE_BACKEND."""
    backend = config.get('STORAGE_BACKEND', 'memory')
    if backend == 'memory':
        storage = MemoryStorage()
    elif backend == 'sqlite':
        storage = SQLiteStorage(_sqlite_path(config.get('DATABASE_URL')))
    else:
        raise ValueError(f"Unknown storage backend: {backend}")

    if config.get('SEED_DATA', True):
        seed_storage(storage)
    return storage


def get_storage() -> Storage:
    """Get the storage backend of the current app."""
    from flask import current_app

    storage = current_app.extensions.get('shopsnap.storage')
    if storage is None:
        storage = create_storage(current_app.config)
        current_app.extensions['shopsnap.storage'] = storage
    return storage


__all__ = [
    'Storage',
    'MemoryStorage',
    'SQLiteStorage',
    'create_storage',
    'get_storage',
    'seed_storage',
]
