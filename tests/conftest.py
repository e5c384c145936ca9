"""Shared fixtures for ShopSnap tests."""

import pytest

from shopsnap import create_app
from shopsnap.config import TestingConfig
from shopsnap.models import ShoppingItem


@pytest.fixture
def app():
    """Flask app backed by seeded in-memory storage."""
    return create_app(TestingConfig)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_item():
    """Build a ShoppingItem with sensible defaults."""

    def _make(item_id, text, **fields):
        return ShoppingItem(id=item_id, text=text, **fields)

    return _make
