"""
Seed data: Manchester supermarkets and a small priced catalogue
"""
import logging

from shopsnap.models import Product, Store
from shopsnap.storage.base import Storage

logger = logging.getLogger(__name__)

SEED_STORES = [
    Store(
        name="Tesco Extra - Manchester Arndale",
        chain="Tesco",
        address="49 High St, Manchester M4 3AH",
        postcode="M4 3AH",
        phone="0345 677 9696",
        latitude=53.4834,
        longitude=-2.2426,
        opening_hours="24 hours",
    ),
    Store(
        name="Sainsbury's Local",
        chain="Sainsbury's",
        address="134 Deansgate, Manchester M3 2BQ",
        postcode="M3 2BQ",
        phone="0161 834 3280",
        latitude=53.4794,
        longitude=-2.2453,
        opening_hours="7am - 11pm",
    ),
    Store(
        name="ASDA Manchester",
        chain="ASDA",
        address="Eastlands, Ashton New Rd, Manchester M11 4BD",
        postcode="M11 4BD",
        phone="0161 230 1143",
        latitude=53.4831,
        longitude=-2.2007,
        opening_hours="7am - 10pm",
    ),
    Store(
        name="Marks & Spencer",
        chain="M&S",
        address="7 Market St, Manchester M1 1WR",
        postcode="M1 1WR",
        phone="0161 831 7341",
        latitude=53.4808,
        longitude=-2.2426,
        opening_hours="8am - 9pm",
    ),
]


def _prices(tesco, sainsburys, asda, morrisons):
    return {'tesco': tesco, 'sainsburys': sainsburys, 'asda': asda, 'morrisons': morrisons}


SEED_PRODUCTS = [
    Product(name="Milk (2L)", category="Dairy", prices=_prices(1.45, 1.50, 1.25, 1.40)),
    Product(name="Bread (Wholemeal)", category="Bakery", prices=_prices(1.20, 1.35, 1.30, 1.25)),
    Product(name="Apples (1kg)", category="Fresh Produce", prices=_prices(2.50, 2.25, 2.45, 2.35)),
    Product(
        name="Chicken Breast (1kg)",
        category="Meat & Fish",
        prices=_prices(6.50, 6.75, 6.20, 6.45),
    ),
    Product(name="Tomatoes (500g)", category="Fresh Produce", prices=_prices(1.80, 1.95, 1.90, 1.85)),
    Product(name="Bananas (1kg)", category="Fresh Produce", prices=_prices(1.10, 1.15, 1.05, 1.12)),
    Product(
        name="Cheddar Cheese (200g)",
        category="Dairy",
        prices=_prices(2.50, 2.65, 2.40, 2.55),
    ),
]


def seed_storage(storage: Storage) -> bool:
    """
    Populate an empty storage with the seed stores and products.

    Returns:
        True if data was inserted, False if the storage already had data
    """
    if not storage.is_empty():
        logger.info("Storage already seeded")
        return False

    for store in SEED_STORES:
        storage.create_store(store)
    for product in SEED_PRODUCTS:
        storage.create_product(product)

    logger.info(f"Seeded {len(SEED_STORES)} stores and {len(SEED_PRODUCTS)} products")
    return True
