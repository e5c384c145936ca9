"""
Helper utilities for ShopSnap Backend
"""

import math

from bs4 import BeautifulSoup

EARTH_RADIUS_KM = 6371.0


def clean_text(text: str) -> str:
    """
    Collapse runs of whitespace and trim.

    Args:
        text: The text to clean.

    Returns:
        Cleaned text string.
    """
    if not text or not isinstance(text, str):
        return ""
    return " ".join(text.split())


def strip_html(text: str) -> str:
    """Remove HTML markup (script and style bodies included) and decode entities."""
    if not isinstance(text, str):
        return ""
    soup = BeautifulSoup(text, "html.parser")
    for element in soup(["script", "style"]):
        element.decompose()
    return soup.get_text()


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two coordinates in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def format_currency(amount: float, currency: str = "GBP") -> str:
    """
    Format a numeric amount as currency string.

    Args:
        amount: The numeric amount.
        currency: Currency code (default: GBP).

    Returns:
        Formatted currency string.
    """
    currency_symbols = {
        "GBP": "£",
        "EUR": "€",
        "USD": "$",
    }

    symbol = currency_symbols.get(currency, currency)
    return f"{symbol}{amount:,.2f}"
