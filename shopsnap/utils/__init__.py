"""
Utilities module for ShopSnap Backend
"""

from shopsnap.utils.validators import validate_input_length, validate_coordinates
from shopsnap.utils.helpers import clean_text, strip_html, haversine_km

__all__ = [
    "validate_input_length",
    "validate_coordinates",
    "clean_text",
    "strip_html",
    "haversine_km",
]
