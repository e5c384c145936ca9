"""
Validation utilities for ShopSnap Backend
"""

from typing import Optional


def validate_input_length(value: any, max_length: int = 1000) -> bool:
    """True for strings no longer than max_length."""
    return isinstance(value, str) and len(value) <= max_length


def parse_bounded_float(value: any, minimum: float, maximum: float) -> Optional[float]:
    """
    Parse a numeric input and check it lies within [minimum, maximum].

    Returns:
        The parsed float, or None if not a number or out of range.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (ValueError, TypeError):
        return None
    if number != number or number < minimum or number > maximum:
        return None
    return number


def validate_coordinates(latitude: any, longitude: any) -> bool:
    """True when both values are numbers within geographic bounds."""
    return (
        parse_bounded_float(latitude, -90.0, 90.0) is not None
        and parse_bounded_float(longitude, -180.0, 180.0) is not None
    )
