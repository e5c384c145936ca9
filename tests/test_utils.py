"""Tests for rate limiting, caching, helpers and validators."""

from unittest.mock import patch

import pytest

from shopsnap.utils.cache import TTLCache
from shopsnap.utils.helpers import clean_text, format_currency, haversine_km, strip_html
from shopsnap.utils.rate_limiter import RateLimiter
from shopsnap.utils.validators import (
    parse_bounded_float,
    validate_coordinates,
    validate_input_length,
)


class TestRateLimiter:
    def test_allows_up_to_limit(self):
        limiter = RateLimiter(requests_per_minute=2)

        assert limiter.is_allowed("1.2.3.4")
        assert limiter.is_allowed("1.2.3.4")
        assert not limiter.is_allowed("1.2.3.4")
        assert limiter.is_allowed("5.6.7.8")
        assert limiter.get_remaining("1.2.3.4") == 0
        assert limiter.get_remaining("5.6.7.8") == 1

    def test_window_slides(self):
        limiter = RateLimiter(requests_per_minute=1, window_seconds=60)
        with patch("shopsnap.utils.rate_limiter.time.time", return_value=1000.0):
            assert limiter.is_allowed("ip")
            assert not limiter.is_allowed("ip")
            assert limiter.get_reset_time("ip") == 1060.0
        with patch("shopsnap.utils.rate_limiter.time.time", return_value=1061.0):
            assert limiter.is_allowed("ip")

    def test_cleanup_removes_idle_clients(self):
        limiter = RateLimiter(requests_per_minute=5, window_seconds=60)
        with patch("shopsnap.utils.rate_limiter.time.time", return_value=1000.0):
            limiter.is_allowed("old")
        with patch("shopsnap.utils.rate_limiter.time.time", return_value=2000.0):
            limiter.is_allowed("new")
            assert limiter.cleanup() == 1
        assert limiter.get_reset_time("old") is None


class TestTTLCache:
    def test_set_and_get(self):
        cache = TTLCache()
        cache.set("k", {"v": 1})
        assert cache.get("k") == {"v": 1}
        assert cache.get("missing") is None

    def test_entries_expire(self):
        cache = TTLCache(ttl_seconds=10)
        with patch("shopsnap.utils.cache.time.time", return_value=100.0):
            cache.set("k", "v")
        with patch("shopsnap.utils.cache.time.time", return_value=111.0):
            assert cache.get("k") is None
        assert cache.stats()["size"] == 0

    def test_oldest_entry_evicted_when_full(self):
        cache = TTLCache(max_size=2)
        with patch("shopsnap.utils.cache.time.time", side_effect=[1.0, 2.0, 3.0]):
            cache.set("a", 1)
            cache.set("b", 2)
            cache.set("c", 3)
        assert cache.get("a") is None
        assert cache.get("b") == 2
        assert cache.get("c") == 3

    def test_delete_prefix(self):
        cache = TTLCache()
        cache.set("prices:1:x", 1)
        cache.set("prices:1:y", 2)
        cache.set("prices:10:x", 3)

        assert cache.delete_prefix("prices:1:") == 2
        assert cache.get("prices:10:x") == 3


class TestHelpers:
    def test_clean_text(self):
        assert clean_text("  semi   skimmed\tmilk \n") == "semi skimmed milk"
        assert clean_text(None) == ""

    def test_strip_html(self):
        assert strip_html("<b>Milk</b> &amp; eggs") == "Milk & eggs"
        assert strip_html("<script>alert(1)</script>bread") == "bread"
        assert strip_html("Fish &nbsp;&amp; chips &pound;2") == "Fish \xa0& chips £2"
        assert clean_text(strip_html("Fish &nbsp;&amp; chips &pound;2")) == "Fish & chips £2"
        assert strip_html("&amp;lt;") == "&lt;"
        assert strip_html(5) == ""

    def test_haversine(self):
        assert haversine_km(53.4834, -2.2426, 53.4834, -2.2426) == 0.0
        # London to Manchester
        assert haversine_km(51.5074, -0.1278, 53.4808, -2.2426) == pytest.approx(262, abs=2)

    def test_format_currency(self):
        assert format_currency(3.15) == "£3.15"
        assert format_currency(1234.5, "EUR") == "€1,234.50"
        assert format_currency(2, "CHF") == "CHF2.00"


class TestValidators:
    def test_validate_input_length(self):
        assert validate_input_length("milk", 4)
        assert not validate_input_length("milks", 4)
        assert not validate_input_length(None)

    @pytest.mark.parametrize("value, expected", [
        ("2.5", 2.5), (0, 0.0), ("101", None), ("-1", None),
        ("nan", None), ("abc", None), (None, None), (False, None),
    ])
    def test_parse_bounded_float(self, value, expected):
        assert parse_bounded_float(value, 0.0, 100.0) == expected

    def test_validate_coordinates(self):
        assert validate_coordinates("53.48", "-2.24")
        assert not validate_coordinates("91", "0")
        assert not validate_coordinates("0", "181")
        assert not validate_coordinates(None, "0")
