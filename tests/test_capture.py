"""Tests for manual and OCR capture parsing."""

import pytest

from shopsnap.services.capture import (
    fallback_items,
    parse_manual_entry,
    parse_ocr_result,
)


class TestManualEntry:
    def test_splits_on_commas_and_newlines(self):
        items = parse_manual_entry("milk, bread\neggs,,\n  apples  ", timestamp=42)

        assert [item.text for item in items] == ["milk", "bread", "eggs", "apples"]
        assert [item.id for item in items] == [
            "manual-42-0", "manual-42-1", "manual-42-2", "manual-42-3",
        ]
        assert all(item.confidence == 1.0 for item in items)
        assert all(item.category is None for item in items)

    @pytest.mark.parametrize("text", ["", " , \n ", None])
    def test_blank_input_gives_no_items(self, text):
        assert parse_manual_entry(text) == []

    def test_ids_unique_within_batch(self):
        items = parse_manual_entry("a\nb\nc")
        assert len({item.id for item in items}) == 3


class TestOCRResult:
    WORDS = [
        {"text": "Milk", "confidence": 90, "bbox": {"x0": 1, "y0": 2, "x1": 11, "y1": 12}},
        {"text": "2L", "confidence": 70},
    ]

    def test_parses_lines_with_confidence_and_position(self):
        items = parse_ocr_result("Milk 2L\nab\n123\nBread!!", self.WORDS, timestamp=5)

        assert [item.id for item in items] == ["ocr-5-0", "ocr-5-1"]
        milk, bread = items
        assert milk.text == "Milk 2L"
        assert milk.confidence == pytest.approx(0.8)
        assert milk.position.to_dict() == {"x": 1.0, "y": 2.0, "width": 10.0, "height": 10.0}
        assert bread.text == "Bread"
        assert bread.confidence == pytest.approx(0.8)
        assert bread.position is None

    def test_noise_characters_removed_but_brackets_kept(self):
        items = parse_ocr_result("Eggs (x12)!  free-range*", timestamp=1)
        assert items[0].text == "Eggs (x12) free-range"

    def test_low_word_confidence_line_is_dropped(self):
        words = [{"text": "Milk", "confidence": 20}, {"text": "Bread", "confidence": 95}]
        items = parse_ocr_result("Milk\nBread", words, timestamp=1)
        assert [item.text for item in items] == ["Bread"]
        assert parse_ocr_result("Milk", words[:1], timestamp=1) == []

    def test_accepted_low_confidence_is_clamped(self):
        words = [{"text": "Milk", "confidence": 45}]
        items = parse_ocr_result("Milk", words, timestamp=1)
        assert items[0].confidence == pytest.approx(0.5)

    def test_high_word_confidence_is_capped(self):
        words = [{"text": "Milk", "confidence": 150}]
        items = parse_ocr_result("Milk", words, timestamp=1)
        assert items[0].confidence == 1.0

    def test_lines_cleaning_to_nothing_are_dropped(self):
        # Three chars with a letter, but only punctuation remains after cleanup
        assert parse_ocr_result("a!!", timestamp=1)[0].text == "a"
        assert parse_ocr_result("!!!\n", timestamp=1) == []

    def test_malformed_words_are_ignored(self):
        words = [None, "Milk", {"text": 3}, {"text": "Milk", "confidence": "high"}]
        items = parse_ocr_result("Milk", words, timestamp=1)
        assert items[0].confidence == pytest.approx(0.8)

    def test_non_string_text(self):
        assert parse_ocr_result(None) == []


def test_fallback_item():
    (item,) = fallback_items()
    assert item.id == "fallback-1"
    assert item.text == "Unable to process image"
    assert item.confidence == 0.5
