"""
Turning raw captures into shopping items.

Two sources feed the list: text typed by the user and the text/word
output of the OCR provider. Both produce unclassified ShoppingItems with
ids that are unique within one capture batch.
"""
import re
import time
from typing import Dict, List, Optional, Sequence

from shopsnap.models import Position, ShoppingItem

MANUAL_SPLIT = re.compile(r"[,\n]+")
OCR_NOISE = re.compile(r"[^\w\s()-]")
HAS_LETTER = re.compile(r"[a-zA-Z]")

DEFAULT_OCR_CONFIDENCE = 0.8
MIN_LINE_CONFIDENCE = 0.5
MIN_ACCEPTED_CONFIDENCE = 0.4

FALLBACK_ITEM_TEXT = "Unable to process image"


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


def parse_manual_entry(text: str, timestamp: Optional[int] = None) -> List[ShoppingItem]:
    """
    Split typed input on commas and newlines into items.

    Manual items are fully trusted, so confidence is 1.0.
    """
    if not isinstance(text, str):
        return []
    stamp = timestamp if timestamp is not None else _timestamp_ms()
    parts = [part.strip() for part in MANUAL_SPLIT.split(text)]
    return [
        ShoppingItem(id=f"manual-{stamp}-{index}", text=part, confidence=1.0)
        for index, part in enumerate(p for p in parts if p)
    ]


def _clean_ocr_line(line: str) -> str:
    return " ".join(OCR_NOISE.sub("", line.strip()).split())


def _word_text(word: Dict) -> str:
    text = word.get("text") if isinstance(word, dict) else None
    return text if isinstance(text, str) else ""


def _line_confidence(line: str, words: Sequence[Dict]) -> float:
    lowered = line.lower()
    scores = []
    for word in words:
        text = _word_text(word)
        confidence = word.get("confidence") if isinstance(word, dict) else None
        if text and text.lower() in lowered and isinstance(confidence, (int, float)):
            scores.append(float(confidence))
    if not scores:
        return DEFAULT_OCR_CONFIDENCE
    return sum(scores) / len(scores) / 100


def _line_position(line: str, words: Sequence[Dict]) -> Optional[Position]:
    for word in words:
        text = _word_text(word)
        if not text or text not in line:
            continue
        bbox = word.get("bbox")
        if not isinstance(bbox, dict):
            continue
        try:
            x0, y0 = float(bbox["x0"]), float(bbox["y0"])
            x1, y1 = float(bbox["x1"]), float(bbox["y1"])
        except (KeyError, TypeError, ValueError):
            continue
        return Position(x=x0, y=y0, width=x1 - x0, height=y1 - y0)
    return None


def parse_ocr_result(
    text: str,
    words: Optional[Sequence[Dict]] = None,
    timestamp: Optional[int] = None,
) -> List[ShoppingItem]:
    """
    Convert recognized page text into shopping items.

    Lines shorter than three characters or without any letter are
    treated as noise. Line confidence is the mean confidence (0-100) of
    recognized words found in the line. Lines at or below 0.4 are dropped
    and the rest are clamped to [0.5, 1.0].

    Args:
        text: Full recognized text, one list entry per line
        words: Word observations {text, confidence, bbox: {x0, y0, x1, y1}}
        timestamp: Millisecond timestamp used in item ids

    Returns:
        Items in page order
    """
    if not isinstance(text, str):
        return []
    words = [word for word in (words or []) if isinstance(word, dict)]
    stamp = timestamp if timestamp is not None else _timestamp_ms()

    lines = [
        line for line in text.split("\n")
        if len(line.strip()) > 2 and HAS_LETTER.search(line.strip())
    ]

    items = []
    for index, line in enumerate(lines):
        cleaned = _clean_ocr_line(line)
        confidence = _line_confidence(line, words)
        if not cleaned or confidence <= MIN_ACCEPTED_CONFIDENCE:
            continue
        items.append(ShoppingItem(
            id=f"ocr-{stamp}-{index}",
            text=cleaned,
            confidence=max(MIN_LINE_CONFIDENCE, min(1.0, confidence)),
            position=_line_position(line, words),
        ))
    return items


def fallback_items() -> List[ShoppingItem]:
    """Placeholder returned in place of a failed OCR capture."""
    return [ShoppingItem(id="fallback-1", text=FALLBACK_ITEM_TEXT, confidence=0.5)]
