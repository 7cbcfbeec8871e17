"""Quantity and item label extraction from dictated segments.

Each strategy looks at one separator-free segment and returns a
``ParsedLine`` or ``None``. ``extract`` tries them in order and keeps the
first hit, ``parse_batch`` runs the whole pipeline on a free-form text.
"""

import re
from typing import Callable

from container_counter.dictation.base import ParsedLine
from container_counter.dictation.normalize import NUMBER_WORDS, normalize

LENGTH_UNITS = frozenset({
    "mm",
    "millimetre",
    "millimetres",
    "millimètre",
    "millimètres",
})

_LEADING_DIGITS_RE = re.compile(r"^(\d+)\s+(.+)$", re.DOTALL)
_TRAILING_MULTIPLIER_RE = re.compile(r"^(.+?)\s+[x×]\s*(\d+)\s*$", re.IGNORECASE | re.DOTALL)
_TRAILING_DIGITS_RE = re.compile(r"^(.+?)\s+(\d+)\s*$", re.DOTALL)
_SEGMENT_SPLIT_RE = re.compile(r"[;,]+")


def _line(quantity: int, label: str) -> ParsedLine | None:
    label = " ".join(label.split())
    if quantity <= 0 or not label:
        return None
    return ParsedLine(item_label=label, quantity=quantity)


def leading_digits(segment: str) -> ParsedLine | None:
    """``"10 vis M6x20"``"""
    m = _LEADING_DIGITS_RE.match(segment)
    if not m:
        return None
    return _line(int(m.group(1)), m.group(2))


def leading_number_word(segment: str) -> ParsedLine | None:
    """``"dix vis M6x20"``"""
    parts = segment.split(None, 1)
    if len(parts) < 2:
        return None
    quantity = NUMBER_WORDS.get(parts[0].lower())
    if quantity is None:
        return None
    return _line(quantity, parts[1])


def trailing_multiplier(segment: str) -> ParsedLine | None:
    """``"vis M6x20 x 10"`` or ``"vis M6x20 x10"``"""
    m = _TRAILING_MULTIPLIER_RE.match(segment)
    if not m:
        return None
    return _line(int(m.group(2)), m.group(1))


def trailing_digits(segment: str) -> ParsedLine | None:
    """``"vis M6x20 10"``"""
    m = _TRAILING_DIGITS_RE.match(segment)
    if not m:
        return None
    return _line(int(m.group(2)), m.group(1))


def first_standalone_number(segment: str) -> ParsedLine | None:
    """Take the first bare number that is not a length ("6 mm")."""
    tokens = segment.split()
    for i, token in enumerate(tokens):
        if not token.isdigit() or not token.isascii():
            continue
        following = tokens[i + 1].lower() if i + 1 < len(tokens) else ""
        if following in LENGTH_UNITS:
            continue
        quantity = int(token)
        if quantity <= 0:
            continue
        return _line(quantity, " ".join(tokens[:i] + tokens[i + 1:]))
    return None


STRATEGIES: tuple[Callable[[str], ParsedLine | None], ...] = (
    leading_digits,
    leading_number_word,
    trailing_multiplier,
    trailing_digits,
    first_standalone_number,
)


def extract(segment: str) -> ParsedLine | None:
    segment = (segment or "").strip()
    if not segment:
        return None
    for strategy in STRATEGIES:
        line = strategy(segment)
        if line is not None:
            return line
    return None


def parse_batch(text: str) -> list[ParsedLine]:
    """Parse a whole dictation into lines, dropping segments without a quantity."""
    lines: list[ParsedLine] = []
    for segment in _SEGMENT_SPLIT_RE.split(normalize(text)):
        line = extract(segment)
        if line is not None:
            lines.append(line)
    return lines
