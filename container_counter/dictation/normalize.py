"""Rewrite spoken French dictation into a canonical token stream."""

import re

NUMBER_WORDS: dict[str, int] = {
    "zero": 0,
    "zéro": 0,
    "un": 1,
    "une": 1,
    "deux": 2,
    "trois": 3,
    "quatre": 4,
    "cinq": 5,
    "six": 6,
    "sept": 7,
    "huit": 8,
    "neuf": 9,
    "dix": 10,
    "onze": 11,
    "douze": 12,
    "treize": 13,
    "quatorze": 14,
    "quinze": 15,
    "seize": 16,
    "vingt": 20,
}

_NUMBER_TOKEN = r"(?:\d+|" + "|".join(sorted(NUMBER_WORDS, key=len, reverse=True)) + r")\b"

_SEMICOLON_RE = re.compile(r"\bpoint[\s-]?virgule\b", re.IGNORECASE)
_COMMA_RE = re.compile(r"\bvirgule\b", re.IGNORECASE)
# "et" only separates items when a quantity follows it
_AND_RE = re.compile(r"\bet\s+(?=" + _NUMBER_TOKEN + ")", re.IGNORECASE)
_SIGN_RE = re.compile(r"\s*[+\-−]\s*")
_TIMES_RE = re.compile(r"\bfois\b", re.IGNORECASE)
_DIMENSION_RE = re.compile(r"\bm\s*(\d+)\s*[x×]\s*(\d+)\b", re.IGNORECASE)
_METRIC_RE = re.compile(r"\bm\s*(\d+)\b", re.IGNORECASE)
_SPACES_RE = re.compile(r"\s+")


def normalize(raw: str) -> str:
    """Normalize a raw dictation transcript.

    Spoken separators become ``,``/``;``, spoken signs become list
    separators, "fois" becomes ``x`` and screw sizes such as "m 6 x 20" are
    glued back into ``M6x20``. Applying it twice gives the same result.
    """
    text = (raw or "").strip()

    text = _SEMICOLON_RE.sub(";", text)
    text = _COMMA_RE.sub(",", text)
    text = _AND_RE.sub(", ", text)

    # Signs are list separators here, arithmetic only happens in sessions
    text = _SIGN_RE.sub(", ", text)

    text = _TIMES_RE.sub("x", text)

    text = _DIMENSION_RE.sub(lambda m: f"M{m.group(1)}x{m.group(2)}", text)
    text = _METRIC_RE.sub(lambda m: f"M{m.group(1)}", text)

    return _SPACES_RE.sub(" ", text).strip()
