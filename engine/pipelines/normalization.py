"""Text normalization for vi/en search input.

Search compares text without diacritics, so "Đà Nẵng", "da nang" and
"  DA NANG " all normalize to the same key.
"""
from __future__ import annotations

import unicodedata

# Letters NFD does not decompose into base + combining mark
_SPECIAL_LETTERS = str.maketrans({
    "đ": "d",
    "ð": "d",
    "ø": "o",
    "ł": "l",
    "ß": "ss",
    "æ": "ae",
    "œ": "oe",
})


def strip_diacritics(text: str) -> str:
    """Map accented lowercase characters to their closest ASCII base letter."""
    text = unicodedata.normalize("NFD", text)
    text = "".join(c for c in text if unicodedata.category(c) != "Mn")
    # After mark removal: "ǣ" only becomes "æ" once its macron is gone
    text = text.translate(_SPECIAL_LETTERS)
    return unicodedata.normalize("NFC", text)


def normalize_text(text: str | None) -> str:
    """Canonical comparison key: trimmed, lowercase, diacritic-free.

    Total over its input (``None`` gives ``""``) and idempotent.
    Inner whitespace is kept as typed; substring checks against the
    normalized query depend on it.
    """
    if not text:
        return ""
    # Lowercase first: some capitals lowercase into base + combining mark
    return strip_diacritics(text.strip().lower()).strip()
