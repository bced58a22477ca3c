"""Text normalization shared by the validator and the category table."""

from __future__ import annotations

import re
import unicodedata

_WORD_RE = re.compile(r"^[a-z ]+$")


def normalize_accents(text: str) -> str:
    """Strip combining accents, e.g. "São" -> "Sao"."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_word(word: str) -> str:
    """Trim, lower-case and strip accents for comparisons."""
    return normalize_accents(word.strip().lower())


def category_key(name: str) -> str:
    """Lookup key for a category name: normalized, inner whitespace collapsed."""
    return " ".join(normalize_word(name).split())


def is_word_shaped(normalized: str) -> bool:
    """True if the normalized word holds only letters and spaces."""
    return bool(_WORD_RE.match(normalized))
