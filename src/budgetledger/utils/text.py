"""Text normalization helpers."""

import re
import unicodedata

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_SPACES = re.compile(r"\s+")


def normalize_description(description: str | None) -> str:
    """Normalize a bank description for comparisons and hashing.

    Lowercases, strips accents, drops punctuation and collapses whitespace,
    so "CB  Café-Dupont" and "cb cafe dupont" normalize identically.
    """
    if not description:
        return ""
    decomposed = unicodedata.normalize("NFD", description.lower())
    without_accents = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _SPACES.sub(" ", _NON_ALNUM.sub("", without_accents)).strip()
