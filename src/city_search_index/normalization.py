"""Text normalization for search keys and slugs.

Names are matched without regard to case, accents or punctuation, so
"Saint-Étienne" and "saint etienne" produce the same tokens.
"""

from __future__ import annotations

import re
import unicodedata

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def normalize_text(text: str) -> str:
    """Normalize text for indexing.

    Transformations:
    1. Decompose accented characters and drop the combining marks
    2. Lowercase
    3. Replace every run of non-alphanumeric characters with a single space
    4. Strip leading/trailing whitespace

    Args:
        text: Raw text (city name or code).

    Returns:
        Normalized text containing only ``[a-z0-9 ]``.
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    # Ligatures have no decomposition.
    s = stripped.lower().replace("œ", "oe").replace("æ", "ae")
    s = _NON_ALNUM_RE.sub(" ", s)
    return s.strip()


def slugify(text: str) -> str:
    """Return a URL-safe slug, e.g. "L'Haÿ-les-Roses" -> "l-hay-les-roses"."""
    return "-".join(normalize_text(text).split())
