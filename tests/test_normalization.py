"""Tests for text normalization and slugs."""

from __future__ import annotations

import pytest

from city_search_index.normalization import normalize_text, slugify


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Saint-Étienne", "saint etienne"),
        ("L'Haÿ-les-Roses", "l hay les roses"),
        ("  Aix   en Provence ", "aix en provence"),
        ("Œuilly", "oeuilly"),
        ("2A", "2a"),
        ("", ""),
        ("---", ""),
    ],
)
def test_normalize_text(raw: str, expected: str) -> None:
    assert normalize_text(raw) == expected


def test_normalize_text_is_idempotent() -> None:
    once = normalize_text("Châlons-en-Champagne")

    assert normalize_text(once) == once


def test_normalize_text_does_not_lengthen_plain_names() -> None:
    name = "Saint-Rémy-de-Provence"

    assert len(normalize_text(name)) <= len(name)


def test_slugify_joins_tokens_with_hyphens() -> None:
    assert slugify("Saint-Étienne 42218") == "saint-etienne-42218"
    assert slugify("L'Isle-sur-la-Sorgue") == "l-isle-sur-la-sorgue"
