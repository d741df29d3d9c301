"""City records: conversion from source entries and the public projection."""

from __future__ import annotations

from collections.abc import Iterable

from ..normalization import normalize_text, slugify
from ..types import City, ElectionEntry, FullCity

COMMUNE_LABEL = "Libellé de la commune"
DEPARTMENT_CODE = "Code du département"
DEPARTMENT_LABEL = "Libellé du département"
COMMUNE_CODE = "Code de la commune"


def full_city_from_entry(entry: ElectionEntry) -> FullCity | None:
    """Convert a source entry into an indexable city.

    Returns None when the entry has no commune label; such entries are expected
    data sparsity rather than errors.
    """
    name = entry.get(COMMUNE_LABEL, "")
    if not name:
        return None
    department_code = entry.get(DEPARTMENT_CODE, "")
    return {
        "id": entry["__id"],
        "normalized_name": normalize_text(name),
        "nom_standard": name,
        "nom_sans_pronom": name,
        "code_postal": department_code,
        "codes_postaux": [],
        "code_departement": department_code,
        "libelle_departement": entry.get(DEPARTMENT_LABEL, ""),
        "code_commune": entry.get(COMMUNE_CODE, ""),
    }


def cities_from_entries(entries: Iterable[ElectionEntry]) -> list[FullCity]:
    cities: list[FullCity] = []
    for entry in entries:
        city = full_city_from_entry(entry)
        if city is not None:
            cities.append(city)
    return cities


def city_slug(city: FullCity) -> str:
    """Build the slug from the name and INSEE-style code, e.g. "paris-75056".

    Falls back to the city id when neither name nor codes yield any slug text.
    """
    code = f"{city['code_departement']}{city['code_commune']}"
    slug = slugify(f"{city['nom_standard']} {code}")
    return slug or str(city["id"])


def project_city(city: FullCity, entry: ElectionEntry) -> City:
    """Reshape a city into its public view.

    The entry is the companion source row; labels it carries take precedence
    over the values copied into the city at conversion time.
    """
    department_label = entry.get(DEPARTMENT_LABEL) or city["libelle_departement"]
    return {
        "id": city["id"],
        "slug": city_slug(city),
        "nom_standard": city["nom_standard"],
        "nom_sans_pronom": city["nom_sans_pronom"],
        "normalized_name": city["normalized_name"],
        "code_departement": city["code_departement"],
        "libelle_departement": department_label,
        "code_commune": city["code_commune"],
        "code_postal": city["code_postal"],
        "codes_postaux": list(city["codes_postaux"]),
    }
