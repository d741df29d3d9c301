"""Typed data contracts used inside the index build after IO validation."""

from __future__ import annotations

from typing import TypedDict

# Source entries use the column labels of the published election results.
ElectionEntry = TypedDict(
    "ElectionEntry",
    {
        "__id": int,
        "Libellé de la commune": str,
        "Code du département": str,
        "Libellé du département": str,
        "Code de la commune": str,
    },
    total=False,
)


class FullCity(TypedDict):
    """Validated, indexable city record."""

    id: int
    normalized_name: str
    nom_standard: str
    nom_sans_pronom: str
    code_postal: str
    codes_postaux: list[str]
    code_departement: str
    libelle_departement: str
    code_commune: str


class City(TypedDict):
    """Public city view written to the city table."""

    id: int
    slug: str
    nom_standard: str
    nom_sans_pronom: str
    normalized_name: str
    code_departement: str
    libelle_departement: str
    code_commune: str
    code_postal: str
    codes_postaux: list[str]


# One ranked search hit: (city id, display name, department code).
RankedCity = tuple[int, str, str]
