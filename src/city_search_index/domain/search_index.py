"""Prefix search index: tokens, n-grams, ranking and partitioning.

The index maps every prefix (2 to 45 characters) of every token of a city's
names and codes to the ids of the cities that produced it. Each prefix keeps at
most 20 hits, shortest display name first, and prefixes are split into 27
partitions by their first character so a client only fetches one shard per
query.

Usage example:
    from city_search_index.domain.search_index import (
        build_search_index,
        partition_search_index,
        rank_search_index,
    )

    index = build_search_index(cities)
    ranked = rank_search_index(index, {city["id"]: city for city in cities})
    partitions = partition_search_index(ranked)
"""

from __future__ import annotations

import string
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from types import MappingProxyType

from ..exceptions import MissingCityRecordError
from ..normalization import normalize_text
from ..types import FullCity, RankedCity

MIN_NGRAM_LENGTH = 2
MAX_NGRAM_LENGTH = 45
MAX_CITIES_PER_NGRAM = 20

FALLBACK_PARTITION = "0"
PARTITION_KEYS: tuple[str, ...] = (*string.ascii_lowercase, FALLBACK_PARTITION)

INDEXED_FIELDS = ("nom_standard", "nom_sans_pronom", "code_departement", "code_commune")

SearchIndex = Mapping[str, tuple[int, ...]]
RankedIndex = dict[str, list[RankedCity]]
PartitionedIndex = dict[str, RankedIndex]
FieldSelector = Callable[[FullCity], Iterable[str]]


def indexed_field_values(city: FullCity) -> tuple[str, ...]:
    return tuple(city[field] for field in INDEXED_FIELDS)


def tokenize(text: str) -> Iterator[str]:
    """Yield the lowercase, space-delimited tokens of already-normalized text."""
    for segment in text.split(" "):
        if segment:
            yield segment.lower()


def create_ngrams(
    token: str,
    *,
    min_length: int = MIN_NGRAM_LENGTH,
    max_length: int = MAX_NGRAM_LENGTH,
) -> set[str]:
    """Return the prefixes of a token used as search keys.

    Prefixes are clamped to the token length, so "pa" yields {"pa"} and "x"
    yields {"x"}. A token longer than ``max_length`` is also added whole so an
    exact lookup still finds it.
    """
    ngrams = {token[:length] for length in range(min_length, max_length + 1)}
    if len(token) > max_length:
        ngrams.add(token)
    return ngrams


class SearchIndexBuilder:
    """Accumulates the inverted index from n-gram to city ids.

    Ids are kept in first-seen order and each id appears at most once per key.
    Call ``freeze`` to hand the finished index to the ranking step.
    """

    def __init__(
        self,
        *,
        min_ngram_length: int = MIN_NGRAM_LENGTH,
        max_ngram_length: int = MAX_NGRAM_LENGTH,
        field_selector: FieldSelector = indexed_field_values,
    ) -> None:
        self._min_ngram_length = min_ngram_length
        self._max_ngram_length = max_ngram_length
        self._field_selector = field_selector
        self._entries: dict[str, list[int]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def ngrams_for(self, values: Iterable[str]) -> list[str]:
        """Return the union of n-grams of all values, in a stable order."""
        union: dict[str, None] = {}
        for value in values:
            for token in tokenize(normalize_text(value)):
                ngrams = create_ngrams(
                    token,
                    min_length=self._min_ngram_length,
                    max_length=self._max_ngram_length,
                )
                # Each prefix length occurs once, so length order is total.
                for ngram in sorted(ngrams, key=len):
                    union.setdefault(ngram, None)
        return list(union)

    def add(self, city_id: int, values: Iterable[str]) -> None:
        for ngram in self.ngrams_for(values):
            ids = self._entries.setdefault(ngram, [])
            if city_id not in ids:
                ids.append(city_id)

    def add_city(self, city: FullCity) -> None:
        self.add(city["id"], self._field_selector(city))

    def freeze(self) -> SearchIndex:
        return MappingProxyType({ngram: tuple(ids) for ngram, ids in self._entries.items()})


def build_search_index(
    cities: Iterable[FullCity],
    field_selector: FieldSelector = indexed_field_values,
    *,
    min_ngram_length: int = MIN_NGRAM_LENGTH,
    max_ngram_length: int = MAX_NGRAM_LENGTH,
) -> SearchIndex:
    builder = SearchIndexBuilder(
        min_ngram_length=min_ngram_length,
        max_ngram_length=max_ngram_length,
        field_selector=field_selector,
    )
    for city in cities:
        builder.add_city(city)
    return builder.freeze()


def rank_city_ids(
    city_ids: Sequence[int],
    cities_by_id: Mapping[int, FullCity],
    *,
    limit: int = MAX_CITIES_PER_NGRAM,
) -> list[RankedCity]:
    """Order ids by display-name length (stable) and keep the first ``limit``.

    Raises:
        MissingCityRecordError: If an id has no city record.
    """
    cities: list[FullCity] = []
    for city_id in city_ids:
        city = cities_by_id.get(city_id)
        if city is None:
            raise MissingCityRecordError(city_id)
        cities.append(city)
    ordered = sorted(cities, key=lambda city: len(city["nom_standard"]))
    return [
        (city["id"], city["nom_standard"], city["code_departement"]) for city in ordered[:limit]
    ]


def rank_search_index(
    index: SearchIndex,
    cities_by_id: Mapping[int, FullCity],
    *,
    limit: int = MAX_CITIES_PER_NGRAM,
) -> RankedIndex:
    return {
        ngram: rank_city_ids(city_ids, cities_by_id, limit=limit)
        for ngram, city_ids in index.items()
    }


def partition_key_for(ngram: str) -> str:
    """Return the partition for an n-gram: its first letter, or "0" otherwise."""
    first = ngram[:1].lower()
    if first and first in string.ascii_lowercase:
        return first
    return FALLBACK_PARTITION


def partition_search_index(ranked: Mapping[str, list[RankedCity]]) -> PartitionedIndex:
    partitions: PartitionedIndex = {key: {} for key in PARTITION_KEYS}
    for ngram, hits in ranked.items():
        partitions[partition_key_for(ngram)][ngram] = hits
    return partitions
