"""Writers for the search index output directory.

The output directory is replaced on every run:

    search-a.json ... search-z.json, search-0.json   n-gram -> [[id, name, department], ...]
    cities-data.json                                 id -> public city view
    slug-map.json                                    slug -> id

Writes are not atomic. A failure part way leaves whatever was already written.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

from ..domain.cities import project_city
from ..domain.search_index import PARTITION_KEYS, PartitionedIndex
from ..exceptions import DuplicateSlugError, OutputDirectoryError
from ..protocols import FileSystem
from ..types import City, ElectionEntry, FullCity

SHARD_FILENAME_TEMPLATE = "search-{key}.json"
CITIES_DATA_FILENAME = "cities-data.json"
SLUG_MAP_FILENAME = "slug-map.json"


def shard_path(out_dir: Path, key: str) -> Path:
    return out_dir / SHARD_FILENAME_TEMPLATE.format(key=key)


def _write_json(fs: FileSystem, data: Mapping[str, object], path: Path) -> None:
    try:
        fs.write_json(data, path)
    except OSError as exc:
        raise OutputDirectoryError(str(path.parent), str(exc)) from exc


def reset_output_dir(out_dir: Path, fs: FileSystem) -> None:
    """Remove the output directory (if present) and recreate it empty."""
    try:
        fs.remove_tree(out_dir)
        fs.mkdir(out_dir, parents=True)
    except OSError as exc:
        raise OutputDirectoryError(str(out_dir), str(exc)) from exc


def write_partitions(partitions: PartitionedIndex, out_dir: Path, fs: FileSystem) -> list[Path]:
    """Write one shard per partition key, including empty shards."""
    paths: list[Path] = []
    for key in PARTITION_KEYS:
        shard = partitions.get(key, {})
        payload: dict[str, object] = {
            ngram: [list(hit) for hit in hits] for ngram, hits in shard.items()
        }
        path = shard_path(out_dir, key)
        _write_json(fs, payload, path)
        paths.append(path)
    return paths


def build_city_table(
    cities: Iterable[FullCity],
    entries_by_id: Mapping[int, ElectionEntry],
) -> dict[int, City]:
    """Project every city that has a companion source entry."""
    table: dict[int, City] = {}
    for full_city in cities:
        entry = entries_by_id.get(full_city["id"])
        if entry is None:
            continue
        city = project_city(full_city, entry)
        table[city["id"]] = city
    return table


def build_slug_map(city_table: Mapping[int, City]) -> dict[str, int]:
    """Map each slug to its city id.

    Raises:
        DuplicateSlugError: If two cities share a slug.
    """
    slug_to_id: dict[str, int] = {}
    for city in city_table.values():
        existing = slug_to_id.get(city["slug"])
        if existing is not None and existing != city["id"]:
            raise DuplicateSlugError(city["slug"], existing, city["id"])
        slug_to_id[city["slug"]] = city["id"]
    return slug_to_id


def write_city_table(city_table: Mapping[int, City], out_dir: Path, fs: FileSystem) -> Path:
    path = out_dir / CITIES_DATA_FILENAME
    payload: dict[str, object] = {str(city_id): city for city_id, city in city_table.items()}
    _write_json(fs, payload, path)
    return path


def write_slug_map(slug_map: Mapping[str, int], out_dir: Path, fs: FileSystem) -> Path:
    path = out_dir / SLUG_MAP_FILENAME
    _write_json(fs, dict(slug_map), path)
    return path
