"""Index output validation helpers for post-build checks."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..application.search_output import CITIES_DATA_FILENAME, SLUG_MAP_FILENAME, shard_path
from ..domain.search_index import MAX_CITIES_PER_NGRAM, PARTITION_KEYS, partition_key_for
from ..io_validation import IncomingDataError, validate_as
from ..protocols import FileSystem


class OutputValidationError(ValueError):
    """Raised when output validation fails."""


@dataclass(frozen=True)
class OutputValidationResult:
    """Validation result for index outputs."""

    out_dir: Path
    validated_files: tuple[Path, ...]
    index_entries: int
    city_count: int


def validate_outputs(
    out_dir: str | Path,
    *,
    fs: FileSystem,
    max_cities_per_ngram: int = MAX_CITIES_PER_NGRAM,
) -> OutputValidationResult:
    """Validate shards, city table and slug map for internal consistency."""
    root = Path(out_dir)
    if not fs.exists(root):
        message = f"Output directory does not exist: {root}"
        raise OutputValidationError(message)

    cities_path = root / CITIES_DATA_FILENAME
    city_table = _read_object(cities_path, fs)
    city_names: dict[int, str] = {}
    for key, value in city_table.items():
        city = _validate_city(key, value, cities_path)
        city_names[int(key)] = city

    validated_paths: list[Path] = [cities_path]
    index_entries = 0
    for partition in PARTITION_KEYS:
        path = shard_path(root, partition)
        shard = _read_object(path, fs)
        for ngram, hits in shard.items():
            _validate_shard_entry(
                ngram=ngram,
                hits=hits,
                partition=partition,
                city_names=city_names,
                limit=max_cities_per_ngram,
                path=path,
            )
        index_entries += len(shard)
        validated_paths.append(path)

    slug_path = root / SLUG_MAP_FILENAME
    _validate_slug_map(_read_object(slug_path, fs), city_table, slug_path)
    validated_paths.append(slug_path)

    expected = set(validated_paths)
    stray = [path.name for path in fs.list_files(root) if path not in expected]
    if stray:
        message = f"Unexpected files in output directory {root}: {', '.join(stray)}"
        raise OutputValidationError(message)

    return OutputValidationResult(
        out_dir=root,
        validated_files=tuple(validated_paths),
        index_entries=index_entries,
        city_count=len(city_names),
    )


def _read_object(path: Path, fs: FileSystem) -> dict[str, object]:
    if not fs.exists(path):
        message = f"Missing required output file: {path}"
        raise OutputValidationError(message)
    try:
        return validate_as(dict[str, object], fs.read_json(path))
    except IncomingDataError as exc:
        message = f"Output file must contain a JSON object: {path}"
        raise OutputValidationError(message) from exc


def _validate_city(key: str, value: object, path: Path) -> str:
    try:
        city = validate_as(dict[str, object], value)
    except IncomingDataError as exc:
        message = f"{path.name}: entry {key} is not an object."
        raise OutputValidationError(message) from exc
    city_id = city.get("id")
    if not isinstance(city_id, int) or str(city_id) != key:
        message = f"{path.name}: entry {key} has mismatched id {city_id!r}."
        raise OutputValidationError(message)
    name = city.get("nom_standard")
    slug = city.get("slug")
    if not isinstance(name, str) or not isinstance(slug, str) or not slug:
        message = f"{path.name}: entry {key} is missing a name or slug."
        raise OutputValidationError(message)
    return name


def _validate_shard_entry(
    *,
    ngram: str,
    hits: object,
    partition: str,
    city_names: dict[int, str],
    limit: int,
    path: Path,
) -> None:
    if partition_key_for(ngram) != partition:
        message = f"{path.name}: '{ngram}' belongs in partition '{partition_key_for(ngram)}'."
        raise OutputValidationError(message)
    try:
        triples = validate_as(list[tuple[int, str, str]], hits)
    except IncomingDataError as exc:
        message = f"{path.name}: '{ngram}' must map to [id, name, department] triples."
        raise OutputValidationError(message) from exc
    if len(triples) > limit:
        message = f"{path.name}: '{ngram}' has {len(triples)} results (limit: {limit})."
        raise OutputValidationError(message)
    lengths = [len(name) for _, name, _ in triples]
    if lengths != sorted(lengths):
        message = f"{path.name}: '{ngram}' results are not ordered by name length."
        raise OutputValidationError(message)
    for city_id, name, _ in triples:
        if city_id in city_names and city_names[city_id] != name:
            message = f"{path.name}: '{ngram}' names city {city_id} as '{name}'."
            raise OutputValidationError(message)


def _validate_slug_map(
    slug_map: dict[str, object],
    city_table: dict[str, object],
    path: Path,
) -> None:
    for slug, city_id in slug_map.items():
        if str(city_id) not in city_table:
            message = f"{path.name}: slug '{slug}' references unknown city {city_id!r}."
            raise OutputValidationError(message)
    for key, value in city_table.items():
        city = validate_as(dict[str, object], value)
        slug = str(city.get("slug"))
        if str(slug_map.get(slug)) != key:
            message = f"{path.name}: slug '{slug}' does not map back to city {key}."
            raise OutputValidationError(message)
