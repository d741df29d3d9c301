"""Full rebuild of the city search index.

Example:
    >>> from city_search_index.config import IndexConfig
    >>> from city_search_index.application.build_index import run_build_index
    >>> from city_search_index.infrastructure import LocalFileSystem
    >>> result = run_build_index(config=IndexConfig.from_env(), fs=LocalFileSystem())
    >>> result.total_files
    29

Stages run in order over in-memory data: load entries, convert to cities,
build the inverted index, rank, partition, then replace the output directory.
Input errors, including slug collisions, abort before the output directory
is touched.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path

from ..config import IndexConfig
from ..domain.cities import cities_from_entries
from ..domain.search_index import (
    SearchIndexBuilder,
    partition_search_index,
    rank_search_index,
)
from ..exceptions import InputFileFormatError, InputFileNotFoundError
from ..io_validation import IncomingDataError, parse_election_entries
from ..observability.logging import get_logger
from ..protocols import FileSystem, ProgressReporter
from ..types import ElectionEntry
from .search_output import (
    build_city_table,
    build_slug_map,
    reset_output_dir,
    write_city_table,
    write_partitions,
    write_slug_map,
)

logger = get_logger("city_search_index.build_index")


@dataclass(frozen=True)
class BuildIndexResult:
    """Summary of a completed index build."""

    input_path: Path
    output_dir: Path
    entry_count: int
    city_count: int
    index_entries: int
    partition_paths: tuple[Path, ...]
    cities_data_path: Path
    slug_map_path: Path
    published_cities: int
    elapsed_ms: float

    @property
    def skipped_entries(self) -> int:
        return self.entry_count - self.city_count

    @property
    def total_files(self) -> int:
        return len(self.partition_paths) + 2


def load_election_entries(path: Path, fs: FileSystem) -> list[ElectionEntry]:
    """Read and validate the source entries file.

    Raises:
        InputFileNotFoundError: If the file does not exist.
        InputFileFormatError: If the file is not a JSON array.
    """
    if not fs.exists(path):
        raise InputFileNotFoundError(str(path))
    try:
        payload = fs.read_json(path)
        return parse_election_entries(payload)
    except IncomingDataError as exc:
        raise InputFileFormatError(str(path), str(exc)) from exc


def run_build_index(
    *,
    config: IndexConfig,
    fs: FileSystem,
    input_path: str | Path | None = None,
    output_dir: str | Path | None = None,
    progress: ProgressReporter | None = None,
) -> BuildIndexResult:
    """Rebuild every index file from the source entries.

    Args:
        config: Index configuration (required; load once at entry point).
        fs: Filesystem (required; inject at entry point).
        input_path: Source entries JSON file (defaults to config.input_path).
        output_dir: Directory to replace with the index files (defaults to config.output_dir).
        progress: Optional progress reporter for the indexing step.

    Returns:
        BuildIndexResult with counts and written paths.
    """
    start = time.perf_counter()
    source_path = Path(input_path if input_path is not None else config.input_path)
    out_dir = Path(output_dir if output_dir is not None else config.output_dir)

    entries = load_election_entries(source_path, fs)
    cities = cities_from_entries(entries)
    logger.info("Loaded %s entries, %s cities with a commune label", len(entries), len(cities))

    builder = SearchIndexBuilder(
        min_ngram_length=config.min_ngram_length,
        max_ngram_length=config.max_ngram_length,
    )
    if progress is not None:
        progress.start("Indexing cities", len(cities))
    try:
        for city in cities:
            builder.add_city(city)
            if progress is not None:
                progress.advance(1)
    finally:
        if progress is not None:
            progress.finish()
    search_index = builder.freeze()

    cities_by_id = {city["id"]: city for city in cities}
    ranked = rank_search_index(search_index, cities_by_id, limit=config.max_cities_per_ngram)
    partitions = partition_search_index(ranked)
    entries_by_id = {entry["__id"]: entry for entry in entries}
    city_table = build_city_table(cities, entries_by_id)
    slug_map = build_slug_map(city_table)

    reset_output_dir(out_dir, fs)
    partition_paths = write_partitions(partitions, out_dir, fs)
    cities_data_path = write_city_table(city_table, out_dir, fs)
    slug_map_path = write_slug_map(slug_map, out_dir, fs)

    elapsed_ms = (time.perf_counter() - start) * 1000
    result = BuildIndexResult(
        input_path=source_path,
        output_dir=out_dir,
        entry_count=len(entries),
        city_count=len(cities),
        index_entries=len(search_index),
        partition_paths=tuple(partition_paths),
        cities_data_path=cities_data_path,
        slug_map_path=slug_map_path,
        published_cities=len(city_table),
        elapsed_ms=elapsed_ms,
    )
    logger.info("%s index entries in %s partition files", result.index_entries, len(partition_paths))
    logger.info("%s total files written to %s", result.total_files, out_dir)
    logger.info("%.1f ms to build search index", elapsed_ms)
    return result
