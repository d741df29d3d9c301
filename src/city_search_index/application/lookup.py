"""Client-side style lookup against built index shards.

Mirrors what a browser does with the output: normalize the query, fetch the
shard for each token and keep the hits every token agrees on.
"""

from __future__ import annotations

from pathlib import Path

from ..domain.search_index import MAX_NGRAM_LENGTH, partition_key_for, tokenize
from ..io_validation import validate_as
from ..normalization import normalize_text
from ..protocols import FileSystem
from ..types import RankedCity
from .search_output import shard_path


class ShardNotFoundError(FileNotFoundError):
    """Raised when the shard for a query token has not been built."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Index shard not found: {path}. Run the build first.")


def _lookup_token(
    token: str,
    out_dir: Path,
    fs: FileSystem,
    max_ngram_length: int,
) -> list[RankedCity]:
    path = shard_path(out_dir, partition_key_for(token))
    if not fs.exists(path):
        raise ShardNotFoundError(path)
    shard = validate_as(dict[str, list[tuple[int, str, str]]], fs.read_json(path))
    hits = shard.get(token)
    if hits is None and len(token) > max_ngram_length:
        hits = shard.get(token[:max_ngram_length])
    return hits or []


def lookup_cities(
    query: str,
    *,
    out_dir: str | Path,
    fs: FileSystem,
    max_ngram_length: int = MAX_NGRAM_LENGTH,
) -> list[RankedCity]:
    """Return ranked hits matching every token of the query.

    Order follows the first token's ranking. Each shard entry is already capped,
    so multi-token queries only see the hits kept for each prefix.

    Raises:
        ShardNotFoundError: If a needed shard file is missing.
        IncomingDataError: If a shard is not in the expected shape.
    """
    root = Path(out_dir)
    tokens = list(tokenize(normalize_text(query)))
    if not tokens:
        return []
    results = _lookup_token(tokens[0], root, fs, max_ngram_length)
    for token in tokens[1:]:
        allowed = {city_id for city_id, _, _ in _lookup_token(token, root, fs, max_ngram_length)}
        results = [hit for hit in results if hit[0] in allowed]
    return results


