"""Filesystem implementation for infrastructure.

Usage example:
    from pathlib import Path

    from city_search_index.infrastructure import LocalFileSystem

    fs = LocalFileSystem()
    fs.write_json({"pa": [[1, "Paris", "75"]]}, Path("public/cities/search-p.json"))
"""

from __future__ import annotations

import json
import shutil
from collections.abc import Mapping
from pathlib import Path
from typing import override

from ..io_validation import validate_json_as
from ..protocols import FileSystem


class LocalFileSystem(FileSystem):
    """Local filesystem implementation.

    JSON output is compact UTF-8, since index shards are fetched by browsers.
    """

    @override
    def read_json(self, path: Path) -> object:
        return validate_json_as(object, path.read_bytes())

    @override
    def write_json(self, data: Mapping[str, object], path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(dict(data), ensure_ascii=False, separators=(",", ":")),
            encoding="utf-8",
        )

    @override
    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    @override
    def write_text(self, content: str, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    @override
    def exists(self, path: Path) -> bool:
        return path.exists()

    @override
    def mkdir(self, path: Path, parents: bool = True) -> None:
        path.mkdir(parents=parents, exist_ok=True)

    @override
    def remove_tree(self, path: Path) -> None:
        if path.is_dir():
            shutil.rmtree(path)
        elif path.exists():
            path.unlink()

    @override
    def list_files(self, path: Path, pattern: str = "*") -> list[Path]:
        return sorted(path.glob(pattern))
