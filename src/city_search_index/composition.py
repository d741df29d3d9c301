"""Composition root for wiring CLI dependencies."""

from __future__ import annotations

from .cli import CliDependencies, create_app
from .cli_progress import CliProgressReporter
from .config import IndexConfig
from .infrastructure import LocalFileSystem


def build_cli_dependencies(*, config: IndexConfig) -> CliDependencies:
    """Build concrete dependencies for CLI commands.

    Args:
        config: Index configuration (unused by the local wiring today).
    """
    _ = config
    return CliDependencies(fs=LocalFileSystem(), progress=CliProgressReporter())


app = create_app(build_cli_dependencies)
