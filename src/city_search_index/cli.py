"""CLI for the city search index.

Commands:
- build: Rebuild every index file from the source entries (full replace)
- validate-output: Check a built output directory for consistency
- lookup: Query built shards the way a client would
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Protocol

import typer
from rich import print as rprint
from rich.markup import escape

from . import __version__
from .application.build_index import run_build_index
from .application.lookup import lookup_cities
from .config import IndexConfig
from .config_file import load_index_config_file
from .devtools.validation_outputs import validate_outputs
from .exceptions import CitySearchIndexError
from .protocols import FileSystem, ProgressReporter


class DependenciesBuilder(Protocol):
    """Protocol for constructing CLI dependencies."""

    def __call__(self, *, config: IndexConfig) -> CliDependencies:
        """Build dependencies for CLI commands."""
        ...


@dataclass(frozen=True)
class CliDependencies:
    """Concrete dependencies required by the CLI."""

    fs: FileSystem
    progress: ProgressReporter | None


@dataclass(frozen=True)
class CliContext:
    """Runtime CLI context for a single command invocation."""

    config: IndexConfig
    deps_builder: DependenciesBuilder

    def build_dependencies(self, *, config: IndexConfig | None = None) -> CliDependencies:
        """Return dependencies using the configured builder."""
        return self.deps_builder(config=config or self.config)


class CliContextNotInitialisedError(typer.BadParameter):
    """Raised when CLI context is missing."""

    def __init__(self) -> None:
        super().__init__("CLI context is not initialised. Use the city-index entry point.")


def _get_context(ctx: typer.Context) -> CliContext:
    if not isinstance(ctx.obj, CliContext):
        raise CliContextNotInitialisedError()
    return ctx.obj


def _version_callback(value: bool) -> None:
    if value:
        rprint(f"city-search-index {__version__}")
        raise typer.Exit()


def _fail(exc: Exception) -> typer.Exit:
    rprint(f"[red]✗ {escape(str(exc))}[/red]")
    return typer.Exit(code=1)


def _with_config_file(
    config: IndexConfig, config_path: Path | None, fs: FileSystem
) -> IndexConfig:
    if config_path is None:
        return config
    return config.with_file_overrides(load_index_config_file(path=config_path, fs=fs))


def create_app(deps_builder: DependenciesBuilder) -> typer.Typer:
    """Create a Typer app wired with the provided dependencies builder."""
    app = typer.Typer(
        add_completion=False,
        help="City search index: entries → n-gram index → 27 shards + city table + slug map",
    )

    @app.callback()
    def main(
        ctx: typer.Context,
        version: Annotated[
            bool,
            typer.Option(
                "--version",
                callback=_version_callback,
                is_eager=True,
                help="Show the package version and exit",
            ),
        ] = False,
    ) -> None:
        """Initialise CLI context."""
        _ = version
        ctx.obj = CliContext(config=IndexConfig.from_env(), deps_builder=deps_builder)

    @app.command()
    def build(
        ctx: typer.Context,
        input_path: Annotated[
            Path | None,
            typer.Option(
                "--input",
                "-i",
                help="Source entries JSON file (default: CITY_INDEX_INPUT_PATH or elections.json)",
            ),
        ] = None,
        out_dir: Annotated[
            Path | None,
            typer.Option(
                "--output-dir",
                "-o",
                help="Output directory, replaced on every run (default: public/cities)",
            ),
        ] = None,
        config_path: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="TOML config file ([index] table)",
            ),
        ] = None,
        max_results: Annotated[
            int | None,
            typer.Option(
                "--max-results",
                min=1,
                help="Override the number of cities kept per n-gram (default: 20)",
            ),
        ] = None,
    ) -> None:
        """Build: rebuild the search shards, city table and slug map."""
        state = _get_context(ctx)
        config = state.config
        deps = state.build_dependencies()
        try:
            config = _with_config_file(config, config_path, deps.fs)
            config = config.with_overrides(
                input_path=None if input_path is None else str(input_path),
                output_dir=None if out_dir is None else str(out_dir),
                max_cities_per_ngram=max_results,
            )
            result = run_build_index(config=config, fs=deps.fs, progress=deps.progress)
        except (CitySearchIndexError, ValueError) as exc:
            raise _fail(exc) from exc

        rprint(f"[green]✓ Build complete:[/green] {result.output_dir}")
        rprint(
            f"  {result.entry_count:,} entries → {result.city_count:,} cities "
            f"({result.skipped_entries:,} without a commune label)"
        )
        rprint(f"  {result.index_entries:,} index entries")
        rprint(f"  {len(result.partition_paths)} search partition files")
        rprint(f"  {result.published_cities:,} cities in {result.cities_data_path.name}")
        rprint(f"  {result.total_files} total files in {result.elapsed_ms:.1f} ms")

    @app.command(name="validate-output")
    def validate_output(
        ctx: typer.Context,
        out_dir: Annotated[
            Path | None,
            typer.Option(
                "--output-dir",
                "-o",
                help="Built output directory (default: public/cities)",
            ),
        ] = None,
        config_path: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="TOML config file ([index] table) used for the build",
            ),
        ] = None,
        max_results: Annotated[
            int | None,
            typer.Option(
                "--max-results",
                min=1,
                help="Result cap the build used (default: 20)",
            ),
        ] = None,
    ) -> None:
        """Validate output: check shard routing, result caps, ordering and slugs."""
        state = _get_context(ctx)
        config = state.config
        deps = state.build_dependencies()
        try:
            config = _with_config_file(config, config_path, deps.fs)
            config = config.with_overrides(
                output_dir=None if out_dir is None else str(out_dir),
                max_cities_per_ngram=max_results,
            )
            result = validate_outputs(
                Path(config.output_dir),
                fs=deps.fs,
                max_cities_per_ngram=config.max_cities_per_ngram,
            )
        except (CitySearchIndexError, ValueError) as exc:
            raise _fail(exc) from exc
        rprint(f"[green]✓ Output valid:[/green] {result.out_dir}")
        rprint(f"  {len(result.validated_files)} files checked")
        rprint(f"  {result.index_entries:,} index entries, {result.city_count:,} cities")

    @app.command()
    def lookup(
        ctx: typer.Context,
        query: Annotated[str, typer.Argument(help="Search text, e.g. 'saint eti'")],
        out_dir: Annotated[
            Path | None,
            typer.Option(
                "--output-dir",
                "-o",
                help="Built output directory (default: public/cities)",
            ),
        ] = None,
        config_path: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="TOML config file ([index] table) used for the build",
            ),
        ] = None,
    ) -> None:
        """Lookup: print the ranked cities a client would show for a query."""
        state = _get_context(ctx)
        config = state.config
        deps = state.build_dependencies()
        try:
            config = _with_config_file(config, config_path, deps.fs)
            config = config.with_overrides(output_dir=None if out_dir is None else str(out_dir))
            hits = lookup_cities(
                query,
                out_dir=Path(config.output_dir),
                fs=deps.fs,
                max_ngram_length=config.max_ngram_length,
            )
        except (CitySearchIndexError, FileNotFoundError, ValueError) as exc:
            raise _fail(exc) from exc
        if not hits:
            rprint(f"[yellow]No cities match '{escape(query)}'[/yellow]")
            return
        for city_id, name, department in hits:
            rprint(f"  {city_id}  {escape(name)} ({escape(department)})")

    _ = (main, build, validate_output, lookup)

    return app
