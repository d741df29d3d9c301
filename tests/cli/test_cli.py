"""Tests for CLI wiring and overrides."""

import re
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from city_search_index import cli
from city_search_index.cli import CliDependencies
from city_search_index.config import IndexConfig
from tests.fakes import FakeProgressReporter, InMemoryFileSystem

runner = CliRunner()
_ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*m")


def _strip_ansi(text: str) -> str:
    return _ANSI_ESCAPE_RE.sub("", text)


@pytest.fixture(autouse=True)
def default_config(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_from_env(cls: type[IndexConfig], dotenv_path: str | None = None) -> IndexConfig:
        _ = (cls, dotenv_path)
        return IndexConfig()

    monkeypatch.setattr(cli.IndexConfig, "from_env", classmethod(fake_from_env))


def _build_app_with_dependencies(deps: CliDependencies) -> typer.Typer:
    def build_with_shared_deps(*, config: IndexConfig) -> CliDependencies:
        _ = config
        return deps

    return cli.create_app(build_with_shared_deps)


def _seeded_deps(entries: list[object]) -> CliDependencies:
    fs = InMemoryFileSystem()
    fs.seed(Path("elections.json"), entries)
    return CliDependencies(fs=fs, progress=FakeProgressReporter())


def test_cli_version_option_prints_package_version(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "__version__", "9.9.9", raising=False)
    app = _build_app_with_dependencies(_seeded_deps([]))

    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert "9.9.9" in _strip_ansi(result.output)


def test_cli_build_writes_index(sample_entries: list[object]) -> None:
    deps = _seeded_deps(sample_entries)
    app = _build_app_with_dependencies(deps)

    result = runner.invoke(app, ["build", "--output-dir", "out"])

    assert result.exit_code == 0, result.output
    output = _strip_ansi(result.output)
    assert "Build complete" in output
    assert "29 total files" in output
    assert isinstance(deps.fs, InMemoryFileSystem)
    assert len(deps.fs.files_under(Path("out"))) == 29
    assert isinstance(deps.progress, FakeProgressReporter)
    assert [(s.label, s.total, s.advanced) for s in deps.progress.sessions] == [
        ("Indexing cities", 3, 3)
    ]


def test_cli_build_applies_max_results_override(sample_entries: list[object]) -> None:
    deps = _seeded_deps(sample_entries)
    app = _build_app_with_dependencies(deps)

    result = runner.invoke(app, ["build", "-o", "out", "--max-results", "1"])

    assert result.exit_code == 0, result.output
    assert isinstance(deps.fs, InMemoryFileSystem)
    shard = deps.fs.json_object(Path("out/search-p.json"))
    assert shard["pa"] == [[2, "Pa", "64"]]


def test_cli_build_reads_config_file(sample_entries: list[object]) -> None:
    deps = _seeded_deps(sample_entries)
    assert isinstance(deps.fs, InMemoryFileSystem)
    deps.fs.write_text(
        'schema_version = 1\n\n[index]\noutput_dir = "from-config"\n',
        Path("index.toml"),
    )
    app = _build_app_with_dependencies(deps)

    result = runner.invoke(app, ["build", "--config", "index.toml"])

    assert result.exit_code == 0, result.output
    assert len(deps.fs.files_under(Path("from-config"))) == 29


def test_cli_build_reports_missing_input() -> None:
    deps = CliDependencies(fs=InMemoryFileSystem(), progress=None)
    app = _build_app_with_dependencies(deps)

    result = runner.invoke(app, ["build", "--input", "nowhere.json"])

    assert result.exit_code == 1
    assert "Input file not found" in _strip_ansi(result.output)


def test_cli_lookup_prints_ranked_hits(sample_entries: list[object]) -> None:
    deps = _seeded_deps(sample_entries)
    app = _build_app_with_dependencies(deps)
    build = runner.invoke(app, ["build", "-o", "out"])
    assert build.exit_code == 0, build.output

    result = runner.invoke(app, ["lookup", "pa", "-o", "out"])

    assert result.exit_code == 0, result.output
    lines = [line.strip() for line in _strip_ansi(result.output).splitlines() if line.strip()]
    assert lines == ["2  Pa (64)", "1  Paris (75)"]


def test_cli_lookup_reports_missing_shards() -> None:
    deps = CliDependencies(fs=InMemoryFileSystem(), progress=None)
    app = _build_app_with_dependencies(deps)

    result = runner.invoke(app, ["lookup", "pa", "-o", "out"])

    assert result.exit_code == 1
    assert "Run the build first" in _strip_ansi(result.output)


def test_cli_validate_output_reports_problems() -> None:
    deps = CliDependencies(fs=InMemoryFileSystem(), progress=None)
    app = _build_app_with_dependencies(deps)

    result = runner.invoke(app, ["validate-output", "-o", "out"])

    assert result.exit_code == 1
    assert "does not exist" in _strip_ansi(result.output)


def test_cli_validate_output_accepts_build(sample_entries: list[object]) -> None:
    deps = _seeded_deps(sample_entries)
    app = _build_app_with_dependencies(deps)
    runner.invoke(app, ["build", "-o", "out"])

    result = runner.invoke(app, ["validate-output", "-o", "out"])

    assert result.exit_code == 0, result.output
    assert "Output valid" in _strip_ansi(result.output)


def test_cli_validate_output_accepts_build_with_raised_cap() -> None:
    entries: list[object] = [
        {"__id": i, "Libellé de la commune": f"Ville {i}", "Code du département": "01"}
        for i in range(30)
    ]
    deps = _seeded_deps(entries)
    app = _build_app_with_dependencies(deps)
    build = runner.invoke(app, ["build", "-o", "out", "--max-results", "25"])
    assert build.exit_code == 0, build.output

    default_cap = runner.invoke(app, ["validate-output", "-o", "out"])
    raised_cap = runner.invoke(app, ["validate-output", "-o", "out", "--max-results", "25"])

    assert default_cap.exit_code == 1
    assert "limit: 20" in _strip_ansi(default_cap.output)
    assert raised_cap.exit_code == 0, raised_cap.output


def test_cli_validate_output_reads_config_file() -> None:
    entries: list[object] = [
        {"__id": i, "Libellé de la commune": f"Ville {i}", "Code du département": "01"}
        for i in range(30)
    ]
    deps = _seeded_deps(entries)
    assert isinstance(deps.fs, InMemoryFileSystem)
    deps.fs.write_text(
        'schema_version = 1\n\n[index]\noutput_dir = "built"\nmax_cities_per_ngram = 25\n',
        Path("index.toml"),
    )
    app = _build_app_with_dependencies(deps)
    build = runner.invoke(app, ["build", "-c", "index.toml"])
    assert build.exit_code == 0, build.output

    result = runner.invoke(app, ["validate-output", "-c", "index.toml"])

    assert result.exit_code == 0, result.output
    assert "Output valid" in _strip_ansi(result.output)


def test_cli_lookup_reads_ngram_length_from_config_file(sample_entries: list[object]) -> None:
    deps = _seeded_deps(sample_entries)
    assert isinstance(deps.fs, InMemoryFileSystem)
    deps.fs.write_text(
        'schema_version = 1\n\n[index]\noutput_dir = "built"\nmax_ngram_length = 3\n',
        Path("index.toml"),
    )
    app = _build_app_with_dependencies(deps)
    build = runner.invoke(app, ["build", "-c", "index.toml"])
    assert build.exit_code == 0, build.output

    without_config = runner.invoke(app, ["lookup", "pari", "-o", "built"])
    with_config = runner.invoke(app, ["lookup", "pari", "-c", "index.toml"])

    assert "No cities match" in _strip_ansi(without_config.output)
    assert with_config.exit_code == 0, with_config.output
    lines = [line.strip() for line in _strip_ansi(with_config.output).splitlines() if line.strip()]
    assert lines == ["1  Paris (75)"]
