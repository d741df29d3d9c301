"""Centralised, injectable configuration for the city search index build."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Self

from dotenv import load_dotenv

from .config_file import IndexConfigFile
from .domain.search_index import MAX_CITIES_PER_NGRAM, MAX_NGRAM_LENGTH, MIN_NGRAM_LENGTH

DEFAULT_INPUT_PATH = "elections.json"
DEFAULT_OUTPUT_DIR = "public/cities"


class PositiveIntegerEnvVarError(ValueError):
    """Raised when an environment variable must be a positive integer."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a positive integer.")


class NgramLengthRangeError(ValueError):
    """Raised when the maximum n-gram length is below the minimum."""

    def __init__(self, min_length: int, max_length: int) -> None:
        super().__init__(
            f"Maximum n-gram length ({max_length}) must not be below "
            f"the minimum n-gram length ({min_length})."
        )


@dataclass(frozen=True)
class IndexConfig:
    """Immutable configuration object for an index build.

    Load from environment with `IndexConfig.from_env()` or construct directly for testing.
    """

    input_path: str = DEFAULT_INPUT_PATH
    output_dir: str = DEFAULT_OUTPUT_DIR

    # Index shape
    max_cities_per_ngram: int = MAX_CITIES_PER_NGRAM
    min_ngram_length: int = MIN_NGRAM_LENGTH
    max_ngram_length: int = MAX_NGRAM_LENGTH

    def __post_init__(self) -> None:
        if self.max_ngram_length < self.min_ngram_length:
            raise NgramLengthRangeError(self.min_ngram_length, self.max_ngram_length)

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> Self:
        """Load configuration from environment variables.

        Args:
            dotenv_path: Optional path to .env file. If None, uses default .env discovery.

        Returns:
            IndexConfig instance populated from environment.
        """
        load_dotenv(dotenv_path)

        return cls(
            input_path=os.getenv("CITY_INDEX_INPUT_PATH", DEFAULT_INPUT_PATH).strip()
            or DEFAULT_INPUT_PATH,
            output_dir=os.getenv("CITY_INDEX_OUTPUT_DIR", DEFAULT_OUTPUT_DIR).strip()
            or DEFAULT_OUTPUT_DIR,
            max_cities_per_ngram=_parse_positive_int(
                os.getenv("CITY_INDEX_MAX_CITIES_PER_NGRAM", ""),
                env_name="CITY_INDEX_MAX_CITIES_PER_NGRAM",
                default=MAX_CITIES_PER_NGRAM,
            ),
            min_ngram_length=_parse_positive_int(
                os.getenv("CITY_INDEX_MIN_NGRAM_LENGTH", ""),
                env_name="CITY_INDEX_MIN_NGRAM_LENGTH",
                default=MIN_NGRAM_LENGTH,
            ),
            max_ngram_length=_parse_positive_int(
                os.getenv("CITY_INDEX_MAX_NGRAM_LENGTH", ""),
                env_name="CITY_INDEX_MAX_NGRAM_LENGTH",
                default=MAX_NGRAM_LENGTH,
            ),
        )

    def with_overrides(
        self,
        *,
        input_path: str | None = None,
        output_dir: str | None = None,
        max_cities_per_ngram: int | None = None,
    ) -> Self:
        """Return a new config with specified overrides (for CLI options)."""
        return replace(
            self,
            input_path=self.input_path if input_path is None else input_path,
            output_dir=self.output_dir if output_dir is None else output_dir,
            max_cities_per_ngram=self.max_cities_per_ngram
            if max_cities_per_ngram is None
            else max_cities_per_ngram,
        )

    def with_file_overrides(self, file_config: IndexConfigFile) -> Self:
        """Return a new config with config-file values overriding env/default values."""
        return replace(
            self,
            input_path=self.input_path
            if file_config.input_path is None
            else file_config.input_path,
            output_dir=self.output_dir
            if file_config.output_dir is None
            else file_config.output_dir,
            max_cities_per_ngram=self.max_cities_per_ngram
            if file_config.max_cities_per_ngram is None
            else file_config.max_cities_per_ngram,
            min_ngram_length=self.min_ngram_length
            if file_config.min_ngram_length is None
            else file_config.min_ngram_length,
            max_ngram_length=self.max_ngram_length
            if file_config.max_ngram_length is None
            else file_config.max_ngram_length,
        )


def _parse_positive_int(value: str, *, env_name: str, default: int) -> int:
    """Parse a positive integer from an environment variable, or return the default."""
    text = value.strip()
    if not text:
        return default
    try:
        parsed = int(text)
    except ValueError as exc:
        raise PositiveIntegerEnvVarError(env_name) from exc
    if parsed < 1:
        raise PositiveIntegerEnvVarError(env_name)
    return parsed
