"""Typed parsing and validation for index build config files.

Example file:

    schema_version = 1

    [index]
    input_path = "data/elections.json"
    output_dir = "public/cities"
    max_cities_per_ngram = 20
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Self

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from .exceptions import ConfigFileNotFoundError, ConfigFileParseError, ConfigFileValidationError
from .protocols import FileSystem

_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class IndexConfigFile:
    """Validated index config values loaded from a TOML file."""

    input_path: str | None = None
    output_dir: str | None = None
    max_cities_per_ngram: int | None = None
    min_ngram_length: int | None = None
    max_ngram_length: int | None = None


class _IndexSectionModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    input_path: str | None = None
    output_dir: str | None = None
    max_cities_per_ngram: int | None = None
    min_ngram_length: int | None = None
    max_ngram_length: int | None = None

    @field_validator("input_path", "output_dir")
    @classmethod
    def _validate_non_empty_text(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        if not text:
            raise ValueError
        return text

    @field_validator("max_cities_per_ngram", "min_ngram_length", "max_ngram_length")
    @classmethod
    def _validate_positive_int(cls, value: int | None) -> int | None:
        if value is None:
            return None
        if value < 1:
            raise ValueError
        return value

    @model_validator(mode="after")
    def _validate_ngram_range(self) -> Self:
        if (
            self.min_ngram_length is not None
            and self.max_ngram_length is not None
            and self.max_ngram_length < self.min_ngram_length
        ):
            raise ValueError
        return self


class _ConfigFileModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: int
    index: _IndexSectionModel

    @field_validator("schema_version")
    @classmethod
    def _validate_schema_version(cls, value: int) -> int:
        if value != _SCHEMA_VERSION:
            raise ValueError
        return value


def _format_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ("<root>",)))
    message = str(first.get("msg", "invalid value"))
    return f"{location}: {message}"


def load_index_config_file(*, path: Path, fs: FileSystem) -> IndexConfigFile:
    """Load and validate an index build TOML config file."""
    if not fs.exists(path):
        raise ConfigFileNotFoundError(str(path))

    raw_payload = fs.read_text(path)
    try:
        payload: object = tomllib.loads(raw_payload)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigFileParseError(str(path), str(exc)) from exc

    try:
        model = _ConfigFileModel.model_validate(payload)
    except ValidationError as exc:
        raise ConfigFileValidationError(str(path), _format_validation_error(exc)) from exc

    section = model.index
    return IndexConfigFile(
        input_path=section.input_path,
        output_dir=section.output_dir,
        max_cities_per_ngram=section.max_cities_per_ngram,
        min_ngram_length=section.min_ngram_length,
        max_ngram_length=section.max_ngram_length,
    )
