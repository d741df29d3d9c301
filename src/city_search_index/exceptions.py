"""Custom exceptions for the city search index build.

These exceptions provide clear error handling and enable testing of error paths.
"""

from __future__ import annotations


class CitySearchIndexError(Exception):
    """Base exception for all index build errors."""

    pass


class InputFileNotFoundError(CitySearchIndexError):
    """Raised when the source entries file does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Input file not found: {path}")


class InputFileFormatError(CitySearchIndexError):
    """Raised when the source entries file is not a JSON array.

    This is fatal and is raised before the output directory is touched.
    """

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        super().__init__(f"Input file is malformed: {path} ({detail})")


class MissingCityRecordError(CitySearchIndexError):
    """Raised when the search index references a city id with no record.

    The index builder only registers ids of cities it iterated, so this signals a defect.
    """

    def __init__(self, city_id: int) -> None:
        self.city_id = city_id
        super().__init__(f"Search index references unknown city id: {city_id}")


class DuplicateSlugError(CitySearchIndexError):
    """Raised when two projected cities share the same slug."""

    def __init__(self, slug: str, first_id: int, second_id: int) -> None:
        self.slug = slug
        super().__init__(
            f"Slug '{slug}' is shared by cities {first_id} and {second_id}. "
            "Slugs must be unique across the city table."
        )


class OutputDirectoryError(CitySearchIndexError):
    """Raised when the output directory cannot be reset or written.

    Files written before the failure are left in place.
    """

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        super().__init__(f"Cannot write output directory {path}: {detail}")


class ConfigFileNotFoundError(CitySearchIndexError):
    """Raised when a config file path does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Config file not found: {path}")


class ConfigFileParseError(CitySearchIndexError):
    """Raised when a config file is not valid TOML."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Config file is not valid TOML: {path} ({detail})")


class ConfigFileValidationError(CitySearchIndexError):
    """Raised when a config file does not match the supported schema."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Config file is invalid: {path} ({detail})")
