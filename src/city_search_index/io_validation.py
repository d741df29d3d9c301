"""Pydantic-based validation helpers for inbound IO payloads."""

from __future__ import annotations

from pydantic import TypeAdapter, ValidationError

from .types import ElectionEntry


class IncomingDataError(ValueError):
    """Raised when inbound data fails validation."""


def validate_as[SchemaT](schema: type[SchemaT], payload: object) -> SchemaT:
    try:
        return TypeAdapter(schema).validate_python(payload)
    except ValidationError as exc:
        message = f"Invalid payload for {schema}."
        raise IncomingDataError(message) from exc


def validate_json_as[SchemaT](schema: type[SchemaT], payload: str | bytes | bytearray) -> SchemaT:
    try:
        return TypeAdapter(schema).validate_json(payload)
    except ValidationError as exc:
        message = f"Invalid JSON payload for {schema}."
        raise IncomingDataError(message) from exc


def _as_str(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value)


def parse_election_entry(payload: object) -> ElectionEntry | None:
    """Return a typed source entry, or None for null/invalid items."""
    if payload is None:
        return None
    try:
        raw = validate_as(dict[str, object], payload)
        entry_id = validate_as(int, raw.get("__id"))
    except IncomingDataError:
        return None
    return {
        "__id": entry_id,
        "Libellé de la commune": _as_str(raw.get("Libellé de la commune")),
        "Code du département": _as_str(raw.get("Code du département")),
        "Libellé du département": _as_str(raw.get("Libellé du département")),
        "Code de la commune": _as_str(raw.get("Code de la commune")),
    }


def parse_election_entries(payload: object) -> list[ElectionEntry]:
    """Validate the top-level document and keep every well-formed entry.

    Raises:
        IncomingDataError: When the document is not a JSON array.
    """
    items = validate_as(list[object], payload)
    entries: list[ElectionEntry] = []
    for item in items:
        entry = parse_election_entry(item)
        if entry is not None:
            entries.append(entry)
    return entries
