"""Pytest fixtures shared across the test suite.

All tests are network-isolated - socket connections are blocked by default.
"""

from __future__ import annotations

import socket

import pytest

from city_search_index.types import ElectionEntry
from tests.fakes import FakeProgressReporter, InMemoryFileSystem
from tests.support.errors import NetworkIsolationError

# =============================================================================
# Network Isolation - Block all socket connections in tests
# =============================================================================


def _blocked_socket_connect(self: socket.socket, *args: object, **kwargs: object) -> None:
    """Raise an error if any test tries to make a real network connection."""
    _ = (self, kwargs)
    raise NetworkIsolationError(str(args))


@pytest.fixture(autouse=True)
def block_network_access(monkeypatch: pytest.MonkeyPatch) -> None:
    """Block all network access in tests."""
    monkeypatch.setattr(socket.socket, "connect", _blocked_socket_connect)


@pytest.fixture
def in_memory_fs() -> InMemoryFileSystem:
    """Provide an in-memory filesystem for tests."""
    return InMemoryFileSystem()


@pytest.fixture
def fake_progress() -> FakeProgressReporter:
    """Provide a recording progress reporter for tests."""
    return FakeProgressReporter()


@pytest.fixture
def sample_entries() -> list[object]:
    """Raw source entries as they appear in the input JSON array."""
    return [
        {
            "__id": 1,
            "Libellé de la commune": "Paris",
            "Code du département": "75",
            "Libellé du département": "Paris",
            "Code de la commune": "056",
        },
        {
            "__id": 2,
            "Libellé de la commune": "Pa",
            "Code du département": "64",
            "Libellé du département": "Pyrénées-Atlantiques",
            "Code de la commune": "999",
        },
        None,
        {
            "__id": 3,
            "Code du département": "13",
            "Libellé du département": "Bouches-du-Rhône",
            "Code de la commune": "055",
        },
        {
            "__id": 4,
            "Libellé de la commune": "Saint-Étienne",
            "Code du département": "42",
            "Libellé du département": "Loire",
            "Code de la commune": "218",
        },
    ]


@pytest.fixture
def sample_entry() -> ElectionEntry:
    """A single validated source entry."""
    return {
        "__id": 7,
        "Libellé de la commune": "L'Haÿ-les-Roses",
        "Code du département": "94",
        "Libellé du département": "Val-de-Marne",
        "Code de la commune": "038",
    }
