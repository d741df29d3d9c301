"""Exports for test fakes."""

from .filesystem import InMemoryFileSystem
from .progress import FakeProgressReporter, ProgressSession

__all__ = [
    "FakeProgressReporter",
    "InMemoryFileSystem",
    "ProgressSession",
]
