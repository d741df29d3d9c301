"""Test-only exceptions for enforcing constraints."""

from __future__ import annotations


class NetworkIsolationError(RuntimeError):
    """Raised when a test attempts a real network connection."""

    def __init__(self, attempted: str) -> None:
        super().__init__(
            "Tests must not make network connections! "
            "The index build is offline; use fakes instead. "
            f"Attempted connection to: {attempted}"
        )


class FakeFileNotFoundError(FileNotFoundError):
    """Raised when a fake filesystem path is missing."""

    def __init__(self, path: str) -> None:
        super().__init__(f"No such file: {path}")


class FakeFileTypeError(TypeError):
    """Raised when a fake filesystem payload has the wrong type."""

    def __init__(self, expected: str, path: str) -> None:
        super().__init__(f"Expected {expected} at {path}")


class FakeWriteError(PermissionError):
    """Raised when writing to a read-only fake filesystem."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Read-only filesystem: {path}")


class FakeProgressStateError(RuntimeError):
    """Raised when a progress call arrives outside a start/finish span."""

    def __init__(self, call: str) -> None:
        super().__init__(f"{call}() called outside a progress session")
