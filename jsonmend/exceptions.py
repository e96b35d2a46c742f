"""Shared exception classes and expected-error tuple for the JSON core."""

from __future__ import annotations


class AppError(Exception):
    """Base class for expected application-layer failures."""


class AppRuntimeError(RuntimeError, AppError):
    """Raised for runtime operation failures with user-facing context."""


class UnsupportedUploadError(ValueError, AppError):
    """Raised when a document is not JSON-typed; the core never sees it."""

    def __init__(self, path, suffix=""):
        self.path = str(path or "")
        self.suffix = str(suffix or "")
        super().__init__(f"Unsupported file type {self.suffix or '(none)'!r}: {self.path}")


EXPECTED_ERRORS = (
    OSError,
    ValueError,
    TypeError,
    RuntimeError,
    AttributeError,
    KeyError,
    IndexError,
    ImportError,
)
