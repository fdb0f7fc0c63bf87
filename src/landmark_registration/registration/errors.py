"""Exceptions raised while reading or correlating sensor reports."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence


class MalformedInputError(ValueError):
    """A sensor report could not be parsed."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class InvalidReadingsError(ValueError):
    """The readings handed to the correlator cannot be correlated as given.

    Raised for an empty reading list, repeated sensor ids or a missing anchor.
    """


class RegistrationError(RuntimeError):
    """Base class for failures of the correlation itself."""


class UnsolvableOverlapError(RegistrationError):
    """A full pass over untried (placed, pending) pairs placed nothing."""

    def __init__(self, placed: Iterable[int], pending: Iterable[int]):
        self.placed = frozenset(placed)
        self.pending = frozenset(pending)
        super().__init__(
            f"No overlap found for sensors {sorted(self.pending)} against placed "
            f"sensors {sorted(self.placed)}; the overlap graph is not connected"
        )


class DegenerateTransformError(RegistrationError):
    """A correspondence set does not pin down a single orientation."""

    def __init__(self, message: str, orientations: Sequence[int] = ()):
        super().__init__(message)
        self.orientations = tuple(orientations)
