"""Exceptions raised while declaring and solving canvas layouts."""

from __future__ import annotations

from typing import List, Sequence


class LayoutError(RuntimeError):
    """Base class for layout failures surfaced to the caller."""


class UnregisteredLocatableError(LayoutError):
    """Raised when a fix or lookup names a locatable the image does not know."""

    def __init__(self, locatable: object, message: str = ""):
        super().__init__(message or f"locatable {locatable!r} is not registered with this image")
        self.locatable = locatable


class UnderconstrainedLayoutError(LayoutError):
    """Raised when the declared fixes cannot position every locatable."""


class SingularLayoutError(LayoutError):
    """Raised when the linear system has no usable solution."""

    def __init__(self, message: str, failed_rows: Sequence[object] = ()):
        super().__init__(message)
        self.failed_rows: List[object] = list(failed_rows)


class LayoutInvariantError(LayoutError):
    """Raised when a solved layout breaks an invariant the assembly guarantees."""


class CoordinateSystemError(LayoutError):
    """Raised when a coordinate-typed value cannot be mapped onto a canvas."""


__all__ = [
    "CoordinateSystemError",
    "LayoutError",
    "LayoutInvariantError",
    "SingularLayoutError",
    "UnderconstrainedLayoutError",
    "UnregisteredLocatableError",
]
