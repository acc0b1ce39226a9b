"""Pixel rectangles, coordinate boxes and abstract point descriptions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class CanvasPart(Enum):
    LEFT = "left"
    RIGHT = "right"
    BOTTOM = "bottom"
    TOP = "top"
    CENTER_X = "center_x"
    CENTER_Y = "center_y"


class CanvasDimension(Enum):
    X = "x"
    Y = "y"


class LocationType(Enum):
    PROPORTIONAL = "proportional"
    COORDINATE = "coordinate"
    PIXELS = "pixels"


# Column offset of each edge inside a locatable's block of four unknowns.
EDGE_OFFSETS = {
    CanvasPart.LEFT: 0,
    CanvasPart.BOTTOM: 1,
    CanvasPart.RIGHT: 2,
    CanvasPart.TOP: 3,
}

EDGE_NAMES: Tuple[str, str, str, str] = ("left", "bottom", "right", "top")


def lesser_part(dimension: CanvasDimension) -> CanvasPart:
    return CanvasPart.LEFT if dimension is CanvasDimension.X else CanvasPart.BOTTOM


def greater_part(dimension: CanvasDimension) -> CanvasPart:
    return CanvasPart.RIGHT if dimension is CanvasDimension.X else CanvasPart.TOP


@dataclass(frozen=True)
class CanvasLocation:
    """Solved pixel rectangle of a canvas, relative to the image origin."""

    left: int = 0
    bottom: int = 0
    right: int = 0
    top: int = 0

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.top - self.bottom

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.left, self.bottom, self.right, self.top)

    def __str__(self) -> str:
        return f"(left={self.left}, bottom={self.bottom}, right={self.right}, top={self.top})"


@dataclass(frozen=True)
class CoordinateBoundingBox:
    """Data extent of a shape. ``None`` marks an axis without data."""

    left: Optional[float] = None
    right: Optional[float] = None
    bottom: Optional[float] = None
    top: Optional[float] = None


@dataclass(frozen=True)
class CanvasCoordinates:
    """User supplied coordinate bounds; any edge may be left unset."""

    left: Optional[float] = None
    right: Optional[float] = None
    bottom: Optional[float] = None
    top: Optional[float] = None

    def is_empty(self) -> bool:
        return self.left is None and self.right is None and self.bottom is None and self.top is None


@dataclass(frozen=True)
class CoordinateDescription:
    """Data coordinate window a canvas maps onto its pixel rectangle."""

    has_coordinates: bool = False
    left: Optional[float] = None
    right: Optional[float] = None
    bottom: Optional[float] = None
    top: Optional[float] = None


@dataclass(frozen=True)
class Point:
    """A location whose axes may use different units.

    ``relative_to_master_x`` / ``relative_to_master_y`` mark a PIXELS axis as
    measured from the image origin rather than from the owning canvas.
    """

    x: float
    y: float
    type_x: LocationType = LocationType.PIXELS
    type_y: LocationType = LocationType.PIXELS
    relative_to_master_x: bool = False
    relative_to_master_y: bool = False


@dataclass(frozen=True)
class Displacement:
    dx: float
    dy: float
    type_dx: LocationType = LocationType.PIXELS
    type_dy: LocationType = LocationType.PIXELS


def make_coordinate_point(x: float, y: float) -> Point:
    return Point(float(x), float(y), LocationType.COORDINATE, LocationType.COORDINATE)


def make_relative_point(x: float, y: float) -> Point:
    return Point(float(x), float(y), LocationType.PROPORTIONAL, LocationType.PROPORTIONAL)


def make_pixel_point(x: float, y: float, relative_to_master: bool = True) -> Point:
    return Point(
        float(x), float(y), LocationType.PIXELS, LocationType.PIXELS, relative_to_master, relative_to_master
    )


__all__ = [
    "CanvasCoordinates",
    "CanvasDimension",
    "CanvasLocation",
    "CanvasPart",
    "CoordinateBoundingBox",
    "CoordinateDescription",
    "Displacement",
    "EDGE_NAMES",
    "EDGE_OFFSETS",
    "LocationType",
    "Point",
    "greater_part",
    "lesser_part",
    "make_coordinate_point",
    "make_pixel_point",
    "make_relative_point",
]
