"""Coordinate-system inference and point mapping for a single canvas."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from .errors import CoordinateSystemError
from .geometry import (
    CanvasCoordinates,
    CanvasLocation,
    CoordinateBoundingBox,
    CoordinateDescription,
    Displacement,
    LocationType,
    Point,
)

logger = logging.getLogger(__name__)

MinMax = Tuple[Optional[float], Optional[float], Optional[float], Optional[float]]

DEFAULT_COORDINATE_EPSILON = 1e-4


def _lower(current: Optional[float], value: Optional[float]) -> Optional[float]:
    if value is None:
        return current
    if current is None or value < current:
        return float(value)
    return current


def _upper(current: Optional[float], value: Optional[float]) -> Optional[float]:
    if value is None:
        return current
    if current is None or value > current:
        return float(value)
    return current


def min_max_coordinates(boxes: Iterable[CoordinateBoundingBox]) -> MinMax:
    """Fold shape bounding boxes into ``(min_x, max_x, min_y, max_y)``.

    Axes to which no box contributes stay ``None``.
    """

    min_x = max_x = min_y = max_y = None
    for box in boxes:
        min_x = _lower(min_x, box.left)
        max_x = _upper(max_x, box.right)
        min_y = _lower(min_y, box.bottom)
        max_y = _upper(max_y, box.top)
    return min_x, max_x, min_y, max_y


def _infer_axis(
    low: Optional[float], high: Optional[float], epsilon: float
) -> Tuple[float, float]:
    if low is None and high is None:
        return -epsilon, epsilon
    if low is None:
        low = high
    if high is None:
        high = low
    if low == high:
        return low - epsilon, high + epsilon
    return low, high


def describe_coordinates(
    min_max: MinMax,
    override: Optional[CanvasCoordinates] = None,
    epsilon: float = DEFAULT_COORDINATE_EPSILON,
) -> CoordinateDescription:
    """Build the coordinate description for one canvas.

    An explicit override edge always wins. Otherwise an axis without data
    falls back to ``[-epsilon, epsilon]`` and a single observed value is
    widened by ``epsilon`` on both sides.
    """

    override = override or CanvasCoordinates()
    min_x, max_x, min_y, max_y = min_max
    has_data = min_x is not None or max_x is not None or min_y is not None or max_y is not None
    if not has_data and override.is_empty():
        return CoordinateDescription()

    left, right = _infer_axis(min_x, max_x, epsilon)
    bottom, top = _infer_axis(min_y, max_y, epsilon)
    description = CoordinateDescription(
        has_coordinates=True,
        left=override.left if override.left is not None else left,
        right=override.right if override.right is not None else right,
        bottom=override.bottom if override.bottom is not None else bottom,
        top=override.top if override.top is not None else top,
    )
    if description.right <= description.left or description.top <= description.bottom:
        logger.warning("Degenerate coordinate description %s", description)
    return description


def _coordinate_fraction(value: float, low: Optional[float], high: Optional[float], axis: str) -> float:
    if low is None or high is None:
        raise CoordinateSystemError(f"canvas has no coordinate system in {axis}")
    span = high - low
    if span == 0:
        raise CoordinateSystemError(f"coordinate system in {axis} has zero extent ({low} to {high})")
    return (value - low) / span


def _axis_to_pixels(
    value: float,
    kind: LocationType,
    pixel_low: int,
    pixel_high: int,
    coord_low: Optional[float],
    coord_high: Optional[float],
    axis: str,
    relative_to_master: bool,
) -> float:
    if kind is LocationType.PIXELS:
        return float(value) if relative_to_master else pixel_low + float(value)
    if kind is LocationType.PROPORTIONAL:
        return pixel_low + (pixel_high - pixel_low) * value
    if kind is LocationType.COORDINATE:
        fraction = _coordinate_fraction(value, coord_low, coord_high, axis)
        return pixel_low + (pixel_high - pixel_low) * fraction
    raise ValueError(f"unrecognized location type {kind!r}")


def point_to_pixels(
    point: Point,
    location: CanvasLocation,
    description: CoordinateDescription,
    *,
    relative_to_canvas: bool = False,
) -> Point:
    """Map ``point`` onto absolute image pixels for a canvas at ``location``.

    PIXELS axes not marked relative to the master are offsets from the
    canvas origin. With ``relative_to_canvas`` the result is measured from
    the canvas' own left/bottom edges instead of the image origin, and its
    ``relative_to_master`` flags are cleared to say so.
    """

    x = _axis_to_pixels(
        point.x,
        point.type_x,
        location.left,
        location.right,
        description.left,
        description.right,
        "x",
        point.relative_to_master_x,
    )
    y = _axis_to_pixels(
        point.y,
        point.type_y,
        location.bottom,
        location.top,
        description.bottom,
        description.top,
        "y",
        point.relative_to_master_y,
    )
    if relative_to_canvas:
        x -= location.left
        y -= location.bottom
    absolute = not relative_to_canvas
    return Point(x, y, LocationType.PIXELS, LocationType.PIXELS, absolute, absolute)


def _axis_span_to_pixels(
    delta: float,
    kind: LocationType,
    pixel_span: int,
    coord_low: Optional[float],
    coord_high: Optional[float],
    axis: str,
) -> float:
    if kind is LocationType.PIXELS:
        return float(delta)
    if kind is LocationType.PROPORTIONAL:
        return pixel_span * delta
    if kind is LocationType.COORDINATE:
        if coord_low is None or coord_high is None:
            raise CoordinateSystemError(f"canvas has no coordinate system in {axis}")
        extent = coord_high - coord_low
        if extent == 0:
            raise CoordinateSystemError(f"coordinate system in {axis} has zero extent")
        return pixel_span * delta / extent
    raise ValueError(f"unrecognized location type {kind!r}")


def displacement_to_pixels(
    displacement: Displacement,
    location: CanvasLocation,
    description: CoordinateDescription,
) -> Displacement:
    """Map a displacement to pixels. Only spans matter, never offsets."""

    dx = _axis_span_to_pixels(
        displacement.dx, displacement.type_dx, location.width, description.left, description.right, "x"
    )
    dy = _axis_span_to_pixels(
        displacement.dy, displacement.type_dy, location.height, description.bottom, description.top, "y"
    )
    return Displacement(dx, dy, LocationType.PIXELS, LocationType.PIXELS)


__all__ = [
    "DEFAULT_COORDINATE_EPSILON",
    "MinMax",
    "describe_coordinates",
    "displacement_to_pixels",
    "min_max_coordinates",
    "point_to_pixels",
]
