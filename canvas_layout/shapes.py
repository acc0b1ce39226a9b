"""Drawable payloads of a canvas.

The layout core only reads ``bounding_box``; ``draw`` is the render hook the
canvas tree calls when writing onto a bitmap.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Optional

import numpy as np

from .bitmap import BLACK, Bitmap, PixelColor
from .geometry import CoordinateBoundingBox, LocationType, Point

if TYPE_CHECKING:  # pragma: no cover
    from .canvas import Canvas


class Shape:
    """Base class for anything placed on a canvas."""

    zorder: float = 1.0

    def bounding_box(self) -> CoordinateBoundingBox:
        raise NotImplementedError

    def draw(self, bitmap: Bitmap, canvas: "Canvas") -> None:
        raise NotImplementedError

    def set_zorder(self, z: float) -> None:
        self.zorder = float(z)


def _coordinate_extent(*values: Optional[float]):
    present = [v for v in values if v is not None]
    if not present:
        return None, None
    return min(present), max(present)


class Line(Shape):
    def __init__(self, first: Point, second: Point, color: PixelColor = BLACK):
        self.first = first
        self.second = second
        self.color = color

    def bounding_box(self) -> CoordinateBoundingBox:
        xs = [p.x for p in (self.first, self.second) if p.type_x is LocationType.COORDINATE]
        ys = [p.y for p in (self.first, self.second) if p.type_y is LocationType.COORDINATE]
        left, right = _coordinate_extent(*xs)
        bottom, top = _coordinate_extent(*ys)
        return CoordinateBoundingBox(left=left, right=right, bottom=bottom, top=top)

    def draw(self, bitmap: Bitmap, canvas: "Canvas") -> None:
        start = canvas.point_to_pixels(self.first)
        end = canvas.point_to_pixels(self.second)
        steps = int(max(abs(end.x - start.x), abs(end.y - start.y))) + 1
        xs = np.rint(np.linspace(start.x, end.x, steps)).astype(int)
        ys = np.rint(np.linspace(start.y, end.y, steps)).astype(int)
        for x, y in zip(xs, ys):
            bitmap.set_pixel(int(x), int(y), self.color, self.zorder)

    def __repr__(self) -> str:
        return f"Line({self.first!r}, {self.second!r})"


class Marker(Shape):
    """Filled square of ``size`` pixels centred on a point."""

    def __init__(self, center: Point, size: int = 3, color: PixelColor = BLACK):
        self.center = center
        self.size = max(1, int(size))
        self.color = color

    def bounding_box(self) -> CoordinateBoundingBox:
        x = self.center.x if self.center.type_x is LocationType.COORDINATE else None
        y = self.center.y if self.center.type_y is LocationType.COORDINATE else None
        return CoordinateBoundingBox(left=x, right=x, bottom=y, top=y)

    def draw(self, bitmap: Bitmap, canvas: "Canvas") -> None:
        center = canvas.point_to_pixels(self.center)
        half = self.size / 2.0
        x0 = int(math.floor(center.x - half + 0.5))
        y0 = int(math.floor(center.y - half + 0.5))
        for x in range(x0, x0 + self.size):
            for y in range(y0, y0 + self.size):
                bitmap.set_pixel(x, y, self.color, self.zorder)

    def __repr__(self) -> str:
        return f"Marker({self.center!r}, size={self.size})"


__all__ = ["Line", "Marker", "Shape"]
