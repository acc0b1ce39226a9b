"""Nested rectangular drawing regions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Tuple

from .bitmap import WHITE, Bitmap, PixelColor
from .coordinates import displacement_to_pixels, point_to_pixels
from .geometry import (
    CanvasCoordinates,
    CanvasLocation,
    CoordinateDescription,
    Displacement,
    Point,
)
from .locatable import Locatable
from .shapes import Shape

if TYPE_CHECKING:  # pragma: no cover
    from .image import Image

logger = logging.getLogger(__name__)


class Canvas(Locatable):
    """A node of the canvas tree owned by an :class:`Image`.

    Only the image creates the master canvas; every other canvas comes from
    :meth:`floating_sub_canvas` and stays attached to its parent for the
    parent's lifetime.
    """

    def __init__(self, image: "Image", parent: Optional["Canvas"] = None):
        self._image = image
        self._parent = parent
        self._children: List[Canvas] = []
        self._shapes: List[Shape] = []
        self._coordinates = CanvasCoordinates()
        self._background: PixelColor = WHITE
        self._paint_background = True
        self._fixed_width: Optional[float] = None
        self._fixed_height: Optional[float] = None
        self._solved: Optional[CanvasLocation] = None
        self.name: Optional[str] = None

    def __repr__(self) -> str:
        label = self.name or ("master" if self._parent is None else hex(id(self)))
        return f"Canvas({label})"

    @property
    def image(self) -> "Image":
        return self._image

    @property
    def parent(self) -> Optional["Canvas"]:
        return self._parent

    @property
    def children(self) -> Tuple["Canvas", ...]:
        return tuple(self._children)

    @property
    def shapes(self) -> Tuple[Shape, ...]:
        return tuple(self._shapes)

    def is_top_level(self) -> bool:
        return self._parent is None

    def floating_sub_canvas(self, name: Optional[str] = None) -> "Canvas":
        sub = Canvas(self._image, self)
        sub.name = name
        self._image._register_canvas(sub)
        self._children.append(sub)
        return sub

    def add_shape(self, shape: Shape) -> None:
        self._shapes.append(shape)
        self._image.mark_dirty()

    @property
    def background(self) -> PixelColor:
        return self._background

    @background.setter
    def background(self, color: PixelColor) -> None:
        self._background = color

    @property
    def paint_background(self) -> bool:
        return self._paint_background

    @paint_background.setter
    def paint_background(self, flag: bool) -> None:
        self._paint_background = bool(flag)

    @property
    def coordinates(self) -> CanvasCoordinates:
        return self._coordinates

    def set_coordinates(self, coordinates: Optional[CanvasCoordinates] = None, **edges: float) -> None:
        """Override coordinate bounds; keyword edges update the current override."""

        if coordinates is None:
            current = self._coordinates
            values = {
                "left": current.left,
                "right": current.right,
                "bottom": current.bottom,
                "top": current.top,
            }
            unknown = set(edges) - set(values)
            if unknown:
                raise TypeError(f"unknown coordinate edge(s): {', '.join(sorted(unknown))}")
            values.update(edges)
            coordinates = CanvasCoordinates(**values)
        self._coordinates = coordinates
        self._image.mark_dirty()

    def set_fixed_dimensions(self, width: Optional[float] = None, height: Optional[float] = None) -> None:
        self._fixed_width = None if width is None else float(width)
        self._fixed_height = None if height is None else float(height)
        self._image.mark_dirty()

    def fixed_width(self) -> Optional[float]:
        return self._fixed_width

    def fixed_height(self) -> Optional[float]:
        return self._fixed_height

    def set_location(self, location: CanvasLocation) -> None:
        self._solved = location

    @property
    def location(self) -> CanvasLocation:
        """Solved location, recalculating the owning image when it is stale."""

        self._image.ensure_calculated()
        return self._solved

    @property
    def coordinate_description(self) -> CoordinateDescription:
        return self._image.get_coordinate_description(self)

    def point_to_pixels(self, point: Point, relative_to_canvas: bool = False) -> Point:
        return point_to_pixels(
            point, self.location, self.coordinate_description, relative_to_canvas=relative_to_canvas
        )

    def displacement_to_pixels(self, displacement: Displacement) -> Displacement:
        return displacement_to_pixels(displacement, self.location, self.coordinate_description)

    def write_on_bitmap(self, bitmap: Bitmap) -> None:
        location = self.location
        bitmap.set_permitted_region(location.left, location.right, location.bottom, location.top)
        if self._paint_background:
            self._paint_background_on(bitmap, location)
        for shape in self._shapes:
            shape.draw(bitmap, self)
        for child in self._children:
            child.write_on_bitmap(bitmap)

    def _paint_background_on(self, bitmap: Bitmap, location: CanvasLocation) -> None:
        bitmap.fill_rect(location.left, location.right, location.bottom, location.top, self._background)


__all__ = ["Canvas"]
