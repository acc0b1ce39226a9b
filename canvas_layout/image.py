"""The image: owner of the canvas tree, the fixes and the solved layout."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from .bitmap import Bitmap
from .canvas import Canvas
from .coordinates import describe_coordinates, min_max_coordinates
from .errors import UnregisteredLocatableError
from .fixes import (
    FIX_TYPES,
    DimensionsFix,
    Fix,
    RelationshipFix,
    RelativeSizeFix,
    ScaleFix,
    fix_locatables,
)
from .geometry import (
    CanvasDimension,
    CanvasLocation,
    CanvasPart,
    CoordinateDescription,
)
from .locatable import IndexedLocatables, Locatable
from .solver import LayoutOptions, LayoutSolution, get_layout_options, solve_layout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutSnapshot:
    """Immutable view of one solve cycle."""

    width: int
    height: int
    locations: Mapping[int, CanvasLocation]
    descriptions: Mapping[int, CoordinateDescription]
    solution: Optional[LayoutSolution] = field(default=None, compare=False)

    def location_of(self, index: int) -> CanvasLocation:
        return self.locations[index]


class Image:
    """Collects canvases, relationships between them and their solved layout.

    Geometry-affecting changes (new canvas, shape, fix, override) only mark
    the image dirty; reads that need positions recompute synchronously.
    """

    def __init__(self, width: int = 100, height: int = 100, options: Optional[LayoutOptions] = None):
        if width < 0 or height < 0:
            raise ValueError(f"image size must be non-negative, got {width}x{height}")
        self._width = int(width)
        self._height = int(height)
        self.options = copy.deepcopy(options) if options is not None else get_layout_options()
        self._locatables = IndexedLocatables()
        self._canvases: List[Canvas] = []
        self._fixes: List[Fix] = []
        self._locations: List[CanvasLocation] = []
        self._descriptions: Dict[int, CoordinateDescription] = {}
        self._solution: Optional[LayoutSolution] = None
        self._needs_calculate = True
        self._master = Canvas(self)
        self._master.name = "master"
        self._register_canvas(self._master)

    # -- tree and registry -------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def master_canvas(self) -> Canvas:
        return self._master

    def get_master_canvas(self) -> Canvas:
        return self._master

    @property
    def canvases(self) -> Tuple[Canvas, ...]:
        return tuple(self._canvases)

    @property
    def locatables(self) -> IndexedLocatables:
        return self._locatables

    def _register_canvas(self, canvas: Canvas) -> None:
        if canvas.image is not self:
            raise ValueError("canvas belongs to a different image")
        self._canvases.append(canvas)
        self.register_locatable(canvas)

    def register_locatable(self, locatable: Locatable) -> Optional[int]:
        index = self._locatables.add(locatable)
        if index is not None:
            logger.debug("Registered %r as locatable #%d", locatable, index)
            self.mark_dirty()
        return index

    @property
    def needs_calculate(self) -> bool:
        return self._needs_calculate

    def mark_dirty(self) -> None:
        self._needs_calculate = True

    # -- fixes ---------------------------------------------------------------

    @property
    def fixes(self) -> Tuple[Fix, ...]:
        return tuple(self._fixes)

    def add_fix(self, fix: Fix) -> Fix:
        if not isinstance(fix, FIX_TYPES):
            raise TypeError(f"unsupported fix type {type(fix).__name__}")
        for locatable in fix_locatables(fix):
            if locatable not in self._locatables:
                raise UnregisteredLocatableError(
                    locatable, f"{fix.name} references {locatable!r}, which is not registered with this image"
                )
        self._fixes.append(fix)
        self.mark_dirty()
        return fix

    def relation_fix(
        self,
        a: Locatable,
        part_a: CanvasPart,
        b: Locatable,
        part_b: CanvasPart,
        pixels_diff: float = 0.0,
        description: str = "",
    ) -> RelationshipFix:
        """Declare ``part_b(b) - part_a(a) = pixels_diff``."""

        return self.add_fix(RelationshipFix(a, part_a, b, part_b, float(pixels_diff), description))

    def scale_fix(
        self,
        a: Locatable,
        part_a: CanvasPart,
        b: Locatable,
        dimension: CanvasDimension,
        lam: float,
        description: str = "",
    ) -> ScaleFix:
        """Place ``part_a`` of ``a`` at fraction ``lam`` along ``dimension`` of ``b``."""

        return self.add_fix(ScaleFix(a, part_a, b, dimension, float(lam), description))

    def dimensions_fix(
        self, locatable: Locatable, dimension: CanvasDimension, extent: float, description: str = ""
    ) -> DimensionsFix:
        if extent < 0:
            raise ValueError(f"extent must be non-negative, got {extent}")
        return self.add_fix(DimensionsFix(locatable, dimension, float(extent), description))

    def relative_size_fix(
        self,
        a: Locatable,
        dimension_a: CanvasDimension,
        b: Locatable,
        dimension_b: CanvasDimension,
        scale: float,
        description: str = "",
    ) -> RelativeSizeFix:
        return self.add_fix(RelativeSizeFix(a, dimension_a, b, dimension_b, float(scale), description))

    def clear_relationships(self) -> None:
        logger.info("Clearing %d relationship(s)", len(self._fixes))
        self._fixes.clear()
        self.mark_dirty()

    # -- calculation ---------------------------------------------------------

    def calculate_canvas_coordinates(self) -> None:
        epsilon = self.options.coordinate_epsilon
        for canvas in self._canvases:
            boxes = [shape.bounding_box() for shape in canvas.shapes]
            description = describe_coordinates(min_max_coordinates(boxes), canvas.coordinates, epsilon)
            self._descriptions[id(canvas)] = description
            if description.has_coordinates:
                logger.debug("Coordinates for %r: %s", canvas, description)

    def calculate_canvas_locations(self) -> LayoutSolution:
        solution = solve_layout(
            self._locatables,
            self._fixes,
            self._width,
            self._height,
            self.options,
            master=self._master,
        )
        self._solution = solution
        self._locations = list(solution.locations)
        return solution

    def calculate_image(self) -> None:
        self.calculate_canvas_coordinates()
        self.calculate_canvas_locations()
        self._needs_calculate = False

    def ensure_calculated(self) -> None:
        if self._needs_calculate:
            self.calculate_image()

    def recompute(self) -> LayoutSnapshot:
        """Force a full recalculation and return its result."""

        self.calculate_image()
        return self.snapshot()

    def snapshot(self) -> LayoutSnapshot:
        self.ensure_calculated()
        locations = {idx: loc for idx, loc in enumerate(self._locations)}
        descriptions = {
            self._locatables.index_of(canvas): self._descriptions[id(canvas)] for canvas in self._canvases
        }
        return LayoutSnapshot(
            width=self._width,
            height=self._height,
            locations=MappingProxyType(locations),
            descriptions=MappingProxyType(descriptions),
            solution=self._solution,
        )

    @property
    def solution(self) -> Optional[LayoutSolution]:
        return self._solution

    def get_location(self, locatable: Locatable) -> CanvasLocation:
        index = self._locatables.index_of(locatable)
        self.ensure_calculated()
        return self._locations[index]

    def get_coordinate_description(self, canvas: Canvas) -> CoordinateDescription:
        self._locatables.index_of(canvas)
        self.ensure_calculated()
        return self._descriptions[id(canvas)]

    # -- rendering -----------------------------------------------------------

    def to_bitmap(self, bitmap: Optional[Bitmap] = None) -> Bitmap:
        self.ensure_calculated()
        output = bitmap if bitmap is not None else Bitmap(self._width, self._height)
        self._master.write_on_bitmap(output)
        output.reset_permitted_region()
        return output


__all__ = ["Image", "LayoutSnapshot"]
