"""Turn a parsed layout script into a live :class:`Image`."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .ast import Program, Stmt
from .bitmap import BLACK, parse_color
from .canvas import Canvas
from .fixes import Fix
from .geometry import (
    CanvasDimension,
    CanvasPart,
    Point,
    make_coordinate_point,
    make_pixel_point,
    make_relative_point,
)
from .image import Image
from .shapes import Line, Marker, Shape
from .solver import LayoutOptions

logger = logging.getLogger(__name__)

MASTER_NAME = "master"

PARTS = {
    "left": CanvasPart.LEFT,
    "right": CanvasPart.RIGHT,
    "bottom": CanvasPart.BOTTOM,
    "top": CanvasPart.TOP,
    "center_x": CanvasPart.CENTER_X,
    "center_y": CanvasPart.CENTER_Y,
}

DIMENSIONS = {"x": CanvasDimension.X, "y": CanvasDimension.Y}

POINT_UNITS = {
    "coordinate": make_coordinate_point,
    "proportional": make_relative_point,
    "pixels": make_pixel_point,
}


class TranslationError(ValueError):
    """Error raised when a statement cannot be applied to the image."""

    def __init__(self, stmt: Stmt, message: str):
        super().__init__(message)
        self.stmt = stmt


@dataclass
class LayoutModel:
    image: Image
    canvases: Dict[str, Canvas] = field(default_factory=dict)
    fixes: List[Fix] = field(default_factory=list)


class _Translator:
    def __init__(self, program: Program, options: Optional[LayoutOptions]):
        self.program = program
        self.options = options
        self.model: Optional[LayoutModel] = None

    def build(self) -> LayoutModel:
        image_stmts = self.program.of_kind("image")
        opts = image_stmts[0].opts if image_stmts else {}
        try:
            image = Image(int(opts.get("width", 100)), int(opts.get("height", 100)), self.options)
        except (TypeError, ValueError) as exc:
            raise TranslationError(image_stmts[0], str(exc)) from exc
        self.model = LayoutModel(image=image, canvases={MASTER_NAME: image.master_canvas})

        for stmt in self.program.stmts:
            handler = getattr(self, f"_on_{stmt.kind}", None)
            if handler is None:
                raise TranslationError(stmt, f"unsupported statement kind {stmt.kind!r}")
            handler(stmt)
        return self.model

    # -- lookups -------------------------------------------------------------

    def _canvas(self, stmt: Stmt, name: str) -> Canvas:
        try:
            return self.model.canvases[name]
        except KeyError:
            raise TranslationError(stmt, f"unknown canvas {name!r}") from None

    def _part(self, stmt: Stmt, name: str) -> CanvasPart:
        try:
            return PARTS[name]
        except KeyError:
            raise TranslationError(stmt, f"unknown canvas part {name!r}") from None

    def _dimension(self, stmt: Stmt, name: str) -> CanvasDimension:
        try:
            return DIMENSIONS[name]
        except KeyError:
            raise TranslationError(stmt, f"unknown canvas dimension {name!r}") from None

    def _point(self, stmt: Stmt, xy) -> Point:
        units = stmt.opts.get("units", "coordinate")
        factory = POINT_UNITS.get(units)
        if factory is None:
            raise TranslationError(stmt, f"unknown point units {units!r}")
        return factory(float(xy[0]), float(xy[1]))

    def _color(self, stmt: Stmt, value, default):
        if value is None:
            return default
        try:
            return parse_color(value)
        except ValueError as exc:
            raise TranslationError(stmt, str(exc)) from exc

    def _add_shape(self, stmt: Stmt, shape: Shape) -> None:
        if "zorder" in stmt.opts:
            shape.set_zorder(stmt.opts["zorder"])
        self._canvas(stmt, stmt.data["canvas"]).add_shape(shape)

    # -- statements ----------------------------------------------------------

    def _on_image(self, stmt: Stmt) -> None:
        pass

    def _on_canvas(self, stmt: Stmt) -> None:
        name = stmt.data["name"]
        if name in self.model.canvases:
            raise TranslationError(stmt, f"canvas {name!r} declared twice")
        parent = self._canvas(stmt, stmt.data["parent"])
        canvas = parent.floating_sub_canvas(name)
        opts = stmt.opts
        if "background" in opts:
            canvas.background = self._color(stmt, opts["background"], canvas.background)
        if "paint" in opts:
            canvas.paint_background = opts["paint"]
        if "width" in opts or "height" in opts:
            canvas.set_fixed_dimensions(opts.get("width"), opts.get("height"))
        self.model.canvases[name] = canvas

    def _fix(self, fix: Fix) -> None:
        self.model.fixes.append(fix)

    def _on_relation(self, stmt: Stmt) -> None:
        (b_name, b_part), (a_name, a_part) = stmt.data["target"], stmt.data["anchor"]
        self._fix(
            self.model.image.relation_fix(
                self._canvas(stmt, a_name),
                self._part(stmt, a_part),
                self._canvas(stmt, b_name),
                self._part(stmt, b_part),
                float(stmt.data["offset"]),
                stmt.opts.get("description", ""),
            )
        )

    def _on_dimensions(self, stmt: Stmt) -> None:
        name, dim = stmt.data["target"]
        self._fix(
            self.model.image.dimensions_fix(
                self._canvas(stmt, name),
                self._dimension(stmt, dim),
                float(stmt.data["extent"]),
                stmt.opts.get("description", ""),
            )
        )

    def _on_scale(self, stmt: Stmt) -> None:
        (a_name, part), (b_name, dim) = stmt.data["target"], stmt.data["reference"]
        self._fix(
            self.model.image.scale_fix(
                self._canvas(stmt, a_name),
                self._part(stmt, part),
                self._canvas(stmt, b_name),
                self._dimension(stmt, dim),
                float(stmt.data["lam"]),
                stmt.opts.get("description", ""),
            )
        )

    def _on_relative_size(self, stmt: Stmt) -> None:
        (a_name, dim_a), (b_name, dim_b) = stmt.data["target"], stmt.data["reference"]
        self._fix(
            self.model.image.relative_size_fix(
                self._canvas(stmt, a_name),
                self._dimension(stmt, dim_a),
                self._canvas(stmt, b_name),
                self._dimension(stmt, dim_b),
                float(stmt.data["scale"]),
                stmt.opts.get("description", ""),
            )
        )

    def _on_coordinates(self, stmt: Stmt) -> None:
        canvas = self._canvas(stmt, stmt.data["canvas"])
        try:
            canvas.set_coordinates(**{key: float(value) for key, value in stmt.opts.items()})
        except TypeError as exc:
            raise TranslationError(stmt, str(exc)) from exc

    def _on_marker(self, stmt: Stmt) -> None:
        marker = Marker(
            self._point(stmt, stmt.data["at"]),
            size=int(stmt.opts.get("size", 3)),
            color=self._color(stmt, stmt.opts.get("color"), BLACK),
        )
        self._add_shape(stmt, marker)

    def _on_line(self, stmt: Stmt) -> None:
        first, second = stmt.data["points"]
        line = Line(
            self._point(stmt, first),
            self._point(stmt, second),
            color=self._color(stmt, stmt.opts.get("color"), BLACK),
        )
        self._add_shape(stmt, line)


def translate(program: Program, options: Optional[LayoutOptions] = None) -> LayoutModel:
    """Translate a validated layout script into an image with canvases and fixes."""

    logger.info("Translating program with %d statements", len(program.stmts))
    model = _Translator(program, options).build()
    logger.info(
        "Translation completed: %d canvas(es), %d fix(es)",
        len(model.canvases),
        len(model.fixes),
    )
    return model


__all__ = ["DIMENSIONS", "LayoutModel", "MASTER_NAME", "PARTS", "TranslationError", "translate"]
