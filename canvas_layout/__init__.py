from .parser import parse_program
from .validate import validate, ValidationError
from .printer import print_program, format_stmt
from .ast import Program, Stmt, Span
from .reference import BNF, EXAMPLE, get_reference
from .translator import translate, LayoutModel, TranslationError
from .errors import (
    CoordinateSystemError,
    LayoutError,
    LayoutInvariantError,
    SingularLayoutError,
    UnderconstrainedLayoutError,
    UnregisteredLocatableError,
)
from .geometry import (
    CanvasCoordinates,
    CanvasDimension,
    CanvasLocation,
    CanvasPart,
    CoordinateBoundingBox,
    CoordinateDescription,
    Displacement,
    LocationType,
    Point,
    make_coordinate_point,
    make_pixel_point,
    make_relative_point,
)
from .locatable import IndexedLocatables, Locatable
from .fixes import DimensionsFix, Fix, RelationshipFix, RelativeSizeFix, ScaleFix
from .coordinates import describe_coordinates, min_max_coordinates
from .bitmap import Bitmap, PixelColor, parse_color
from .shapes import Line, Marker, Shape
from .canvas import Canvas
from .image import Image, LayoutSnapshot
from .solver import (
    solve_layout,
    LayoutOptions,
    LayoutSolution,
    RowReport,
    FreeEdge,
    format_row_report,
    get_layout_options,
    set_layout_options,
)

__all__ = [
    'parse_program',
    'validate',
    'ValidationError',
    'print_program',
    'format_stmt',
    'Program',
    'Stmt',
    'Span',
    'BNF',
    'EXAMPLE',
    'get_reference',
    'translate',
    'LayoutModel',
    'TranslationError',
    'LayoutError',
    'UnregisteredLocatableError',
    'UnderconstrainedLayoutError',
    'SingularLayoutError',
    'LayoutInvariantError',
    'CoordinateSystemError',
    'CanvasCoordinates',
    'CanvasDimension',
    'CanvasLocation',
    'CanvasPart',
    'CoordinateBoundingBox',
    'CoordinateDescription',
    'Displacement',
    'LocationType',
    'Point',
    'make_coordinate_point',
    'make_pixel_point',
    'make_relative_point',
    'Locatable',
    'IndexedLocatables',
    'Fix',
    'RelationshipFix',
    'DimensionsFix',
    'ScaleFix',
    'RelativeSizeFix',
    'describe_coordinates',
    'min_max_coordinates',
    'Bitmap',
    'PixelColor',
    'parse_color',
    'Shape',
    'Line',
    'Marker',
    'Canvas',
    'Image',
    'LayoutSnapshot',
    'solve_layout',
    'LayoutOptions',
    'LayoutSolution',
    'RowReport',
    'FreeEdge',
    'format_row_report',
    'get_layout_options',
    'set_layout_options',
]
