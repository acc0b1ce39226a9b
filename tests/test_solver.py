import numpy as np
import pytest

from canvas_layout.errors import SingularLayoutError, UnderconstrainedLayoutError
from canvas_layout.fixes import DimensionsFix, RelationshipFix, RelativeSizeFix, ScaleFix
from canvas_layout.geometry import CanvasDimension, CanvasLocation, CanvasPart
from canvas_layout.locatable import IndexedLocatables, Locatable
from canvas_layout.solver import (
    FreeEdge,
    LayoutOptions,
    assemble_system,
    format_equation,
    solve_dense,
    solve_layout,
)
from canvas_layout.solver.solver_core import round_locations

X, Y = CanvasDimension.X, CanvasDimension.Y
LEFT, RIGHT, BOTTOM, TOP = CanvasPart.LEFT, CanvasPart.RIGHT, CanvasPart.BOTTOM, CanvasPart.TOP


class Box(Locatable):
    def __init__(self, width=None, height=None):
        self.width = width
        self.height = height
        self.location = None

    def fixed_width(self):
        return self.width

    def fixed_height(self):
        return self.height

    def set_location(self, location):
        self.location = location


def _registry(*boxes):
    registry = IndexedLocatables()
    for box in boxes:
        registry.add(box)
    return registry


def _margins(master, box, left, bottom, right, top):
    return [
        RelationshipFix(master, LEFT, box, LEFT, left),
        RelationshipFix(master, BOTTOM, box, BOTTOM, bottom),
        RelationshipFix(box, RIGHT, master, RIGHT, right),
        RelationshipFix(box, TOP, master, TOP, top),
    ]


def test_master_only_layout_skips_solve():
    master = Box()
    solution = solve_layout(_registry(master), [], 640, 480)

    assert solution.method == "none"
    assert solution.success
    assert master.location == CanvasLocation(0, 0, 640, 480)


def test_two_locatables_without_fixes_are_underconstrained():
    with pytest.raises(UnderconstrainedLayoutError):
        solve_layout(_registry(Box(), Box()), [], 100, 100)


def test_margins_place_inner_box():
    master, inner = Box(), Box()

    solution = solve_layout(_registry(master, inner), _margins(master, inner, 50, 50, 50, 50), 1000, 1000)

    assert master.location == CanvasLocation(0, 0, 1000, 1000)
    assert inner.location == CanvasLocation(50, 50, 950, 950)
    assert solution.method == "lu"
    assert solution.success
    assert solution.rank == 8
    assert solution.degrees_of_freedom == 0
    assert solution.free_edges == []
    assert [row.source.kind for row in solution.rows] == ["master"] * 4 + ["fix"] * 4


def test_dimensions_fix_sets_exact_extent():
    master, box = Box(), Box()
    fixes = [
        RelationshipFix(master, LEFT, box, LEFT, 10),
        DimensionsFix(box, X, 200),
        RelationshipFix(master, BOTTOM, box, BOTTOM, 0),
        RelationshipFix(master, TOP, box, TOP, 0),
    ]

    solve_layout(_registry(master, box), fixes, 1000, 800)

    assert box.location == CanvasLocation(10, 0, 210, 800)
    assert box.location.width == 200


def test_relative_size_halves_reference():
    master, full, half = Box(), Box(), Box()
    fixes = _margins(master, full, 0, 0, 0, 0) + [
        RelationshipFix(full, LEFT, half, LEFT),
        RelationshipFix(full, BOTTOM, half, BOTTOM),
        RelativeSizeFix(half, X, full, X, 0.5),
        RelativeSizeFix(half, Y, full, Y, 0.5),
    ]

    solve_layout(_registry(master, full, half), fixes, 1000, 800)

    assert half.location == CanvasLocation(0, 0, 500, 400)


def test_scale_fix_places_edges_proportionally():
    master, box = Box(), Box()
    fixes = [
        ScaleFix(box, LEFT, master, X, 0.1),
        ScaleFix(box, RIGHT, master, X, 0.9),
        ScaleFix(box, BOTTOM, master, Y, 0.25),
        ScaleFix(box, TOP, master, Y, 0.75),
    ]

    solve_layout(_registry(master, box), fixes, 1000, 800)

    assert box.location == CanvasLocation(100, 200, 900, 600)


def test_centers_align_boxes():
    master, box = Box(), Box()
    fixes = [
        DimensionsFix(box, X, 100),
        DimensionsFix(box, Y, 50),
        RelationshipFix(master, CanvasPart.CENTER_X, box, CanvasPart.CENTER_X),
        RelationshipFix(master, CanvasPart.CENTER_Y, box, CanvasPart.CENTER_Y),
    ]

    solve_layout(_registry(master, box), fixes, 1000, 800)

    assert box.location == CanvasLocation(450, 375, 550, 425)


def test_declared_extent_adds_implicit_rows():
    master, legend = Box(), Box(width=120, height=60)
    fixes = [
        RelationshipFix(legend, RIGHT, master, RIGHT, 10),
        RelationshipFix(legend, TOP, master, TOP, 10),
    ]

    solution = solve_layout(_registry(master, legend), fixes, 1000, 800)

    assert legend.location == CanvasLocation(870, 730, 990, 790)
    kinds = [row.source.kind for row in solution.rows]
    assert kinds == ["master"] * 4 + ["implicit"] * 2 + ["fix"] * 2
    assert solution.rows[4].source.description == "implicit width 120 for locatable 1"


def test_contradiction_raises_with_failed_rows():
    master, box = Box(), Box()
    fixes = _margins(master, box, 10, 0, 0, 0) + [
        RelationshipFix(master, LEFT, box, LEFT, 20, description="second left"),
    ]

    with pytest.raises(SingularLayoutError) as exc:
        solve_layout(_registry(master, box), fixes, 100, 100)

    failed = exc.value.failed_rows
    assert len(failed) == 2
    assert all(row.source.kind == "fix" for row in failed)
    assert "second left" in str(exc.value)
    assert box.location is None


def test_lenient_mode_reports_contradiction():
    master, box = Box(), Box()
    fixes = _margins(master, box, 10, 0, 0, 0) + [RelationshipFix(master, LEFT, box, LEFT, 20)]

    solution = solve_layout(_registry(master, box), fixes, 100, 100, LayoutOptions(strict=False))

    assert not solution.success
    assert solution.method == "lstsq"
    assert len(solution.failed_rows) == 2
    assert solution.max_residual == pytest.approx(5.0)
    assert box.location == CanvasLocation(15, 0, 100, 100)
    assert master.location == CanvasLocation(0, 0, 100, 100)
    assert solution.warnings


def test_unconstrained_edges_are_reported():
    master, box = Box(), Box()
    fixes = [
        RelationshipFix(master, LEFT, box, LEFT, 5),
        RelationshipFix(box, RIGHT, master, RIGHT, 5),
    ]

    solution = solve_layout(_registry(master, box), fixes, 100, 100)

    assert solution.success
    assert set(solution.free_edges) == {FreeEdge(1, "bottom"), FreeEdge(1, "top")}
    assert solution.degrees_of_freedom == 2
    assert box.location.left == 5
    assert box.location.right == 95


def test_translation_freedom_is_reported():
    master, box = Box(), Box()
    fixes = [DimensionsFix(box, X, 10), DimensionsFix(box, Y, 10)]

    solution = solve_layout(_registry(master, box), fixes, 100, 100)

    assert set(solution.free_edges) == {FreeEdge(1, "x-position"), FreeEdge(1, "y-position")}


def test_require_fully_constrained_rejects_free_edges():
    master, box = Box(), Box()
    fixes = [RelationshipFix(master, LEFT, box, LEFT, 5)]
    options = LayoutOptions(require_fully_constrained=True)

    with pytest.raises(UnderconstrainedLayoutError) as exc:
        solve_layout(_registry(master, box), fixes, 100, 100, options)

    assert "right[1]" in str(exc.value)


def test_diagnostics_can_be_disabled():
    master, box = Box(), Box()
    fixes = [RelationshipFix(master, LEFT, box, LEFT, 5)]

    solution = solve_layout(_registry(master, box), fixes, 100, 100, LayoutOptions(diagnose=False))

    assert solution.free_edges == []


def test_assemble_system_orders_rows():
    master, box = Box(), Box(width=30)
    registry = _registry(master, box)
    system = assemble_system(registry, [DimensionsFix(box, Y, 40)], 200, 100)

    assert system.matrix.shape == (6, 8)
    np.testing.assert_allclose(system.constants, [0, 0, 200, 100, 30, 40])
    assert [source.kind for source in system.sources] == ["master"] * 4 + ["implicit", "fix"]


def test_solve_dense_falls_back_to_least_squares_for_singular_matrix():
    matrix = np.array([[1.0, 1.0], [1.0, 1.0]])
    solution, method = solve_dense(matrix, np.array([2.0, 2.0]))

    assert method == "lstsq"
    np.testing.assert_allclose(solution, [1.0, 1.0])


def test_format_equation_lists_nonzero_terms():
    coefficients = np.array([-1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.5, 0.0])

    assert format_equation(coefficients, 50) == "+ (-1 x left[0]) + (left[1]) + (0.5 x right[1]) = 50"


def test_round_locations_rounds_half_up():
    locations = round_locations(np.array([0.5, 1.49, 2.5, 3.51]))

    assert locations == [CanvasLocation(1, 1, 3, 4)]


@pytest.mark.parametrize("strict", [True, False])
def test_inverted_extent_is_rejected(strict):
    master, box = Box(), Box()
    fixes = [
        RelationshipFix(master, LEFT, box, LEFT, 100, description="left margin"),
        DimensionsFix(box, X, -50, description="negative width"),
        RelationshipFix(master, BOTTOM, box, BOTTOM),
        RelationshipFix(box, TOP, master, TOP),
    ]

    with pytest.raises(SingularLayoutError) as exc:
        solve_layout(_registry(master, box), fixes, 1000, 1000, LayoutOptions(strict=strict))

    message = str(exc.value)
    assert "locatable 1 along x (100 > 50)" in message
    assert "left margin" in message
    assert "negative width" in message
    assert len(exc.value.failed_rows) == 2
    assert box.location is None
    assert master.location is None


def test_right_edge_anchored_left_of_left_edge_is_rejected():
    master, box = Box(), Box()
    fixes = _margins(master, box, 10, 0, 0, 0)[1:] + [RelationshipFix(box, LEFT, box, RIGHT, -20)]

    with pytest.raises(SingularLayoutError, match="along x"):
        solve_layout(_registry(master, box), fixes, 100, 100)


def test_unconstrained_inverted_extent_is_only_reported():
    master, box = Box(), Box()
    fixes = [RelationshipFix(master, LEFT, box, LEFT, 5)]

    solution = solve_layout(_registry(master, box), fixes, 100, 100)

    assert solution.success
    assert box.location == CanvasLocation(5, 0, 0, 0)
    assert "inverted x extent of locatable 1 is unconstrained" in solution.warnings


def test_lenient_mode_still_rejects_displaced_master():
    master, box = Box(), Box()
    fixes = _margins(master, box, 0, 0, 0, 0) + [DimensionsFix(master, X, 500, description="half width")]

    with pytest.raises(SingularLayoutError) as exc:
        solve_layout(_registry(master, box), fixes, 1000, 1000, LayoutOptions(strict=False))

    assert any(row.source.kind == "master" for row in exc.value.failed_rows)
    assert "half width" in str(exc.value)
    assert master.location is None
    assert box.location is None
