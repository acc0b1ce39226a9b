import numpy as np
import pytest

from canvas_layout.fixes import (
    DimensionsFix,
    RelationshipFix,
    RelativeSizeFix,
    ScaleFix,
    add_fix_row,
    describe_fix,
    fix_locatables,
)
from canvas_layout.geometry import CanvasDimension, CanvasPart
from canvas_layout.locatable import Locatable


@pytest.fixture
def pair():
    a, b = Locatable(), Locatable()
    lookup = {id(a): 0, id(b): 1}
    return a, b, lambda loc: lookup[id(loc)]


def _row(fix, index_of):
    matrix = np.zeros((1, 8))
    constants = np.zeros(1)
    add_fix_row(fix, 0, matrix, constants, index_of)
    return matrix[0], constants[0]


def test_relationship_row_is_b_minus_a(pair):
    a, b, index_of = pair
    row, constant = _row(RelationshipFix(a, CanvasPart.LEFT, b, CanvasPart.RIGHT, 5), index_of)

    expected = np.zeros(8)
    expected[0] = -1.0
    expected[6] = 1.0
    np.testing.assert_allclose(row, expected)
    assert constant == 5


def test_center_splits_coefficient_over_opposite_edges(pair):
    a, b, index_of = pair
    row, constant = _row(RelationshipFix(a, CanvasPart.CENTER_X, b, CanvasPart.CENTER_Y), index_of)

    np.testing.assert_allclose(row, [-0.5, 0, -0.5, 0, 0, 0.5, 0, 0.5])
    assert constant == 0


def test_dimensions_row_uses_extent(pair):
    a, _, index_of = pair
    row, constant = _row(DimensionsFix(a, CanvasDimension.Y, 30), index_of)

    np.testing.assert_allclose(row, [0, -1, 0, 1, 0, 0, 0, 0])
    assert constant == 30


def test_scale_row_interpolates_reference_edges(pair):
    a, b, index_of = pair
    row, constant = _row(ScaleFix(a, CanvasPart.TOP, b, CanvasDimension.Y, 0.25), index_of)

    np.testing.assert_allclose(row, [0, 0, 0, 1, 0, -0.75, 0, -0.25])
    assert constant == 0


def test_relative_size_row_mixes_dimensions(pair):
    a, b, index_of = pair
    row, _ = _row(RelativeSizeFix(a, CanvasDimension.X, b, CanvasDimension.Y, 0.5), index_of)

    np.testing.assert_allclose(row, [-1, 0, 1, 0, 0, 0.5, 0, -0.5])


def test_same_locatable_on_both_sides_accumulates(pair):
    a, _, index_of = pair
    row, constant = _row(RelationshipFix(a, CanvasPart.LEFT, a, CanvasPart.RIGHT, 40), index_of)

    np.testing.assert_allclose(row, [-1, 0, 1, 0, 0, 0, 0, 0])
    assert constant == 40


def test_unknown_fix_type_is_rejected(pair):
    _, _, index_of = pair
    with pytest.raises(TypeError):
        add_fix_row(object(), 0, np.zeros((1, 8)), np.zeros(1), index_of)

    with pytest.raises(TypeError):
        fix_locatables("not a fix")


def test_fix_locatables_and_description(pair):
    a, b, _ = pair
    fix = ScaleFix(a, CanvasPart.LEFT, b, CanvasDimension.X, 0.1, description="left gutter")

    assert fix_locatables(fix) == (a, b)
    assert fix_locatables(DimensionsFix(b, CanvasDimension.X, 10)) == (b,)
    assert describe_fix(fix) == 'ScaleFix "left gutter"'
    assert describe_fix(DimensionsFix(b, CanvasDimension.X, 10)) == "DimensionsFix"
