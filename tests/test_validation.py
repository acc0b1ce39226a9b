import pytest

from canvas_layout import EXAMPLE, parse_program
from canvas_layout.ast import Program, Span, Stmt
from canvas_layout.validate import ValidationError, validate


def stmt(kind, data, opts=None, line=1, col=1):
    return Stmt(kind, Span(line, col), data, opts or {})


def test_validate_accepts_example():
    validate(parse_program(EXAMPLE))


def test_validate_accepts_valid_program():
    prog = Program(
        [
            stmt('image', {}, {'width': 200, 'height': 100}),
            stmt('canvas', {'name': 'plot', 'parent': 'master'}, {'background': 'gray', 'paint': True}),
            stmt('relation', {'target': ('plot', 'left'), 'anchor': ('master', 'left'), 'offset': 5}),
            stmt('dimensions', {'target': ('plot', 'x'), 'extent': 50}, {'description': 'width'}),
            stmt('scale', {'target': ('plot', 'center_y'), 'reference': ('master', 'y'), 'lam': 0.5}),
            stmt('relative_size', {'target': ('plot', 'y'), 'reference': ('plot', 'x'), 'scale': 1}),
            stmt('coordinates', {'canvas': 'plot'}, {'left': -1, 'right': 1}),
            stmt('marker', {'canvas': 'plot', 'at': (0, 0)}, {'units': 'proportional', 'zorder': 2}),
            stmt('line', {'canvas': 'plot', 'points': [(0, 0), (1, 1)]}, {'color': '#ff000080'}),
        ]
    )

    validate(prog)


@pytest.mark.parametrize(
    'text, message_part',
    [
        ('canvas master in master', 'reserved'),
        ('canvas a in master\ncanvas a in master', 'already declared'),
        ('canvas a in b', 'unknown canvas "b"'),
        ('canvas a in master\nimage [width=10]', 'image must be the first statement'),
        ('relation plot.left = master.left', 'unknown canvas "plot"'),
        ('canvas p in master\nrelation p.left = master.top', 'mixes horizontal and vertical'),
        ('canvas p in master\nrelation p.side = master.left', '"side" is not a canvas part'),
        ('canvas p in master\ndimensions p.left = 5', '"left" is not a canvas dimension'),
        ('canvas p in master\ndimensions p.x = -5', 'non-negative'),
        ('canvas p in master\nscale p.left at master.y 0.5', 'along the y dimension'),
        ('canvas p in master [width=0]', 'must be a positive number'),
        ('canvas p in master [paint=yes]', 'must be true|false'),
        ('canvas p in master [background=teal]', 'unrecognized colour'),
        ('canvas p in master [margin=3]', 'does not support option "margin"'),
        ('coordinates master', 'needs at least one'),
        ('coordinates master [left=low]', 'must be numeric'),
        ('marker master (0, 0) [units=inches]', 'units must be'),
        ('relation master.left = master.left [description=5]', 'description must be a string'),
    ],
)
def test_invalid_programs(text, message_part):
    with pytest.raises(ValidationError) as exc:
        validate(parse_program(text))

    assert message_part in str(exc.value)


def test_error_carries_location():
    with pytest.raises(ValidationError) as exc:
        validate(parse_program('image\n\ncanvas a in nowhere'))

    assert str(exc.value).startswith('[line 3, col 8]')


def test_unknown_statement_kind():
    with pytest.raises(ValidationError):
        validate(Program([stmt('banner', {})]))
