import pytest

from canvas_layout import EXAMPLE, parse_program


def parse_single(text: str):
    prog = parse_program(text)
    assert len(prog.stmts) == 1, f"expected single statement, got {len(prog.stmts)}"
    return prog.stmts[0]


@pytest.mark.parametrize(
    'text, kind, data, opts',
    [
        ('image [width=1000 height=800]', 'image', {}, {'width': 1000, 'height': 800}),
        (
            'canvas plot in master [background="#f0f0f0" paint=true]',
            'canvas',
            {'name': 'plot', 'parent': 'master'},
            {'background': '#f0f0f0', 'paint': True},
        ),
        (
            'relation plot.left = master.left + 50',
            'relation',
            {'target': ('plot', 'left'), 'anchor': ('master', 'left'), 'offset': 50},
            {},
        ),
        (
            'relation legend.top = plot.top - 2.5',
            'relation',
            {'target': ('legend', 'top'), 'anchor': ('plot', 'top'), 'offset': -2.5},
            {},
        ),
        (
            'relation a.center_x = b.center_x',
            'relation',
            {'target': ('a', 'center_x'), 'anchor': ('b', 'center_x'), 'offset': 0},
            {},
        ),
        ('dimensions plot.x = 200', 'dimensions', {'target': ('plot', 'x'), 'extent': 200}, {}),
        (
            'scale plot.top at master.y 0.95',
            'scale',
            {'target': ('plot', 'top'), 'reference': ('master', 'y'), 'lam': 0.95},
            {},
        ),
        (
            'relative-size legend.y = 0.25 * plot.y',
            'relative_size',
            {'target': ('legend', 'y'), 'reference': ('plot', 'y'), 'scale': 0.25},
            {},
        ),
        ('coordinates plot [left=0 right=10]', 'coordinates', {'canvas': 'plot'}, {'left': 0, 'right': 10}),
        (
            'marker plot (1, -2) [size=3 color=red]',
            'marker',
            {'canvas': 'plot', 'at': (1, -2)},
            {'size': 3, 'color': 'red'},
        ),
        (
            'line plot (0, 0) (10, 5.5)',
            'line',
            {'canvas': 'plot', 'points': [(0, 0), (10, 5.5)]},
            {},
        ),
    ],
)
def test_statements(text, kind, data, opts):
    stmt = parse_single(text)
    assert stmt.kind == kind
    assert stmt.data == data
    assert stmt.opts == opts


def test_description_option_and_comments():
    prog = parse_program(
        '# layout for the report\n'
        '\n'
        'relation master.top = plot.top + 15 [description="top margin"]  # keep room for title\n'
    )

    assert len(prog.stmts) == 1
    stmt = prog.stmts[0]
    assert stmt.opts == {'description': 'top margin'}
    assert stmt.span.line == 3
    assert stmt.span.col == 10


def test_options_accept_commas():
    stmt = parse_single('canvas legend in plot [width=120, height=60]')

    assert stmt.opts == {'width': 120, 'height': 60}


def test_example_script_parses():
    prog = parse_program(EXAMPLE)

    assert prog.stmts[0].kind == 'image'
    assert len(prog.of_kind('canvas')) == 2


@pytest.mark.parametrize(
    'text, fragment',
    [
        ('banner plot', 'unknown statement "banner"'),
        ('relation plot.left = master.left 50', "unexpected token '50'"),
        ('relation plot = master.left', 'expected DOT'),
        ('canvas plot in master [width=1 width=2]', "duplicate option 'width'"),
        ('marker plot (1 2)', 'expected COMMA'),
        ('canvas plot in master [background=#fff]', 'unterminated options value'),
        ('marker plot (1, 2) ?', 'unexpected character'),
    ],
)
def test_syntax_errors(text, fragment):
    with pytest.raises(SyntaxError) as exc:
        parse_program(text)

    assert fragment in str(exc.value)


def test_syntax_error_has_caret_snippet():
    with pytest.raises(SyntaxError) as exc:
        parse_program('image\nrelation plot.left = master.left * 2')

    message = str(exc.value)
    assert message.startswith('[line 2, col 34]')
    lines = message.splitlines()
    assert lines[1] == '    relation plot.left = master.left * 2'
    assert lines[2] == '    ' + ' ' * 33 + '^'
