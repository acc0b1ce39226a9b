from copy import deepcopy
from typing import Dict, Set

from .ast import Program, Span, Stmt
from .bitmap import parse_color
from .errors import LayoutError
from .translator import DIMENSIONS, MASTER_NAME, PARTS, POINT_UNITS, TranslationError, translate

_HORIZONTAL = {"left", "right", "center_x"}

_ALLOWED_OPTS: Dict[str, Set[str]] = {
    "image": {"width", "height"},
    "canvas": {"width", "height", "background", "paint"},
    "relation": {"description"},
    "dimensions": {"description"},
    "scale": {"description"},
    "relative_size": {"description"},
    "coordinates": {"left", "right", "bottom", "top"},
    "marker": {"size", "color", "units", "zorder"},
    "line": {"color", "units", "zorder"},
}


class ValidationError(Exception):
    pass


def _fail(sp: Span, message: str):
    raise ValidationError(f'[line {sp.line}, col {sp.col}] {message}')


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _axis(member: str) -> str:
    return "x" if member in _HORIZONTAL or member == "x" else "y"


def _check_opts(s: Stmt) -> None:
    allowed = _ALLOWED_OPTS[s.kind]
    label = s.kind.replace('_', '-')
    for key, val in s.opts.items():
        if key not in allowed:
            _fail(s.span, f'{label} does not support option "{key}"')
        if key in ("width", "height", "size"):
            if not _is_number(val) or val <= 0:
                _fail(s.span, f'{label} option "{key}" must be a positive number')
        elif key in ("left", "right", "bottom", "top", "zorder"):
            if not _is_number(val):
                _fail(s.span, f'{label} option "{key}" must be numeric')
        elif key == "paint":
            if not isinstance(val, bool):
                _fail(s.span, f'{label} option "paint" must be true|false')
        elif key in ("background", "color"):
            try:
                parse_color(str(val))
            except ValueError as exc:
                _fail(s.span, str(exc))
        elif key == "units":
            if val not in POINT_UNITS:
                _fail(s.span, f'units must be {"|".join(POINT_UNITS)}')
        elif key == "description":
            if not isinstance(val, str):
                _fail(s.span, f'{label} description must be a string')


def _check_part(s: Stmt, ref) -> None:
    if ref[1] not in PARTS:
        _fail(s.span, f'"{ref[1]}" is not a canvas part (expected {"|".join(PARTS)})')


def _check_dimension(s: Stmt, ref) -> None:
    if ref[1] not in DIMENSIONS:
        _fail(s.span, f'"{ref[1]}" is not a canvas dimension (expected x|y)')


def validate(prog: Program) -> None:
    declared: Set[str] = {MASTER_NAME}

    def require(s: Stmt, name: str) -> None:
        if name not in declared:
            _fail(s.span, f'unknown canvas "{name}"')

    for idx, s in enumerate(prog.stmts):
        k = s.kind
        if k not in _ALLOWED_OPTS:
            _fail(s.span, f'unknown statement kind "{k}"')
        _check_opts(s)
        if k == 'image':
            if idx != 0:
                _fail(s.span, 'image must be the first statement and appear at most once')
        elif k == 'canvas':
            name = s.data['name']
            if name == MASTER_NAME:
                _fail(s.span, f'"{MASTER_NAME}" is reserved for the image canvas')
            if name in declared:
                _fail(s.span, f'canvas "{name}" already declared')
            require(s, s.data['parent'])
            declared.add(name)
        elif k == 'relation':
            target, anchor = s.data['target'], s.data['anchor']
            for ref in (target, anchor):
                require(s, ref[0])
                _check_part(s, ref)
            if _axis(target[1]) != _axis(anchor[1]):
                _fail(s.span, 'relation mixes horizontal and vertical parts')
        elif k == 'dimensions':
            require(s, s.data['target'][0])
            _check_dimension(s, s.data['target'])
            if s.data['extent'] < 0:
                _fail(s.span, 'dimensions extent must be non-negative')
        elif k == 'scale':
            target, reference = s.data['target'], s.data['reference']
            require(s, target[0])
            require(s, reference[0])
            _check_part(s, target)
            _check_dimension(s, reference)
            if _axis(target[1]) != reference[1]:
                _fail(s.span, f'scale places a {_axis(target[1])} part along the {reference[1]} dimension')
        elif k == 'relative_size':
            for ref in (s.data['target'], s.data['reference']):
                require(s, ref[0])
                _check_dimension(s, ref)
        elif k in ('coordinates', 'marker', 'line'):
            require(s, s.data['canvas'])
            if k == 'coordinates' and not s.opts:
                _fail(s.span, 'coordinates needs at least one of left|right|bottom|top')

    try:
        translate(deepcopy(prog))
    except TranslationError as exc:
        span = exc.stmt.span
        raise ValidationError(f'[line {span.line}, col {span.col}] {exc}') from exc
    except (LayoutError, ValueError) as exc:
        raise ValidationError(str(exc)) from exc
