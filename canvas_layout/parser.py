import re
from typing import Any, Dict, List, Optional, Tuple

from .ast import Program, Span, Stmt
from .lexer import Token, tokenize_line

_ERROR_LOC_RE = re.compile(r"\[line (\d+), col (\d+)\]")


def _error(tok: Token, message: str) -> SyntaxError:
    return SyntaxError(f'[line {tok[2]}, col {tok[3]}] {message}')


class Cursor:
    """Single-line token stream with one token of lookahead."""

    def __init__(self, tokens: List[Token]):
        self.toks = tokens
        self.i = 0

    def peek(self, offset: int = 0) -> Optional[Token]:
        idx = self.i + offset
        return self.toks[idx] if idx < len(self.toks) else None

    def at(self, *types: str) -> bool:
        t = self.peek()
        return t is not None and t[0] in types

    def peek_keyword(self) -> Optional[str]:
        """Statement keyword, joining ``relative-size`` style hyphenated words."""
        words = []
        j = 0
        while True:
            t = self.peek(j)
            if not t or t[0] != 'ID' or (words and not t[1].islower()):
                break
            words.append(t[1].lower())
            dash = self.peek(j + 1)
            if not dash or dash[0] != 'DASH':
                break
            j += 2
        return '-'.join(words) if words else None

    def consume_keyword(self, keyword: str) -> None:
        for idx, part in enumerate(keyword.split('-')):
            if idx:
                self.expect('DASH')
            tok = self.expect('ID')
            if tok[1].lower() != part:
                raise _error(tok, f"expected keyword '{part}', got '{tok[1]}'")

    def match(self, *types: str) -> Optional[Token]:
        if self.at(*types):
            self.i += 1
            return self.toks[self.i - 1]
        return None

    def expect(self, *types: str) -> Token:
        t = self.match(*types)
        if t:
            return t
        want = '|'.join(types)
        nxt = self.peek()
        if nxt:
            raise _error(nxt, f'expected {want}, got {nxt[0]}')
        raise SyntaxError(f'Unexpected end of line: expected {want}')


def parse_name(cur: Cursor) -> Tuple[str, Span]:
    t = cur.expect('ID')
    return t[1], Span(t[2], t[3])


def parse_ref(cur: Cursor) -> Tuple[Tuple[str, str], Span]:
    """``canvas.member`` where member is a part (``left``) or a dimension (``x``)."""
    name, sp = parse_name(cur)
    cur.expect('DOT')
    member = cur.expect('ID')
    return (name, member[1].lower()), sp


def _parse_number_literal(raw: str):
    return float(raw) if ('.' in raw or 'e' in raw.lower()) else int(raw)


def parse_number(cur: Cursor):
    negative = False
    if cur.match('DASH'):
        negative = True
    else:
        cur.match('PLUS')
    tok = cur.expect('NUMBER')
    value = _parse_number_literal(tok[1])
    return -value if negative else value


def parse_point(cur: Cursor) -> Tuple[float, float]:
    cur.expect('LPAREN')
    x = parse_number(cur)
    cur.expect('COMMA')
    y = parse_number(cur)
    cur.expect('RPAREN')
    return (x, y)


def parse_opt_value(cur: Cursor):
    vtok = cur.peek()
    if not vtok:
        raise SyntaxError('unterminated options value')
    if vtok[0] == 'STRING':
        return cur.match('STRING')[1]
    if vtok[0] in ('NUMBER', 'DASH', 'PLUS'):
        return parse_number(cur)
    if vtok[0] == 'ID':
        raw = cur.match('ID')[1]
        low = raw.lower()
        if low in ('true', 'false'):
            return low == 'true'
        return raw
    raise _error(vtok, f'invalid option value token {vtok[0]}')


def parse_opts(cur: Cursor) -> Dict[str, Any]:
    """``[key=value key=value]``; commas between entries are optional."""
    opts: Dict[str, Any] = {}
    if not cur.match('LBRACK'):
        return opts
    last_key: Optional[str] = None
    while not cur.match('RBRACK'):
        t = cur.peek()
        if not t:
            raise SyntaxError('unterminated options block')
        if last_key is not None and cur.match('COMMA'):
            continue
        if t[0] != 'ID':
            raise _error(t, f"unexpected token '{t[1]}'. Expected another option or ']'")
        nxt = cur.peek(1)
        if not nxt or nxt[0] != 'EQUAL':
            if last_key:
                raise _error(
                    t,
                    f"unexpected value '{t[1]}' after option '{last_key}'. "
                    "Did you forget to quote a value or close the options block?",
                )
            raise _error(t, f"expected '=' after option '{t[1]}'")
        cur.i += 2
        if t[1] in opts:
            raise _error(t, f"duplicate option '{t[1]}'")
        opts[t[1]] = parse_opt_value(cur)
        last_key = t[1]
    return opts


def parse_stmt(tokens: List[Token]) -> Stmt:
    cur = Cursor(tokens)
    t0 = cur.peek()
    kw = cur.peek_keyword()
    if kw is None:
        raise _error(t0, 'expected statement keyword')
    first = Span(t0[2], t0[3])

    if kw == 'image':
        cur.consume_keyword('image')
        stmt = Stmt('image', first, {}, parse_opts(cur))
    elif kw == 'canvas':
        cur.consume_keyword('canvas')
        name, sp = parse_name(cur)
        cur.consume_keyword('in')
        parent, _ = parse_name(cur)
        stmt = Stmt('canvas', sp, {'name': name, 'parent': parent}, parse_opts(cur))
    elif kw == 'relation':
        cur.consume_keyword('relation')
        target, sp = parse_ref(cur)
        cur.expect('EQUAL')
        anchor, _ = parse_ref(cur)
        offset = 0
        sign = cur.match('PLUS', 'DASH')
        if sign:
            value = _parse_number_literal(cur.expect('NUMBER')[1])
            offset = -value if sign[0] == 'DASH' else value
        stmt = Stmt('relation', sp, {'target': target, 'anchor': anchor, 'offset': offset}, parse_opts(cur))
    elif kw == 'dimensions':
        cur.consume_keyword('dimensions')
        ref, sp = parse_ref(cur)
        cur.expect('EQUAL')
        extent = parse_number(cur)
        stmt = Stmt('dimensions', sp, {'target': ref, 'extent': extent}, parse_opts(cur))
    elif kw == 'scale':
        cur.consume_keyword('scale')
        target, sp = parse_ref(cur)
        cur.consume_keyword('at')
        reference, _ = parse_ref(cur)
        lam = parse_number(cur)
        stmt = Stmt('scale', sp, {'target': target, 'reference': reference, 'lam': lam}, parse_opts(cur))
    elif kw == 'relative-size':
        cur.consume_keyword('relative-size')
        target, sp = parse_ref(cur)
        cur.expect('EQUAL')
        scale = parse_number(cur)
        cur.expect('STAR')
        reference, _ = parse_ref(cur)
        stmt = Stmt(
            'relative_size', sp, {'target': target, 'reference': reference, 'scale': scale}, parse_opts(cur)
        )
    elif kw == 'coordinates':
        cur.consume_keyword('coordinates')
        name, sp = parse_name(cur)
        stmt = Stmt('coordinates', sp, {'canvas': name}, parse_opts(cur))
    elif kw == 'marker':
        cur.consume_keyword('marker')
        name, sp = parse_name(cur)
        at = parse_point(cur)
        stmt = Stmt('marker', sp, {'canvas': name, 'at': at}, parse_opts(cur))
    elif kw == 'line':
        cur.consume_keyword('line')
        name, sp = parse_name(cur)
        first_pt = parse_point(cur)
        second_pt = parse_point(cur)
        stmt = Stmt('line', sp, {'canvas': name, 'points': [first_pt, second_pt]}, parse_opts(cur))
    else:
        raise _error(t0, f'unknown statement "{kw}"')

    trailing = cur.peek()
    if trailing:
        raise _error(trailing, f"unexpected token {trailing[1]!r}")
    return stmt


def _augment_syntax_error(err: SyntaxError, line_text: str) -> Optional[SyntaxError]:
    message = str(err)
    if not line_text or "\n" in message:
        return None
    match = _ERROR_LOC_RE.search(message)
    if not match:
        return None
    col = max(int(match.group(2)), 1)
    caret_line = " " * (col - 1) + "^"
    snippet = f"    {line_text.rstrip()}\n    {caret_line}"
    return SyntaxError(f"{message}\n{snippet}")


def parse_program(text: str) -> Program:
    prog = Program()
    for i, raw in enumerate(text.splitlines(), start=1):
        try:
            tokens = tokenize_line(raw, i)
            if not tokens:
                continue
            stmt = parse_stmt(tokens)
        except SyntaxError as err:
            augmented = _augment_syntax_error(err, raw)
            if augmented is None:
                raise
            raise augmented from None
        prog.stmts.append(stmt)
    return prog
