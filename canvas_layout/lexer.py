import re
from typing import List, Tuple

Token = Tuple[str, str, int, int]  # (type, value, line, col)

SYMBOLS = {
    '[': 'LBRACK',
    ']': 'RBRACK',
    '(': 'LPAREN',
    ')': 'RPAREN',
    ',': 'COMMA',
    '-': 'DASH',
    '+': 'PLUS',
    '*': 'STAR',
    '=': 'EQUAL',
    '.': 'DOT',
}

_TOKEN_RE = re.compile(
    r'''
    (?P<WS>[ \t\r]+)
  | (?P<COMMENT>\#.*)
  | (?P<STRING>"(?:[^"\\]|\\.)*")
  | (?P<NUMBER>(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)
  | (?P<ID>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<SYMBOL>[][(),\-+*=.])
    ''',
    re.VERBOSE,
)


def tokenize_line(s: str, line_no: int) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    while pos < len(s):
        col = pos + 1
        m = _TOKEN_RE.match(s, pos)
        if not m:
            if s[pos] == '"':
                raise SyntaxError(f'[line {line_no}, col {col}] unterminated string literal')
            raise SyntaxError(f'[line {line_no}, col {col}] unexpected character: {s[pos]!r}')
        kind = m.lastgroup
        text = m.group(0)
        pos = m.end()
        if kind == 'WS':
            continue
        if kind == 'COMMENT':
            break
        if kind == 'NUMBER' and text[0] == '.' and tokens and tokens[-1][0] == 'ID' and s[col - 2].isalnum():
            # a dot glued to a name is member access, never a decimal point
            tokens.append(('DOT', '.', line_no, col))
            pos = col
            continue
        if kind == 'STRING':
            text = bytes(text[1:-1], 'utf-8').decode('unicode_escape')
        elif kind == 'SYMBOL':
            kind = SYMBOLS[text]
        tokens.append((kind, text, line_no, col))
    return tokens
