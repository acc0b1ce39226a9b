import re
from typing import Dict, Tuple

from .ast import Program, Stmt

_BARE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def ref_str(ref: Tuple[str, str]) -> str:
    return f"{ref[0]}.{ref[1]}"


def point_str(point: Tuple[float, float]) -> str:
    return f"({point[0]}, {point[1]})"


def _quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _format_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    text = str(value)
    if _BARE_RE.match(text) and text.lower() not in ("true", "false"):
        return text
    return _quote(text)


def _format_opts(opts: Dict[str, object]) -> str:
    if not opts:
        return ""
    parts = [f"{key}={_format_value(opts[key])}" for key in sorted(opts.keys())]
    return " [" + " ".join(parts) + "]"


def format_stmt(stmt: Stmt) -> str:
    k = stmt.kind
    d = stmt.data
    if k == "image":
        head = "image"
    elif k == "canvas":
        head = f"canvas {d['name']} in {d['parent']}"
    elif k == "relation":
        head = f"relation {ref_str(d['target'])} = {ref_str(d['anchor'])}"
        offset = d.get("offset", 0)
        if offset:
            sign = "-" if offset < 0 else "+"
            head += f" {sign} {abs(offset)}"
    elif k == "dimensions":
        head = f"dimensions {ref_str(d['target'])} = {d['extent']}"
    elif k == "scale":
        head = f"scale {ref_str(d['target'])} at {ref_str(d['reference'])} {d['lam']}"
    elif k == "relative_size":
        head = f"relative-size {ref_str(d['target'])} = {d['scale']} * {ref_str(d['reference'])}"
    elif k == "coordinates":
        head = f"coordinates {d['canvas']}"
    elif k == "marker":
        head = f"marker {d['canvas']} {point_str(d['at'])}"
    elif k == "line":
        first, second = d["points"]
        head = f"line {d['canvas']} {point_str(first)} {point_str(second)}"
    else:
        raise ValueError(f"cannot format statement kind {k!r}")
    return head + _format_opts(stmt.opts)


def print_program(prog: Program) -> str:
    return "".join(format_stmt(stmt) + "\n" for stmt in prog.stmts)
