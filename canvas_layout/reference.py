"""Reference text for the layout script language."""

from textwrap import dedent

BNF = dedent(
"""
```
Program    := { Stmt }
Stmt       := Image | Canvas | Fix | Coords | Shape | Comment

Image      := 'image' Opts?
Canvas     := 'canvas' ID 'in' ID Opts?

Fix        := 'relation' Ref '=' Ref [ ('+' | '-') NUMBER ] Opts?
            | 'dimensions' Ref '=' Number Opts?
            | 'scale' Ref 'at' Ref Number Opts?
            | 'relative-size' Ref '=' Number '*' Ref Opts?

Coords     := 'coordinates' ID Opts
Shape      := 'marker' ID Point Opts?
            | 'line' ID Point Point Opts?

Ref        := ID '.' Member
Member     := 'left' | 'right' | 'bottom' | 'top' | 'center_x' | 'center_y' | 'x' | 'y'
Point      := '(' Number ',' Number ')'
Number     := [ '+' | '-' ] NUMBER
Opts       := '[' KeyValue { [','] KeyValue } ']'
KeyValue   := ID '=' ( NUMBER | STRING | ID | 'true' | 'false' )
Comment    := '#' { any char }
```
"""
).strip()

OPTIONS = dedent(
"""
image          width, height (pixels, default 100)
canvas         width, height (fixed extent), background (colour), paint (true|false)
fixes          description (free text used in diagnostics)
coordinates    left, right, bottom, top (override inferred bounds)
marker         size (pixels), color, units (coordinate|proportional|pixels), zorder
line           color, units (coordinate|proportional|pixels), zorder
"""
).strip()

SEMANTICS = dedent(
"""
relation B.p = A.q + d      p(B) - q(A) = d
dimensions A.x = w          right(A) - left(A) = w
scale A.p at B.x t          p(A) = (1 - t) * left(B) + t * right(B)
relative-size A.y = s * B.x extent_y(A) = s * extent_x(B)
The canvas named 'master' always spans the whole image.
"""
).strip()

EXAMPLE = dedent(
"""
image [width=1000 height=800]
canvas plot in master [background="#f0f0f0"]
canvas legend in plot [width=120 height=60 paint=false]
relation plot.left = master.left + 50
relation plot.bottom = master.bottom + 40
relation master.right = plot.right + 20 [description="right margin"]
scale plot.top at master.y 0.95
relation plot.right = legend.right + 10
relation plot.top = legend.top + 10
coordinates plot [left=0 right=10]
marker plot (1, 2) [size=5 color=red]
line plot (0, 0) (10, 5) [color=blue]
"""
).strip()


def get_reference(*, include_example: bool = True) -> str:
    parts = [BNF, "Options:\n" + OPTIONS, "Equations:\n" + SEMANTICS]
    if include_example:
        parts.append("Example:\n" + EXAMPLE)
    return "\n\n".join(parts)
