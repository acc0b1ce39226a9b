"""Assemble the dense layout system from locatables and fixes."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..fixes import DimensionsFix, Fix, add_fix_row, describe_fix
from ..geometry import EDGE_NAMES, CanvasDimension
from ..locatable import IndexedLocatables, Locatable
from .model import LayoutSystem, RowSource

logger = logging.getLogger(__name__)

MASTER_ROWS = 4


def _implicit_fixes(locatables: IndexedLocatables) -> List[Tuple[DimensionsFix, str]]:
    implicit: List[Tuple[DimensionsFix, str]] = []
    for idx, loc in enumerate(locatables):
        width = loc.fixed_width()
        if width is not None:
            implicit.append(
                (
                    DimensionsFix(loc, CanvasDimension.X, float(width)),
                    f"implicit width {width:g} for locatable {idx}",
                )
            )
        height = loc.fixed_height()
        if height is not None:
            implicit.append(
                (
                    DimensionsFix(loc, CanvasDimension.Y, float(height)),
                    f"implicit height {height:g} for locatable {idx}",
                )
            )
    return implicit


def assemble_system(
    locatables: IndexedLocatables,
    fixes: Sequence[Fix],
    width: int,
    height: int,
    *,
    master: Optional[Locatable] = None,
) -> LayoutSystem:
    """Build the ``(rows, 4N)`` system.

    Rows are ordered: four master pins, one row per declared fixed width or
    height, then one row per fix in declaration order.
    """

    master_index = locatables.index_of(master) if master is not None else 0
    implicit = _implicit_fixes(locatables)
    num_rows = MASTER_ROWS + len(implicit) + len(fixes)
    num_cols = 4 * len(locatables)
    matrix = np.zeros((num_rows, num_cols), dtype=float)
    constants = np.zeros(num_rows, dtype=float)
    sources: List[RowSource] = []

    base = 4 * master_index
    pins = (0.0, 0.0, float(width), float(height))
    for offset, value in enumerate(pins):
        matrix[offset, base + offset] = 1.0
        constants[offset] = value
        sources.append(RowSource("master", f"master {EDGE_NAMES[offset]} pinned to {value:g}"))

    row = MASTER_ROWS
    for fix, text in implicit:
        add_fix_row(fix, row, matrix, constants, locatables.index_of)
        sources.append(RowSource("implicit", text, fix))
        row += 1

    for fix in fixes:
        add_fix_row(fix, row, matrix, constants, locatables.index_of)
        sources.append(RowSource("fix", describe_fix(fix), fix))
        row += 1

    logger.info(
        "Assembled layout system: %d row(s) (%d implicit, %d fix) x %d unknown(s)",
        num_rows,
        len(implicit),
        len(fixes),
        num_cols,
    )
    return LayoutSystem(matrix=matrix, constants=constants, sources=sources, master_index=master_index)


def format_equation(coefficients: np.ndarray, constant: float, *, threshold: float = 1e-4) -> str:
    """Render one row as ``+ (0.5 x right[1]) + (-1 x left[0]) = 50``."""

    terms = []
    for col, value in enumerate(coefficients):
        if abs(value) <= threshold:
            continue
        name = f"{EDGE_NAMES[col % 4]}[{col // 4}]"
        if value == 1:
            terms.append(f"+ ({name})")
        else:
            terms.append(f"+ ({value:g} x {name})")
    lhs = " ".join(terms) if terms else "0"
    return f"{lhs} = {constant:g}"
