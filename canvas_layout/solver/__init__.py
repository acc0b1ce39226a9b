"""Solver façade: assemble, solve and apply a layout."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from ..errors import LayoutInvariantError, UnderconstrainedLayoutError
from ..fixes import Fix
from ..geometry import CanvasLocation
from ..locatable import IndexedLocatables, Locatable
from .builder import assemble_system, format_equation
from .config import get_layout_options, set_layout_options
from .model import (
    FreeEdge,
    LayoutOptions,
    LayoutSolution,
    LayoutSystem,
    RowReport,
    RowSource,
)
from .solver_core import check_orientation, find_free_edges, format_row_report, solve_dense, solve_system

logger = logging.getLogger(__name__)


def _master_only_solution(width: int, height: int) -> LayoutSolution:
    return LayoutSolution(
        positions=np.array([0.0, 0.0, float(width), float(height)]),
        locations=[CanvasLocation(0, 0, width, height)],
        success=True,
        method="none",
        rank=4,
    )


def solve_layout(
    locatables: IndexedLocatables,
    fixes: Sequence[Fix],
    width: int,
    height: int,
    options: Optional[LayoutOptions] = None,
    *,
    master: Optional[Locatable] = None,
) -> LayoutSolution:
    """Compute and push a ``CanvasLocation`` to every registered locatable."""

    options = options or get_layout_options()
    master_index = locatables.index_of(master) if master is not None else 0
    logger.info(
        "Solving layout for %d locatable(s) and %d fix(es) on %dx%d image",
        len(locatables),
        len(fixes),
        width,
        height,
    )

    if not fixes:
        if len(locatables) > 1:
            raise UnderconstrainedLayoutError(
                f"no relationships declared, but there are {len(locatables)} locatables to position"
            )
        solution = _master_only_solution(width, height)
    else:
        system = assemble_system(locatables, fixes, width, height, master=master)
        solution = solve_system(system, options)

    expected = CanvasLocation(0, 0, width, height)
    if solution.locations[master_index] != expected:
        raise LayoutInvariantError(
            f"master canvas positioned incorrectly: {solution.locations[master_index]} != {expected}"
        )

    for idx, location in enumerate(solution.locations):
        locatables.set_location(idx, location)
        logger.debug("Locatable #%d location: %s", idx, location)
    return solution


__all__ = [
    "FreeEdge",
    "LayoutOptions",
    "LayoutSolution",
    "LayoutSystem",
    "RowReport",
    "RowSource",
    "assemble_system",
    "check_orientation",
    "find_free_edges",
    "format_equation",
    "format_row_report",
    "get_layout_options",
    "set_layout_options",
    "solve_dense",
    "solve_layout",
    "solve_system",
]
