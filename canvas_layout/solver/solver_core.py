from __future__ import annotations

import logging
import math
import warnings
from typing import List, Tuple

import numpy as np
from scipy.linalg import LinAlgError, LinAlgWarning, lstsq, lu_factor, lu_solve

from ..errors import SingularLayoutError, UnderconstrainedLayoutError
from ..geometry import EDGE_NAMES, CanvasLocation
from ..logging_utils import apply_debug_logging
from .builder import format_equation
from .model import FreeEdge, LayoutOptions, LayoutSolution, LayoutSystem, RowReport

logger = logging.getLogger(__name__)

# Pairs of column offsets moved together to test an axis position.
_TRANSLATIONS = (("x-position", (0, 2)), ("y-position", (1, 3)))


def solve_dense(matrix: np.ndarray, constants: np.ndarray) -> Tuple[np.ndarray, str]:
    """Solve ``matrix @ x = constants``.

    Square systems go through an LU factorisation; rectangular or singular
    ones fall back to the minimum-norm least-squares solution, which the
    residual check then accepts or rejects.
    """

    rows, cols = matrix.shape
    if rows == cols:
        with warnings.catch_warnings():
            warnings.simplefilter("error", LinAlgWarning)
            try:
                factors = lu_factor(matrix)
                solution = lu_solve(factors, constants)
            except (LinAlgWarning, LinAlgError) as exc:
                logger.info("LU factorisation rejected the layout system (%s); using least squares", exc)
            else:
                if np.all(np.isfinite(solution)):
                    return solution, "lu"
                logger.info("LU solution is not finite; using least squares")
    else:
        logger.info("Layout system is %dx%d; using least squares", rows, cols)
    try:
        solution, _, _, _ = lstsq(matrix, constants)
    except (LinAlgError, ValueError) as exc:
        raise SingularLayoutError(f"could not determine canvas locations: {exc}") from exc
    return solution, "lstsq"


def _abs_residual(system: LayoutSystem, positions: np.ndarray) -> float:
    return float(np.sum(np.abs(system.matrix @ positions - system.constants)))


def check_rows(system: LayoutSystem, positions: np.ndarray, tolerance: float) -> List[RowReport]:
    actual = system.matrix @ positions
    reports: List[RowReport] = []
    for idx in range(system.num_rows):
        expected = float(system.constants[idx])
        value = float(actual[idx])
        satisfied = abs(value - expected) <= tolerance
        report = RowReport(
            index=idx,
            equation=format_equation(system.matrix[idx], expected),
            expected=expected,
            actual=value,
            satisfied=satisfied,
            source=system.sources[idx],
        )
        if satisfied:
            logger.debug("Satisfied constraint #%d: %s", idx, format_row_report(report))
        else:
            logger.warning("Failed to satisfy constraint #%d: %s", idx, format_row_report(report))
        reports.append(report)
    return reports


def format_row_report(report: RowReport) -> str:
    text = f"{report.equation}, actually {report.actual:g}"
    if report.source.kind == "master":
        text += ", fix is auto generated"
    else:
        text += f", {report.source.description}"
    return text


def find_free_edges(
    system: LayoutSystem,
    positions: np.ndarray,
    perturbation: float,
    threshold: float,
) -> List[FreeEdge]:
    """Flag edges whose perturbation leaves the residual unchanged."""

    baseline = _abs_residual(system, positions)

    def sensitivity(columns) -> float:
        shifted = positions.copy()
        shifted[list(columns)] += perturbation
        return abs(_abs_residual(system, shifted) - baseline) / perturbation

    free: List[FreeEdge] = []
    for idx in range(system.num_locatables):
        base = 4 * idx
        flagged = set()
        for offset, name in enumerate(EDGE_NAMES):
            if sensitivity([base + offset]) < threshold:
                flagged.add(offset)
                free.append(FreeEdge(idx, name))
        for name, pair in _TRANSLATIONS:
            if flagged.intersection(pair):
                continue
            if sensitivity([base + offset for offset in pair]) < threshold:
                free.append(FreeEdge(idx, name))
    for edge in free:
        logger.info("Unconstrained %s of locatable %d", edge.edge, edge.locatable_index)
    return free


def _round_pixel(value: float) -> int:
    return int(math.floor(value + 0.5))


def round_locations(positions: np.ndarray) -> List[CanvasLocation]:
    locations = []
    for base in range(0, positions.shape[0], 4):
        left, bottom, right, top = (_round_pixel(float(v)) for v in positions[base : base + 4])
        locations.append(CanvasLocation(left, bottom, right, top))
    return locations


def _extent_is_determined(matrix: np.ndarray, rank: int, lower: int, upper: int) -> bool:
    """True when ``upper - lower`` lies in the row space of ``matrix``."""

    direction = np.zeros(matrix.shape[1])
    direction[lower] = -1.0
    direction[upper] = 1.0
    return int(np.linalg.matrix_rank(np.vstack([matrix, direction]))) == rank


def check_orientation(
    system: LayoutSystem, rows: List[RowReport], locations: List[CanvasLocation], rank: int
) -> List[str]:
    """Reject rectangles the fixes force inside out.

    An inverted extent that the system does not determine is a least-squares
    artefact of a free edge; it is reported, not raised.
    """

    notes: List[str] = []
    for idx, location in enumerate(locations):
        base = 4 * idx
        for axis, lower, upper, low_value, high_value in (
            ("x", 0, 2, location.left, location.right),
            ("y", 1, 3, location.bottom, location.top),
        ):
            if high_value >= low_value:
                continue
            columns = [base + lower, base + upper]
            if not _extent_is_determined(system.matrix, rank, *columns):
                logger.warning("Locatable %d has an unconstrained inverted %s extent", idx, axis)
                notes.append(f"inverted {axis} extent of locatable {idx} is unconstrained")
                continue
            touching = [
                row
                for row in rows
                if row.source.kind != "master" and np.any(system.matrix[row.index, columns] != 0)
            ]
            raise SingularLayoutError(
                f"layout inverts locatable {idx} along {axis} "
                f"({low_value} > {high_value}): {_implicated(touching)}",
                touching,
            )
    return notes


def _implicated(rows: List[RowReport]) -> str:
    names = [f"#{row.index} {row.source.description}" for row in rows]
    return "; ".join(names)


def solve_system(system: LayoutSystem, options: LayoutOptions) -> LayoutSolution:
    """Solve, validate and optionally diagnose an assembled layout system."""

    positions, method = solve_dense(system.matrix, system.constants)
    if not np.all(np.isfinite(positions)):
        raise SingularLayoutError("layout solve produced non-finite positions")

    rank = int(np.linalg.matrix_rank(system.matrix))
    dof = system.num_unknowns - rank
    rows = check_rows(system, positions, options.tolerance)
    failed = [row for row in rows if not row.satisfied]
    max_residual = max((row.residual for row in rows), default=0.0)
    solution_warnings: List[str] = []

    logger.info(
        "Layout solve via %s: rank=%d dof=%d max_residual=%.3e failed_rows=%d",
        method,
        rank,
        dof,
        max_residual,
        len(failed),
    )

    if failed:
        message = f"{len(failed)} layout constraint(s) cannot be satisfied: {_implicated(failed)}"
        if options.strict or any(row.source.kind == "master" for row in failed):
            # a displaced master has no best-effort reading
            raise SingularLayoutError(message, failed)
        solution_warnings.append(message)

    locations = round_locations(positions)
    solution_warnings.extend(check_orientation(system, rows, locations, rank))

    free_edges: List[FreeEdge] = []
    if options.diagnose:
        free_edges = find_free_edges(
            system, positions, options.perturbation, options.sensitivity_threshold
        )
        if free_edges:
            text = ", ".join(f"{edge.edge}[{edge.locatable_index}]" for edge in free_edges)
            if options.require_fully_constrained:
                raise UnderconstrainedLayoutError(f"layout leaves edges unconstrained: {text}")
            solution_warnings.append(f"unconstrained: {text}")

    return LayoutSolution(
        positions=positions,
        locations=locations,
        success=not failed,
        method=method,
        max_residual=float(max_residual),
        rank=rank,
        degrees_of_freedom=dof,
        rows=rows,
        free_edges=free_edges,
        warnings=solution_warnings,
    )


apply_debug_logging(globals(), logger=logger)
