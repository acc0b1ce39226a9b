"""Core data structures for the layout solver pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from ..fixes import Fix
from ..geometry import CanvasLocation

RowKind = str  # "master" | "implicit" | "fix"


@dataclass
class LayoutOptions:
    """Solver options.

    ``strict`` turns a failed residual check into ``SingularLayoutError``;
    otherwise the failure is only reported. ``require_fully_constrained``
    additionally rejects layouts with free edges.
    """

    tolerance: float = 1e-4
    perturbation: float = 0.1
    sensitivity_threshold: float = 1e-6
    coordinate_epsilon: float = 1e-4
    strict: bool = True
    diagnose: bool = True
    require_fully_constrained: bool = False


@dataclass
class RowSource:
    """Record of what produced a row of the layout system."""

    kind: RowKind
    description: str
    fix: Optional[Fix] = None


@dataclass
class LayoutSystem:
    """Dense ``matrix @ positions = constants`` system over 4N unknowns."""

    matrix: np.ndarray
    constants: np.ndarray
    sources: List[RowSource]
    master_index: int = 0

    @property
    def num_rows(self) -> int:
        return int(self.matrix.shape[0])

    @property
    def num_unknowns(self) -> int:
        return int(self.matrix.shape[1])

    @property
    def num_locatables(self) -> int:
        return self.num_unknowns // 4


@dataclass
class RowReport:
    index: int
    equation: str
    expected: float
    actual: float
    satisfied: bool
    source: RowSource

    @property
    def residual(self) -> float:
        return abs(self.actual - self.expected)


@dataclass(frozen=True)
class FreeEdge:
    """An edge (or a whole axis position) that no equation pins down."""

    locatable_index: int
    edge: str


@dataclass
class LayoutSolution:
    positions: np.ndarray
    locations: List[CanvasLocation]
    success: bool
    method: str
    max_residual: float = 0.0
    rank: int = 0
    degrees_of_freedom: int = 0
    rows: List[RowReport] = field(default_factory=list)
    free_edges: List[FreeEdge] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def failed_rows(self) -> List[RowReport]:
        return [row for row in self.rows if not row.satisfied]


__all__ = [
    "FreeEdge",
    "LayoutOptions",
    "LayoutSolution",
    "LayoutSystem",
    "RowKind",
    "RowReport",
    "RowSource",
]
