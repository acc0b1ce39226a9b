"""Declarative constraints between locatable edges and extents.

Every fix contributes exactly one row ``sum(c_i * edge_i) = constant`` to the
layout system. Columns are addressed through an ``index_of`` callable so the
same row math serves registry lookups and positional indices alike.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

import numpy as np

from .geometry import (
    EDGE_OFFSETS,
    CanvasDimension,
    CanvasPart,
    greater_part,
    lesser_part,
)
from .locatable import Locatable

IndexLookup = Callable[[Locatable], int]


def add_part_coefficient(
    matrix: np.ndarray,
    row: int,
    value: float,
    part: CanvasPart,
    locatable_index: int,
) -> None:
    """Accumulate ``value * part`` into ``matrix[row]``.

    Centers split the coefficient in half over the two opposite edges.
    """

    base = 4 * locatable_index
    if part is CanvasPart.CENTER_X:
        matrix[row, base + EDGE_OFFSETS[CanvasPart.LEFT]] += 0.5 * value
        matrix[row, base + EDGE_OFFSETS[CanvasPart.RIGHT]] += 0.5 * value
    elif part is CanvasPart.CENTER_Y:
        matrix[row, base + EDGE_OFFSETS[CanvasPart.BOTTOM]] += 0.5 * value
        matrix[row, base + EDGE_OFFSETS[CanvasPart.TOP]] += 0.5 * value
    elif part in EDGE_OFFSETS:
        matrix[row, base + EDGE_OFFSETS[part]] += value
    else:
        raise ValueError(f"unrecognized canvas part {part!r}")


def add_extent_coefficients(
    matrix: np.ndarray,
    row: int,
    value: float,
    dimension: CanvasDimension,
    locatable_index: int,
) -> None:
    """Accumulate ``value * (greater - lesser)`` along ``dimension``."""

    if not isinstance(dimension, CanvasDimension):
        raise ValueError(f"unrecognized canvas dimension {dimension!r}")
    add_part_coefficient(matrix, row, value, greater_part(dimension), locatable_index)
    add_part_coefficient(matrix, row, -value, lesser_part(dimension), locatable_index)


@dataclass(frozen=True)
class RelationshipFix:
    """``part_b(b) - part_a(a) = pixels_diff``."""

    a: Locatable
    part_a: CanvasPart
    b: Locatable
    part_b: CanvasPart
    pixels_diff: float = 0.0
    description: str = ""

    name = "RelationshipFix"


@dataclass(frozen=True)
class DimensionsFix:
    """``extent(locatable, dimension) = extent``."""

    locatable: Locatable
    dimension: CanvasDimension
    extent: float
    description: str = ""

    name = "DimensionsFix"


@dataclass(frozen=True)
class ScaleFix:
    """``part_a(a) = (1 - lam) * lesser(b) + lam * greater(b)`` along ``dimension``."""

    a: Locatable
    part_a: CanvasPart
    b: Locatable
    dimension: CanvasDimension
    lam: float
    description: str = ""

    name = "ScaleFix"


@dataclass(frozen=True)
class RelativeSizeFix:
    """``extent(a, dimension_a) = scale * extent(b, dimension_b)``."""

    a: Locatable
    dimension_a: CanvasDimension
    b: Locatable
    dimension_b: CanvasDimension
    scale: float
    description: str = ""

    name = "RelativeSizeFix"


Fix = Union[RelationshipFix, DimensionsFix, ScaleFix, RelativeSizeFix]

FIX_TYPES = (RelationshipFix, DimensionsFix, ScaleFix, RelativeSizeFix)


def fix_locatables(fix: Fix) -> tuple:
    """Return the locatables ``fix`` references, in declaration order."""

    if isinstance(fix, DimensionsFix):
        return (fix.locatable,)
    if isinstance(fix, FIX_TYPES):
        return (fix.a, fix.b)
    raise TypeError(f"unsupported fix type {type(fix).__name__}")


def add_fix_row(
    fix: Fix,
    row: int,
    matrix: np.ndarray,
    constants: np.ndarray,
    index_of: IndexLookup,
) -> None:
    """Write the equation of ``fix`` into ``matrix[row]`` and ``constants[row]``."""

    if isinstance(fix, RelationshipFix):
        add_part_coefficient(matrix, row, -1.0, fix.part_a, index_of(fix.a))
        add_part_coefficient(matrix, row, 1.0, fix.part_b, index_of(fix.b))
        constants[row] = float(fix.pixels_diff)
    elif isinstance(fix, DimensionsFix):
        add_extent_coefficients(matrix, row, 1.0, fix.dimension, index_of(fix.locatable))
        constants[row] = float(fix.extent)
    elif isinstance(fix, ScaleFix):
        idx_a, idx_b = index_of(fix.a), index_of(fix.b)
        lam = float(fix.lam)
        add_part_coefficient(matrix, row, 1.0, fix.part_a, idx_a)
        add_part_coefficient(matrix, row, -(1.0 - lam), lesser_part(fix.dimension), idx_b)
        add_part_coefficient(matrix, row, -lam, greater_part(fix.dimension), idx_b)
        constants[row] = 0.0
    elif isinstance(fix, RelativeSizeFix):
        idx_a, idx_b = index_of(fix.a), index_of(fix.b)
        add_extent_coefficients(matrix, row, 1.0, fix.dimension_a, idx_a)
        add_extent_coefficients(matrix, row, -float(fix.scale), fix.dimension_b, idx_b)
        constants[row] = 0.0
    else:
        raise TypeError(f"unsupported fix type {type(fix).__name__}")


def describe_fix(fix: Fix) -> str:
    text = fix.name
    if fix.description:
        text += f' "{fix.description}"'
    return text


__all__ = [
    "DimensionsFix",
    "FIX_TYPES",
    "Fix",
    "IndexLookup",
    "RelationshipFix",
    "RelativeSizeFix",
    "ScaleFix",
    "add_extent_coefficients",
    "add_fix_row",
    "add_part_coefficient",
    "describe_fix",
    "fix_locatables",
]
