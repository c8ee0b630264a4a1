"""
Two-phase primal simplex on a :class:`~lpconduit.simplex.tableau.Tableau`.

Phase 1 minimizes the sum of the artificial variables starting from the
artificial basis. Once that sum is zero the remaining basic artificials are
swapped for real columns and phase 2 minimizes the real objective over the
columns left of the artificial block.

Entering columns are chosen as the first column with a positive reduced
cost and leaving rows by the first minimal ratio. No anti-cycling rule is
applied, so degenerate problems may pivot forever.

References:
    - Dantzig, *Linear Programming and Extensions*, 1963.
    - Bertsimas & Tsitsiklis, *Introduction to Linear Optimization*, 1997.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..logging import get_logger
from .core import DifficultSolveError, InfeasibleError, SimplexError, UnboundedError
from .tableau import Tableau, pivot
from .utils import is_positive, is_zero

logger = get_logger(__name__)


def first_positive_column(tableau: Tableau, border: int) -> Optional[int]:
    """First column in ``1 .. border-1`` whose reduced cost is positive."""
    row = tableau.reduced_costs
    for j in range(1, border):
        if is_positive(row[j]):
            return j
    return None


def min_ratio_row(tableau: Tableau, column: int) -> Optional[int]:
    """Row limiting the increase of ``column``, or None if nothing limits it."""
    constants = tableau.constants
    entries = tableau.matrix[:-1, column]
    best_row = None
    best_ratio = np.inf
    for i in range(entries.shape[0]):
        if is_positive(entries[i]):
            ratio = constants[i] / entries[i]
            if ratio < best_ratio:
                best_ratio = ratio
                best_row = i
    return best_row


def enter_column(tableau: Tableau, column: int) -> None:
    """
    Pivot ``column`` into the basis at its minimum-ratio row.

    Raises:
        UnboundedError: If no row limits the entering column.
    """
    row = min_ratio_row(tableau, column)
    if row is None:
        raise UnboundedError(tableau.direction)
    pivot(tableau, row, column)


def run_primal(tableau: Tableau, border: int) -> None:
    """Pivot until no column left of ``border`` has a positive reduced cost."""
    while True:
        column = first_positive_column(tableau, border)
        if column is None:
            return
        enter_column(tableau, column)


def normalize_basis(tableau: Tableau, row: int) -> None:
    """
    Replace a basic artificial variable in ``row`` by a real column.

    The replacement is the first non-basic column left of the artificial block
    with a non-zero entry in ``row`` and a reduced cost in ``[0, EPSILON)``,
    so the pivot leaves the objective untouched.

    Raises:
        DifficultSolveError: If no such column exists.
    """
    if tableau.basis[row] < tableau.artificial_index:
        return
    basic = set(tableau.basis.tolist())
    reduced = tableau.reduced_costs
    for j in range(1, tableau.artificial_index):
        if j in basic or is_zero(tableau.matrix[row, j]):
            continue
        if is_zero(reduced[j]) and reduced[j] >= 0:
            logger.debug("Purging artificial column %d from row %d via column %d", tableau.basis[row], row, j)
            pivot(tableau, row, j)
            return
    raise DifficultSolveError(
        "The artificial variable of row "
        f"{row} must be expressed as a linear combination of non-artificial columns"
    )


def phase_one(tableau: Tableau) -> None:
    """
    Drive the artificial objective to zero and purge artificial variables.

    Raises:
        InfeasibleError: If the artificial objective stays above zero.
        DifficultSolveError: If an artificial variable cannot be purged.
    """
    m = tableau.n_constraints
    tableau.basis = np.arange(tableau.artificial_index, tableau.artificial_index + m)
    tableau.matrix[-1] = tableau.score_row(tableau.phase_one_cost)
    try:
        run_primal(tableau, tableau.matrix.shape[1])
    except UnboundedError as exc:
        raise SimplexError("Artificial objective is unbounded in phase 1") from exc

    residual = tableau.matrix[-1, 0]
    if not is_zero(residual):
        raise InfeasibleError(f"The constraints are incompatible (artificial objective {residual:.6g})")
    logger.info("Phase 1 finished after %d pivots", tableau.nit)

    for row in range(m):
        normalize_basis(tableau, row)


def phase_two(tableau: Tableau) -> None:
    """
    Optimize the real objective from the phase-1 basis.

    Raises:
        UnboundedError: If the objective is unbounded in the solve direction.
    """
    tableau.matrix[-1] = tableau.score_row(tableau.cost)
    run_primal(tableau, tableau.artificial_index)
    tableau.solved = True
    logger.info("Phase 2 finished after %d pivots, objective %.6g", tableau.nit, tableau.matrix[-1, 0])


__all__ = [
    "first_positive_column",
    "min_ratio_row",
    "enter_column",
    "run_primal",
    "normalize_basis",
    "phase_one",
    "phase_two",
]
