"""
Dual-simplex re-optimization of a solved tableau.

Changing the right-hand side or appending a constraint keeps the reduced
costs optimal but may make basic variables negative. The dual simplex method
restores primal feasibility from there without re-solving from scratch:
the most negative basic variable leaves, and the entering column is the one
with the smallest ratio ``reduced_cost / row_entry`` over the negative
entries of the leaving row.
"""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from ..diagnostics.debug_mode import is_debug_enabled
from ..logging import get_logger
from .core import (
    DifficultSolveError,
    IncompatibleError,
    Inequality,
    SimplexDataError,
    SimplexStateError,
    coerce_index,
    coerce_scalar,
    coerce_vector,
)
from .phases import normalize_basis
from .tableau import Tableau, pivot
from .utils import is_negative

logger = get_logger(__name__)


def _require_solved(tableau: Tableau) -> None:
    if not tableau.solved:
        raise SimplexStateError("The system hasn't been solved yet")


def most_negative_row(tableau: Tableau) -> Optional[int]:
    """Constraint row with the most negative constant, if any."""
    constants = tableau.constants
    best_row = None
    best_value = np.inf
    for i in range(constants.shape[0]):
        value = constants[i]
        if is_negative(value) and value < best_value:
            best_value = value
            best_row = i
    return best_row


def min_ratio_column(tableau: Tableau, row: int) -> Optional[int]:
    """Entering column for the dual step leaving ``row``."""
    reduced = tableau.reduced_costs
    entries = tableau.matrix[row]
    best_column = None
    best_ratio = np.inf
    for j in range(1, tableau.artificial_index):
        if is_negative(entries[j]):
            ratio = reduced[j] / entries[j]
            if ratio < best_ratio:
                best_ratio = ratio
                best_column = j
    return best_column


def run_dual(tableau: Tableau) -> None:
    """
    Pivot until every basic variable is non-negative.

    Raises:
        IncompatibleError: If a negative row has no admissible entering column.
    """
    while True:
        row = most_negative_row(tableau)
        if row is None:
            return
        column = min_ratio_column(tableau, row)
        if column is None:
            raise IncompatibleError("The updated system is incompatible")
        pivot(tableau, row, column)


def _recompute_constants(tableau: Tableau) -> None:
    m = tableau.n_constraints
    inverse = tableau.matrix[:-1, tableau.artificial_index : tableau.artificial_index + m]
    constants = inverse @ (tableau.row_signs * tableau.rhs)
    tableau.matrix[:-1, 0] = constants
    tableau.matrix[-1, 0] = tableau.cost[tableau.basis] @ constants


def change_rhs(tableau: Tableau, rhs: Any, value: Optional[float] = None) -> None:
    """
    Replace the right-hand side and re-optimize.

    ``rhs`` is either the whole new vector, or a row index when ``value`` is
    given. The tableau is left untouched if the arguments are invalid.

    Raises:
        SimplexStateError: If the tableau has not been solved.
        SimplexDataError: On a length mismatch, an invalid index or a
            non-numeric or non-finite value.
        IncompatibleError: If the new system is infeasible.
    """
    _require_solved(tableau)
    m = tableau.n_constraints
    if value is None:
        new_rhs = coerce_vector(rhs, "right-hand side")
        if new_rhs.shape[0] != m:
            raise SimplexDataError(
                f"New right-hand side has {new_rhs.shape[0]} entries, expected {m}"
            )
    else:
        index = coerce_index(rhs, m, "right-hand side")
        new_rhs = tableau.rhs.copy()
        new_rhs[index] = coerce_scalar(value, "right-hand side value")

    tableau.rhs = new_rhs
    _recompute_constants(tableau)
    logger.info("Re-optimizing after right-hand side change")
    run_dual(tableau)


def _grow_blocks(tableau: Tableau) -> None:
    """Insert an empty slack column and an empty artificial column."""
    art = tableau.artificial_index
    tableau.matrix = np.insert(tableau.matrix, art, 0.0, axis=1)
    tableau.matrix = np.hstack([tableau.matrix, np.zeros((tableau.matrix.shape[0], 1))])
    tableau.cost = np.append(np.insert(tableau.cost, art, 0.0), 0.0)
    tableau.phase_one_cost = np.append(np.insert(tableau.phase_one_cost, art, 0.0), 1.0)
    # basic artificial columns move right with the block
    tableau.basis = np.where(tableau.basis >= art, tableau.basis + 1, tableau.basis)
    tableau.artificial_index = art + 1


def _form_pseudo_basis(tableau: Tableau) -> None:
    """Express the new last row through its own artificial variable only."""
    new_row = tableau.n_constraints - 1
    for i in range(new_row):
        k = tableau.matrix[new_row, tableau.basis[i]]
        if k != 0.0:
            tableau.matrix[new_row] -= k * tableau.matrix[i]
    pivot(tableau, new_row, tableau.basis[new_row])


def add_constraint(tableau: Tableau, ai: Any, inequality: Any, bi: float) -> None:
    """
    Append the constraint ``ai . x (inequality) bi`` and re-optimize.

    Raises:
        SimplexStateError: If the tableau has not been solved.
        SimplexDataError: If ``ai`` does not match the number of variables,
            or if ``ai``, ``inequality`` or ``bi`` is malformed.
        IncompatibleError: If the extended system is infeasible or the new
            artificial variable cannot be purged.
    """
    _require_solved(tableau)
    coefficients = coerce_vector(ai, "constraint coefficients")
    if coefficients.shape[0] != tableau.n_variables:
        raise SimplexDataError(
            f"New constraint has {coefficients.shape[0]} coefficients, "
            f"expected {tableau.n_variables}"
        )
    sign = Inequality.parse(inequality)
    bi = coerce_scalar(bi, "constraint right-hand side")

    tableau.inequalities.append(sign)
    tableau.rhs = np.append(tableau.rhs, bi)
    tableau.row_signs = np.append(tableau.row_signs, 1.0)

    _grow_blocks(tableau)
    row = np.zeros(tableau.matrix.shape[1])
    row[0] = bi
    row[1 : coefficients.shape[0] + 1] = coefficients
    if tableau.substitution_index is not None:
        row[tableau.substitution_index] = -coefficients[~tableau.sign_constrained].sum()
    row[tableau.artificial_index - 1] = sign.slack_coefficient
    row[-1] = 1.0
    tableau.matrix = np.vstack([tableau.matrix[:-1], row, tableau.matrix[-1:]])
    tableau.basis = np.append(tableau.basis, tableau.matrix.shape[1] - 1)
    if is_debug_enabled():
        tableau.check_invariants()

    logger.info("Added constraint %s %s %g as row %d", coefficients.tolist(), sign, bi, tableau.n_constraints - 1)
    _form_pseudo_basis(tableau)
    try:
        normalize_basis(tableau, tableau.n_constraints - 1)
    except DifficultSolveError as exc:
        raise IncompatibleError("The system with the new constraint is incompatible") from exc
    run_dual(tableau)


__all__ = [
    "most_negative_row",
    "min_ratio_column",
    "run_dual",
    "change_rhs",
    "add_constraint",
]
