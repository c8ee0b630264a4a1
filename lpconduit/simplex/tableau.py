"""
Simplex tableau: canonicalization, the pivot primitive and answer extraction.

The tableau is a single ``(m + 1) x n`` float matrix. Rows ``0 .. m-1`` hold the
constraints, the trailing row holds the reduced costs of whichever phase is
running. Columns are laid out as::

    | b | x_1 .. x_k | t | s_1 .. s_m | r_1 .. r_m |
     0   1            ^   ^             ^
                      |   slack_index   artificial_index
                      substitution_index (only if a variable is free)

``t`` is the shared substitution variable for free variables
(``x_j = x_j' - t``), ``s`` the slack/surplus block and ``r`` the artificial
block. The artificial block starts as the identity and, because every pivot
is a row operation on the whole matrix, always holds the inverse of the
current basis relative to the canonical rows.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from ..diagnostics.debug_mode import is_debug_enabled
from ..logging import get_logger
from .core import Direction, Inequality, LPProblem, SimplexAnswer
from .utils import EPSILON, is_zero

logger = get_logger(__name__)


@dataclass
class Tableau:
    """
    Mutable tableau plus the bookkeeping needed to re-optimize it.

    Attributes:
        matrix: Constraint rows followed by the reduced-cost row.
        cost: Real objective row in minimization form, as wide as ``matrix``.
        phase_one_cost: Artificial objective row, as wide as ``matrix``.
        basis: Column index basic in each constraint row.
        substitution_index: Column of the shared free-variable substitute.
        slack_index: First slack/surplus column.
        artificial_index: First artificial column.
        direction: Caller's objective direction.
        sign_constrained: Per-variable non-negativity flags.
        inequalities: Canonical relation of each row.
        rhs: Right-hand side in the caller's row orientation.
        row_signs: +1/-1 per row; canonical rhs is ``row_signs * rhs``.
        solved: Whether phase 2 has completed.
        nit: Number of pivots applied so far.
    """

    matrix: np.ndarray
    cost: np.ndarray
    phase_one_cost: np.ndarray
    basis: np.ndarray
    substitution_index: Optional[int]
    slack_index: int
    artificial_index: int
    direction: Direction
    sign_constrained: np.ndarray
    inequalities: List[Inequality]
    rhs: np.ndarray
    row_signs: np.ndarray
    solved: bool = False
    nit: int = 0

    @property
    def n_constraints(self) -> int:
        return self.matrix.shape[0] - 1

    @property
    def n_variables(self) -> int:
        return self.sign_constrained.shape[0]

    @property
    def constants(self) -> np.ndarray:
        """View of the constant column of the constraint rows."""
        return self.matrix[:-1, 0]

    @property
    def reduced_costs(self) -> np.ndarray:
        """View of the trailing reduced-cost row."""
        return self.matrix[-1]

    def clone(self) -> "Tableau":
        """Return an independent copy sharing no mutable storage."""
        return Tableau(
            matrix=self.matrix.copy(),
            cost=self.cost.copy(),
            phase_one_cost=self.phase_one_cost.copy(),
            basis=self.basis.copy(),
            substitution_index=self.substitution_index,
            slack_index=self.slack_index,
            artificial_index=self.artificial_index,
            direction=self.direction,
            sign_constrained=self.sign_constrained.copy(),
            inequalities=list(self.inequalities),
            rhs=self.rhs.copy(),
            row_signs=self.row_signs.copy(),
            solved=self.solved,
            nit=self.nit,
        )

    def score_row(self, cost: np.ndarray) -> np.ndarray:
        """Reduced-cost row ``cost_B . M - cost`` for the current basis."""
        return cost[self.basis] @ self.matrix[:-1] - cost

    def check_invariants(self) -> None:
        """
        Verify the structural invariants of the tableau.

        Raises:
            ValueError: If block widths disagree or the basis is malformed.
        """
        m, n = self.matrix.shape[0] - 1, self.matrix.shape[1]
        if self.cost.shape[0] != n or self.phase_one_cost.shape[0] != n:
            raise ValueError(
                f"Cost rows have widths {self.cost.shape[0]}/{self.phase_one_cost.shape[0]}, "
                f"matrix has {n} columns"
            )
        if self.basis.shape[0] != m:
            raise ValueError(f"Basis holds {self.basis.shape[0]} entries for {m} rows")
        if len(set(self.basis.tolist())) != m:
            raise ValueError(f"Basis has duplicate columns: {self.basis.tolist()}")
        if np.any(self.basis < 1) or np.any(self.basis >= n):
            raise ValueError(f"Basis refers to columns outside 1..{n - 1}: {self.basis.tolist()}")
        if self.artificial_index + m != n or self.slack_index + m != self.artificial_index:
            raise ValueError(
                f"Block markers slack={self.slack_index} artificial={self.artificial_index} "
                f"do not match {m} rows and {n} columns"
            )


def canonicalize(problem: LPProblem) -> Tableau:
    """
    Build the extended standard-form tableau of ``problem``.

    The steps run in a fixed order: free-variable substitution, objective
    negation for maximization, sign normalization of the right-hand side,
    constant column, slack/surplus block and finally the artificial block.
    """

    a_mat = np.array(problem.a, dtype=float, copy=True)
    b_vec = np.array(problem.b, dtype=float, copy=True)
    cost = np.array(problem.c, dtype=float, copy=True)
    m = a_mat.shape[0]
    free = ~np.asarray(problem.sign_constrained, dtype=bool)

    substitution_index = None
    if np.any(free):
        # +1 accounts for the constant column prepended below
        substitution_index = cost.shape[0] + 1
        a_mat = np.hstack([a_mat, -a_mat[:, free].sum(axis=1, keepdims=True)])
        cost = np.append(cost, -cost[free].sum())

    if problem.direction is Direction.MAX:
        cost = -cost

    inequalities = list(problem.inequalities)
    row_signs = np.ones(m)
    for i in range(m):
        if b_vec[i] < 0:
            a_mat[i] *= -1.0
            b_vec[i] *= -1.0
            row_signs[i] = -1.0
            inequalities[i] = inequalities[i].inverted()

    a_mat = np.hstack([b_vec[:, np.newaxis], a_mat])
    cost = np.concatenate([[0.0], cost])

    slack_index = cost.shape[0]
    slack_diag = np.diag([sign.slack_coefficient for sign in inequalities])
    a_mat = np.hstack([a_mat, slack_diag])
    cost = np.concatenate([cost, np.zeros(m)])

    artificial_index = cost.shape[0]
    a_mat = np.hstack([a_mat, np.eye(m)])
    phase_one_cost = np.concatenate([np.zeros(artificial_index), np.ones(m)])
    cost = np.concatenate([cost, np.zeros(m)])

    matrix = np.vstack([a_mat, np.zeros((1, a_mat.shape[1]))])
    tableau = Tableau(
        matrix=matrix,
        cost=cost,
        phase_one_cost=phase_one_cost,
        basis=np.arange(artificial_index, artificial_index + m),
        substitution_index=substitution_index,
        slack_index=slack_index,
        artificial_index=artificial_index,
        direction=problem.direction,
        sign_constrained=np.array(problem.sign_constrained, dtype=bool),
        inequalities=inequalities,
        rhs=np.array(problem.b, dtype=float, copy=True),
        row_signs=row_signs,
    )
    logger.debug(
        "Canonicalized %d x %d problem into %d x %d tableau (substitution=%s)",
        m,
        problem.n_variables,
        matrix.shape[0],
        matrix.shape[1],
        substitution_index,
    )
    if is_debug_enabled():
        tableau.check_invariants()
    return tableau


def pivot(tableau: Tableau, row: int, column: int) -> None:
    """
    Gauss-Jordan elimination around ``matrix[row, column]``.

    The pivot row is normalized, ``column`` is eliminated from every other row
    including the reduced-cost row, and ``column`` becomes basic in ``row``.

    Raises:
        ValueError: If the pivot element is within ``EPSILON`` of zero.
    """

    matrix = tableau.matrix
    element = matrix[row, column]
    if is_zero(element, EPSILON):
        raise ValueError(f"Pivot element at ({row}, {column}) is numerically zero: {element!r}")

    matrix[row] /= element
    factors = matrix[:, column].copy()
    factors[row] = 0.0
    matrix -= np.outer(factors, matrix[row])
    tableau.basis[row] = column
    tableau.nit += 1
    logger.debug("Pivot %d: column %d enters at row %d", tableau.nit, column, row)
    if is_debug_enabled():
        tableau.check_invariants()


def extract_answer(tableau: Tableau) -> SimplexAnswer:
    """Map the current basic solution back into the caller's variables."""

    full = np.zeros(tableau.matrix.shape[1])
    full[tableau.basis] = tableau.constants
    border = tableau.slack_index
    if tableau.substitution_index is not None:
        border = tableau.substitution_index
        substitute = full[border]
        free = np.flatnonzero(~tableau.sign_constrained) + 1
        full[free] -= substitute

    fun = float(tableau.matrix[-1, 0])
    if tableau.direction is Direction.MAX:
        fun = -fun
    return SimplexAnswer(x=full[1:border].copy(), fun=fun)


__all__ = ["Tableau", "canonicalize", "pivot", "extract_answer"]
