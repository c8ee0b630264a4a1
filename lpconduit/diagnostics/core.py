"""Feasibility and objective checks for candidate solutions."""

from __future__ import annotations

from typing import Any, List

import numpy as np

from ..simplex.core import Inequality, LPProblem
from ..simplex.utils import EPSILON, as_float_array


def objective_value(problem: LPProblem, x: Any) -> float:
    """
    Evaluate the objective ``c . x`` in the caller's direction.

    Parameters
    ----------
    problem:
        Problem whose objective is evaluated.
    x:
        Candidate solution with one entry per variable.

    Returns
    -------
    float
        The objective value (no sign flip is applied for maximization).
    """
    return float(problem.c @ as_float_array(x).reshape(-1))


def constraint_residuals(problem: LPProblem, x: Any) -> np.ndarray:
    """
    Signed constraint violations of ``x``.

    Entry ``i`` is zero when row ``i`` is satisfied and positive by the amount
    it is violated otherwise. Negative variables whose sign is constrained are
    not reported here; see :func:`is_feasible`.

    Parameters
    ----------
    problem:
        Problem whose constraints are checked.
    x:
        Candidate solution with one entry per variable.

    Returns
    -------
    np.ndarray
        Non-negative array of shape (n_constraints,).
    """
    x_vec = as_float_array(x).reshape(-1)
    if x_vec.shape[0] != problem.n_variables:
        raise ValueError(
            f"Solution has {x_vec.shape[0]} entries, problem has {problem.n_variables} variables."
        )
    lhs = problem.a @ x_vec
    residuals = np.zeros(problem.n_constraints)
    for i, sign in enumerate(problem.inequalities):
        gap = lhs[i] - problem.b[i]
        if sign is Inequality.EQ:
            residuals[i] = abs(gap)
        elif sign in (Inequality.LE, Inequality.LT):
            residuals[i] = max(gap, 0.0)
        else:
            residuals[i] = max(-gap, 0.0)
    return residuals


def _violations(problem: LPProblem, x: Any, atol: float) -> List[str]:
    x_vec = as_float_array(x).reshape(-1)
    found = [
        f"row {i} ({problem.inequalities[i]}) by {value:.3g}"
        for i, value in enumerate(constraint_residuals(problem, x_vec))
        if value > atol
    ]
    for j, flag in enumerate(problem.sign_constrained):
        if flag and x_vec[j] < -atol:
            found.append(f"x[{j}] >= 0 by {-x_vec[j]:.3g}")
    return found


def is_feasible(problem: LPProblem, x: Any, atol: float = EPSILON) -> bool:
    """Return True if ``x`` satisfies every constraint within ``atol``."""
    return not _violations(problem, x, atol)


def assert_feasible(problem: LPProblem, x: Any, atol: float = EPSILON) -> None:
    """
    Assert that ``x`` is feasible for ``problem`` within ``atol``.

    Raises
    ------
    ValueError
        If any constraint or sign restriction is violated.
    """
    violations = _violations(problem, x, atol)
    if violations:
        raise ValueError("Solution is not feasible: " + "; ".join(violations))
