"""
Public entry points of the tableau simplex engine.

:class:`Simplex` owns one tableau and exposes the solve, re-optimization and
alternate-solution operations. Every operation returns a
:class:`~lpconduit.simplex.core.SimplexResult`; solver failures are reported
through its ``status`` rather than raised.

Example:
    >>> from lpconduit.simplex import Simplex, make_problem
    >>> problem = make_problem(
    ...     a=[[-1, 1], [0, 1], [1, 0]],
    ...     b=[2, 1, 3],
    ...     c=[6, 10],
    ...     direction="max",
    ...     inequalities=["<=", "<=", "<="],
    ... )
    >>> engine = Simplex(problem)
    >>> engine.solve().fun
    28.0
    >>> engine.change_rhs([4, 2, 6]).x
    array([6., 2.])

The engine is not thread-safe. Use :meth:`Simplex.clone` to hand an
independent copy to another thread.
"""

from __future__ import annotations

from concurrent.futures import Executor
from dataclasses import replace
from typing import Any, Callable, Optional, Sequence

import numpy as np

from ..logging import get_logger
from . import alternatives, dual, phases
from .core import (
    Direction,
    LPProblem,
    SimplexAnswer,
    SimplexDataError,
    SimplexError,
    SimplexResult,
    Status,
    frozen_array,
    make_problem,
)
from .tableau import Tableau, canonicalize, extract_answer
from .utils import as_float_array

try:
    from scipy.optimize import linprog as _scipy_linprog

    SCIPY_AVAILABLE = True
except Exception:  # pragma: no cover - SciPy is optional
    SCIPY_AVAILABLE = False
    _scipy_linprog = None

logger = get_logger(__name__)


class Simplex:
    """
    Two-phase tableau simplex solver with dual-simplex re-optimization.

    Args:
        problem: Validated problem description from :func:`make_problem`.
    """

    def __init__(self, problem: LPProblem) -> None:
        self.problem = problem
        self._tableau = canonicalize(problem)
        self._broken: Optional[str] = None

    @classmethod
    def _from_tableau(cls, problem: LPProblem, tableau: Tableau, broken: Optional[str]) -> "Simplex":
        engine = cls.__new__(cls)
        engine.problem = problem
        engine._tableau = tableau
        engine._broken = broken
        return engine

    @property
    def solved(self) -> bool:
        return self._tableau.solved and self._broken is None

    @property
    def tableau(self) -> Tableau:
        """The engine's tableau. Mutating it invalidates the engine."""
        return self._tableau

    def clone(self) -> "Simplex":
        """Return an independent engine with identical numeric state."""
        return Simplex._from_tableau(self.problem, self._tableau.clone(), self._broken)

    def _success(self, answer: SimplexAnswer, message: str, **extra: Any) -> SimplexResult:
        return SimplexResult(
            x=answer.x,
            fun=answer.fun,
            status=Status.OPTIMAL,
            message=message,
            nit=self._tableau.nit,
            **extra,
        )

    def _run(
        self,
        operation: str,
        action: Callable[[], SimplexResult],
        mutates: bool = True,
    ) -> SimplexResult:
        if self._broken is not None:
            return SimplexResult(
                x=None,
                fun=None,
                status=Status.STATE_ERROR,
                message=f"The engine is unusable after a failed {self._broken}; discard it",
                nit=self._tableau.nit,
            )
        try:
            try:
                return action()
            except SimplexError:
                raise
            except ValueError as exc:
                # zero pivot element or a corrupted tableau
                raise SimplexError(str(exc)) from exc
        except SimplexError as exc:
            if mutates and not exc.safe:
                self._broken = operation
            logger.warning("%s failed: %s (%s)", operation, exc, exc.status.value)
            return SimplexResult(
                x=None,
                fun=None,
                status=exc.status,
                message=str(exc),
                nit=self._tableau.nit,
            )

    def solve(self) -> SimplexResult:
        """Solve the problem, or return the cached answer if already solved."""

        def action() -> SimplexResult:
            if not self._tableau.solved:
                phases.phase_one(self._tableau)
                phases.phase_two(self._tableau)
            return self._success(extract_answer(self._tableau), "Optimal solution found")

        return self._run("solve", action)

    def change_rhs(self, rhs: Any, value: Optional[float] = None) -> SimplexResult:
        """
        Re-optimize after changing the right-hand side.

        Call as ``change_rhs(new_b)`` to replace the whole vector, or as
        ``change_rhs(index, value)`` to replace a single entry.
        """

        def action() -> SimplexResult:
            dual.change_rhs(self._tableau, rhs, value)
            self.problem = replace(self.problem, b=frozen_array(self._tableau.rhs.copy()))
            return self._success(extract_answer(self._tableau), "Re-optimized after right-hand side change")

        return self._run("right-hand side change", action)

    def add_constraint(self, ai: Sequence[float], inequality: Any, bi: float) -> SimplexResult:
        """Append the constraint ``ai . x (inequality) bi`` and re-optimize."""

        def action() -> SimplexResult:
            dual.add_constraint(self._tableau, ai, inequality, bi)
            row = self._tableau.rhs.shape[0] - 1
            self.problem = replace(
                self.problem,
                a=frozen_array(np.vstack([self.problem.a, as_float_array(ai).reshape(1, -1)])),
                b=frozen_array(self._tableau.rhs.copy()),
                inequalities=self.problem.inequalities + (self._tableau.inequalities[row],),
            )
            return self._success(extract_answer(self._tableau), "Re-optimized after adding a constraint")

        return self._run("constraint addition", action)

    def find_alternative_solutions(self, executor: Optional[Executor] = None) -> SimplexResult:
        """
        Enumerate alternate optimal vertices adjacent to the current optimum.

        The returned result carries the current optimum in ``x``/``fun`` and
        the alternates in ``alternatives``; an empty list means the optimum is
        unique. The engine itself is not modified.
        """

        def action() -> SimplexResult:
            found = alternatives.find_alternatives(self._tableau, executor)
            return self._success(
                extract_answer(self._tableau),
                f"Found {len(found)} alternative solution(s)",
                alternatives=found,
            )

        # the search pivots clones only, so its failures leave this engine usable
        return self._run("alternative solution search", action, mutates=False)


def simplex(
    a: Any,
    b: Any,
    c: Any,
    direction: Any = None,
    inequalities: Optional[Sequence[Any]] = None,
    sign_constrained: Optional[Sequence[bool]] = None,
) -> SimplexResult:
    """
    Solve a linear program in one call.

    Invalid input is reported as ``Status.DATA_ERROR`` instead of raising.
    See :func:`~lpconduit.simplex.core.make_problem` for the arguments.
    """

    try:
        problem = make_problem(a, b, c, direction, inequalities, sign_constrained)
    except SimplexDataError as exc:
        return SimplexResult(x=None, fun=None, status=Status.DATA_ERROR, message=str(exc), nit=0)
    return Simplex(problem).solve()


def linprog_wrapper(problem: LPProblem) -> SimplexResult:
    """
    Solve ``problem`` with SciPy's ``linprog`` if SciPy is installed.

    Strict inequalities are passed as their non-strict counterparts.
    """

    if not SCIPY_AVAILABLE:  # pragma: no cover - depends on SciPy
        return SimplexResult(
            x=None,
            fun=None,
            status=Status.NUMERICAL_ERROR,
            message="SciPy is not available",
        )
    sign = -1.0 if problem.direction is Direction.MAX else 1.0
    ub_rows, ub_rhs, eq_rows, eq_rhs = [], [], [], []
    for row, rhs, inequality in zip(problem.a, problem.b, problem.inequalities):
        coefficient = inequality.slack_coefficient
        if coefficient == 0.0:
            eq_rows.append(row)
            eq_rhs.append(rhs)
        else:
            # slack +1 means "<=", surplus -1 means ">="
            ub_rows.append(coefficient * row)
            ub_rhs.append(coefficient * rhs)
    bounds = [(0, None) if flag else (None, None) for flag in problem.sign_constrained]

    res = _scipy_linprog(
        c=sign * np.asarray(problem.c),
        A_ub=np.array(ub_rows) if ub_rows else None,
        b_ub=np.array(ub_rhs) if ub_rhs else None,
        A_eq=np.array(eq_rows) if eq_rows else None,
        b_eq=np.array(eq_rhs) if eq_rhs else None,
        bounds=bounds,
        method="highs",
    )
    status = Status.OPTIMAL if res.success else Status.NUMERICAL_ERROR
    return SimplexResult(
        x=res.x if res.success else None,
        fun=sign * res.fun if res.success else None,
        status=status,
        message=res.message,
        nit=res.nit,
    )


__all__ = ["Simplex", "simplex", "linprog_wrapper"]
