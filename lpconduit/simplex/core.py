"""
Problem, answer and status types for the tableau simplex engine.

A linear program is described by the triple ``(A, b, c)`` together with an
objective :class:`Direction`, one :class:`Inequality` per constraint row and
one sign-constraint flag per decision variable::

    minimize / maximize    c^T x
    subject to             A_i x  (=, <=, <, >=, >)  b_i
                           x_j >= 0  where sign_constrained[j]

Strict and non-strict inequalities are treated identically by the engine;
both symbols exist so that callers can state problems as they are written.

Engine operations never raise for solver outcomes. They return a
:class:`SimplexResult` whose :class:`Status` names the outcome. Internally the
engine signals failures with :class:`SimplexError` subclasses, each bound to
the status it is reported as.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from .utils import as_float_array


class Direction(Enum):
    """Objective direction."""

    MIN = "min"
    MAX = "max"

    def inverted(self) -> "Direction":
        return _DIRECTION_INVERSION[self]

    @classmethod
    def parse(cls, value: Any) -> "Direction":
        if isinstance(value, Direction):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise SimplexDataError(f"Unknown objective direction {value!r}") from None

    def __str__(self) -> str:
        return self.value


_DIRECTION_INVERSION = {Direction.MIN: Direction.MAX, Direction.MAX: Direction.MIN}


class Inequality(Enum):
    """Relation between a constraint row and its right-hand side."""

    EQ = "="
    LE = "<="
    LT = "<"
    GE = ">="
    GT = ">"

    def inverted(self) -> "Inequality":
        """Relation obtained after multiplying both sides by -1."""
        return _INEQUALITY_INVERSION[self]

    @property
    def slack_coefficient(self) -> float:
        """Coefficient of the row's slack/surplus column in standard form."""
        if self in (Inequality.LE, Inequality.LT):
            return 1.0
        if self in (Inequality.GE, Inequality.GT):
            return -1.0
        return 0.0

    @classmethod
    def parse(cls, value: Any) -> "Inequality":
        if isinstance(value, Inequality):
            return value
        try:
            return cls(_INEQUALITY_ALIASES.get(value, value))
        except (TypeError, ValueError):
            raise SimplexDataError(f"Unknown inequality sign {value!r}") from None

    def __str__(self) -> str:
        return self.value


_INEQUALITY_INVERSION = {
    Inequality.EQ: Inequality.EQ,
    Inequality.LE: Inequality.GE,
    Inequality.LT: Inequality.GT,
    Inequality.GE: Inequality.LE,
    Inequality.GT: Inequality.LT,
}

_INEQUALITY_ALIASES = {"==": "=", "≤": "<=", "≥": ">="}


class Status(Enum):
    """Outcome of an engine operation."""

    OPTIMAL = "optimal"
    DATA_ERROR = "data_error"
    STATE_ERROR = "state_error"
    INFEASIBLE = "infeasible"
    INCOMPATIBLE = "incompatible"
    UNBOUNDED_MAXIMIZE = "unbounded_maximize"
    UNBOUNDED_MINIMIZE = "unbounded_minimize"
    DIFFICULT = "difficult"
    NUMERICAL_ERROR = "numerical_error"


class SimplexError(Exception):
    """
    Base class of the engine's internal failure signals.

    ``safe`` errors are raised before any mutation, so the engine stays
    usable after them. Every other error leaves the tableau half-pivoted.
    """

    status: Status = Status.NUMERICAL_ERROR
    safe: bool = False


class SimplexDataError(SimplexError, ValueError):
    status = Status.DATA_ERROR
    safe = True


class SimplexStateError(SimplexError):
    status = Status.STATE_ERROR
    safe = True


class InfeasibleError(SimplexError):
    status = Status.INFEASIBLE


class IncompatibleError(SimplexError):
    status = Status.INCOMPATIBLE


class DifficultSolveError(SimplexError):
    status = Status.DIFFICULT


class UnboundedError(SimplexError):
    def __init__(self, direction: Direction) -> None:
        if direction is Direction.MAX:
            self.status = Status.UNBOUNDED_MAXIMIZE
            message = "The objective can be increased without limit"
        else:
            self.status = Status.UNBOUNDED_MINIMIZE
            message = "The objective can be decreased without limit"
        super().__init__(message)
        self.direction = direction


@dataclass(frozen=True)
class SimplexAnswer:
    """A vertex of the feasible region and its objective value."""

    x: np.ndarray
    fun: float


@dataclass
class SimplexResult:
    """
    Result container returned by every engine operation.

    Attributes:
        x: Solution vector in the caller's variable space (``None`` on failure).
        fun: Objective value at ``x`` (``None`` on failure).
        status: Enumeration describing the outcome.
        message: Human-readable explanation of the status.
        nit: Total number of pivots performed on the tableau so far.
        alternatives: Alternate optimal vertices, filled by
            :meth:`lpconduit.simplex.solver.Simplex.find_alternative_solutions`.
    """

    x: Optional[np.ndarray]
    fun: Optional[float]
    status: Status
    message: str
    nit: int = 0
    alternatives: List[SimplexAnswer] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status is Status.OPTIMAL

    @property
    def answer(self) -> Optional[SimplexAnswer]:
        if self.x is None or self.fun is None:
            return None
        return SimplexAnswer(x=self.x, fun=self.fun)


@dataclass(frozen=True)
class LPProblem:
    """
    Immutable description of a linear program.

    Instances should be created with :func:`make_problem`, which validates
    dimensions, fills defaults and copies every array so that later changes
    to the caller's buffers cannot leak into the engine.
    """

    a: np.ndarray
    b: np.ndarray
    c: np.ndarray
    direction: Direction = Direction.MIN
    inequalities: Tuple[Inequality, ...] = ()
    sign_constrained: Tuple[bool, ...] = ()

    @property
    def n_constraints(self) -> int:
        return self.a.shape[0]

    @property
    def n_variables(self) -> int:
        return self.a.shape[1]


def default_inequalities(size: int) -> Tuple[Inequality, ...]:
    return (Inequality.EQ,) * size


def default_sign_constrained(size: int) -> Tuple[bool, ...]:
    return (True,) * size


def frozen_array(arr: np.ndarray) -> np.ndarray:
    """Mark ``arr`` read-only and return it."""
    arr.flags.writeable = False
    return arr


def _require_finite(arr: np.ndarray, name: str) -> None:
    if not np.all(np.isfinite(arr)):
        raise SimplexDataError(f"Non-finite values in {name}")


def coerce_vector(data: Any, name: str) -> np.ndarray:
    """
    Convert ``data`` into a non-empty, finite float vector.

    Raises:
        SimplexDataError: If ``data`` is missing, empty, ragged, non-numeric
            or holds NaN/inf.
    """
    if data is None:
        raise SimplexDataError(f"Empty or missing {name}")
    try:
        arr = as_float_array(data).reshape(-1)
    except (TypeError, ValueError) as exc:
        raise SimplexDataError(f"The {name} is not a numeric vector: {exc}") from None
    if arr.shape[0] == 0:
        raise SimplexDataError(f"Empty or missing {name}")
    _require_finite(arr, name)
    return arr


def coerce_scalar(value: Any, name: str) -> float:
    """Convert ``value`` into a finite float or raise :class:`SimplexDataError`."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise SimplexDataError(f"The {name} is not a number: {value!r}") from None
    if not np.isfinite(number):
        raise SimplexDataError(f"Non-finite {name}: {number}")
    return number


def coerce_index(value: Any, length: int, name: str) -> int:
    """Validate an integer position into a sequence of ``length`` items."""
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise SimplexDataError(f"Incorrect index {value!r} for {name} of length {length}")
    index = int(value)
    if index < 0 or index >= length:
        raise SimplexDataError(f"Incorrect index {index} for {name} of length {length}")
    return index


def _coerce_matrix(data: Any, columns: int) -> np.ndarray:
    if data is None:
        raise SimplexDataError("Empty or missing coefficient matrix A")
    try:
        rows = [as_float_array(row).reshape(-1) for row in data]
    except (TypeError, ValueError) as exc:
        raise SimplexDataError(f"Coefficient matrix A is not a sequence of rows: {exc}") from None
    if not rows:
        raise SimplexDataError("Empty or missing coefficient matrix A")
    for i, row in enumerate(rows):
        if row.shape[0] != columns:
            raise SimplexDataError(
                f"Row {i} of A has {row.shape[0]} coefficients, expected {columns} to match c"
            )
    matrix = np.vstack(rows)
    _require_finite(matrix, "coefficient matrix A")
    return matrix


def make_problem(
    a: Any,
    b: Any,
    c: Any,
    direction: Any = None,
    inequalities: Optional[Sequence[Any]] = None,
    sign_constrained: Optional[Sequence[bool]] = None,
) -> LPProblem:
    """
    Validate raw problem data and build an :class:`LPProblem`.

    Args:
        a: Constraint matrix (rows = constraints, columns = variables).
        b: Right-hand side, one entry per row of ``a``.
        c: Objective coefficients, one entry per column of ``a``.
        direction: ``Direction`` or ``"min"``/``"max"``; defaults to MIN.
        inequalities: One ``Inequality`` (or symbol such as ``"<="``) per row;
            defaults to equality for every row.
        sign_constrained: One flag per variable, True when the variable must
            be non-negative; defaults to True for every variable.

    Raises:
        SimplexDataError: On missing, non-numeric or non-finite data, or
            mismatched dimensions.
    """

    c_vec = coerce_vector(c, "objective vector c")
    b_vec = coerce_vector(b, "right-hand side b")
    a_mat = _coerce_matrix(a, c_vec.shape[0])
    if a_mat.shape[0] != b_vec.shape[0]:
        raise SimplexDataError(
            f"Matrix A has {a_mat.shape[0]} rows but b has {b_vec.shape[0]} entries"
        )

    if inequalities is None:
        signs = default_inequalities(b_vec.shape[0])
    else:
        signs = tuple(Inequality.parse(sign) for sign in inequalities)
        if len(signs) != b_vec.shape[0]:
            raise SimplexDataError(
                f"{len(signs)} inequality signs given for {b_vec.shape[0]} constraints"
            )

    if sign_constrained is None:
        flags = default_sign_constrained(c_vec.shape[0])
    else:
        flags = tuple(bool(flag) for flag in sign_constrained)
        if len(flags) != c_vec.shape[0]:
            raise SimplexDataError(
                f"{len(flags)} sign-constraint flags given for {c_vec.shape[0]} variables"
            )

    return LPProblem(
        a=frozen_array(a_mat),
        b=frozen_array(b_vec),
        c=frozen_array(c_vec),
        direction=Direction.MIN if direction is None else Direction.parse(direction),
        inequalities=signs,
        sign_constrained=flags,
    )


__all__ = [
    "Direction",
    "Inequality",
    "Status",
    "SimplexError",
    "SimplexDataError",
    "SimplexStateError",
    "InfeasibleError",
    "IncompatibleError",
    "DifficultSolveError",
    "UnboundedError",
    "SimplexAnswer",
    "SimplexResult",
    "LPProblem",
    "make_problem",
    "frozen_array",
    "coerce_vector",
    "coerce_scalar",
    "coerce_index",
    "default_inequalities",
    "default_sign_constrained",
]
