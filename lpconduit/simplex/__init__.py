"""
Tableau simplex engine with re-optimization and alternate-optimum search.

The subpackage solves linear programs with the two-phase simplex method on a
single mutable tableau. A solved tableau can be re-optimized with the dual
simplex method after a right-hand side change or after appending a
constraint, and can enumerate alternate optimal vertices when the optimum is
degenerate.
"""

from . import alternatives, core, dual, phases, solver, tableau, utils
from .core import (
    Direction,
    Inequality,
    LPProblem,
    SimplexAnswer,
    SimplexDataError,
    SimplexResult,
    Status,
    make_problem,
)
from .solver import Simplex, linprog_wrapper, simplex
from .tableau import Tableau
from .utils import EPSILON

__all__ = [
    "alternatives",
    "core",
    "dual",
    "phases",
    "solver",
    "tableau",
    "utils",
    # Core types
    "Direction",
    "Inequality",
    "Status",
    "LPProblem",
    "SimplexAnswer",
    "SimplexResult",
    "SimplexDataError",
    "Tableau",
    "EPSILON",
    # Entry points
    "make_problem",
    "Simplex",
    "simplex",
    "linprog_wrapper",
]
