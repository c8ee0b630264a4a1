"""lpconduit - a tableau simplex engine with incremental re-optimization."""

__version__ = "0.1.0"

# Diagnostics
from .diagnostics import (
    assert_feasible,
    constraint_residuals,
    debug_context,
    is_debug_enabled,
    is_feasible,
    objective_value,
    set_debug_enabled,
)

# Logging
from .logging import configure_logging, get_logger, set_log_level

# Simplex engine
from .simplex import (
    EPSILON,
    Direction,
    Inequality,
    LPProblem,
    Simplex,
    SimplexAnswer,
    SimplexDataError,
    SimplexResult,
    Status,
    Tableau,
    linprog_wrapper,
    make_problem,
    simplex,
)

__all__ = [
    "__version__",
    # Simplex engine
    "EPSILON",
    "Direction",
    "Inequality",
    "LPProblem",
    "Simplex",
    "SimplexAnswer",
    "SimplexDataError",
    "SimplexResult",
    "Status",
    "Tableau",
    "linprog_wrapper",
    "make_problem",
    "simplex",
    # Diagnostics
    "objective_value",
    "constraint_residuals",
    "is_feasible",
    "assert_feasible",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
    # Logging
    "get_logger",
    "set_log_level",
    "configure_logging",
]
