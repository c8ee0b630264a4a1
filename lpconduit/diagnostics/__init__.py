"""Diagnostics and debugging utilities for lpconduit."""

from .core import (
    assert_feasible,
    constraint_residuals,
    is_feasible,
    objective_value,
)
from .debug_mode import (
    debug_context,
    is_debug_enabled,
    set_debug_enabled,
)

__all__ = [
    "objective_value",
    "constraint_residuals",
    "is_feasible",
    "assert_feasible",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
]
