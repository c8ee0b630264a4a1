"""Debug mode management for lpconduit.

While debug mode is on, every pivot and every appended constraint row is
followed by :meth:`lpconduit.simplex.tableau.Tableau.check_invariants`. A
violated invariant raises ``ValueError`` inside the engine, which the public
:class:`~lpconduit.simplex.solver.Simplex` methods report as
``Status.NUMERICAL_ERROR``.

The initial state comes from the ``LPCONDUIT_DEBUG`` environment variable
(``1``, ``true``, ``yes`` or ``on``); the flag is process-wide.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator

_DEBUG_ENV_VAR = "LPCONDUIT_DEBUG"
_debug_enabled: bool = os.getenv(_DEBUG_ENV_VAR, "0").lower() in (
    "1",
    "true",
    "yes",
    "on",
)


def is_debug_enabled() -> bool:
    """Return whether tableau invariants are checked after each mutation."""
    return _debug_enabled


def set_debug_enabled(enabled: bool) -> None:
    """
    Turn tableau invariant checking on or off for the whole process.

    Parameters
    ----------
    enabled:
        True to validate block markers, cost-row widths and the basis after
        every pivot.
    """
    global _debug_enabled
    _debug_enabled = bool(enabled)


@contextmanager
def debug_context(enabled: bool = True) -> Iterator[None]:
    """
    Temporarily switch invariant checking, restoring the previous flag on exit.

    Example
    -------
    >>> from lpconduit.simplex import Simplex, make_problem
    >>> engine = Simplex(make_problem([[1, 1]], [4], [1, 2], "max", ["<="]))
    >>> with debug_context(True):
    ...     engine.solve().fun
    8.0
    """
    global _debug_enabled
    prev = _debug_enabled
    _debug_enabled = bool(enabled)
    try:
        yield
    finally:
        _debug_enabled = prev
