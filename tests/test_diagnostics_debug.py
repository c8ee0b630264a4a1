"""Tests for debug mode functionality."""

import pytest

from lpconduit.diagnostics import (
    debug_context,
    is_debug_enabled,
    set_debug_enabled,
)
from lpconduit.simplex import make_problem
from lpconduit.simplex.tableau import canonicalize, pivot


def test_debug_mode_toggle_and_context() -> None:
    """Test debug mode toggling and context manager."""
    original = is_debug_enabled()

    try:
        set_debug_enabled(False)
        assert not is_debug_enabled()

        with debug_context(True):
            assert is_debug_enabled()

        # Back to previous (False in this block)
        assert not is_debug_enabled()

        set_debug_enabled(True)
        with debug_context(False):
            assert not is_debug_enabled()
        assert is_debug_enabled()
    finally:
        set_debug_enabled(original)


def test_debug_context_nested() -> None:
    """Test nested debug contexts."""
    set_debug_enabled(False)

    with debug_context(True):
        assert is_debug_enabled()
        with debug_context(False):
            assert not is_debug_enabled()
        assert is_debug_enabled()

    assert not is_debug_enabled()


def _corrupted_tableau():
    tableau = canonicalize(make_problem([[1, 1], [1, -1]], [4, 1], [1, 2], "max", ["<=", "<="]))
    # the second row already claims column 1 as basic
    tableau.basis[1] = 1
    return tableau


def test_pivot_checks_invariants_in_debug_mode() -> None:
    """A pivot that leaves a duplicated basis is caught only in debug mode."""
    with debug_context(True):
        with pytest.raises(ValueError, match="duplicate"):
            pivot(_corrupted_tableau(), 0, 1)

    with debug_context(False):
        tableau = _corrupted_tableau()
        pivot(tableau, 0, 1)
        assert tableau.basis.tolist() == [1, 1]
