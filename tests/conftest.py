"""Pytest configuration and shared fixtures for lpconduit tests.

This module provides:
- Deterministic RNG fixtures for numpy and torch
- A guard that restores debug mode after each test
"""

import os

import numpy as np
import pytest
import torch

from lpconduit.diagnostics import is_debug_enabled, set_debug_enabled


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    This ensures tests are reproducible while allowing override for debugging.

    Returns:
        A seeded numpy.random.Generator instance.
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Auto-use fixture to set global random seeds for reproducibility."""
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    np.random.seed(seed)
    torch.manual_seed(seed)


@pytest.fixture(scope="function", autouse=True)
def restore_debug_mode():
    """Run every test with debug mode on and restore the global flag afterwards."""
    prev = is_debug_enabled()
    set_debug_enabled(True)
    yield
    set_debug_enabled(prev)
