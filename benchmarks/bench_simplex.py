"""Benchmark a full solve against a warm-started right-hand side change."""

import time
from typing import Dict

import numpy as np

from lpconduit import Simplex, make_problem


def benchmark_reoptimization(
    n_constraints: int,
    n_variables: int,
    n_repeats: int = 20,
    seed: int = 0,
) -> Dict[str, float]:
    """Benchmark solving from scratch versus re-optimizing a solved tableau.

    Args:
        n_constraints: Number of ``<=`` rows.
        n_variables: Number of non-negative variables.
        n_repeats: Number of timed repetitions.
        seed: Seed for the random problem data.

    Returns:
        Dictionary with timing results.
    """
    rng = np.random.default_rng(seed)
    a = rng.uniform(0.5, 2.0, size=(n_constraints, n_variables))
    b = rng.uniform(50.0, 100.0, size=n_constraints)
    c = rng.uniform(1.0, 3.0, size=n_variables)
    problem = make_problem(a, b, c, "max", ["<="] * n_constraints)

    start = time.perf_counter()
    for _ in range(n_repeats):
        Simplex(problem).solve()
    cold = (time.perf_counter() - start) / n_repeats

    engine = Simplex(problem)
    engine.solve()
    start = time.perf_counter()
    for i in range(n_repeats):
        engine.change_rhs(b * (1.0 + 0.01 * (i % 5)))
    warm = (time.perf_counter() - start) / n_repeats

    return {
        "n_constraints": n_constraints,
        "n_variables": n_variables,
        "cold_solve_sec": cold,
        "warm_change_rhs_sec": warm,
        "speedup": cold / warm,
    }


if __name__ == "__main__":
    print("Benchmarking re-optimization...")

    results = benchmark_reoptimization(n_constraints=40, n_variables=30)
    print("Simplex (40 rows, 30 variables):")
    print(f"  Cold solve: {results['cold_solve_sec']*1e3:.2f} ms")
    print(f"  Warm RHS change: {results['warm_change_rhs_sec']*1e3:.2f} ms")
    print(f"  Speedup: {results['speedup']:.1f}x")
