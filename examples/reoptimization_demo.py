"""
Example: Solving and re-optimizing a production plan with lpconduit

This example solves a small production-planning LP, then shows how the solved
tableau is reused when capacities change, when a new constraint appears, and
how alternate optimal plans are enumerated.
"""

from concurrent.futures import ThreadPoolExecutor

from lpconduit import Simplex, Status, make_problem


def example_production_plan():
    """Example: maximize profit, then react to new capacities."""
    print("=" * 60)
    print("Example 1: Production plan and capacity changes")
    print("=" * 60)

    # Maximize 6x + 10y
    # Subject to: -x + y <= 2, y <= 1, x <= 3, x >= 0, y >= 0
    problem = make_problem(
        a=[[-1, 1], [0, 1], [1, 0]],
        b=[2, 1, 3],
        c=[6, 10],
        direction="max",
        inequalities=["<=", "<=", "<="],
    )
    engine = Simplex(problem)
    result = engine.solve()
    print(f"Status: {result.status}")
    print(f"Optimal plan: x = {result.x}, profit = {result.fun}")

    result = engine.change_rhs([4, 2, 6])
    print(f"After doubling capacities: x = {result.x}, profit = {result.fun}")

    result = engine.add_constraint([1, 1], "<=", 7)
    print(f"After limiting total output: x = {result.x}, profit = {result.fun}")
    print(f"Pivots so far: {result.nit}")
    print()


def example_alternative_optima():
    """Example: several plans with the same optimal value."""
    print("=" * 60)
    print("Example 2: Alternate optimal solutions")
    print("=" * 60)

    engine = Simplex(make_problem([[1, 1, 1]], [2], [1, 1, 1], "max", ["<="]))
    primary = engine.solve()
    with ThreadPoolExecutor(max_workers=2) as executor:
        result = engine.find_alternative_solutions(executor)
    if result.status == Status.OPTIMAL:
        print(f"Primary optimum: {primary.x} -> {primary.fun}")
        for answer in result.alternatives:
            print(f"Alternative:     {answer.x} -> {answer.fun}")
    print()


def example_infeasible_update():
    """Example: a capacity change that makes the plan impossible."""
    print("=" * 60)
    print("Example 3: Incompatible right-hand side")
    print("=" * 60)

    engine = Simplex(make_problem([[-1, 1], [0, 1], [1, 0]], [2, 1, 3], [6, 10], "max", ["<="] * 3))
    engine.solve()
    backup = engine.clone()
    result = engine.change_rhs([-5, 1, 3])
    print(f"Status: {result.status} ({result.message})")
    print(f"Backup engine still answers: {backup.solve().x}")
    print()


if __name__ == "__main__":
    example_production_plan()
    example_alternative_optima()
    example_infeasible_update()
