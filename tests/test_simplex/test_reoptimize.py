import numpy as np
import pytest

from lpconduit.diagnostics import is_feasible
from lpconduit.simplex import EPSILON, Inequality, Simplex, Status, make_problem


def _solved(a, b, c, direction="min", inequalities=None, sign_constrained=None):
    engine = Simplex(make_problem(a, b, c, direction, inequalities, sign_constrained))
    result = engine.solve()
    assert result.success, result.message
    return engine


def _assert_answer(result, expected_x, expected_fun):
    assert result.status is Status.OPTIMAL, result.message
    assert np.allclose(result.x, expected_x, atol=EPSILON, rtol=0.0)
    assert pytest.approx(expected_fun, abs=EPSILON) == result.fun


@pytest.fixture
def production():
    return _solved([[-1, 1], [0, 1], [1, 0]], [2, 1, 3], [6, 10], "max", ["<=", "<=", "<="])


def test_change_rhs_scales_solution(production):
    _assert_answer(production.solve(), [3, 1], 28)
    _assert_answer(production.change_rhs([4, 2, 6]), [6, 2], 56)


def test_change_rhs_moves_to_new_vertex(production):
    _assert_answer(production.change_rhs([2, 6, 3]), [3, 5], 68)


def test_change_rhs_single_entry(production):
    result = production.change_rhs(1, 6)
    _assert_answer(result, [3, 5], 68)
    assert production.problem.b.tolist() == [2.0, 6.0, 3.0]


def test_change_rhs_round_trip(production):
    production.change_rhs([2, 6, 3])
    _assert_answer(production.change_rhs([2, 1, 3]), [3, 1], 28)


@pytest.mark.parametrize(
    "data, new_b, expected_x, expected_fun",
    [
        pytest.param(
            dict(
                a=[[3, -7, -1], [5, 6, 10]],
                b=[490, 620],
                c=[4, 5, -3],
                inequalities=[">=", "<="],
                sign_constrained=[True, True, False],
            ),
            [490, 650],
            [158 + 4 / 7, 0, -14 - 2 / 7],
            677 + 1 / 7,
            id="one-free",
        ),
        pytest.param(
            dict(
                a=[[0, 2, 7], [4, 5, -4], [-2, 1, -9]],
                b=[970, 260, 770],
                c=[-3, 3, -5],
                inequalities=[">=", "<=", ">="],
                sign_constrained=[False, False, False],
            ),
            [1010, 270, 790],
            [-368 - 91 / 93, 378 + 16 / 93, 36 + 22 / 93],
            2060 + 25 / 93,
            id="all-free",
        ),
        pytest.param(
            dict(
                a=[[4, -5, -10], [1, 9, -4], [9, 5, 1], [9, 8, 7]],
                b=[230, 700, 430, 990],
                c=[-2, -3, 4],
                inequalities=["<=", "<=", "<=", ">="],
            ),
            [200, 710, 440, 1030],
            [0, 75 + 25 / 27, 60 + 10 / 27],
            13 + 19 / 27,
            id="dual-pivots",
        ),
        pytest.param(
            dict(
                a=[[3, -2, 4], [-4, -9, 1]],
                b=[950, 810],
                c=[-2, -3, -1],
                direction="max",
                inequalities=[">=", "<="],
                sign_constrained=[False, False, True],
            ),
            [940, 830],
            [194 + 2 / 7, -178 - 4 / 7, 0],
            147 + 1 / 7,
            id="max-free",
        ),
        pytest.param(
            dict(
                a=[[-7, -6, 2], [-7, -8, -1], [9, 8, -2]],
                b=[350, 310, 730],
                c=[-1, 4, 5],
                inequalities=["<=", "<=", "<="],
                sign_constrained=[False, True, True],
            ),
            [310, 260, 720],
            [80, 0, 0],
            -80,
            id="free-first",
        ),
    ],
)
def test_change_rhs_reference_problems(data, new_b, expected_x, expected_fun):
    engine = _solved(**data)
    _assert_answer(engine.change_rhs(new_b), expected_x, expected_fun)
    assert is_feasible(engine.problem, engine.solve().x, atol=1e-6)


def test_change_rhs_on_flipped_row_uses_caller_orientation():
    # row 0 is stored as x + y >= 2 internally
    engine = _solved([[-1, -1], [1, 0]], [-2, 5], [1, 2], "min", ["<=", "<="])
    _assert_answer(engine.solve(), [2, 0], 2)
    result = engine.change_rhs(0, -3)
    _assert_answer(result, [3, 0], 3)
    assert is_feasible(engine.problem, result.x)


def test_change_rhs_before_solve_is_state_error():
    engine = Simplex(make_problem([[1, 1]], [1], [1, 1], inequalities=["<="]))
    result = engine.change_rhs([2])
    assert result.status is Status.STATE_ERROR
    assert not engine.solved
    assert engine.solve().success


@pytest.mark.parametrize(
    "args",
    [
        ([1, 2],),
        ([1, 2, 3, 4],),
        (3, 1.0),
        (-1, 1.0),
        ([1, [2, 3], 4],),
        (["a", 1, 3],),
        ([np.nan, 1, 3],),
        ([np.inf, 1, 3],),
        (1.7, 6.0),
        ("1", 6.0),
        (True, 6.0),
        (1, "abc"),
        (1, np.nan),
        (None,),
    ],
)
def test_change_rhs_invalid_arguments_leave_engine_usable(production, args):
    before = production.tableau.matrix.copy()
    result = production.change_rhs(*args)
    assert result.status is Status.DATA_ERROR
    assert np.array_equal(production.tableau.matrix, before)
    _assert_answer(production.change_rhs([4, 2, 6]), [6, 2], 56)


def test_change_rhs_incompatible(production):
    # -x + y <= -5 with y <= 1 and x <= 3 has no non-negative solution
    result = production.change_rhs([-5, 1, 3])
    assert result.status is Status.INCOMPATIBLE
    assert production.change_rhs([2, 1, 3]).status is Status.STATE_ERROR


ADD_CASES = [
    pytest.param(
        dict(
            a=[[50, 75], [60, 30], [10, 25]],
            b=[15000, 12000, 5000],
            c=[100, 120],
            inequalities=[">=", ">=", "<="],
        ),
        ([1, 3], "<=", 360),
        [240, 40],
        28800,
        id="min-cost",
    ),
    pytest.param(
        dict(
            a=[[-1, 1], [0, 1], [1, 0]],
            b=[2, 1, 3],
            c=[6, 10],
            direction="max",
            inequalities=["<=", "<=", "<="],
        ),
        ([1, 0], "<=", 5),
        [3, 1],
        28,
        id="inactive",
    ),
    pytest.param(
        dict(
            a=[[5, -2], [1, -2], [1, 1]],
            b=[4, -4, 4],
            c=[1, 2],
            direction="max",
            inequalities=["<=", ">=", "<="],
        ),
        ([1, 0], "<=", 1.5),
        [4 / 3, 2 + 2 / 3],
        20 / 3,
        id="flipped-row",
    ),
    pytest.param(
        dict(
            a=[[5, -2], [1, -2], [1, 1]],
            b=[4, -4, 4],
            c=[1, 2],
            direction="max",
            inequalities=["<=", ">=", "<="],
        ),
        ([1, 0], "<=", 1),
        [1, 5 / 2],
        6,
        id="flipped-row-tight",
    ),
    pytest.param(
        dict(
            a=[[1, 2], [2, 1], [-1, 1], [0, 1]],
            b=[6, 8, 1, 2],
            c=[3, 2],
            direction="max",
            inequalities=["<=", "<=", "<=", "<="],
        ),
        ([1, 0], "<=", 4),
        [10 / 3, 4 / 3],
        12 + 2 / 3,
        id="cut-off-vertex",
    ),
    pytest.param(
        dict(
            a=[[1, 2], [2, 1], [-1, 1], [0, 1]],
            b=[6, 8, 1, 2],
            c=[3, 2],
            direction="max",
            inequalities=["<=", "<=", "<=", "<="],
        ),
        ([1, 0], "<=", 3),
        [3, 3 / 2],
        12,
        id="cut-off-deeper",
    ),
    pytest.param(
        dict(
            a=[[1, 2], [2, 1], [1, 3], [0, 1]],
            b=[6, 8, 9, 2],
            c=[3, 2],
            direction="max",
            inequalities=["<=", "<=", "<=", "<="],
        ),
        ([1, 0], ">=", 3.5),
        [3.5, 1],
        12.5,
        id="surplus-row",
    ),
]


@pytest.mark.parametrize("data, constraint, expected_x, expected_fun", ADD_CASES)
def test_add_constraint_reference_problems(data, constraint, expected_x, expected_fun):
    engine = _solved(**data)
    result = engine.add_constraint(*constraint)
    _assert_answer(result, expected_x, expected_fun)
    assert engine.problem.n_constraints == len(data["b"]) + 1
    assert is_feasible(engine.problem, result.x, atol=1e-6)
    engine.tableau.check_invariants()


def test_add_constraint_incompatible():
    engine = _solved([[1, 2], [2, 1], [1, 3], [0, 1]], [6, 8, 9, 2], [3, 2], "max", ["<="] * 4)
    result = engine.add_constraint([1, 1], Inequality.GE, 5)
    assert result.status is Status.INCOMPATIBLE
    assert engine.add_constraint([1, 0], "<=", 1).status is Status.STATE_ERROR


def test_add_constraint_then_change_rhs(production):
    production.add_constraint([1, 1], "<=", 3)
    _assert_answer(production.solve(), [2, 1], 22)
    # relax the appended row again
    _assert_answer(production.change_rhs(3, 10), [3, 1], 28)


def test_add_constraint_with_free_variable():
    engine = _solved([[1, 1], [0, -1]], [1, 3], [-1, 2], "min", ["<=", "<="], [False, False])
    _assert_answer(engine.solve(), [4, -3], -10)
    result = engine.add_constraint([1, 0], "<=", 3)
    _assert_answer(result, [3, -3], -9)
    assert is_feasible(engine.problem, result.x)


@pytest.mark.parametrize(
    "constraint",
    [
        ([1, 0, 0], "<=", 1),
        ([1, 0], "=>", 1),
        ([1, 0], ["<="], 1),
        ([1, [0, 1]], "<=", 1),
        ([np.nan, 0], "<=", 1),
        ([1, 0], "<=", "abc"),
        ([1, 0], "<=", np.inf),
        ([1, 0], "<=", None),
    ],
)
def test_add_constraint_validates_before_mutation(production, constraint):
    before = production.tableau.matrix.copy()
    result = production.add_constraint(*constraint)
    assert result.status is Status.DATA_ERROR
    assert np.array_equal(production.tableau.matrix, before)
    assert len(production.tableau.inequalities) == 3
    assert production.problem.n_constraints == 3
    _assert_answer(production.add_constraint([1, 1], "<=", 3), [2, 1], 22)


def test_add_equality_without_replacement_column_is_incompatible(production):
    # x = 2 leaves the new artificial basic at -1 and only the x <= 3 slack,
    # whose reduced cost is non-zero, has an entry in its row
    result = production.add_constraint([1, 0], "=", 2)
    assert result.status is Status.INCOMPATIBLE
    assert "new constraint" in result.message
    assert production.solve().status is Status.STATE_ERROR


def test_add_constraint_before_solve_is_state_error():
    engine = Simplex(make_problem([[1, 1]], [1], [1, 1], inequalities=["<="]))
    assert engine.add_constraint([1, 0], "<=", 1).status is Status.STATE_ERROR


def test_reoptimization_on_clone_leaves_original(production):
    copy = production.clone()
    _assert_answer(copy.change_rhs([4, 2, 6]), [6, 2], 56)
    _assert_answer(production.solve(), [3, 1], 28)
