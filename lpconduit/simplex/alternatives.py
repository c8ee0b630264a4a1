"""
Enumeration of alternate optimal vertices.

At an optimal tableau, a non-basic column with zero reduced cost can enter
the basis without changing the objective. Pivoting each such column in on
its own copy of the tableau yields one neighbouring optimal vertex per
column. The copies share nothing, so the pivots may run on any executor.
"""

from __future__ import annotations

from concurrent.futures import Executor, wait
from typing import Callable, List, Optional

import numpy as np

from ..logging import get_logger
from .core import SimplexAnswer, SimplexStateError
from .phases import enter_column
from .tableau import Tableau, extract_answer
from .utils import EPSILON, is_zero

logger = get_logger(__name__)


def zero_reduced_cost_columns(tableau: Tableau) -> List[int]:
    """Non-basic columns left of the artificial block with zero reduced cost."""
    reduced = tableau.reduced_costs
    basic = set(tableau.basis.tolist())
    return [
        j
        for j in range(1, tableau.artificial_index)
        if is_zero(reduced[j]) and j not in basic
    ]


def _alternative_task(tableau: Tableau, column: int) -> Callable[[], SimplexAnswer]:
    def task() -> SimplexAnswer:
        copy = tableau.clone()
        enter_column(copy, column)
        return extract_answer(copy)

    return task


def _distinct(primary: SimplexAnswer, answers: List[SimplexAnswer]) -> List[SimplexAnswer]:
    # a degenerate pivot (ratio 0) lands on the vertex it started from
    kept: List[SimplexAnswer] = []
    seen = [primary.x]
    for answer in answers:
        if any(np.allclose(answer.x, x, atol=EPSILON, rtol=0.0) for x in seen):
            continue
        kept.append(answer)
        seen.append(answer.x)
    return kept


def find_alternatives(tableau: Tableau, executor: Optional[Executor] = None) -> List[SimplexAnswer]:
    """
    Return the distinct alternate optima reached from zero-reduced-cost columns.

    Answers equal to the current optimum or to an earlier answer within
    ``EPSILON`` are dropped.

    Args:
        tableau: Solved tableau; it is not modified.
        executor: Optional ``concurrent.futures.Executor``. Tasks run inline
            when omitted.

    Raises:
        SimplexStateError: If the tableau has not been solved.
        UnboundedError: If a candidate column is not limited by any row.
    """
    if not tableau.solved:
        raise SimplexStateError("The system hasn't been solved yet")

    columns = zero_reduced_cost_columns(tableau)
    logger.debug("Alternate optimum candidates: %s", columns)
    tasks = [_alternative_task(tableau, column) for column in columns]
    if executor is None:
        answers = [task() for task in tasks]
    else:
        futures = [executor.submit(task) for task in tasks]
        wait(futures)
        answers = [future.result() for future in futures]
    return _distinct(extract_answer(tableau), answers)


__all__ = ["zero_reduced_cost_columns", "find_alternatives"]
