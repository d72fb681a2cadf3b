"""
Solver State
============

IN/OUT bookkeeping shared by the simplex and critical line stages.
"""

from __future__ import annotations

from enum import IntEnum
from typing import List, Sequence, Tuple

import numpy as np

from .active_set import ActiveSet
from .inputs import ProblemData


class VarState(IntEnum):
    """Status of a variable."""

    LOW = 0   # clipped at its lower bound
    HIGH = 1  # clipped at its upper bound
    IN = 2    # free ranging


def last_argmax(values: Sequence[float], floor: float = 0.0) -> Tuple[int, float]:
    """
    Scan ``values`` in order keeping the best value not below ``floor``.

    Comparisons use ``>=``, so the last of several tied candidates wins.
    Returns ``(-1, floor)`` when nothing qualifies.
    """
    best, best_value = -1, floor
    for k, value in enumerate(values):
        if value >= best_value:
            best, best_value = k, value
    return best, best_value


class SolverState:
    """
    Partition of the variables into IN and OUT sets.

    Holds the current weights, the inverse of the IN columns of the
    constraint matrix and the scalar trackers of the current corner.

    Args:
        data: Problem being solved
    """

    def __init__(self, data: ProblemData) -> None:
        m = data.constraints
        size = data.size
        # Room for the lambda variables and a degenerate retry.
        capacity = size + m
        self._state: List[VarState] = [VarState.LOW] * size
        self._in = ActiveSet(capacity)
        self._out = ActiveSet(capacity)
        self.ai = np.zeros((m, m))
        self.weights = np.zeros(size)
        self.mean = 0.0
        self.variance = 0.0
        self.lambda_e = 0.0

    def grow(self, extra: int) -> None:
        """Extend per-variable storage by ``extra`` columns."""
        self._state.extend([VarState.LOW] * extra)
        self.weights = np.concatenate([self.weights, np.zeros(extra)])

    def is_up(self, j: int) -> bool:
        return self._state[j] == VarState.HIGH

    def is_lo(self, j: int) -> bool:
        return self._state[j] == VarState.LOW

    def go_in(self, j: int) -> None:
        """Move variable ``j`` from OUT to IN."""
        self._out.remove(j)
        self._in.add(j)
        self._state[j] = VarState.IN

    def go_out(self, j: int, direction: VarState, data: ProblemData) -> None:
        """
        Move variable ``j`` from IN to OUT, pinned at one of its bounds.

        Artificial columns (``j >= data.variables``) leave the problem
        instead of joining the OUT set.
        """
        self._in.remove(j)
        if j < data.variables:
            self._out.add(j)
        self._state[j] = direction
        self.weights[j] = data.upper[j] if direction == VarState.HIGH else data.lower[j]

    def add_in_var(self, j: int) -> None:
        self._in.add(j)
        self._state[j] = VarState.IN

    def add_out_var(self, j: int) -> None:
        self._out.add(j)

    @property
    def in_count(self) -> int:
        return len(self._in)

    @property
    def out_count(self) -> int:
        return len(self._out)

    def get_in_var(self, i: int) -> int:
        return self._in[i]

    def get_out_var(self, i: int) -> int:
        return self._out[i]

    def in_position(self, j: int) -> int:
        """Position of ``j`` inside the IN set, -1 if it is OUT."""
        return self._in.find(j)

    @property
    def in_vars(self) -> np.ndarray:
        return np.array(self._in.to_list(), dtype=np.intp)

    @property
    def out_vars(self) -> np.ndarray:
        return np.array(self._out.to_list(), dtype=np.intp)

    def __repr__(self) -> str:
        return f"SolverState(in={self._in!r}, out={self._out!r}, lambda={self.lambda_e:g})"
