"""
Two-Phase Simplex
=================

Finds the feasible vertex with maximum expected return, the lambda -> inf
end of the efficient frontier. The quadratic term is ignored.

Phase 1 starts from an artificial basis, one column per constraint, and
drives it out. Phase 2 maximizes expected return from the resulting
vertex. Both phases share one pivot loop that keeps ``state.ai`` equal to
the inverse of the IN columns by a product-form update.
"""

from __future__ import annotations

import logging

import numpy as np

from ..result import SolveResult, Status
from .inputs import EPSILON, INFINITY, ProblemData
from .states import SolverState, VarState, last_argmax

logger = logging.getLogger(__name__)

# Expected returns of OUT variables with no reduced profit are shifted by
# this amount so the starting corner is unique.
UNIQUENESS_NUDGE = 1e-6


class SimplexSolver:
    """
    Linear programming stage of the optimizer.

    Example:
        >>> state = SolverState(data)
        >>> result = SimplexSolver.run(data, state)
        >>> result.status
        <Status.OK: 'ok'>
    """

    def __init__(self, data: ProblemData) -> None:
        m = data.constraints
        # Objective coefficients for every column, artificial ones included.
        self._z = np.zeros(data.size)
        self._price = np.zeros(m)
        self._adj_rate = np.zeros(m)
        self._profit = np.zeros(data.variables)
        self._in_abvs = 0
        self._pivots = 0

    @classmethod
    def run(cls, data: ProblemData, state: SolverState) -> SolveResult:
        """Run both phases, leaving the first corner in ``state``."""
        return cls(data)._execute(data, state)

    def _execute(self, data: ProblemData, state: SolverState) -> SolveResult:
        n = data.variables
        m = data.constraints

        # Every ordinary variable starts OUT at its lower limit.
        for j in range(n):
            state.add_out_var(j)
            state.weights[j] = data.lower[j]

        # One artificial basis variable per row, signed to start non-negative.
        self._in_abvs = m
        residual = data.rhs - data.lhs[:, :n] @ data.lower[:n]
        for i in range(m):
            sign = 1.0 if residual[i] >= 0 else -1.0
            data.lhs[i, n + i] = sign
            state.ai[i, i] = sign
            state.add_in_var(n + i)
            state.weights[n + i] = abs(residual[i])
            self._z[n + i] = -1.0

        status = self._phase(data, state, first_phase=True)
        retried = False
        if status == Status.DEGENERATE and data.allow_degenerate:
            logger.warning(
                "Degenerate phase 1: keeping %d artificial columns as variables", m
            )
            data.promote_artificials(EPSILON)
            state.grow(m)
            self._z = np.concatenate([self._z, np.zeros(m)])
            self._profit = np.zeros(data.variables)
            n = data.variables
            status = Status.OK
            retried = True

        if status == Status.OK:
            self._z[:n] = data.mean[:n]
            status = self._phase(data, state, first_phase=False)
            if status == Status.OK:
                self._ensure_unique_solution(data, state)

        logger.debug("Simplex finished: %s after %d pivots", status, self._pivots)
        return SolveResult(status=status, iterations=self._pivots, degenerate_retry=retried)

    def _ensure_unique_solution(self, data: ProblemData, state: SolverState) -> None:
        for j0 in range(state.out_count):
            j = state.get_out_var(j0)
            if self._profit[j] > -UNIQUENESS_NUDGE:
                if state.is_lo(j):
                    data.mean[j] -= UNIQUENESS_NUDGE
                else:
                    data.mean[j] += UNIQUENESS_NUDGE

    def _phase(self, data: ProblemData, state: SolverState, first_phase: bool) -> Status:
        m = data.constraints
        ai = state.ai
        z = self._z
        while True:
            # Shadow price of each constraint.
            in_vars = state.in_vars
            self._price = -(ai.T @ z[in_vars])

            # Reduced profit of each OUT variable coming IN.
            out_vars = state.out_vars
            profits = []
            for j in out_vars:
                profit = z[j] + data.lhs[:, j] @ self._price
                if state.is_up(j):
                    profit = -profit
                self._profit[j] = profit
                profits.append(profit)
            pos, profit_max = last_argmax(profits)

            if pos < 0 or profit_max < EPSILON:
                if first_phase:
                    return self._phase_one_outcome(data, state)
                return Status.OK

            j_max = int(out_vars[pos])
            in_dir = VarState.LOW if state.is_up(j_max) else VarState.HIGH

            # Rate of change of each IN variable as j_max moves off its bound.
            adj_rate = -(ai @ data.lhs[:, j_max])
            if in_dir == VarState.LOW:
                adj_rate = -adj_rate
            self._adj_rate = adj_rate

            # Ratio test: how far j_max can move before something hits a limit.
            i_out = -1
            out_dir = in_dir
            if data.upper[j_max] == INFINITY:
                theta = INFINITY
            else:
                theta = data.upper[j_max] - data.lower[j_max]
            for i in range(m):
                j = state.get_in_var(i)
                rate = adj_rate[i]
                if rate < -EPSILON:
                    step = (data.lower[j] - state.weights[j]) / rate
                    if step < theta:
                        theta, i_out, out_dir = step, i, VarState.LOW
                elif rate > EPSILON and data.upper[j] != INFINITY:
                    step = (data.upper[j] - state.weights[j]) / rate
                    if step < theta:
                        theta, i_out, out_dir = step, i, VarState.HIGH

            if theta >= INFINITY:
                logger.debug("Unbounded ray along variable %d", j_max)
                return Status.UNBOUNDED

            j_out = state.get_in_var(i_out) if i_out >= 0 else j_max
            logger.debug(
                "Pivot %d: %d enters, %d leaves (theta=%g)",
                self._pivots, j_max, j_out, theta,
            )

            state.weights[in_vars] += theta * adj_rate
            if in_dir == VarState.HIGH:
                state.weights[j_max] += theta
            else:
                state.weights[j_max] -= theta

            state.go_in(j_max)
            state.go_out(j_out, out_dir, data)
            if j_max != j_out:
                self._update_inverse(state, i_out, j_max, in_dir)
            self._pivots += 1

            if first_phase and j_out >= data.variables:
                self._in_abvs -= 1
                if self._in_abvs == 0:
                    return Status.OK

    def _phase_one_outcome(self, data: ProblemData, state: SolverState) -> Status:
        # No OUT variable improves feasibility any further.
        for i in range(state.in_count):
            j = state.get_in_var(i)
            if j >= data.variables and state.weights[j] > EPSILON:
                return Status.INFEASIBLE
        return Status.DEGENERATE

    def _update_inverse(
        self,
        state: SolverState,
        i_out: int,
        j_max: int,
        in_dir: VarState,
    ) -> None:
        """Replace row ``i_out`` of the basis inverse by the entering column."""
        ai = state.ai
        adj_rate = self._adj_rate
        pivot = adj_rate[i_out]
        pivot_row = ai[i_out].copy()
        ratios = adj_rate / pivot
        ratios[i_out] = 0.0
        ai -= np.outer(ratios, pivot_row)
        ai[i_out] = pivot_row / (-pivot if in_dir == VarState.HIGH else pivot)

        # Keep the rows in the same order as the IN set.
        del_row = i_out
        add_row = state.in_position(j_max)
        if add_row != del_row:
            row = ai[del_row].copy()
            if add_row > del_row:
                ai[del_row:add_row] = ai[del_row + 1:add_row + 1].copy()
            else:
                ai[add_row + 1:del_row + 1] = ai[add_row:del_row].copy()
            ai[add_row] = row
