"""
Critical Line Algorithm
=======================

Traces the efficient frontier from the maximum-return corner found by the
simplex stage down to the minimum-variance portfolio.

Between two corners every IN variable moves linearly with lambda::

    w(j) = alpha[j] + beta[j] * lambda

The bordered matrix ``M = [[C, A'], [A, 0]]`` restricted to the IN
variables is kept inverted in ``mi``. Adding a variable borders it by one
row/column (Sherman-Morrison); deleting one deflates it by a Schur
complement. Neither step refactorizes.

Reference: H. Markowitz & G. P. Todd, "Mean-Variance Analysis in
Portfolio Choice and Capital Markets", 2000.
"""

from __future__ import annotations

import logging

import numpy as np

from ..exceptions import NumericalError
from .inputs import EPSILON, INFINITY, ProblemData
from .states import SolverState, VarState, last_argmax

logger = logging.getLogger(__name__)

# dE/dlambda below this marks a kink: mean and variance are recomputed.
KINK_TOLERANCE = 1e-9


class CriticalLineEngine:
    """
    Corner-by-corner walk along the efficient frontier.

    Args:
        data: Problem data, already processed by the simplex stage
        state: Solver state holding the simplex solution

    Example:
        >>> engine = CriticalLineEngine(data, state)
        >>> engine.iteration(1)
        >>> state.lambda_e, state.mean, state.variance
    """

    def __init__(self, data: ProblemData, state: SolverState) -> None:
        self._data = data
        self._state = state

        n = data.variables
        m = data.constraints
        size = data.size
        self._alpha = np.zeros(size)
        self._beta = np.zeros(size)
        self._bbar = np.zeros(size)
        self._mi = np.zeros((size, size))

        self._idx_out = -1
        self._idx_in = -1
        self._out_dir = VarState.LOW
        self._lambda_out = 0.0
        self._lambda_in = 0.0
        self._old_lambda = 0.0

        outs = state.out_vars
        self._alpha[outs] = state.weights[outs]

        # The lambda variables are IN for the whole walk.
        for j in range(n, size):
            state.add_in_var(j)

        # Border the covariance with the constraint rows.
        cov = data.cov
        cov[:n, n:] = data.lhs[:, :n].T
        cov[n:, :n] = data.lhs[:, :n]

        ins = state.in_vars
        base = np.zeros(len(ins))
        is_lambda = ins >= n
        base[is_lambda] = data.rhs[ins[is_lambda] - n]
        self._bbar[ins] = base - cov[np.ix_(ins, outs)] @ state.weights[outs]

        # Initial inverse:
        #   | 0      Ai                |
        #   | Ai'   -Ai' C(IN,IN) Ai   |
        basis = ins[:m]
        lambdas = np.arange(n, size)
        ai = state.ai
        self._mi[np.ix_(basis, lambdas)] = ai
        self._mi[np.ix_(lambdas, basis)] = ai.T
        t = -ai.T @ cov[np.ix_(basis, basis)]
        self._mi[np.ix_(lambdas, lambdas)] = t @ ai

    @property
    def has_pending_change(self) -> bool:
        """True when the next iteration has a variable to add or delete."""
        if self._lambda_out >= self._lambda_in:
            return self._idx_out >= 0
        return self._idx_in >= 0

    def iteration(self, step: int) -> None:
        """
        Compute the next corner portfolio into the solver state.

        Args:
            step: 1-based iteration number. From step 2 on, the basis change
                found by the previous call is applied first.
        """
        data, state = self._data, self._state
        n = data.variables

        if step > 1:
            if self._lambda_out >= self._lambda_in:
                self.delete_variable(self._idx_out, self._out_dir)
            else:
                self.add_variable(self._idx_in)

        # Alpha and beta for every IN variable.
        ins = state.in_vars
        m_in = self._mi[np.ix_(ins, ins)]
        alpha_in = m_in @ self._bbar[ins]
        beta_in = m_in @ np.where(ins < n, data.mean[ins], 0.0)
        self._alpha[ins] = alpha_in
        self._beta[ins] = beta_in

        # Which IN variable hits a bound first as lambda decreases.
        out_lambdas = np.full(len(ins), -np.inf)
        out_dirs = [VarState.LOW] * len(ins)
        for k, i in enumerate(ins):
            if i >= n:
                continue
            beta = beta_in[k]
            if beta > EPSILON:
                out_lambdas[k] = (data.lower[i] - alpha_in[k]) / beta
            elif data.upper[i] < INFINITY and beta < -EPSILON:
                out_lambdas[k] = (data.upper[i] - alpha_in[k]) / beta
                out_dirs[k] = VarState.HIGH
        pos, self._lambda_out = last_argmax(out_lambdas)
        if pos >= 0:
            self._idx_out, self._out_dir = int(ins[pos]), out_dirs[pos]
        else:
            self._idx_out = -1

        # Which OUT variable becomes profitable first.
        outs = state.out_vars
        rows = data.cov[outs]
        gamma = rows @ self._alpha
        delta = rows @ self._beta - data.mean[outs]
        in_lambdas = np.full(len(outs), -np.inf)
        for k, i in enumerate(outs):
            leaving = delta[k] > EPSILON if state.is_lo(i) else delta[k] < -EPSILON
            if leaving:
                in_lambdas[k] = -gamma[k] / delta[k]
        pos, self._lambda_in = last_argmax(in_lambdas)
        self._idx_in = int(outs[pos]) if pos >= 0 else -1

        state.lambda_e = max(0.0, self._lambda_in, self._lambda_out)
        logger.debug(
            "CLA step %d: lambda=%g (in=%d at %g, out=%d at %g)",
            step, state.lambda_e, self._idx_in, self._lambda_in,
            self._idx_out, self._lambda_out,
        )
        self._corner_portfolio()

    def _corner_portfolio(self) -> None:
        data, state = self._data, self._state
        lam = state.lambda_e

        ins = state.in_vars
        free = ins[: state.in_count - data.constraints]
        state.weights[free] = self._alpha[free] + self._beta[free] * lam
        de_dlambda = float(self._beta[free] @ data.mean[free])

        if de_dlambda < KINK_TOLERANCE:
            # Kink in the frontier: recompute from scratch.
            s = data.securities
            w = state.weights[:s]
            state.mean = float(data.mean[:s] @ w)
            state.variance = float(w @ data.cov[:s, :s] @ w)
        else:
            # Variance is quadratic in the mean along a segment.
            a2 = 1.0 / de_dlambda
            a1 = 2.0 * (self._old_lambda - a2 * state.mean)
            a0 = state.variance - (a1 + a2 * state.mean) * state.mean
            state.mean += (lam - self._old_lambda) * de_dlambda
            state.variance = a0 + (a1 + a2 * state.mean) * state.mean
        self._old_lambda = lam

    def add_variable(self, j_add: int) -> None:
        """Border ``mi`` with variable ``j_add`` and move it IN."""
        data, state = self._data, self._state
        cov, mi = data.cov, self._mi

        ins = state.in_vars
        m_in = mi[np.ix_(ins, ins)]
        xi = m_in @ cov[ins, j_add]
        pivot = cov[j_add, j_add] - cov[j_add, ins] @ xi
        if abs(pivot) < EPSILON:
            raise NumericalError(f"Near-zero pivot adding variable {j_add}")

        mi[np.ix_(ins, ins)] = m_in + np.outer(xi, xi) / pivot
        mi[j_add, ins] = -xi / pivot
        mi[ins, j_add] = -xi / pivot
        mi[j_add, j_add] = 1.0 / pivot
        self._bbar[ins] += cov[ins, j_add] * state.weights[j_add]

        state.go_in(j_add)

        outs = state.out_vars
        self._bbar[j_add] = -(cov[j_add, outs] @ state.weights[outs])

    def delete_variable(self, j_del: int, direction: VarState) -> None:
        """Pin ``j_del`` at a bound, move it OUT and deflate ``mi``."""
        data, state = self._data, self._state
        cov, mi = data.cov, self._mi

        state.go_out(j_del, direction, data)
        self._alpha[j_del] = state.weights[j_del]
        self._beta[j_del] = 0.0

        pivot = mi[j_del, j_del]
        if abs(pivot) < EPSILON:
            raise NumericalError(f"Near-zero pivot deleting variable {j_del}")
        ins = state.in_vars
        mi[np.ix_(ins, ins)] -= np.outer(mi[ins, j_del], mi[j_del, ins]) / pivot
        self._bbar[ins] -= cov[ins, j_del] * state.weights[j_del]
