"""
Markowitz Optimizer
===================

Runs the simplex stage, then the critical line stage, and collects the
corner portfolios of the efficient frontier.
"""

from __future__ import annotations

import logging
from typing import List

import numpy as np

from .critical_lines import CriticalLineEngine
from .inputs import EPSILON, ProblemData
from .portfolio import Portfolio
from .simplex import SimplexSolver
from .states import SolverState

logger = logging.getLogger(__name__)


def optimize(data: ProblemData) -> List[Portfolio]:
    """
    Compute the corner portfolios of the efficient frontier.

    Args:
        data: Problem data. It is modified in place and cannot be reused.

    Returns:
        Corner portfolios ordered from the maximum-return corner down to the
        minimum-variance one.

    Raises:
        InfeasibleError: No portfolio satisfies the constraints and bounds
        UnboundedError: Expected return has no upper limit
        DegenerateError: Phase 1 is degenerate and retries are disabled
        NumericalError: A basis update hit a near-zero pivot
    """
    data.transform_constraints()
    state = SolverState(data)
    result = SimplexSolver.run(data, state)
    logger.debug("Simplex stage: %r", result)
    result.raise_for_status()

    engine = CriticalLineEngine(data, state)
    portfolios: List[Portfolio] = []
    s = data.securities
    for step in range(1, data.max_corner_portfolios + 1):
        engine.iteration(step)
        portfolios.append(_clean(state.weights[:s], state, data))
        if state.lambda_e < data.end_lambda or not engine.has_pending_change:
            break
    else:
        logger.warning(
            "Stopped after %d corner portfolios at lambda=%g",
            data.max_corner_portfolios, state.lambda_e,
        )

    frontier = _collapse_duplicates(portfolios)
    logger.info(
        "Efficient frontier: %d corner portfolios for %d securities",
        len(frontier), s,
    )
    return frontier


def _clean(weights: np.ndarray, state: SolverState, data: ProblemData) -> Portfolio:
    """Snap weights within EPSILON of a bound onto the bound."""
    w = weights.copy()
    lower = data.lower[: len(w)]
    upper = data.upper[: len(w)]
    at_lower = np.abs(w - lower) < EPSILON
    at_upper = ~at_lower & (np.abs(w - upper) < EPSILON)
    w[at_lower] = lower[at_lower]
    w[at_upper] = upper[at_upper]
    return Portfolio(
        weights=w,
        lambda_=state.lambda_e,
        mean=state.mean,
        variance=state.variance,
    )


def _collapse_duplicates(portfolios: List[Portfolio]) -> List[Portfolio]:
    # A run of equal weight vectors keeps its last member.
    result: List[Portfolio] = []
    for p in portfolios:
        if result and np.allclose(p.weights, result[-1].weights, rtol=0.0, atol=EPSILON):
            result[-1] = p
        else:
            result.append(p)
    return result
