"""
Frontier Queries
================

Entry point of the mean-variance optimizer plus searches over a computed
efficient frontier: target return, target volatility, minimum variance and
maximum Sharpe ratio.

Frontiers are ordered by decreasing return, so a larger index always means
a lower return and a lower risk.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from .inputs import EPSILON, ProblemData
from .markowitz import optimize
from .portfolio import InterpolatedPortfolio, Portfolio, interpolate

logger = logging.getLogger(__name__)

__all__ = [
    "EPSILON",
    "get_efficient_frontier",
    "target_return_portfolio",
    "target_volatility_portfolio",
    "min_variance_portfolio",
    "max_sharpe_portfolio",
]


def get_efficient_frontier(data: ProblemData) -> List[Portfolio]:
    """Corner portfolios of the efficient frontier (see ``optimize``)."""
    return optimize(data)


def target_return_portfolio(
    frontier: Sequence[Portfolio],
    covariance: np.ndarray,
    expected_return: float,
) -> Optional[InterpolatedPortfolio]:
    """
    Efficient portfolio with a given expected return.

    Returns:
        The matching corner, a blend of the two corners around the target,
        or None when the target is outside the frontier's return range.
    """
    if not frontier:
        return None
    last = len(frontier) - 1
    if abs(frontier[0].mean - expected_return) < EPSILON:
        return InterpolatedPortfolio.from_corner(frontier[0], 0)
    if abs(frontier[last].mean - expected_return) < EPSILON:
        return InterpolatedPortfolio.from_corner(frontier[last], last)
    if expected_return > frontier[0].mean or expected_return < frontier[last].mean:
        return None

    low, high = 0, last
    while high - low > 1:
        middle = (low + high) // 2
        delta = frontier[middle].mean - expected_return
        if delta > EPSILON:
            low = middle
        elif delta < -EPSILON:
            high = middle
        else:
            return InterpolatedPortfolio.from_corner(frontier[middle], middle)

    low_p, high_p = frontier[low], frontier[high]
    factor = (expected_return - high_p.mean) / (low_p.mean - high_p.mean)
    return interpolate(frontier, covariance, factor, low, high)


def target_volatility_portfolio(
    frontier: Sequence[Portfolio],
    covariance: np.ndarray,
    volatility: float,
) -> Optional[InterpolatedPortfolio]:
    """
    Efficient portfolio with a given standard deviation.

    Along a segment the variance is quadratic in the blend factor, so the
    factor is the root in [0, 1] of::

        a t^2 + 2 b t + c = 0
        a = vL + vH - 2 x,  b = x - vH,  c = vH - volatility^2

    where ``x = wL' S wH`` and ``t = 0`` is the lower-risk corner.

    Returns:
        The matching corner or blend, or None when the target is outside the
        frontier's volatility range.
    """
    if not frontier:
        return None
    last = len(frontier) - 1
    if abs(frontier[0].std_dev - volatility) < EPSILON:
        return InterpolatedPortfolio.from_corner(frontier[0], 0)
    if abs(frontier[last].std_dev - volatility) < EPSILON:
        return InterpolatedPortfolio.from_corner(frontier[last], last)
    if volatility > frontier[0].std_dev or volatility < frontier[last].std_dev:
        return None

    low, high = 0, last
    while high - low > 1:
        middle = (low + high) // 2
        delta = frontier[middle].std_dev - volatility
        if delta > EPSILON:
            low = middle
        elif delta < -EPSILON:
            high = middle
        else:
            return InterpolatedPortfolio.from_corner(frontier[middle], middle)

    cov = np.asarray(covariance, dtype=np.float64)
    low_p, high_p = frontier[low], frontier[high]
    cross = float(low_p.weights @ cov @ high_p.weights)
    a = low_p.variance + high_p.variance - 2.0 * cross
    b = cross - high_p.variance
    c = high_p.variance - volatility * volatility

    if abs(a) < EPSILON:
        if abs(b) < EPSILON:
            return None
        factor = -c / (2.0 * b)
    else:
        disc = max(b * b - a * c, 0.0)
        q = -(b + np.copysign(np.sqrt(disc), b))
        if q == 0.0:
            factor = 0.0
        else:
            factor = q / a
            if not 0.0 <= factor <= 1.0:
                factor = c / q
    if not -EPSILON <= factor <= 1.0 + EPSILON:
        logger.debug("No blend factor in [0, 1] for volatility %g", volatility)
        return None
    factor = min(max(factor, 0.0), 1.0)
    return interpolate(frontier, cov, factor, low, high)


def min_variance_portfolio(frontier: Sequence[Portfolio]) -> InterpolatedPortfolio:
    """The last corner of the frontier."""
    last = len(frontier) - 1
    return InterpolatedPortfolio.from_corner(frontier[last], last)


def max_sharpe_portfolio(
    frontier: Sequence[Portfolio],
    covariance: np.ndarray,
    risk_free_return: float = 0.0,
) -> Optional[InterpolatedPortfolio]:
    """
    Efficient portfolio with the highest ``(mean - rf) / variance``.

    Every corner is a candidate, and so is every stationary point of the
    ratio inside a segment between two adjacent corners.

    Returns:
        The best candidate, or None when no portfolio earns more than the
        risk-free return.
    """
    if not frontier or frontier[0].mean <= risk_free_return:
        return None
    cov = np.asarray(covariance, dtype=np.float64)

    best: Optional[InterpolatedPortfolio] = None
    best_ratio = -np.inf

    def consider(candidate: InterpolatedPortfolio) -> None:
        nonlocal best, best_ratio
        if candidate.mean <= risk_free_return or candidate.variance <= 0.0:
            return
        ratio = candidate.sharpe_ratio(risk_free_return)
        if ratio > best_ratio:
            best, best_ratio = candidate, ratio

    for i, corner in enumerate(frontier):
        consider(InterpolatedPortfolio.from_corner(corner, i))

    for i in range(len(frontier) - 1):
        for factor in _segment_stationary_points(frontier[i], frontier[i + 1], cov, risk_free_return):
            consider(interpolate(frontier, cov, factor, i, i + 1))
    return best


def _segment_stationary_points(
    low_p: Portfolio,
    high_p: Portfolio,
    cov: np.ndarray,
    rf: float,
) -> List[float]:
    # Blend w(t) = (1 - t) wH + t wL. The ratio (m(t) - rf) / v(t) is
    # stationary where  d k t^2 + 2 p k t + (2 p e - d vH) = 0.
    p = high_p.mean - rf
    d = low_p.mean - high_p.mean
    cross = float(low_p.weights @ cov @ high_p.weights)
    e = cross - high_p.variance
    k = low_p.variance + high_p.variance - 2.0 * cross

    qa = d * k
    qb = p * k
    qc = 2.0 * p * e - d * high_p.variance
    if abs(qa) < EPSILON * EPSILON:
        roots = [] if abs(qb) < EPSILON * EPSILON else [-qc / (2.0 * qb)]
    else:
        disc = qb * qb - qa * qc
        if disc < 0.0:
            return []
        sq = np.sqrt(disc)
        roots = [(-qb + sq) / qa, (-qb - sq) / qa]
    return [t for t in roots if 0.0 < t < 1.0]
