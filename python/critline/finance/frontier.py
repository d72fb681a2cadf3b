"""
Efficient Frontier
==================

Convenience wrapper that estimates the optimizer inputs from a return
history and exposes the exact CLA frontier.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..exceptions import InvalidInputError
from ..mvo.optimizer import (
    max_sharpe_portfolio,
    min_variance_portfolio,
    target_return_portfolio,
    target_volatility_portfolio,
)
from ..mvo.portfolio import InterpolatedPortfolio, Portfolio
from ..solver import efficient_frontier
from ..utils.validation import as_matrix
from .utils import compute_covariance


@dataclass
class FrontierPoint:
    """Corner portfolio of the efficient frontier."""

    return_: float
    volatility: float
    sharpe_ratio: float
    lambda_: float
    weights: np.ndarray


class EfficientFrontier:
    """
    Efficient frontier computation and analysis.

    Unlike a sampled frontier, ``compute()`` returns every corner
    portfolio; any point in between is an exact blend of two adjacent
    corners.

    Args:
        returns: Historical returns (T, N) or expected returns (N,)
        covariance: Covariance matrix (N, N); estimated from ``returns``
            when omitted
        expected_returns: Expected returns (N,); override ``returns``
        risk_free_rate: Risk-free rate used for Sharpe ratios
        periods_per_year: Scaling applied to estimates from a history

    Example:
        >>> ef = EfficientFrontier(returns)
        >>> corners = ef.compute()
        >>> weights = ef.portfolio_at_volatility(0.15)
        >>> best = ef.max_sharpe()
    """

    def __init__(
        self,
        returns: Optional[np.ndarray] = None,
        covariance: Optional[np.ndarray] = None,
        expected_returns: Optional[np.ndarray] = None,
        risk_free_rate: float = 0.0,
        periods_per_year: int = 252,
    ) -> None:
        mu = None
        cov = None
        if returns is not None:
            r = np.asarray(returns, dtype=np.float64)
            if r.ndim == 2:
                mu = r.mean(axis=0) * periods_per_year
                cov = compute_covariance(r) * periods_per_year
            else:
                mu = r
        if expected_returns is not None:
            mu = np.asarray(expected_returns, dtype=np.float64)
        if covariance is not None:
            cov = as_matrix(covariance, "covariance")
        if mu is None or cov is None:
            raise InvalidInputError("expected returns and a covariance matrix are required")

        self._mu = mu
        self._cov = cov
        self._rf = risk_free_rate
        self._lower = np.zeros(len(mu))
        self._upper = np.ones(len(mu))
        self._corners: List[Portfolio] = []
        self._frontier: List[FrontierPoint] = []

    @property
    def n_assets(self) -> int:
        """Number of assets."""
        return len(self._mu)

    @property
    def expected_returns(self) -> np.ndarray:
        return self._mu

    @property
    def covariance(self) -> np.ndarray:
        return self._cov

    @property
    def frontier(self) -> List[FrontierPoint]:
        """Computed frontier points."""
        return self._frontier

    @property
    def corners(self) -> List[Portfolio]:
        """Corner portfolios behind ``frontier``."""
        return self._corners

    def set_bounds(self, lower: Any = 0.0, upper: Any = 1.0) -> EfficientFrontier:
        """Set weight bounds (scalars or one value per asset)."""
        n = self.n_assets
        self._lower = np.broadcast_to(np.asarray(lower, dtype=np.float64), (n,)).copy()
        self._upper = np.broadcast_to(np.asarray(upper, dtype=np.float64), (n,)).copy()
        self._corners = []
        self._frontier = []
        return self

    def compute(self, params: Optional[Dict[str, Any]] = None) -> List[FrontierPoint]:
        """
        Compute the corner portfolios of the efficient frontier.

        Args:
            params: Solver parameters passed to ``efficient_frontier``

        Returns:
            List of FrontierPoint objects, highest return first
        """
        self._corners = efficient_frontier(
            self._mu, self._cov, self._lower, self._upper, params=params
        )
        self._frontier = [
            FrontierPoint(
                return_=p.mean,
                volatility=p.std_dev,
                sharpe_ratio=p.sharpe_ratio(self._rf),
                lambda_=p.lambda_,
                weights=np.array(p.weights),
            )
            for p in self._corners
        ]
        return self._frontier

    def _ensure_computed(self) -> List[Portfolio]:
        if not self._corners:
            self.compute()
        return self._corners

    def portfolio_at_return(self, target_return: float) -> np.ndarray:
        """
        Get portfolio weights for target return.

        Raises:
            InvalidInputError: If the target is outside the frontier
        """
        p = target_return_portfolio(self._ensure_computed(), self._cov, target_return)
        if p is None:
            raise InvalidInputError(f"target return {target_return} is outside the frontier")
        return np.array(p.weights)

    def portfolio_at_volatility(self, target_volatility: float) -> np.ndarray:
        """
        Get portfolio weights for target volatility.

        Raises:
            InvalidInputError: If the target is outside the frontier
        """
        p = target_volatility_portfolio(self._ensure_computed(), self._cov, target_volatility)
        if p is None:
            raise InvalidInputError(
                f"target volatility {target_volatility} is outside the frontier"
            )
        return np.array(p.weights)

    def min_variance(self) -> InterpolatedPortfolio:
        return min_variance_portfolio(self._ensure_computed())

    def max_sharpe(self) -> Optional[InterpolatedPortfolio]:
        return max_sharpe_portfolio(self._ensure_computed(), self._cov, self._rf)

    def get_returns_volatilities(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Get arrays of returns and volatilities from frontier.

        Returns:
            Tuple of (returns, volatilities) arrays

        Raises:
            InvalidInputError: If compute() has not been called
        """
        if not self._frontier:
            raise InvalidInputError("Frontier not computed. Call compute() first.")

        returns = np.array([p.return_ for p in self._frontier])
        vols = np.array([p.volatility for p in self._frontier])

        return returns, vols
