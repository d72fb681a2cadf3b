"""
Portfolios
==========

Corner portfolios of the efficient frontier and blends of two corners.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np


@dataclass(frozen=True, eq=False)
class Portfolio:
    """
    A portfolio on the efficient frontier.

    Attributes:
        weights: Security weights (read-only)
        lambda_: Risk-aversion parameter of the corner
        mean: Expected return
        variance: Variance of the return
    """

    weights: np.ndarray
    lambda_: float
    mean: float
    variance: float

    def __post_init__(self) -> None:
        weights = np.array(self.weights, dtype=np.float64)
        weights.setflags(write=False)
        object.__setattr__(self, "weights", weights)
        object.__setattr__(self, "lambda_", float(self.lambda_))
        object.__setattr__(self, "mean", float(self.mean))
        object.__setattr__(self, "variance", float(self.variance))

    @property
    def std_dev(self) -> float:
        """Standard deviation of the return."""
        return float(np.sqrt(self.variance))

    def sharpe_ratio(self, risk_free_return: float = 0.0) -> float:
        """
        Excess return per unit of variance.

        Note the denominator is the variance, not the standard deviation.
        """
        return (self.mean - risk_free_return) / self.variance

    def __len__(self) -> int:
        return len(self.weights)

    def __str__(self) -> str:
        head = f"{self.mean:.5f}\t{self.std_dev:.5f}\t{self.lambda_:.5f}"
        return "\t".join([head] + [f"{w:.3f}" for w in self.weights])

    def to_long_string(self) -> str:
        """Tab-separated mean, std dev, variance, lambda and weights at full precision."""
        fields = [self.mean, self.std_dev, self.variance, self.lambda_, *self.weights]
        return "\t".join(repr(float(x)) for x in fields)

    def __repr__(self) -> str:
        return (
            f"Portfolio(mean={self.mean:.6g}, std_dev={self.std_dev:.6g}, "
            f"lambda_={self.lambda_:.6g})"
        )


@dataclass(frozen=True, eq=False)
class InterpolatedPortfolio(Portfolio):
    """
    A portfolio answering a frontier query.

    Either a corner (both source indices equal) or a blend of two adjacent
    corners, in which case ``lambda_`` is -1.
    """

    source_index1: int = -1
    source_index2: int = -1

    @classmethod
    def from_corner(cls, portfolio: Portfolio, index: int) -> "InterpolatedPortfolio":
        return cls(
            weights=portfolio.weights,
            lambda_=portfolio.lambda_,
            mean=portfolio.mean,
            variance=portfolio.variance,
            source_index1=index,
            source_index2=index,
        )

    def __repr__(self) -> str:
        return (
            f"InterpolatedPortfolio(mean={self.mean:.6g}, std_dev={self.std_dev:.6g}, "
            f"sources=({self.source_index1}, {self.source_index2}))"
        )


def interpolate(
    frontier: Sequence[Portfolio],
    covariance: np.ndarray,
    factor: float,
    low_index: int,
    high_index: int,
) -> InterpolatedPortfolio:
    """
    Blend two corner portfolios.

    Weights and mean are ``(1 - factor) * high + factor * low``. The
    variance is recomputed from the blended weights, since it is not linear
    along a segment.

    Args:
        frontier: Corner portfolios
        covariance: Securities covariance matrix
        factor: 0 gives the ``high_index`` corner, 1 the ``low_index`` one
        low_index: Smaller frontier index, the corner with the higher return
        high_index: Larger frontier index, the corner with the lower return
    """
    low = frontier[low_index]
    high = frontier[high_index]
    g = 1.0 - factor
    weights = g * high.weights + factor * low.weights
    mean = g * high.mean + factor * low.mean
    cov = np.asarray(covariance, dtype=np.float64)
    variance = float(weights @ cov @ weights)
    return InterpolatedPortfolio(
        weights=weights,
        lambda_=-1.0,
        mean=mean,
        variance=variance,
        source_index1=low_index,
        source_index2=high_index,
    )
