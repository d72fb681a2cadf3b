"""
critline Finance Module
=======================

Helpers that turn market data into optimizer inputs, and an efficient
frontier object built on the exact Critical Line Algorithm.

Efficient Frontier
------------------
>>> from critline.finance import EfficientFrontier, compute_returns
>>>
>>> returns = compute_returns(prices)
>>> ef = EfficientFrontier(returns, risk_free_rate=0.02)
>>> corners = ef.compute()
>>> ef.portfolio_at_return(0.08)

Classes
-------
EfficientFrontier
    Corner portfolios and frontier queries
FrontierPoint
    One corner portfolio
"""

from .frontier import EfficientFrontier, FrontierPoint
from .utils import (
    compute_covariance,
    compute_returns,
    is_positive_definite,
    make_positive_definite,
)

__all__ = [
    # Main classes
    "EfficientFrontier",
    "FrontierPoint",
    # Utilities
    "compute_returns",
    "compute_covariance",
    "is_positive_definite",
    "make_positive_definite",
]
