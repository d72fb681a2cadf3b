"""
critline: Mean-Variance Optimization by the Critical Line Algorithm
===================================================================

critline computes the whole efficient frontier of a long-only (or
generally bounded and linearly constrained) portfolio problem: a
two-phase simplex finds the maximum-return portfolio, and the Critical
Line Algorithm then walks down the frontier corner by corner to the
minimum-variance portfolio.

Quick Start
-----------
>>> import critline
>>> model = critline.MvoModel(
...     returns=[0.10, 0.05],
...     covariance=[[0.04, 0.012], [0.012, 0.01]],
...     labels=["stocks", "bonds"],
... )
>>> for p in model:
...     print(p)
>>> model.target_volatility(0.15)

Linear programs use the same simplex stage:

>>> lp = critline.SimplexModel.maximize([1, 1], [[1, 2], [3, 1]], [10, 15], "<=")
>>> lp.value, lp.weights
(7.0, array([4., 3.]))
"""

import logging

__version__ = "0.1.0"
__author__ = "critline Contributors"

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Import public API
from .model import MvoModel, SimplexModel
from .solver import efficient_frontier, solve_lp
from .result import LPResult, SolveResult, Status
from .mvo import (
    ConstraintType,
    InterpolatedPortfolio,
    Portfolio,
    ProblemData,
    get_efficient_frontier,
    interpolate,
    max_sharpe_portfolio,
    min_variance_portfolio,
    target_return_portfolio,
    target_volatility_portfolio,
)
from .exceptions import (
    CritlineError,
    ConvergenceError,
    DegenerateError,
    DimensionError,
    InfeasibleError,
    InvalidInputError,
    NumericalError,
    SolverError,
    UnboundedError,
)

__all__ = [
    # Version
    "__version__",

    # Models
    "MvoModel",
    "SimplexModel",

    # Solving
    "efficient_frontier",
    "solve_lp",
    "ProblemData",
    "ConstraintType",
    "get_efficient_frontier",

    # Frontier queries
    "target_return_portfolio",
    "target_volatility_portfolio",
    "min_variance_portfolio",
    "max_sharpe_portfolio",
    "interpolate",

    # Results
    "Portfolio",
    "InterpolatedPortfolio",
    "SolveResult",
    "LPResult",
    "Status",

    # Exceptions
    "CritlineError",
    "DimensionError",
    "InvalidInputError",
    "SolverError",
    "InfeasibleError",
    "UnboundedError",
    "DegenerateError",
    "NumericalError",
    "ConvergenceError",
]


def info() -> str:
    """Return information about the critline installation."""
    import platform

    import numpy
    import scipy

    lines = [
        f"critline version: {__version__}",
        f"Python version: {platform.python_version()}",
        f"Platform: {platform.platform()}",
        f"NumPy version: {numpy.__version__}",
        f"SciPy version: {scipy.__version__}",
    ]
    return "\n".join(lines)
