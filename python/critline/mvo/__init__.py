"""
critline MVO Core
=================

Mean-variance optimization by the Critical Line Algorithm.

A two-phase simplex finds the maximum-return corner of the feasible set;
the critical line stage then walks the efficient frontier corner by corner
down to the minimum-variance portfolio.

Low-level usage
---------------
>>> from critline.mvo import ProblemData, get_efficient_frontier
>>>
>>> data = ProblemData(3)
>>> data.set_constraints([[1, 1, 1]], [1])
>>> data.set_lower_bounds([0, 0, 0])
>>> data.set_upper_bounds([1, 1, 1])
>>> data.set_expected_returns(mu)
>>> data.set_covariance(sigma)
>>> frontier = get_efficient_frontier(data)
>>> frontier[-1].std_dev

Classes
-------
ProblemData
    Problem definition consumed by both stages
SolverState
    IN/OUT partition and basis inverse
SimplexSolver
    Linear programming stage
CriticalLineEngine
    Frontier tracing stage
Portfolio, InterpolatedPortfolio
    Corner portfolios and frontier query results
"""

from .active_set import ActiveSet
from .critical_lines import CriticalLineEngine
from .inputs import EPSILON, INFINITY, ConstraintType, ProblemData
from .markowitz import optimize
from .optimizer import (
    get_efficient_frontier,
    max_sharpe_portfolio,
    min_variance_portfolio,
    target_return_portfolio,
    target_volatility_portfolio,
)
from .portfolio import InterpolatedPortfolio, Portfolio, interpolate
from .simplex import SimplexSolver
from .states import SolverState, VarState, last_argmax

__all__ = [
    # Data
    "ProblemData",
    "ConstraintType",
    "EPSILON",
    "INFINITY",
    # Stages
    "ActiveSet",
    "SolverState",
    "VarState",
    "last_argmax",
    "SimplexSolver",
    "CriticalLineEngine",
    # Results
    "Portfolio",
    "InterpolatedPortfolio",
    "interpolate",
    # Queries
    "optimize",
    "get_efficient_frontier",
    "target_return_portfolio",
    "target_volatility_portfolio",
    "min_variance_portfolio",
    "max_sharpe_portfolio",
]
