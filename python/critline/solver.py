"""critline Solver Interface."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .exceptions import DimensionError, InvalidInputError
from .mvo.inputs import ConstraintType, ProblemData
from .mvo.markowitz import optimize
from .mvo.portfolio import Portfolio
from .mvo.simplex import SimplexSolver
from .mvo.states import SolverState
from .result import LPResult
from .utils.validation import as_matrix, as_vector, validate_bounds

logger = logging.getLogger(__name__)

DEFAULT_PARAMS: Dict[str, Any] = {
    "max_corner_portfolios": 100,
    "end_lambda": 1e-6,
    "allow_degenerate": True,
}


def apply_params(data: ProblemData, params: Optional[Dict[str, Any]] = None) -> None:
    """
    Copy solver parameters onto the problem.

    Recognized keys are those of ``DEFAULT_PARAMS``; anything else raises
    ``InvalidInputError``.
    """
    params = params or {}
    unknown = sorted(set(params) - set(DEFAULT_PARAMS))
    if unknown:
        raise InvalidInputError(f"unknown solver parameter(s): {', '.join(unknown)}")

    max_corners = int(params.get("max_corner_portfolios", DEFAULT_PARAMS["max_corner_portfolios"]))
    if max_corners < 1:
        raise InvalidInputError("max_corner_portfolios must be at least 1")
    end_lambda = float(params.get("end_lambda", DEFAULT_PARAMS["end_lambda"]))
    if end_lambda < 0:
        raise InvalidInputError("end_lambda must be non-negative")

    data.max_corner_portfolios = max_corners
    data.end_lambda = end_lambda
    data.allow_degenerate = bool(params.get("allow_degenerate", DEFAULT_PARAMS["allow_degenerate"]))


def _parse_types(types: Optional[Sequence[Any]], rows: int) -> List[ConstraintType]:
    if types is None:
        return [ConstraintType.EQUAL] * rows
    if isinstance(types, (str, int, ConstraintType)):
        types = [types] * rows
    parsed = [ConstraintType.parse(t) for t in types]
    if len(parsed) != rows:
        raise DimensionError(f"{len(parsed)} constraint types for {rows} constraints")
    return parsed


def build_problem(
    returns: Any,
    covariance: Any,
    lower: Any = None,
    upper: Any = None,
    constraints: Optional[Sequence[Any]] = None,
) -> ProblemData:
    """
    Validate the inputs of a mean-variance problem and load them.

    The budget row ``sum(w) = 1`` always comes first; ``constraints`` is an
    optional ``(lhs, rhs)`` or ``(lhs, rhs, types)`` tuple of extra rows.

    Raises:
        DimensionError: If shapes are inconsistent
        InvalidInputError: If inputs contain NaN or a lower bound exceeds
            its upper bound
    """
    mu = as_vector(returns, "returns")
    n = len(mu)
    cov = as_matrix(covariance, "covariance", shape=(n, n))
    lo = np.zeros(n) if lower is None else as_vector(lower, "lower bounds", length=n)
    hi = np.ones(n) if upper is None else as_vector(upper, "upper bounds", length=n)
    validate_bounds(lo, hi)

    lhs = np.ones((1, n))
    rhs = np.ones(1)
    types = [ConstraintType.EQUAL]
    if constraints is not None:
        if len(constraints) not in (2, 3):
            raise InvalidInputError("constraints must be (lhs, rhs) or (lhs, rhs, types)")
        extra_lhs = as_matrix(constraints[0], "constraint matrix")
        if extra_lhs.shape[1] != n:
            raise DimensionError(
                f"constraint matrix has {extra_lhs.shape[1]} columns, expected {n}"
            )
        extra_rhs = as_vector(constraints[1], "constraint RHS", length=extra_lhs.shape[0])
        extra_types = constraints[2] if len(constraints) == 3 else None
        lhs = np.vstack([lhs, extra_lhs])
        rhs = np.concatenate([rhs, extra_rhs])
        types += _parse_types(extra_types, extra_lhs.shape[0])

    data = ProblemData(n, types)
    data.set_constraints(lhs, rhs)
    data.set_expected_returns(mu)
    data.set_covariance(cov)
    data.set_lower_bounds(lo)
    data.set_upper_bounds(hi)
    return data


def efficient_frontier(
    returns: Any,
    covariance: Any,
    lower: Any = None,
    upper: Any = None,
    constraints: Optional[Sequence[Any]] = None,
    params: Optional[Dict[str, Any]] = None,
) -> List[Portfolio]:
    """
    Corner portfolios of the efficient frontier.

    Args:
        returns: Expected returns (n,)
        covariance: Covariance matrix (n, n)
        lower: Lower weight limits (default: 0)
        upper: Upper weight limits (default: 1)
        constraints: Extra ``(lhs, rhs[, types])`` rows beyond the budget
        params: Solver parameters (``max_corner_portfolios``,
            ``end_lambda``, ``allow_degenerate``)

    Returns:
        Corner portfolios from maximum return down to minimum variance

    Example:
        >>> frontier = efficient_frontier([0.10, 0.05], [[0.04, 0.012], [0.012, 0.01]])
        >>> frontier[0].weights
        array([1., 0.])
    """
    data = build_problem(returns, covariance, lower, upper, constraints)
    apply_params(data, params)
    return optimize(data)


def solve_lp(
    objective: Any,
    lhs: Any,
    rhs: Any,
    types: Optional[Sequence[Any]] = None,
    params: Optional[Dict[str, Any]] = None,
) -> LPResult:
    """
    Maximize ``objective @ x`` subject to ``lhs @ x (types) rhs`` and ``x >= 0``.

    Args:
        objective: Objective coefficients (n,)
        lhs: Constraint matrix (m, n)
        rhs: Constraint right-hand side (m,)
        types: One constraint type per row, or a single type for every
            row (default: equality)
        params: Solver parameters, as for ``efficient_frontier``

    Raises:
        InfeasibleError, UnboundedError, DegenerateError
    """
    c = as_vector(objective, "objective")
    n = len(c)
    a = as_matrix(lhs, "constraint matrix")
    if a.shape[1] != n:
        raise DimensionError(f"constraint matrix has {a.shape[1]} columns, expected {n}")
    m = a.shape[0]
    if m == 0:
        raise InvalidInputError("at least one constraint is required")
    b = as_vector(rhs, "constraint RHS", length=m)

    data = ProblemData(n, _parse_types(types, m))
    data.set_constraints(a, b)
    data.set_expected_returns(c)
    apply_params(data, params)

    data.transform_constraints()
    state = SolverState(data)
    result = SimplexSolver.run(data, state)
    result.raise_for_status()

    weights = state.weights[:n].copy()
    value = float(c @ weights)
    logger.debug("LP solved: value=%g after %d pivots", value, result.iterations)
    return LPResult(
        weights=weights,
        value=value,
        iterations=result.iterations,
        degenerate_retry=result.degenerate_retry,
    )
