"""
critline Models
===============

Object interface over the optimizer: a mean-variance model holding its
efficient frontier, and a linear programming model.
"""

from typing import Any, Dict, Iterator, List, Optional, Sequence

import numpy as np

from .mvo.markowitz import optimize
from .mvo.optimizer import (
    max_sharpe_portfolio,
    min_variance_portfolio,
    target_return_portfolio,
    target_volatility_portfolio,
)
from .mvo.portfolio import InterpolatedPortfolio, Portfolio
from .solver import apply_params, build_problem, solve_lp
from .utils.validation import as_vector, normalize_labels


class MvoModel:
    """
    Mean-variance optimization model.

    Solves on construction; the corner portfolios of the efficient frontier
    are then available by index, from maximum return to minimum variance.

    Args:
        returns: Expected returns (n,)
        covariance: Covariance matrix (n, n)
        lower: Lower weight limits (default: 0)
        upper: Upper weight limits (default: 1)
        labels: Asset names, padded with positions or truncated to n
        constraints: Extra ``(lhs, rhs[, types])`` rows beyond the budget
        params: Solver parameters

    Example:
        >>> model = MvoModel([0.10, 0.05], [[0.04, 0.012], [0.012, 0.01]],
        ...                  labels=["stocks", "bonds"])
        >>> model.first.weights
        array([1., 0.])
        >>> model.target_return(0.07).weights
    """

    def __init__(
        self,
        returns: Any,
        covariance: Any,
        lower: Any = None,
        upper: Any = None,
        labels: Optional[Sequence[str]] = None,
        constraints: Optional[Sequence[Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> None:
        data = build_problem(returns, covariance, lower, upper, constraints)
        apply_params(data, params)
        n = data.securities

        self._returns = data.mean[:n].copy()
        self._covariance = data.cov[:n, :n].copy()
        self._lower = data.lower[:n].copy()
        self._upper = data.upper[:n].copy()
        self._labels = normalize_labels(labels, n)
        self._portfolios = optimize(data)

    @property
    def size(self) -> int:
        """Number of assets."""
        return len(self._returns)

    @property
    def returns(self) -> np.ndarray:
        return self._returns

    @property
    def covariance(self) -> np.ndarray:
        return self._covariance

    @property
    def lower(self) -> np.ndarray:
        return self._lower

    @property
    def upper(self) -> np.ndarray:
        return self._upper

    @property
    def labels(self) -> List[str]:
        return self._labels

    @property
    def portfolios(self) -> List[Portfolio]:
        """Corner portfolios of the efficient frontier."""
        return self._portfolios

    @property
    def first(self) -> Portfolio:
        """Maximum-return corner."""
        return self._portfolios[0]

    @property
    def last(self) -> Portfolio:
        """Minimum-variance corner."""
        return self._portfolios[-1]

    def __len__(self) -> int:
        return len(self._portfolios)

    def __getitem__(self, index: int) -> Portfolio:
        return self._portfolios[index]

    def __iter__(self) -> Iterator[Portfolio]:
        return iter(self._portfolios)

    def target_return(self, expected_return: float) -> Optional[InterpolatedPortfolio]:
        """Efficient portfolio with the given expected return, if any."""
        return target_return_portfolio(self._portfolios, self._covariance, expected_return)

    def target_volatility(self, volatility: float) -> Optional[InterpolatedPortfolio]:
        """Efficient portfolio with the given standard deviation, if any."""
        return target_volatility_portfolio(self._portfolios, self._covariance, volatility)

    def min_variance(self) -> InterpolatedPortfolio:
        return min_variance_portfolio(self._portfolios)

    def max_sharpe(self, risk_free_return: float = 0.0) -> Optional[InterpolatedPortfolio]:
        return max_sharpe_portfolio(self._portfolios, self._covariance, risk_free_return)

    def summary(self) -> str:
        """Return a formatted table of the corner portfolios."""
        header = "\t".join(["Mean", "StdDev", "Lambda"] + self._labels)
        lines = [
            "=" * 50,
            f"MVO Model ({self.size} assets)",
            "=" * 50,
            header,
            "-" * 50,
        ]
        lines.extend(str(p) for p in self._portfolios)
        lines.append("=" * 50)
        return "\n".join(lines)

    def __str__(self) -> str:
        lines = [f"MVO Model ({self.size} assets)"]
        lines.extend(str(p) for p in self._portfolios)
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"MvoModel(assets={self.size}, portfolios={len(self)})"


class SimplexModel:
    """
    Linear programming model.

    Maximizes ``objective @ x`` subject to ``lhs @ x (types) rhs`` and
    ``x >= 0``. Use ``SimplexModel.minimize`` for minimization.

    Args:
        objective: Objective coefficients (n,)
        lhs: Constraint matrix (m, n)
        rhs: Constraint right-hand side (m,)
        types: Constraint types, one per row or one for all (default: equal)
        labels: Variable names
        params: Solver parameters

    Example:
        >>> lp = SimplexModel.maximize([1, 1], [[1, 2], [3, 1]], [10, 15], "<=")
        >>> lp.value
        7.0
    """

    def __init__(
        self,
        objective: Any,
        lhs: Any,
        rhs: Any,
        types: Optional[Sequence[Any]] = None,
        labels: Optional[Sequence[str]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._objective = as_vector(objective, "objective")
        self._labels = normalize_labels(labels, len(self._objective))
        result = solve_lp(self._objective, lhs, rhs, types, params)
        self._weights = result.weights
        self._value = result.value
        self._iterations = result.iterations

    @classmethod
    def maximize(
        cls,
        objective: Any,
        lhs: Any,
        rhs: Any,
        types: Optional[Sequence[Any]] = None,
        labels: Optional[Sequence[str]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> "SimplexModel":
        return cls(objective, lhs, rhs, types, labels, params)

    @classmethod
    def minimize(
        cls,
        objective: Any,
        lhs: Any,
        rhs: Any,
        types: Optional[Sequence[Any]] = None,
        labels: Optional[Sequence[str]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> "SimplexModel":
        """Minimize by maximizing the negated objective."""
        model = cls(-as_vector(objective, "objective"), lhs, rhs, types, labels, params)
        model._objective = -model._objective
        model._value = -model._value
        return model

    @property
    def objective(self) -> np.ndarray:
        return self._objective

    @property
    def labels(self) -> List[str]:
        return self._labels

    @property
    def weights(self) -> np.ndarray:
        """Optimal variable values."""
        return self._weights

    @property
    def value(self) -> float:
        """Objective value at the optimum."""
        return self._value

    @property
    def iterations(self) -> int:
        return self._iterations

    def summary(self) -> str:
        lines = [
            "=" * 50,
            f"LP Model ({len(self._objective)} variables)",
            "=" * 50,
            f"Value:            {self._value:.6g}",
            f"Iterations:       {self._iterations}",
            "-" * 50,
        ]
        lines.extend(f"{label:<18}{w:.6g}" for label, w in zip(self._labels, self._weights))
        lines.append("=" * 50)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.summary()

    def __repr__(self) -> str:
        return f"SimplexModel(variables={len(self._objective)}, value={self._value:.6g})"
