"""
Problem Data
============

Portfolio data for the mean-variance optimizer.

Variables are laid out as::

    [0, securities)                   securities
    [securities, variables)           slack columns (+ promoted artificials)
    [variables, variables + m)        artificial columns / lambda variables

The covariance matrix is sized for every column so that the critical
line stage can border it with the constraint rows.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Sequence, Union

import numpy as np

from ..exceptions import DimensionError, InvalidInputError

# Sentinel for "no upper limit".
INFINITY = 1e30

# Close enough to zero: every bound-hit and pivot test uses it.
EPSILON = 1e-8


class ConstraintType(Enum):
    """Constraint types."""

    EQUAL = "="
    LESS_THAN = "<"
    GREATER_THAN = ">"

    @classmethod
    def parse(cls, value: Union["ConstraintType", str, int]) -> "ConstraintType":
        """
        Read a constraint type.

        Accepts the enum itself, ``'='``, ``'<'``, ``'>'``, ``'=='``,
        ``'<='``, ``'>='`` or an integer code (0 = equal, negative = less
        than, positive = greater than).
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            sense = value.strip()
            if sense in ("=", "=="):
                return cls.EQUAL
            if sense in ("<", "<="):
                return cls.LESS_THAN
            if sense in (">", ">="):
                return cls.GREATER_THAN
            raise InvalidInputError(f"unknown constraint type {value!r}")
        if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
            if value == 0:
                return cls.EQUAL
            return cls.LESS_THAN if value < 0 else cls.GREATER_THAN
        raise InvalidInputError(f"unknown constraint type {value!r}")


class ProblemData:
    """
    The optimization problem fed to the simplex and critical line stages.

    Args:
        securities: Number of securities in the portfolio
        constraint_types: One type per constraint row. When omitted, the
            problem has a single budget row ``sum(w) = 1``.

    Attributes:
        max_corner_portfolios: Maximum number of critical line iterations
        end_lambda: Smallest lambda worth tracing
        allow_degenerate: Give degenerate problems a second chance
    """

    def __init__(
        self,
        securities: int,
        constraint_types: Optional[Sequence[Any]] = None,
    ) -> None:
        if securities < 1:
            raise InvalidInputError("at least one security is required")
        self.securities = securities
        self.max_corner_portfolios = 100
        self.end_lambda = 1e-6
        self.allow_degenerate = True
        self._transformed = False

        if not constraint_types:
            self.constraints = 1
            self.types = [ConstraintType.EQUAL]
            self.variables = securities
            self.lhs = np.zeros((1, securities + 1))
            self.lhs[0, :securities] = 1.0
            self.rhs = np.ones(1)
        else:
            self.types = [ConstraintType.parse(t) for t in constraint_types]
            self.constraints = len(self.types)
            slacks = sum(1 for t in self.types if t != ConstraintType.EQUAL)
            self.variables = securities + slacks
            self.lhs = np.zeros((self.constraints, self.variables + self.constraints))
            self.rhs = np.zeros(self.constraints)

        size = self.variables + self.constraints
        self.mean = np.zeros(size)
        self.lower = np.zeros(size)
        self.upper = np.full(size, INFINITY)
        self.cov = np.zeros((size, size))

    @property
    def size(self) -> int:
        """Number of columns including artificial/lambda columns."""
        return self.variables + self.constraints

    def set_constraints(self, lhs: Any, rhs: Any) -> None:
        """Copy a constraints x securities matrix and its right-hand side."""
        lhs = np.asarray(lhs, dtype=np.float64)
        if lhs.ndim == 1:
            lhs = lhs.reshape(1, -1)
        rhs = np.asarray(rhs, dtype=np.float64).ravel()
        if lhs.shape != (self.constraints, self.securities):
            raise DimensionError(
                f"constraint matrix must be {self.constraints}x{self.securities}, "
                f"got {lhs.shape[0]}x{lhs.shape[1]}"
            )
        if len(rhs) != self.constraints:
            raise DimensionError(
                f"constraint RHS has {len(rhs)} elements, expected {self.constraints}"
            )
        self.lhs[:, : self.securities] = lhs
        self.rhs[:] = rhs

    def set_lower_bounds(self, lower: Any) -> None:
        self.lower[: self.securities] = self._securities_vector(lower, "lower bounds")

    def set_upper_bounds(self, upper: Any) -> None:
        upper = self._securities_vector(upper, "upper bounds")
        self.upper[: self.securities] = np.where(
            np.isinf(upper) | (upper >= INFINITY), INFINITY, upper
        )

    def set_expected_returns(self, returns: Any) -> None:
        self.mean[: self.securities] = self._securities_vector(returns, "expected returns")

    def set_covariance(self, covariance: Any) -> None:
        """
        Set the securities block of the covariance matrix.

        Accepts a square matrix or the packed lower triangle, row by row.
        """
        n = self.securities
        cov = np.asarray(covariance, dtype=np.float64)
        if cov.ndim == 1:
            if len(cov) != n * (n + 1) // 2:
                raise DimensionError(
                    f"packed covariance has {len(cov)} elements, expected {n * (n + 1) // 2}"
                )
            full = np.zeros((n, n))
            rows, cols = np.tril_indices(n)
            full[rows, cols] = cov
            full[cols, rows] = cov
            cov = full
        if cov.shape != (n, n):
            raise DimensionError(f"covariance must be {n}x{n}, got {cov.shape}")
        self.cov[:n, :n] = cov

    def transform_constraints(self) -> None:
        """
        Bring every inequality into ``<=`` form with its own slack column.

        ``>=`` rows are sign-flipped; each inequality row gets a +1 in the
        next free slack column. Calling it twice has no further effect.
        """
        if self._transformed:
            return
        n = self.securities
        slack = n
        for i, kind in enumerate(self.types):
            if kind == ConstraintType.EQUAL:
                continue
            if kind == ConstraintType.GREATER_THAN:
                self.lhs[i, :n] = -self.lhs[i, :n]
                self.rhs[i] = -self.rhs[i]
            self.lhs[i, slack] = 1.0
            slack += 1
        self._transformed = True

    def promote_artificials(self, cap: float) -> None:
        """
        Keep the artificial columns as ordinary variables.

        Used when phase 1 ends degenerate: the artificial columns become
        variables capped at ``cap`` and a fresh block of ``m`` columns is
        appended for the lambda variables.
        """
        m = self.constraints
        old_size = self.size
        self.upper[self.variables:old_size] = cap
        self.variables += m
        size = self.size

        self.mean = np.concatenate([self.mean, np.zeros(m)])
        self.lower = np.concatenate([self.lower, np.zeros(m)])
        self.upper = np.concatenate([self.upper, np.full(m, INFINITY)])
        self.lhs = np.hstack([self.lhs, np.zeros((m, m))])

        n = self.securities
        cov = np.zeros((size, size))
        cov[:n, :n] = self.cov[:n, :n]
        self.cov = cov

    def _securities_vector(self, value: Any, name: str) -> np.ndarray:
        arr = np.asarray(value, dtype=np.float64).ravel()
        if len(arr) != self.securities:
            raise DimensionError(f"{name} has {len(arr)} elements, expected {self.securities}")
        return arr

    def __repr__(self) -> str:
        return (
            f"ProblemData(securities={self.securities}, "
            f"constraints={self.constraints}, variables={self.variables})"
        )
