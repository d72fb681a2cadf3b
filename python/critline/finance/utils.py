"""
Finance Utility Functions
=========================

Estimation of the optimizer inputs from price and return histories.
"""

from __future__ import annotations

from typing import Union

import numpy as np

from ..exceptions import InvalidInputError

# Type aliases
ArrayLike = Union[np.ndarray, list]


def compute_returns(
    prices: ArrayLike,
    method: str = "simple",
    periods: int = 1,
) -> np.ndarray:
    """
    Compute returns from price data.

    Args:
        prices: Price series (T,) or matrix (T, N) for N assets
        method: 'simple' for arithmetic returns, 'log' for log returns
        periods: Holding period in rows (default: 1)

    Returns:
        Returns array with T - periods rows

    Example:
        >>> compute_returns([100.0, 102.0, 101.0])
        array([ 0.02      , -0.00980392])
    """
    prices = np.asarray(prices, dtype=np.float64)
    if periods < 1 or periods >= len(prices):
        raise InvalidInputError(f"periods must be in [1, {len(prices) - 1}], got {periods}")
    if np.any(prices <= 0):
        raise InvalidInputError("prices must be positive")

    ratio = prices[periods:] / prices[:-periods]
    if method == "simple":
        return ratio - 1.0
    if method == "log":
        return np.log(ratio)
    raise InvalidInputError(f"method must be 'simple' or 'log', got '{method}'")


def compute_covariance(
    returns: ArrayLike,
    method: str = "sample",
    shrinkage: float = 0.0,
) -> np.ndarray:
    """
    Estimate the covariance matrix of a return history.

    Args:
        returns: Return matrix (T, N) for N assets
        method: 'sample' for the unbiased sample covariance, 'ledoit_wolf'
            for shrinkage towards a scaled identity with the Ledoit-Wolf
            intensity
        shrinkage: Extra shrinkage towards the scaled identity (0 to 1),
            applied after the estimator

    Returns:
        Symmetric covariance matrix (N, N)
    """
    returns = np.asarray(returns, dtype=np.float64)
    if returns.ndim == 1:
        returns = returns.reshape(-1, 1)
    if returns.shape[0] < 2:
        raise InvalidInputError("at least two observations are required")
    if not 0.0 <= shrinkage <= 1.0:
        raise InvalidInputError(f"shrinkage must be in [0, 1], got {shrinkage}")

    if method == "sample":
        cov = np.atleast_2d(np.cov(returns, rowvar=False))
    elif method == "ledoit_wolf":
        cov = _ledoit_wolf(returns)
    else:
        raise InvalidInputError(f"method must be 'sample' or 'ledoit_wolf', got '{method}'")

    if shrinkage > 0:
        n = cov.shape[0]
        target = np.trace(cov) / n * np.eye(n)
        cov = (1.0 - shrinkage) * cov + shrinkage * target

    return (cov + cov.T) / 2


def _ledoit_wolf(returns: np.ndarray) -> np.ndarray:
    """Ledoit-Wolf (2004) shrinkage towards ``mu * I``."""
    t, n = returns.shape
    centered = returns - returns.mean(axis=0)
    sample = centered.T @ centered / t
    mu = np.trace(sample) / n
    target = mu * np.eye(n)

    d2 = np.sum((sample - target) ** 2)
    if d2 == 0.0:
        return sample
    # Mean squared distance of the single-observation outer products.
    b2 = sum(np.sum((np.outer(x, x) - sample) ** 2) for x in centered) / (t * t)
    intensity = min(b2, d2) / d2
    return (1.0 - intensity) * sample + intensity * target


def is_positive_definite(matrix: ArrayLike, tolerance: float = 1e-10) -> bool:
    """Check that a symmetric matrix has no eigenvalue below ``-tolerance``."""
    try:
        eigenvalues = np.linalg.eigvalsh(np.asarray(matrix, dtype=np.float64))
    except np.linalg.LinAlgError:
        return False
    return bool(np.all(eigenvalues > -tolerance))


def make_positive_definite(
    matrix: ArrayLike,
    min_eigenvalue: float = 1e-8,
) -> np.ndarray:
    """
    Clip the spectrum of a symmetric matrix from below.

    Args:
        matrix: Input matrix (symmetrized first)
        min_eigenvalue: Smallest eigenvalue of the result

    Returns:
        Positive definite matrix
    """
    sym = np.atleast_2d(np.asarray(matrix, dtype=np.float64))
    if sym.ndim != 2 or sym.shape[0] != sym.shape[1]:
        raise InvalidInputError(f"expected a square matrix, got shape {sym.shape}")
    sym = (sym + sym.T) / 2

    values, vectors = np.linalg.eigh(sym)
    if values[0] >= min_eigenvalue:
        return sym
    clipped = (vectors * np.maximum(values, min_eigenvalue)) @ vectors.T
    return (clipped + clipped.T) / 2
