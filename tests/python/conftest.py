"""
pytest configuration and fixtures for critline tests.
"""

import pytest
import numpy as np

from critline.mvo import ProblemData


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def two_assets():
    """
    Two risky assets, long only, fully invested.

    The global minimum-variance mix would short asset 0
    (cov01 > var1), so the frontier runs from [1, 0] straight to [0, 1].
    First breakpoint: lambda = 0.028 / 0.05 = 0.56.
    """
    return {
        "returns": np.array([0.10, 0.05]),
        "covariance": np.array([
            [0.040, 0.012],
            [0.012, 0.010],
        ]),
        "first_lambda": 0.56,
    }


@pytest.fixture
def three_assets():
    """Three assets with annual vols 20/15/10% and moderate correlation."""
    vols = np.array([0.20, 0.15, 0.10])
    corr = np.array([
        [1.0, 0.3, 0.1],
        [0.3, 1.0, 0.2],
        [0.1, 0.2, 1.0],
    ])
    return {
        "returns": np.array([0.12, 0.08, 0.04]),
        "covariance": np.outer(vols, vols) * corr,
    }


@pytest.fixture
def random_problem():
    """Factory for random long-only problems with a positive definite covariance."""
    def make(n, seed=42):
        rng = np.random.default_rng(seed)
        factors = rng.normal(size=(n, n)) * 0.1
        covariance = factors @ factors.T + np.diag(rng.uniform(0.01, 0.05, n))
        returns = rng.uniform(0.02, 0.15, n)
        return {"returns": returns, "covariance": covariance}
    return make


@pytest.fixture
def simple_lp():
    """
    Simple LP problem for testing.

    maximize:   x + y
    subject to: x + 2y <= 10
                3x + y <= 15
                x, y >= 0

    Optimal: x=4, y=3, obj=7
    """
    return {
        "c": np.array([1.0, 1.0]),
        "A": np.array([
            [1.0, 2.0],
            [3.0, 1.0],
        ]),
        "b": np.array([10.0, 15.0]),
        "types": ["<=", "<="],
        "expected_obj": 7.0,
        "expected_x": np.array([4.0, 3.0]),
    }


@pytest.fixture
def make_data():
    """Factory for a budget-constrained ProblemData."""
    def make(returns, covariance, lower=None, upper=None):
        n = len(returns)
        data = ProblemData(n)
        data.set_expected_returns(returns)
        data.set_covariance(covariance)
        data.set_lower_bounds(np.zeros(n) if lower is None else lower)
        data.set_upper_bounds(np.ones(n) if upper is None else upper)
        return data
    return make


# ============================================================================
# Markers
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "benchmark: marks benchmark tests")
    config.addinivalue_line("markers", "integration: marks integration tests")
