"""
Tests for the optimizer orchestration and the frontier it produces.
"""

import numpy as np
import pytest

from critline.exceptions import DegenerateError, InfeasibleError, UnboundedError
from critline.mvo import EPSILON, Portfolio, ProblemData, optimize
from critline.mvo.markowitz import _collapse_duplicates


class TestKnownFrontiers:
    """Small problems with hand-checked frontiers."""

    def test_single_asset(self):
        data = ProblemData(1)
        data.set_expected_returns([0.07])
        data.set_covariance([[0.02]])
        frontier = optimize(data)

        assert len(frontier) == 1
        np.testing.assert_array_equal(frontier[0].weights, [1.0])
        assert frontier[0].mean == pytest.approx(0.07)
        assert frontier[0].variance == pytest.approx(0.02)

    def test_single_asset_capped_at_budget(self):
        # The cap ties with the artificial in phase 1, which then stays IN
        # at zero and is retried as a variable capped at EPSILON.
        data = ProblemData(1)
        data.set_expected_returns([0.07])
        data.set_covariance([[0.02]])
        data.set_upper_bounds([1.0])
        frontier = optimize(data)

        np.testing.assert_array_equal(frontier[0].weights, [1.0])
        assert frontier[0].mean == pytest.approx(0.07)
        for p in frontier:
            assert p.weights[0] == pytest.approx(1.0, abs=2 * EPSILON)

    def test_two_assets(self, two_assets, make_data):
        frontier = optimize(make_data(two_assets["returns"], two_assets["covariance"]))

        assert len(frontier) == 2
        np.testing.assert_array_equal(frontier[0].weights, [1.0, 0.0])
        np.testing.assert_array_equal(frontier[-1].weights, [0.0, 1.0])
        assert frontier[0].lambda_ == pytest.approx(two_assets["first_lambda"])
        assert frontier[-1].lambda_ == 0.0
        assert frontier[-1].mean == pytest.approx(0.05)
        assert frontier[-1].variance == pytest.approx(0.01)

    def test_interior_minimum_variance(self, make_data):
        # Uncorrelated: min variance mix is proportional to 1/var.
        frontier = optimize(make_data([0.10, 0.05], [[0.04, 0.0], [0.0, 0.01]]))

        np.testing.assert_array_equal(frontier[0].weights, [1.0, 0.0])
        np.testing.assert_allclose(frontier[-1].weights, [0.2, 0.8], atol=1e-9)
        assert frontier[-1].variance == pytest.approx(0.008)

    def test_identical_risk_single_corner(self, make_data):
        frontier = optimize(make_data([0.10, 0.05], [[0.04, 0.04], [0.04, 0.04]]))

        assert len(frontier) == 1
        np.testing.assert_array_equal(frontier[0].weights, [1.0, 0.0])

    def test_corner_limit(self, three_assets, make_data):
        data = make_data(three_assets["returns"], three_assets["covariance"])
        data.max_corner_portfolios = 1
        frontier = optimize(data)

        assert len(frontier) == 1
        np.testing.assert_array_equal(frontier[0].weights, [1.0, 0.0, 0.0])


class TestFrontierProperties:
    """Invariants that hold on every frontier."""

    @pytest.mark.parametrize("n,seed", [(3, 1), (5, 2), (8, 3), (12, 4)])
    def test_random_frontier(self, random_problem, make_data, n, seed):
        problem = random_problem(n, seed=seed)
        upper = np.full(n, 0.4 if n > 3 else 1.0)
        data = make_data(problem["returns"], problem["covariance"], upper=upper)
        frontier = optimize(data)

        assert len(frontier) >= 1
        for p in frontier:
            assert len(p.weights) == n
            assert np.all(p.weights >= -EPSILON)
            assert np.all(p.weights <= upper + EPSILON)
            assert p.weights.sum() == pytest.approx(1.0, abs=EPSILON)

        lambdas = [p.lambda_ for p in frontier]
        means = [p.mean for p in frontier]
        variances = [p.variance for p in frontier]
        assert all(a > b for a, b in zip(lambdas, lambdas[1:]))
        assert all(a >= b - 1e-12 for a, b in zip(means, means[1:]))
        assert all(a >= b - 1e-12 for a, b in zip(variances, variances[1:]))

    def test_weights_snapped_to_bounds(self, random_problem, make_data):
        problem = random_problem(8, seed=5)
        frontier = optimize(make_data(problem["returns"], problem["covariance"]))

        for p in frontier:
            for w in p.weights:
                assert w == 0.0 or abs(w) >= EPSILON
                assert w == 1.0 or abs(w - 1.0) >= EPSILON

    def test_deterministic(self, random_problem, make_data):
        problem = random_problem(8, seed=6)
        first = optimize(make_data(problem["returns"], problem["covariance"]))
        second = optimize(make_data(problem["returns"], problem["covariance"]))

        assert len(first) == len(second)
        for a, b in zip(first, second):
            np.testing.assert_array_equal(a.weights, b.weights)
            assert a.lambda_ == b.lambda_
            assert a.mean == b.mean
            assert a.variance == b.variance

    def test_extra_inequality_respected(self, random_problem):
        problem = random_problem(5, seed=8)
        data = ProblemData(5, ["=", "<"])
        # Budget plus "assets 0 and 1 hold at most 30% together".
        data.set_constraints([[1, 1, 1, 1, 1], [1, 1, 0, 0, 0]], [1, 0.3])
        data.set_expected_returns(problem["returns"])
        data.set_covariance(problem["covariance"])
        data.set_upper_bounds(np.ones(5))
        frontier = optimize(data)

        for p in frontier:
            assert p.weights[0] + p.weights[1] <= 0.3 + EPSILON
            assert p.weights.sum() == pytest.approx(1.0, abs=EPSILON)


class TestFailures:
    """Non-OK simplex outcomes become exceptions."""

    def test_infeasible(self):
        data = ProblemData(2, ["=", "="])
        data.set_constraints([[1, 1], [1, 1]], [1, 2])
        data.set_upper_bounds([1, 1])
        with pytest.raises(InfeasibleError, match="Infeasible problem. Check constraints and limits."):
            optimize(data)

    def test_unbounded(self):
        data = ProblemData(2, ["<"])
        data.set_constraints([[1, -1]], [1])
        data.set_expected_returns([0.10, 0.05])
        data.set_covariance(np.eye(2) * 0.01)
        with pytest.raises(UnboundedError) as excinfo:
            optimize(data)
        assert excinfo.value.message == "Unbounded E. Make sure you have a valid budget constraint."

    def test_degenerate_disallowed(self):
        data = ProblemData(2, ["=", "="])
        data.set_constraints([[1, 1], [1, 1]], [1, 1])
        data.set_upper_bounds([1, 1])
        data.allow_degenerate = False
        with pytest.raises(DegenerateError, match="Degenerate problem."):
            optimize(data)

    def test_degenerate_retry_frontier(self, two_assets):
        data = ProblemData(2, ["=", "="])
        data.set_constraints([[1, 1], [1, 1]], [1, 1])
        data.set_upper_bounds([1, 1])
        data.set_expected_returns(two_assets["returns"])
        data.set_covariance(two_assets["covariance"])
        frontier = optimize(data)

        np.testing.assert_allclose(frontier[0].weights, [1.0, 0.0], atol=1e-9)
        np.testing.assert_allclose(frontier[-1].weights, [0.0, 1.0], atol=1e-9)


class TestCollapseDuplicates:
    """Consecutive equal corners keep the later one."""

    def test_later_portfolio_kept(self):
        a = Portfolio(weights=[1.0, 0.0], lambda_=2.0, mean=0.1, variance=0.04)
        b = Portfolio(weights=[1.0, 1e-10], lambda_=1.0, mean=0.1, variance=0.04)
        c = Portfolio(weights=[0.0, 1.0], lambda_=0.0, mean=0.05, variance=0.01)
        result = _collapse_duplicates([a, b, c])

        assert result == [b, c]

    def test_non_consecutive_kept(self):
        a = Portfolio(weights=[1.0, 0.0], lambda_=2.0, mean=0.1, variance=0.04)
        b = Portfolio(weights=[0.5, 0.5], lambda_=1.0, mean=0.07, variance=0.02)
        c = Portfolio(weights=[1.0, 0.0], lambda_=0.0, mean=0.1, variance=0.04)

        assert len(_collapse_duplicates([a, b, c])) == 3
