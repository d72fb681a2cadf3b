"""
Tests for the two-phase simplex stage.
"""

import numpy as np
import pytest

from critline.mvo import ProblemData, SimplexSolver, SolverState
from critline.mvo.simplex import UNIQUENESS_NUDGE
from critline.result import Status


def run(data):
    data.transform_constraints()
    state = SolverState(data)
    return SimplexSolver.run(data, state), state


class TestSimplexFeasible:
    """Problems with a maximum-return vertex."""

    def test_two_assets_start_at_best_asset(self, two_assets, make_data):
        data = make_data(two_assets["returns"], two_assets["covariance"])
        result, state = run(data)

        assert result.status == Status.OK
        assert result.is_successful
        assert result.iterations > 0
        assert not result.degenerate_retry
        np.testing.assert_allclose(state.weights[:2], [1.0, 0.0])
        assert state.in_vars.tolist() == [0]

    def test_three_assets(self, three_assets, make_data):
        data = make_data(three_assets["returns"], three_assets["covariance"])
        result, state = run(data)

        assert result.status == Status.OK
        np.testing.assert_allclose(state.weights[:3], [1.0, 0.0, 0.0])

    def test_upper_bounds_spread_weight(self, make_data):
        data = make_data(
            [0.10, 0.08, 0.05],
            np.eye(3) * 0.01,
            upper=[0.5, 0.3, 1.0],
        )
        result, state = run(data)

        assert result.status == Status.OK
        np.testing.assert_allclose(state.weights[:3], [0.5, 0.3, 0.2])

    def test_basis_inverse_matches_in_columns(self, random_problem, make_data):
        problem = random_problem(6)
        data = make_data(problem["returns"], problem["covariance"], upper=np.full(6, 0.4))
        result, state = run(data)

        assert result.status == Status.OK
        basis = data.lhs[:, state.in_vars]
        np.testing.assert_allclose(state.ai @ basis, np.eye(data.constraints), atol=1e-12)

    def test_weights_satisfy_constraints(self, random_problem, make_data):
        problem = random_problem(6, seed=3)
        data = make_data(problem["returns"], problem["covariance"], upper=np.full(6, 0.3))
        result, state = run(data)

        assert result.status == Status.OK
        w = state.weights[:data.variables]
        np.testing.assert_allclose(data.lhs[:, :data.variables] @ w, data.rhs, atol=1e-10)
        assert np.all(w >= -1e-10)
        assert np.all(w[:6] <= 0.3 + 1e-10)


class TestSimplexTieBreaks:
    """Later-scanned entering candidates and earlier-scanned leaving rows win ties."""

    def test_equal_returns_last_asset_enters(self, make_data):
        data = make_data([0.10, 0.10], np.eye(2) * 0.01)
        result, state = run(data)

        assert result.status == Status.OK
        np.testing.assert_allclose(state.weights[:2], [0.0, 1.0])

    def test_unprofitable_out_variable_nudged(self, make_data):
        data = make_data([0.10, 0.10], np.eye(2) * 0.01)
        run(data)

        # Asset 1 sits OUT at its upper bound with zero reduced profit.
        assert data.mean[0] == 0.10
        assert data.mean[1] == pytest.approx(0.10 + UNIQUENESS_NUDGE)

    def test_entering_bound_flip_beats_tied_artificial(self, make_data):
        data = make_data([0.05, 0.10], np.eye(2) * 0.01)
        result, state = run(data)

        # Asset 1 flips to its upper bound, then asset 0 replaces the artificial.
        assert result.status == Status.OK
        assert result.iterations == 2
        assert state.is_up(1)
        assert state.in_vars.tolist() == [0]
        np.testing.assert_allclose(state.weights[:2], [0.0, 1.0])

    def test_first_scanned_in_variable_leaves_on_tie(self):
        data = ProblemData(2, ["=", "="])
        data.set_constraints([[1, 1], [1, 1]], [1, 1])
        data.set_upper_bounds([1, 1])
        data.allow_degenerate = False
        result, state = run(data)

        # Both artificials sit at zero when asset 0 enters; the first one leaves.
        assert result.status == Status.DEGENERATE
        assert state.in_vars.tolist() == [0, 3]


class TestSimplexFailures:
    """Tagged failure outcomes."""

    def test_infeasible(self):
        data = ProblemData(2, ["=", "="])
        data.set_constraints([[1, 1], [1, 1]], [1, 2])
        data.set_upper_bounds([1, 1])
        result, _ = run(data)

        assert result.status == Status.INFEASIBLE
        assert not result.is_successful

    def test_unbounded(self):
        data = ProblemData(2, ["<"])
        data.set_constraints([[1, -1]], [1])
        data.set_expected_returns([0.10, 0.05])
        result, _ = run(data)

        assert result.status == Status.UNBOUNDED

    def test_degenerate_without_retry(self):
        data = ProblemData(2, ["=", "="])
        data.set_constraints([[1, 1], [1, 1]], [1, 1])
        data.set_upper_bounds([1, 1])
        data.set_expected_returns([0.10, 0.05])
        data.allow_degenerate = False
        result, _ = run(data)

        assert result.status == Status.DEGENERATE

    def test_degenerate_retry(self):
        data = ProblemData(2, ["=", "="])
        data.set_constraints([[1, 1], [1, 1]], [1, 1])
        data.set_upper_bounds([1, 1])
        data.set_expected_returns([0.10, 0.05])
        result, state = run(data)

        assert result.status == Status.OK
        assert result.degenerate_retry
        assert data.variables == 4
        np.testing.assert_allclose(state.weights[:2], [1.0, 0.0])
