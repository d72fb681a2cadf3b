"""
Tests for ProblemData and constraint handling.
"""

import numpy as np
import pytest

from critline.exceptions import DimensionError, InvalidInputError
from critline.mvo import INFINITY, ConstraintType, ProblemData


class TestConstraintType:
    """Parsing of constraint senses."""

    @pytest.mark.parametrize("value,expected", [
        ("=", ConstraintType.EQUAL),
        ("==", ConstraintType.EQUAL),
        ("<=", ConstraintType.LESS_THAN),
        ("<", ConstraintType.LESS_THAN),
        (">=", ConstraintType.GREATER_THAN),
        (0, ConstraintType.EQUAL),
        (-1, ConstraintType.LESS_THAN),
        (1, ConstraintType.GREATER_THAN),
        (ConstraintType.EQUAL, ConstraintType.EQUAL),
    ])
    def test_parse(self, value, expected):
        assert ConstraintType.parse(value) is expected

    def test_parse_unknown(self):
        with pytest.raises(InvalidInputError):
            ConstraintType.parse("!=")


class TestProblemDataLayout:
    """Sizes and defaults."""

    def test_default_budget_row(self):
        data = ProblemData(3)
        assert data.constraints == 1
        assert data.variables == 3
        assert data.size == 4
        np.testing.assert_array_equal(data.lhs[0], [1, 1, 1, 0])
        np.testing.assert_array_equal(data.rhs, [1])

    def test_slack_columns_counted(self):
        data = ProblemData(2, ["=", "<", ">"])
        assert data.constraints == 3
        assert data.variables == 4
        assert data.lhs.shape == (3, 7)
        assert data.cov.shape == (7, 7)

    def test_defaults(self):
        data = ProblemData(2)
        assert data.max_corner_portfolios == 100
        assert data.end_lambda == 1e-6
        assert data.allow_degenerate is True
        assert np.all(data.upper == INFINITY)
        assert np.all(data.lower == 0)

    def test_no_securities(self):
        with pytest.raises(InvalidInputError):
            ProblemData(0)


class TestProblemDataSetters:
    """Loading problem inputs."""

    def test_set_constraints(self):
        data = ProblemData(2, ["<"])
        data.set_constraints([[1.0, 2.0]], [3.0])
        np.testing.assert_array_equal(data.lhs[0, :2], [1, 2])
        assert data.rhs[0] == 3.0

    def test_set_constraints_wrong_shape(self):
        data = ProblemData(2, ["<"])
        with pytest.raises(DimensionError):
            data.set_constraints([[1.0, 2.0, 3.0]], [3.0])

    def test_set_constraints_wrong_rhs(self):
        data = ProblemData(2, ["<"])
        with pytest.raises(DimensionError):
            data.set_constraints([[1.0, 2.0]], [3.0, 4.0])

    def test_upper_infinity_mapped(self):
        data = ProblemData(2)
        data.set_upper_bounds([np.inf, 0.5])
        assert data.upper[0] == INFINITY
        assert data.upper[1] == 0.5

    def test_full_covariance(self):
        data = ProblemData(2)
        data.set_covariance([[0.04, 0.01], [0.01, 0.09]])
        np.testing.assert_array_equal(data.cov[:2, :2], [[0.04, 0.01], [0.01, 0.09]])
        assert np.all(data.cov[2] == 0)

    def test_packed_covariance(self):
        data = ProblemData(3)
        # Row-wise lower triangle: c00, c10, c11, c20, c21, c22
        data.set_covariance([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
        expected = np.array([
            [1.0, 2.0, 4.0],
            [2.0, 3.0, 5.0],
            [4.0, 5.0, 6.0],
        ])
        np.testing.assert_array_equal(data.cov[:3, :3], expected)

    def test_packed_covariance_wrong_length(self):
        data = ProblemData(3)
        with pytest.raises(DimensionError):
            data.set_covariance([1.0, 2.0, 3.0])

    def test_vector_length_checked(self):
        data = ProblemData(3)
        with pytest.raises(DimensionError):
            data.set_expected_returns([0.1, 0.2])


class TestTransformConstraints:
    """Inequalities become <= rows with slack columns."""

    def test_slacks_and_sign_flip(self):
        data = ProblemData(2, ["<", "=", ">"])
        data.set_constraints([[1, 1], [1, -1], [2, 3]], [1, 0, 4])
        data.transform_constraints()

        np.testing.assert_array_equal(data.lhs[0, :4], [1, 1, 1, 0])
        np.testing.assert_array_equal(data.lhs[1, :4], [1, -1, 0, 0])
        np.testing.assert_array_equal(data.lhs[2, :4], [-2, -3, 0, 1])
        np.testing.assert_array_equal(data.rhs, [1, 0, -4])

    def test_idempotent(self):
        data = ProblemData(2, [">"])
        data.set_constraints([[1, 1]], [1])
        data.transform_constraints()
        data.transform_constraints()
        np.testing.assert_array_equal(data.lhs[0, :3], [-1, -1, 1])
        assert data.rhs[0] == -1


class TestPromoteArtificials:
    """Degenerate retry layout."""

    def test_promote(self):
        data = ProblemData(2)
        data.set_covariance([[0.04, 0.01], [0.01, 0.09]])
        data.promote_artificials(1e-8)

        assert data.variables == 3
        assert data.size == 4
        assert data.upper[2] == 1e-8
        assert data.upper[3] == INFINITY
        assert data.lhs.shape == (1, 4)
        assert data.cov.shape == (4, 4)
        np.testing.assert_array_equal(data.cov[:2, :2], [[0.04, 0.01], [0.01, 0.09]])
        assert len(data.mean) == len(data.lower) == len(data.upper) == 4
