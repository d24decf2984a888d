"""
Tests for matrix helpers.
"""

import numpy as np
import pytest

from tsgraph.core.interface import InvalidGeometryError
from tsgraph.numerics import (
    to_vector,
    to_matrix,
    extract_column,
    submatrix,
    block_matrix,
    hstack,
    vstack,
    column_means,
    covariance,
    correlation,
)


@pytest.fixture
def m():
    return np.array([[1.0, 2.0, 3.0],
                     [4.0, 5.0, 6.0]])


# ============================================================================
# RESHAPING TESTS
# ============================================================================


class TestReshape:
    """Test vector/matrix conversion."""

    def test_to_vector_is_column_major(self, m):
        np.testing.assert_array_equal(to_vector(m), [1, 4, 2, 5, 3, 6])

    def test_to_matrix_inverts_to_vector(self, m):
        np.testing.assert_array_equal(to_matrix(to_vector(m), 2, 3), m)

    def test_to_matrix_size_mismatch(self):
        with pytest.raises(InvalidGeometryError, match="Invalid vector to matrix"):
            to_matrix([1.0, 2.0, 3.0], 2, 2)

    def test_geometry_error_is_value_error(self):
        with pytest.raises(ValueError):
            to_matrix([1.0], 2, 2)

    def test_non_matrix_rejected(self):
        with pytest.raises(InvalidGeometryError):
            to_vector([1.0, 2.0])


# ============================================================================
# SLICING TESTS
# ============================================================================


class TestSlicing:
    """Test columns and sub-blocks."""

    def test_extract_column(self, m):
        column = extract_column(m, 1)
        column[0] = 99.0

        np.testing.assert_array_equal(extract_column(m, 1), [2.0, 5.0])

    def test_extract_column_out_of_range(self, m):
        with pytest.raises(InvalidGeometryError):
            extract_column(m, 3)

    def test_submatrix(self, m):
        np.testing.assert_array_equal(submatrix(m, 0, 1, 2, 3), [[2.0, 3.0], [5.0, 6.0]])

    @pytest.mark.parametrize("bounds", [
        (1, 0, 1, 1),   # empty row range
        (0, 0, 3, 1),   # too many rows
        (-1, 0, 1, 1),  # negative start
        (2, 0, 3, 1),   # start past last row
    ])
    def test_submatrix_bad_rows(self, m, bounds):
        with pytest.raises(InvalidGeometryError, match="row"):
            submatrix(m, *bounds)

    def test_submatrix_bad_columns(self, m):
        with pytest.raises(InvalidGeometryError, match="column"):
            submatrix(m, 0, 2, 1, 4)


# ============================================================================
# BINDING TESTS
# ============================================================================


class TestBinding:
    """Test block assembly."""

    def test_block_matrix(self):
        a = np.eye(2)
        b = np.zeros((2, 1))
        c = np.ones((1, 2))
        d = np.full((1, 1), 7.0)

        result = block_matrix(a, b, c, d)

        assert result.shape == (3, 3)
        assert result[2, 2] == 7.0
        np.testing.assert_array_equal(result[:2, :2], np.eye(2))

    def test_block_matrix_mismatch(self):
        with pytest.raises(InvalidGeometryError, match="block sizes"):
            block_matrix(np.eye(2), np.zeros((1, 1)), np.ones((1, 2)), np.ones((1, 1)))

    def test_hstack_vstack(self, m):
        assert hstack(m, m).shape == (2, 6)
        assert vstack(m, m).shape == (4, 3)

    def test_stack_mismatch(self, m):
        with pytest.raises(InvalidGeometryError, match="rows"):
            hstack(m, np.ones((3, 1)))
        with pytest.raises(InvalidGeometryError, match="columns"):
            vstack(m, np.ones((1, 2)))


# ============================================================================
# MOMENT TESTS
# ============================================================================


class TestMoments:
    """Test means, covariance and correlation."""

    def test_column_means_shape(self, m):
        means = column_means(m)

        assert means.shape == (1, 3)
        np.testing.assert_allclose(means, [[2.5, 3.5, 4.5]])

    def test_covariance_is_population(self, rng):
        data = rng.normal(size=(200, 3))
        np.testing.assert_allclose(covariance(data), np.cov(data, rowvar=False, bias=True))

    def test_correlation(self, rng):
        data = rng.normal(size=(200, 3))
        data[:, 2] = 2.0 * data[:, 0] + 1.0

        corr = correlation(data)

        np.testing.assert_allclose(np.diag(corr), 1.0)
        assert corr[0, 2] == pytest.approx(1.0)
        np.testing.assert_allclose(corr, np.corrcoef(data, rowvar=False), atol=1e-10)
