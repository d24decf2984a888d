"""
Tests for the linear combination transform.

Tests:
- Exact timestamp matching
- Step-function alignment on the union of timestamps
- Alignment on the first input's timestamps
- Titles, socket counts and invalid inputs
"""

from datetime import timedelta

import numpy as np
import pytest

from tsgraph.data import MVTimeSeries
from tsgraph.transforms import LinearCombinationTransform, InputType


# ============================================================================
# TEST FIXTURES
# ============================================================================


@pytest.fixture
def x_and_y(make_series):
    """x on days 0..2, y on days 1..3."""
    x = make_series([1.0, 2.0, 3.0], 'X')
    y = make_series([10.0, 20.0, 30.0], 'Y', offset=1)
    return x, y


def connect(node, *series):
    for socket, s in enumerate(series):
        node.set_input(socket, s)
    return node.get_output(0)


def day(start_date, n):
    return start_date + timedelta(days=n)


# ============================================================================
# ALIGNMENT TESTS
# ============================================================================


class TestAlignment:
    """Test the three alignment modes."""

    def test_exact_time_match(self, x_and_y, start_date):
        """Test that only shared timestamps are emitted."""
        node = LinearCombinationTransform(requires_exact_time_match=True)
        out = connect(node, *x_and_y)

        assert out.timestamps == [day(start_date, 1), day(start_date, 2)]
        np.testing.assert_allclose(out.values, [2.0 - 10.0, 3.0 - 20.0])

    def test_step_alignment(self, x_and_y, start_date):
        """Test union of timestamps with last-known values."""
        node = LinearCombinationTransform()
        out = connect(node, *x_and_y)

        # day 0 is skipped because y has not started yet
        assert out.timestamps == [day(start_date, 1), day(start_date, 2), day(start_date, 3)]
        np.testing.assert_allclose(out.values, [-8.0, -17.0, 3.0 - 30.0])

    def test_step_alignment_holds_last_value(self, make_series):
        """Test that an exhausted input keeps contributing its last value."""
        x = make_series([1.0, 2.0], 'X')
        y = make_series([100.0], 'Y')
        node = LinearCombinationTransform(coefficients=[1.0, 1.0])

        out = connect(node, x, y)

        np.testing.assert_allclose(out.values, [101.0, 102.0])

    def test_times_from_first(self, x_and_y, start_date):
        """Test evaluation on the first input's clock."""
        node = LinearCombinationTransform(use_times_from_first=True)
        out = connect(node, *x_and_y)

        assert out.timestamps == [day(start_date, 1), day(start_date, 2)]
        np.testing.assert_allclose(out.values, [-8.0, -17.0])

    def test_times_from_first_overrides_exact(self, make_series, start_date):
        """Test that the first-input clock wins over exact matching."""
        x = make_series([1.0, 2.0, 3.0], 'X', offset=1)
        y = make_series([10.0], 'Y')
        node = LinearCombinationTransform(use_times_from_first=True,
                                          requires_exact_time_match=True)
        out = connect(node, x, y)

        assert len(out) == 3
        np.testing.assert_allclose(out.values, [-9.0, -8.0, -7.0])

    def test_three_inputs(self, make_series):
        node = LinearCombinationTransform(coefficients=[1.0, 2.0, 3.0])
        out = connect(node, make_series([1.0, 1.0]), make_series([1.0, 2.0]),
                      make_series([0.0, 1.0]))

        assert node.num_inputs() == 3
        np.testing.assert_allclose(out.values, [3.0, 8.0])
        assert out.title == "Linear Comb."


# ============================================================================
# NODE BEHAVIOUR TESTS
# ============================================================================


class TestNode:
    """Test sockets, titles and validity."""

    def test_defaults(self):
        node = LinearCombinationTransform()

        assert node.coefficients == [1.0, -1.0]
        assert node.num_inputs() == 2
        assert node.num_outputs() == 1
        assert node.get_input_name(1) == "Time Series #2"
        assert node.get_output_name(0) == "Time Series"

    def test_title(self, x_and_y):
        out = connect(LinearCombinationTransform(coefficients=[2.0, -0.5]), *x_and_y)
        assert out.title == "2.0xX - 0.5xY"

    def test_title_positive(self, x_and_y):
        out = connect(LinearCombinationTransform(coefficients=[1.0, 1.0]), *x_and_y)
        assert out.title == "1.0xX + 1.0xY"

    def test_needs_coefficients(self):
        with pytest.raises(ValueError, match="at least one coefficient"):
            LinearCombinationTransform(coefficients=[])

    def test_partial_inputs_invalid(self, x_and_y):
        node = LinearCombinationTransform()
        node.set_input(0, x_and_y[0])

        assert not node.is_valid
        assert node.get_input_type() == InputType.NONE

    def test_multivariate_input_invalid(self, make_series):
        mv = MVTimeSeries.from_components([make_series([1.0])])
        node = LinearCombinationTransform()

        node.set_input(0, make_series([1.0]))
        node.set_input(1, mv)

        assert node.get_input_type() == InputType.MIXED
        assert not node.is_valid

    def test_no_overlap_invalid(self, make_series):
        """Test that an empty combination leaves the node invalid."""
        node = LinearCombinationTransform(requires_exact_time_match=True)
        connect(node, make_series([1.0, 2.0]), make_series([1.0, 2.0], offset=5))

        assert not node.is_valid
        assert node.get_output(0) is None
