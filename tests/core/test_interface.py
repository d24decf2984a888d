"""
Tests for the node contract.

Tests:
- Connectable protocol checks
- Socket validation helpers
- SocketSpec descriptions
- Socket compatibility
"""

import pytest

from tsgraph.core.interface import (
    Connectable,
    SocketSpec,
    InvalidSocketError,
    InvalidGeometryError,
    CycleDetectedError,
    check_socket,
    describe_sockets,
    is_compatible,
)
from tsgraph.data import TimeSeries, MVTimeSeries, Longitudinal
from tsgraph.models import ARModel
from tsgraph.transforms import ExpSmoother, LinearCombinationTransform, SeriesSource


# ============================================================================
# PROTOCOL TESTS
# ============================================================================


class TestConnectable:
    """Test the runtime-checkable protocol."""

    @pytest.mark.parametrize("node", [
        SeriesSource(),
        ExpSmoother(),
        LinearCombinationTransform(),
        ARModel(),
    ])
    def test_builtin_nodes_are_connectable(self, node):
        """Test that every built-in node satisfies the protocol."""
        assert isinstance(node, Connectable)

    def test_recording_node_is_connectable(self, make_node):
        """Test a duck-typed node without any base class."""
        assert isinstance(make_node('A'), Connectable)

    def test_plain_object_is_not_connectable(self):
        """Test that missing methods fail the check."""
        assert not isinstance(object(), Connectable)
        assert not isinstance("series", Connectable)


# ============================================================================
# SOCKET HELPER TESTS
# ============================================================================


class TestCheckSocket:
    """Test socket range validation."""

    def test_valid_socket(self):
        """Test that in-range sockets pass silently."""
        check_socket(0, 1)
        check_socket(2, 3, 'output')

    @pytest.mark.parametrize("socket", [-1, 1, 5])
    def test_invalid_socket(self, socket):
        """Test out-of-range sockets."""
        with pytest.raises(InvalidSocketError, match="Invalid input socket"):
            check_socket(socket, 1)

    def test_error_details(self):
        """Test error attributes and base class."""
        with pytest.raises(IndexError) as excinfo:
            check_socket(3, 2, 'output')

        error = excinfo.value
        assert isinstance(error, InvalidSocketError)
        assert error.socket == 3
        assert error.count == 2
        assert error.direction == 'output'

    def test_node_methods_raise(self):
        """Test that node socket accessors validate their index."""
        smoother = ExpSmoother()
        with pytest.raises(InvalidSocketError):
            smoother.get_input_name(1)
        with pytest.raises(InvalidSocketError):
            smoother.get_output(1)
        with pytest.raises(InvalidSocketError):
            smoother.set_input(2, None)
        with pytest.raises(InvalidSocketError):
            smoother.get_allowed_input_types_for(-1)


class TestExceptions:
    """Test exception hierarchy."""

    def test_geometry_error_is_value_error(self):
        assert issubclass(InvalidGeometryError, ValueError)

    def test_cycle_error_keeps_cycle(self):
        error = CycleDetectedError([2, 3, 2])
        assert error.cycle == [2, 3, 2]
        assert "2 -> 3 -> 2" in str(error)


# ============================================================================
# SOCKET DESCRIPTION TESTS
# ============================================================================


class TestDescribeSockets:
    """Test SocketSpec collection."""

    def test_smoother_sockets(self):
        """Test names and types of a one-in, one-out node."""
        specs = describe_sockets(ExpSmoother())

        assert [s.direction for s in specs] == ['input', 'output']
        assert specs[0].name == "Input TS"
        assert specs[1].name == "Filtered TS"
        assert specs[0].types == frozenset({TimeSeries, MVTimeSeries})

    def test_filter_by_direction(self):
        """Test direction filter."""
        model = ARModel()
        outputs = describe_sockets(model, 'output')

        assert [s.name for s in outputs] == ["Model", "Residuals"]
        assert describe_sockets(SeriesSource(), 'input') == []

    def test_linear_combination_socket_count(self):
        """Test that the input count follows the coefficients."""
        node = LinearCombinationTransform(coefficients=[1.0, 2.0, 3.0])
        inputs = describe_sockets(node, 'input')

        assert [s.name for s in inputs] == [
            "Time Series #1", "Time Series #2", "Time Series #3"
        ]

    def test_spec_accepts(self, make_series):
        """Test instance checks against declared types."""
        spec = SocketSpec(index=0, name="Data", types=frozenset({TimeSeries, Longitudinal}))

        assert spec.accepts(make_series([1.0]))
        assert spec.accepts(Longitudinal())
        assert not spec.accepts(3.0)
        assert SocketSpec(index=0, name="any").accepts(3.0)

    def test_spec_repr(self):
        spec = SocketSpec(index=1, name="Residuals",
                          types=frozenset({TimeSeries, Longitudinal}), direction='output')
        assert repr(spec) == 'SocketSpec(output 1 "Residuals": Longitudinal|TimeSeries)'


class TestCompatibility:
    """Test output-to-input compatibility."""

    def test_source_feeds_smoother(self):
        assert is_compatible(SeriesSource(), 0, ExpSmoother(), 0)

    def test_model_output_does_not_feed_smoother(self):
        """Test that the fitted model itself is not a series."""
        assert not is_compatible(ARModel(), 0, ExpSmoother(), 0)

    def test_residuals_feed_linear_combination(self):
        """Test that residuals are usable downstream."""
        assert is_compatible(ARModel(), 1, LinearCombinationTransform(), 0)

    def test_model_output_accepts_subclass(self):
        """Test subclass matching of produced types."""

        class Consumer(ExpSmoother):
            def get_allowed_input_types_for(self, socket):
                return frozenset({ARModel})

        assert is_compatible(ARModel(), 0, Consumer(), 0)
