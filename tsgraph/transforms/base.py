"""
Base classes for time-series transforms.

A transform is a Connectable with N input sockets and M output sockets.
Feeding an input stores the value and immediately recomputes the outputs,
which is what the graph cascade relies on.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional

from ..core.interface import check_socket
from ..data.timeseries import TimeSeries, MVTimeSeries, Longitudinal


class InputType(Enum):
    """
    Kind of data currently connected to a node.

    Attributes:
        NONE: Nothing connected (or some socket still empty)
        UNIVARIATE_TS: Every input is a TimeSeries
        MULTIVARIATE_TS: Every input is an MVTimeSeries
        LONGITUDINAL: Every input is a Longitudinal
        MIXED: Inputs of different kinds
    """
    NONE = "none"
    UNIVARIATE_TS = "univariate"
    MULTIVARIATE_TS = "multivariate"
    LONGITUDINAL = "longitudinal"
    MIXED = "mixed"

    @staticmethod
    def of(value: Any) -> 'InputType':
        """Classify a single value."""
        if isinstance(value, TimeSeries):
            return InputType.UNIVARIATE_TS
        if isinstance(value, MVTimeSeries):
            return InputType.MULTIVARIATE_TS
        if isinstance(value, Longitudinal):
            return InputType.LONGITUDINAL
        return InputType.NONE


class TimeSeriesTransformation(ABC):
    """
    Base class for transforms between time series.

    Subclasses declare their sockets and implement recompute(). The base
    class stores inputs, checks socket ranges, and serves outputs only
    while the node is valid.

    Attributes:
        is_valid: True once recompute() produced outputs for the current
            inputs
        outputs: Computed output values, one per output socket

    Example:
        >>> class Negate(TimeSeriesTransformation):
        ...     def num_inputs(self): return 1
        ...     def num_outputs(self): return 1
        ...     def recompute(self):
        ...         self.is_valid = False
        ...         bundle = self.get_input_bundle()
        ...         if not bundle:
        ...             return
        ...         self.outputs = [negated(bundle[0])]
        ...         self.is_valid = True
    """

    def __init__(self):
        self.is_valid = False
        self.outputs: List[Any] = []
        self._inputs: Dict[int, Any] = {}
        self._sources: Dict[int, Any] = {}

    # ------------------------------------------------------------------
    # Socket declarations
    # ------------------------------------------------------------------

    @abstractmethod
    def num_inputs(self) -> int:
        ...

    @abstractmethod
    def num_outputs(self) -> int:
        ...

    def get_input_name(self, index: int) -> str:
        check_socket(index, self.num_inputs(), 'input')
        return f"Input #{index + 1}"

    def get_output_name(self, index: int) -> str:
        check_socket(index, self.num_outputs(), 'output')
        return f"Output #{index + 1}"

    def get_allowed_input_types_for(self, socket: int) -> FrozenSet[type]:
        check_socket(socket, self.num_inputs(), 'input')
        return frozenset({TimeSeries})

    def get_output_types_for(self, socket: int) -> FrozenSet[type]:
        check_socket(socket, self.num_outputs(), 'output')
        return frozenset({TimeSeries})

    def get_description(self) -> str:
        """Longer human-readable description."""
        return type(self).__name__

    def get_short_description(self) -> str:
        """Short label for listings."""
        return type(self).__name__

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def set_input(self, socket: int, value: Any, source: Optional[Any] = None) -> None:
        """Store an input value and recompute."""
        check_socket(socket, self.num_inputs(), 'input')
        if value is None:
            self._inputs.pop(socket, None)
            self._sources.pop(socket, None)
        else:
            self._inputs[socket] = value
            self._sources[socket] = source
        self.recompute()

    def get_input(self, socket: int) -> Any:
        """Value currently stored on an input socket, or None."""
        check_socket(socket, self.num_inputs(), 'input')
        return self._inputs.get(socket)

    def get_input_source(self, socket: int) -> Any:
        """Source metadata passed with the current input value."""
        check_socket(socket, self.num_inputs(), 'input')
        return self._sources.get(socket)

    def get_output(self, socket: int) -> Any:
        check_socket(socket, self.num_outputs(), 'output')
        if not self.is_valid or socket >= len(self.outputs):
            return None
        return self.outputs[socket]

    def get_input_bundle(self) -> List[Any]:
        """
        All inputs in socket order.

        Returns:
            List of input values, or an empty list if any socket is empty
        """
        bundle = []
        for socket in range(self.num_inputs()):
            value = self._inputs.get(socket)
            if value is None:
                return []
            bundle.append(value)
        return bundle

    def get_input_type(self) -> InputType:
        """Common kind of all connected inputs (NONE if incomplete)."""
        bundle = self.get_input_bundle()
        if not bundle:
            return InputType.NONE
        kinds = {InputType.of(value) for value in bundle}
        if len(kinds) > 1:
            return InputType.MIXED
        return kinds.pop()

    @abstractmethod
    def recompute(self) -> None:
        ...

    def __repr__(self) -> str:
        state = 'valid' if self.is_valid else 'invalid'
        return f"{type(self).__name__}({state})"
