"""
Base classes for statistical time-series models.

A model is a graph node with one data input. Connecting data fits the
model; its outputs are the fitted model itself and its residuals, so
downstream nodes can consume either.
"""

from abc import ABC, abstractmethod
import logging
from typing import Any, FrozenSet, List, Optional

import numpy as np

from ..core.interface import check_socket
from ..data.timeseries import TimeSeries, Longitudinal


logger = logging.getLogger(__name__)


class TimeSeriesModel(ABC):
    """
    Connectable base for models fitted to connected data.

    Sockets:
        input 0 "Data": the data to fit
        output 0 "Model": the fitted model instance
        output 1 "Residuals": one-step residuals

    Attributes:
        is_valid: True once the model is fitted to the current data
        the_data: Currently connected data (None if disconnected)
        last_error: Why the last connection or fit was rejected, if it was
    """

    OUTPUT_NAMES = ("Model", "Residuals")

    def __init__(self):
        self.is_valid = False
        self.the_data: Any = None
        self.data_source: Any = None
        self.residuals: Any = None
        self.last_error: Optional[str] = None

    # ------------------------------------------------------------------
    # Socket declarations
    # ------------------------------------------------------------------

    def num_inputs(self) -> int:
        return 1

    def num_outputs(self) -> int:
        return len(self.OUTPUT_NAMES)

    def get_input_name(self, index: int) -> str:
        check_socket(index, self.num_inputs(), 'input')
        return "Data"

    def get_output_name(self, index: int) -> str:
        check_socket(index, self.num_outputs(), 'output')
        return self.OUTPUT_NAMES[index]

    @abstractmethod
    def get_allowed_input_types_for(self, socket: int) -> FrozenSet[type]:
        ...

    def get_output_types_for(self, socket: int) -> FrozenSet[type]:
        check_socket(socket, self.num_outputs(), 'output')
        if socket == 0:
            return frozenset({type(self)})
        return frozenset({TimeSeries, Longitudinal})

    # ------------------------------------------------------------------
    # Data connection
    # ------------------------------------------------------------------

    @abstractmethod
    def check_data_validity(self, data: Any, fail_messages: Optional[List[str]] = None) -> bool:
        """Whether data can be fitted; reasons are appended to fail_messages."""
        ...

    def on_data_connection(self) -> None:
        """Hook run after valid data is connected, before fitting."""

    def set_input(self, socket: int, value: Any, source: Optional[Any] = None) -> None:
        """Connect (or with None, disconnect) data and refit."""
        check_socket(socket, self.num_inputs(), 'input')
        self.last_error = None

        if value is None:
            self.the_data = None
            self.data_source = None
        else:
            messages: List[str] = []
            if not self.check_data_validity(value, messages):
                self.the_data = None
                self.data_source = None
                self.last_error = ' '.join(messages) or "Invalid data connection."
            else:
                self.the_data = value
                self.data_source = source
                self.on_data_connection()

        self.recompute()

    def get_output(self, socket: int) -> Any:
        check_socket(socket, self.num_outputs(), 'output')
        if not self.is_valid:
            return None
        if socket == 0:
            return self
        return self.residuals

    # ------------------------------------------------------------------
    # Fitting
    # ------------------------------------------------------------------

    @abstractmethod
    def fit(self) -> None:
        """Estimate parameters from the_data."""
        ...

    @abstractmethod
    def compute_residuals(self) -> Any:
        """Residual series for the_data under the fitted parameters."""
        ...

    @abstractmethod
    def compute_acf(self, max_lag: int, normalize: bool = True) -> np.ndarray:
        """Model autocovariance (or autocorrelation) at lags 0..max_lag."""
        ...

    def recompute(self) -> None:
        self.is_valid = False
        self.residuals = None
        if self.the_data is None:
            return
        try:
            self.fit()
        except ValueError as e:
            self.last_error = str(e)
            logger.warning("%s could not be fitted: %s", type(self).__name__, e)
            return
        self.residuals = self.compute_residuals()
        self.is_valid = True

    def get_description(self) -> str:
        return type(self).__name__

    def get_short_description(self) -> str:
        return type(self).__name__

    def __repr__(self) -> str:
        state = 'fitted' if self.is_valid else 'unfitted'
        return f"{type(self).__name__}({state})"


class UnivariateTimeSeriesModel(TimeSeriesModel):
    """
    Model for one univariate series or longitudinal data (a list of
    independent univariate series sharing the same parameters).
    """

    def __init__(self):
        super().__init__()
        self.values: Optional[TimeSeries] = None
        self.longitudinal_values: Optional[Longitudinal] = None

    def data_is_longitudinal(self) -> bool:
        return self.longitudinal_values is not None

    def data_segments(self) -> List[TimeSeries]:
        """The connected data as a list of independent series."""
        if self.longitudinal_values is not None:
            return list(self.longitudinal_values)
        if self.values is not None:
            return [self.values]
        return []

    def check_data_validity(self, data: Any, fail_messages: Optional[List[str]] = None) -> bool:
        if not isinstance(data, (TimeSeries, Longitudinal)):
            if fail_messages is not None:
                fail_messages.append(
                    "Cannot cast input into a (univariate) TimeSeries or Longitudinal object."
                )
            return False
        return True

    def on_data_connection(self) -> None:
        self.values = self.the_data if isinstance(self.the_data, TimeSeries) else None
        self.longitudinal_values = (
            self.the_data if isinstance(self.the_data, Longitudinal) else None
        )

    def set_input(self, socket: int, value: Any, source: Optional[Any] = None) -> None:
        check_socket(socket, self.num_inputs(), 'input')
        self.values = None
        self.longitudinal_values = None
        super().set_input(socket, value, source)

    def get_allowed_input_types_for(self, socket: int) -> FrozenSet[type]:
        check_socket(socket, self.num_inputs(), 'input')
        return frozenset({TimeSeries, Longitudinal})
