"""
Exponential smoothing transform.
"""

from typing import FrozenSet, Union

import numpy as np

from ..core.interface import check_socket
from ..core.registry import register_component
from ..data.timeseries import TimeSeries, MVTimeSeries
from .base import TimeSeriesTransformation


def exponential_smooth(values: np.ndarray, smooth_factor: float) -> np.ndarray:
    """
    First-order exponential filter along axis 0.

    y[0] = (1 - a) * x[0]
    y[t] = (1 - a) * x[t] + a * y[t-1]

    Args:
        values: Array of shape (n,) or (n, d)
        smooth_factor: a, the weight kept from the previous output

    Returns:
        Smoothed array with the same shape
    """
    values = np.asarray(values, dtype=float)
    out = np.empty_like(values)
    previous = np.zeros_like(values[0]) if len(values) else 0.0
    for t in range(len(values)):
        previous = (1.0 - smooth_factor) * values[t] + smooth_factor * previous
        out[t] = previous
    return out


@register_component('transform', 'exp_smoother')
class ExpSmoother(TimeSeriesTransformation):
    """
    Exponential smoother with one input and one output.

    Multivariate input is smoothed column by column.

    Args:
        smooth_factor: Weight in [0, 1] given to the previous smoothed value
            (default: 0.9)

    Example:
        >>> smoother = ExpSmoother(smooth_factor=0.5)
        >>> smoother.set_input(0, ts)
        >>> smoothed = smoother.get_output(0)
    """

    def __init__(self, smooth_factor: float = 0.9):
        super().__init__()
        if not 0.0 <= smooth_factor <= 1.0:
            raise ValueError(f"smooth_factor must be in [0, 1], got {smooth_factor}")
        self.smooth_factor = float(smooth_factor)

    def num_inputs(self) -> int:
        return 1

    def num_outputs(self) -> int:
        return 1

    def get_input_name(self, index: int) -> str:
        check_socket(index, 1, 'input')
        return "Input TS"

    def get_output_name(self, index: int) -> str:
        check_socket(index, 1, 'output')
        return "Filtered TS"

    def get_description(self) -> str:
        return "Exponential smoother"

    def get_short_description(self) -> str:
        return "ExpSmooth"

    def get_allowed_input_types_for(self, socket: int) -> FrozenSet[type]:
        check_socket(socket, self.num_inputs(), 'input')
        return frozenset({TimeSeries, MVTimeSeries})

    def get_output_types_for(self, socket: int) -> FrozenSet[type]:
        check_socket(socket, self.num_outputs(), 'output')
        return frozenset({TimeSeries, MVTimeSeries})

    def apply_filter_to(self, series: Union[TimeSeries, MVTimeSeries]) -> Union[TimeSeries, MVTimeSeries]:
        """Smooth one series, keeping its timestamps."""
        smoothed = exponential_smooth(series.values, self.smooth_factor)
        if isinstance(series, MVTimeSeries):
            return MVTimeSeries(series.timestamps, smoothed, title=series.title,
                                component_names=series.component_names)
        return TimeSeries.from_arrays(series.timestamps, smoothed, title=series.title)

    def recompute(self) -> None:
        self.is_valid = False
        self.outputs = []

        bundle = self.get_input_bundle()
        if not bundle:
            return
        if not all(isinstance(s, (TimeSeries, MVTimeSeries)) for s in bundle):
            return

        self.outputs = [self.apply_filter_to(s) for s in bundle]
        self.is_valid = True
