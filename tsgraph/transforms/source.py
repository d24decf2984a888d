"""
Source node: injects client-provided data into a graph.
"""

from pathlib import Path
from typing import Any, FrozenSet, Optional, Union

from ..core.interface import check_socket
from ..core.registry import register_component
from ..data.timeseries import TimeSeries, MVTimeSeries, Longitudinal, read_csv_series
from .base import TimeSeriesTransformation


@register_component('source', 'series')
class SeriesSource(TimeSeriesTransformation):
    """
    Node with no inputs and one output holding a fixed value.

    Hosts seed data here and then cascade from the node's record.

    Args:
        series: Initial value (TimeSeries, MVTimeSeries or Longitudinal)
        csv: Optional CSV path to load a TimeSeries from
        column: Value column in the CSV
        time_column: Timestamp column in the CSV

    Example:
        >>> source = SeriesSource(ts)
        >>> record = graph.add_node(source)
        >>> source.set_series(updated_ts)
        >>> graph.cascade_from(record)
    """

    def __init__(
        self,
        series: Any = None,
        csv: Optional[Union[str, Path]] = None,
        column: Optional[str] = None,
        time_column: str = 'date'
    ):
        super().__init__()
        if csv is not None:
            if column is None:
                raise ValueError("SeriesSource from CSV needs a 'column'")
            series = read_csv_series(csv, column, time_column=time_column)
        self._series = series
        self.recompute()

    def num_inputs(self) -> int:
        return 0

    def num_outputs(self) -> int:
        return 1

    def get_output_name(self, index: int) -> str:
        check_socket(index, 1, 'output')
        return "Data"

    def get_output_types_for(self, socket: int) -> FrozenSet[type]:
        check_socket(socket, 1, 'output')
        return frozenset({TimeSeries, MVTimeSeries, Longitudinal})

    def get_description(self) -> str:
        return "Data source"

    def get_short_description(self) -> str:
        return "Source"

    @property
    def series(self) -> Any:
        return self._series

    def set_series(self, series: Any) -> None:
        """Replace the held value; cascade afterwards to propagate it."""
        self._series = series
        self.recompute()

    def recompute(self) -> None:
        self.is_valid = False
        self.outputs = []
        if self._series is None:
            return
        self.outputs = [self._series]
        self.is_valid = True
