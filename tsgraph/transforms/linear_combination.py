"""
Linear combination of two or more univariate time series.
"""

from datetime import datetime
from typing import FrozenSet, List, Optional, Sequence

from ..core.interface import check_socket
from ..core.registry import register_component
from ..data.timeseries import TimeSeries
from .base import TimeSeriesTransformation, InputType


@register_component('transform', 'linear_combination')
class LinearCombinationTransform(TimeSeriesTransformation):
    """
    Weighted sum of N univariate series, one input socket per coefficient.

    Timestamp alignment is controlled by two flags:
    - use_times_from_first: evaluate at the first input's timestamps and
      read every other input as a step function (overrides the other flag)
    - requires_exact_time_match: only emit timestamps present in every
      input; otherwise walk the union of timestamps and read each input as
      a step function, skipping times before every input has started

    Args:
        coefficients: Weights, one per input (default: [1.0, -1.0])
        use_times_from_first: See above (default: False)
        requires_exact_time_match: See above (default: False)

    Example:
        >>> diff = LinearCombinationTransform(coefficients=[1.0, -1.0],
        ...                                   requires_exact_time_match=True)
        >>> diff.set_input(0, x)
        >>> diff.set_input(1, y)
        >>> spread = diff.get_output(0)
    """

    def __init__(
        self,
        coefficients: Optional[Sequence[float]] = None,
        use_times_from_first: bool = False,
        requires_exact_time_match: bool = False
    ):
        super().__init__()
        if coefficients is None:
            coefficients = [1.0, -1.0]
        coefficients = [float(c) for c in coefficients]
        if not coefficients:
            raise ValueError("LinearCombinationTransform needs at least one coefficient")
        self.coefficients: List[float] = coefficients
        self.use_times_from_first = use_times_from_first
        self.requires_exact_time_match = requires_exact_time_match

    def num_inputs(self) -> int:
        return len(self.coefficients)

    def num_outputs(self) -> int:
        return 1

    def get_input_name(self, index: int) -> str:
        check_socket(index, self.num_inputs(), 'input')
        return f"Time Series #{index + 1}"

    def get_output_name(self, index: int) -> str:
        check_socket(index, 1, 'output')
        return "Time Series"

    def get_description(self) -> str:
        return "Linear combination of two or more time series."

    def get_short_description(self) -> str:
        return "aX+bY"

    def get_allowed_input_types_for(self, socket: int) -> FrozenSet[type]:
        check_socket(socket, self.num_inputs(), 'input')
        return frozenset({TimeSeries})

    def get_output_types_for(self, socket: int) -> FrozenSet[type]:
        check_socket(socket, 1, 'output')
        return frozenset({TimeSeries})

    def _title_for(self, series: List[TimeSeries]) -> str:
        if len(series) != 2:
            return "Linear Comb."
        c0, c1 = self.coefficients
        sign = '+' if c1 >= 0 else '-'
        return f"{c0:.1f}x{series[0].title} {sign} {abs(c1):.1f}x{series[1].title}"

    def _combine_on_first(self, series: List[TimeSeries], out: TimeSeries) -> None:
        first = series[0]
        for t in range(len(first)):
            when = first.timestamp(t)
            total = first[t] * self.coefficients[0]
            for i in range(1, len(series)):
                total += series[i].value_at_time(when) * self.coefficients[i]
            if total == total:  # other inputs have not started yet when NaN
                out.add(when, total, allow_overwrite=True)

    def _combine_merged(self, series: List[TimeSeries], out: TimeSeries) -> None:
        n = len(series)
        counts = [len(s) for s in series]
        cursor = [0] * n

        while any(cursor[i] < counts[i] for i in range(n)):
            stamps = [
                series[i].timestamp(cursor[i]) if cursor[i] < counts[i] else datetime.max
                for i in range(n)
            ]
            earliest = min(stamps)
            argmin = stamps.index(earliest)

            if all(s == stamps[0] for s in stamps):
                total = sum(series[i][cursor[i]] * self.coefficients[i] for i in range(n))
                out.add(earliest, total)
                cursor = [c + 1 for c in cursor]
            elif not self.requires_exact_time_match:
                total = 0.0
                valid = True
                for i in range(n):
                    if cursor[i] < counts[i] and stamps[i] <= earliest:
                        total += self.coefficients[i] * series[i][cursor[i]]
                    elif cursor[i] > 0:
                        total += self.coefficients[i] * series[i][cursor[i] - 1]
                    else:
                        valid = False
                if valid:
                    out.add(earliest, total)
                for i in range(n):
                    if cursor[i] < counts[i] and stamps[i] <= earliest:
                        cursor[i] += 1
            else:
                cursor[argmin] += 1

    def recompute(self) -> None:
        self.is_valid = False
        self.outputs = []

        if self.get_input_type() != InputType.UNIVARIATE_TS:
            return
        series = self.get_input_bundle()
        if len(series) != len(self.coefficients):
            return

        combination = TimeSeries(title=self._title_for(series))
        if self.use_times_from_first:
            self._combine_on_first(series, combination)
        else:
            self._combine_merged(series, combination)

        if len(combination) == 0:
            return
        self.outputs = [combination]
        self.is_valid = True
