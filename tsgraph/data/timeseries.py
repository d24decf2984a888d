"""
Time-series value types carried between graph nodes.

This module provides:
- TimeSeries: univariate, strictly increasing timestamps
- MVTimeSeries: multivariate, one value vector per timestamp
- Longitudinal: a list of independent univariate series
- read_csv_series: load a TimeSeries column from a CSV file

Example:
    >>> from datetime import datetime, timedelta
    >>> ts = TimeSeries(title='X')
    >>> for i in range(3):
    ...     ts.add(datetime(2024, 1, 1) + timedelta(days=i), float(i))
    >>> ts.value_at_time(datetime(2024, 1, 2, 12))
    1.0
"""

import bisect
import csv
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Iterator, Tuple, Union

import numpy as np


# ============================================================================
# UNIVARIATE
# ============================================================================


class TimeSeries:
    """
    Univariate time series with strictly increasing timestamps.

    Args:
        title: Display name
        timestamps: Optional initial timestamps
        values: Optional initial values (same length as timestamps)

    Example:
        >>> ts = TimeSeries.from_arrays(dates, [1.0, 2.0, 3.0], title='price')
        >>> len(ts)
        3
        >>> ts[1]
        2.0
    """

    def __init__(
        self,
        title: str = '',
        timestamps: Optional[Sequence[datetime]] = None,
        values: Optional[Sequence[float]] = None
    ):
        self.title = title
        self._timestamps: List[datetime] = []
        self._values: List[float] = []

        if timestamps is not None or values is not None:
            timestamps = list(timestamps or [])
            values = list(values if values is not None else [])
            if len(timestamps) != len(values):
                raise ValueError(
                    f"timestamps ({len(timestamps)}) and values ({len(values)}) "
                    f"must have the same length"
                )
            for t, v in zip(timestamps, values):
                self.add(t, v)

    @classmethod
    def from_arrays(
        cls,
        timestamps: Sequence[datetime],
        values: Sequence[float],
        title: str = ''
    ) -> 'TimeSeries':
        """Build a series from parallel timestamp and value sequences."""
        return cls(title=title, timestamps=timestamps, values=values)

    def add(self, timestamp: datetime, value: float, allow_overwrite: bool = False) -> None:
        """
        Append an observation.

        Args:
            timestamp: Must be later than the last timestamp, or equal to
                it when allow_overwrite is set
            value: Observation value
            allow_overwrite: Replace the last value on an equal timestamp

        Raises:
            ValueError: If the timestamp would break strict ordering
        """
        if self._timestamps:
            last = self._timestamps[-1]
            if timestamp == last and allow_overwrite:
                self._values[-1] = float(value)
                return
            if timestamp <= last:
                raise ValueError(
                    f"Timestamp {timestamp} is not after last timestamp {last}"
                )
        self._timestamps.append(timestamp)
        self._values.append(float(value))

    def timestamp(self, index: int) -> datetime:
        """Timestamp of the observation at index."""
        return self._timestamps[index]

    @property
    def timestamps(self) -> List[datetime]:
        return list(self._timestamps)

    @property
    def values(self) -> np.ndarray:
        """Values as a float array (a copy)."""
        return np.asarray(self._values, dtype=float)

    def value_at_time(self, when: datetime) -> float:
        """
        Step-function value at a time.

        Returns:
            The value at the latest timestamp not after ``when``, or NaN if
            ``when`` precedes the first observation
        """
        pos = bisect.bisect_right(self._timestamps, when)
        if pos == 0:
            return float('nan')
        return self._values[pos - 1]

    def index_of(self, when: datetime) -> int:
        """Index of an exact timestamp, or -1."""
        pos = bisect.bisect_left(self._timestamps, when)
        if pos < len(self._timestamps) and self._timestamps[pos] == when:
            return pos
        return -1

    def diff(self) -> 'TimeSeries':
        """First differences, stamped at the later time of each pair."""
        out = TimeSeries(title=f"diff({self.title})" if self.title else 'diff')
        for i in range(1, len(self)):
            out.add(self._timestamps[i], self._values[i] - self._values[i - 1])
        return out

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, index: int) -> float:
        return self._values[index]

    def __iter__(self) -> Iterator[Tuple[datetime, float]]:
        return iter(zip(self._timestamps, self._values))

    def __eq__(self, other) -> bool:
        if not isinstance(other, TimeSeries):
            return NotImplemented
        return (self._timestamps == other._timestamps
                and np.array_equal(self.values, other.values))

    def __repr__(self) -> str:
        if not self._timestamps:
            return f"TimeSeries('{self.title}', empty)"
        return (
            f"TimeSeries('{self.title}', n={len(self)}, "
            f"{self._timestamps[0]:%Y-%m-%d}..{self._timestamps[-1]:%Y-%m-%d})"
        )


# ============================================================================
# MULTIVARIATE
# ============================================================================


class MVTimeSeries:
    """
    Multivariate time series: one value vector per timestamp.

    Args:
        timestamps: Strictly increasing timestamps
        values: Array of shape (len(timestamps), dimension)
        title: Display name
        component_names: Optional per-column names

    Example:
        >>> mv = MVTimeSeries(dates, np.zeros((10, 3)), title='xyz')
        >>> mv.dimension
        3
        >>> x = mv.component(0)
    """

    def __init__(
        self,
        timestamps: Sequence[datetime],
        values: Union[np.ndarray, Sequence[Sequence[float]]],
        title: str = '',
        component_names: Optional[Sequence[str]] = None
    ):
        values = np.asarray(values, dtype=float)
        if values.ndim == 1:
            values = values.reshape(-1, 1)
        if values.ndim != 2:
            raise ValueError(f"values must be 2-dimensional, got shape {values.shape}")
        timestamps = list(timestamps)
        if len(timestamps) != values.shape[0]:
            raise ValueError(
                f"timestamps ({len(timestamps)}) and value rows ({values.shape[0]}) "
                f"must have the same length"
            )
        for earlier, later in zip(timestamps, timestamps[1:]):
            if later <= earlier:
                raise ValueError(f"Timestamp {later} is not after {earlier}")

        self.title = title
        self._timestamps = timestamps
        self._values = values
        if component_names is None:
            component_names = [f"{title or 'X'}[{j}]" for j in range(values.shape[1])]
        if len(component_names) != values.shape[1]:
            raise ValueError("component_names must match the number of columns")
        self.component_names = list(component_names)

    @classmethod
    def from_components(cls, series: Sequence[TimeSeries], title: str = '') -> 'MVTimeSeries':
        """
        Stack univariate series sharing the same timestamps.

        Raises:
            ValueError: If the series do not share timestamps
        """
        if not series:
            raise ValueError("Need at least one component series")
        stamps = series[0].timestamps
        for s in series[1:]:
            if s.timestamps != stamps:
                raise ValueError("Component series must share timestamps")
        values = np.column_stack([s.values for s in series])
        return cls(stamps, values, title=title,
                   component_names=[s.title for s in series])

    @property
    def dimension(self) -> int:
        return self._values.shape[1]

    @property
    def timestamps(self) -> List[datetime]:
        return list(self._timestamps)

    @property
    def values(self) -> np.ndarray:
        return self._values.copy()

    def timestamp(self, index: int) -> datetime:
        return self._timestamps[index]

    def component(self, j: int) -> TimeSeries:
        """Column j as a univariate TimeSeries."""
        return TimeSeries.from_arrays(self._timestamps, self._values[:, j],
                                      title=self.component_names[j])

    def __len__(self) -> int:
        return self._values.shape[0]

    def __getitem__(self, index: int) -> np.ndarray:
        return self._values[index].copy()

    def __repr__(self) -> str:
        return f"MVTimeSeries('{self.title}', n={len(self)}, dim={self.dimension})"


# ============================================================================
# LONGITUDINAL
# ============================================================================


class Longitudinal:
    """
    Ordered collection of independent univariate series.

    Used for panel-style data where each subject has its own series.
    """

    def __init__(self, series: Optional[Sequence[TimeSeries]] = None, title: str = ''):
        self.title = title
        self._series: List[TimeSeries] = list(series or [])

    def append(self, series: TimeSeries) -> None:
        self._series.append(series)

    @property
    def total_count(self) -> int:
        """Total number of observations across all series."""
        return sum(len(s) for s in self._series)

    def __len__(self) -> int:
        return len(self._series)

    def __getitem__(self, index: int) -> TimeSeries:
        return self._series[index]

    def __iter__(self) -> Iterator[TimeSeries]:
        return iter(self._series)

    def __repr__(self) -> str:
        return f"Longitudinal('{self.title}', series={len(self._series)}, n={self.total_count})"


# ============================================================================
# CSV UTILITIES
# ============================================================================


def read_csv_series(
    path: Union[str, Path],
    column: str,
    time_column: str = 'date',
    time_format: Optional[str] = None
) -> TimeSeries:
    """
    Load one column of a CSV file as a TimeSeries.

    Args:
        path: CSV file with a header row
        column: Name of the value column
        time_column: Name of the timestamp column
        time_format: strptime format; ISO 8601 when omitted

    Returns:
        TimeSeries titled after the column

    Raises:
        ValueError: If a column is missing or rows are out of order
    """
    series = TimeSeries(title=column)
    with open(path, newline='') as f:
        reader = csv.DictReader(f)
        fields = reader.fieldnames or []
        for required in (time_column, column):
            if required not in fields:
                raise ValueError(f"Column '{required}' not found in {path}. Available: {fields}")
        for row in reader:
            raw_time = row[time_column].strip()
            when = (datetime.strptime(raw_time, time_format) if time_format
                    else datetime.fromisoformat(raw_time))
            series.add(when, float(row[column]))
    return series
