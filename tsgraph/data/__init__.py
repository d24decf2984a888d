"""
Time-series value types passed between nodes.
"""

from .timeseries import TimeSeries, MVTimeSeries, Longitudinal, read_csv_series

__all__ = [
    'TimeSeries',
    'MVTimeSeries',
    'Longitudinal',
    'read_csv_series',
]
