"""
Statistical time-series models usable as graph nodes.
"""

from .base import TimeSeriesModel, UnivariateTimeSeriesModel
from .ar import ARModel

__all__ = [
    'TimeSeriesModel',
    'UnivariateTimeSeriesModel',
    'ARModel',
]
