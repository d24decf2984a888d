"""
Transforms: nodes that map input series to output series.

Importing this package registers the built-in transforms and the series
source with the ComponentRegistry.
"""

from .base import TimeSeriesTransformation, InputType
from .source import SeriesSource
from .exp_smoother import ExpSmoother, exponential_smooth
from .linear_combination import LinearCombinationTransform

__all__ = [
    'TimeSeriesTransformation',
    'InputType',
    'SeriesSource',
    'ExpSmoother',
    'exponential_smooth',
    'LinearCombinationTransform',
]
