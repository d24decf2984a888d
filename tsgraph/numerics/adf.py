"""
Augmented Dickey-Fuller unit-root test.

The test regression is

    dx[t] = a + b*t + gamma*x[t-1] + sum_j delta_j * dx[t-j] + e[t]

and the statistic is the t-ratio of gamma. A statistic below the negated
critical value rejects the unit root (the series looks stationary).

Example:
    >>> result = adfuller(prices, significance=0.05)
    >>> result.is_stationary
    False
"""

from dataclasses import dataclass
from typing import Dict, Tuple, Union

import numpy as np

from ..data.timeseries import TimeSeries
from .regression import Regression


# Absolute critical values by sample size and significance level
# (constant and trend in the test regression).
CRITICAL_VALUES: Dict[int, Dict[float, float]] = {
    50: {0.01: 4.32, 0.05: 3.67, 0.10: 3.28},
    100: {0.01: 4.07, 0.05: 3.37, 0.10: 3.03},
    200: {0.01: 4.00, 0.05: 3.37, 0.10: 3.02},
}


@dataclass(frozen=True)
class ADFResult:
    """
    Outcome of an augmented Dickey-Fuller test.

    Attributes:
        statistic: t-ratio of the lagged level coefficient
        critical_value: Negated tabulated critical value used
        significance: Test level (0.01, 0.05 or 0.10)
        lags: Number of lagged differences in the regression
        num_observations: Rows used in the regression
        table_size: Tabulated sample size the critical value came from
    """
    statistic: float
    critical_value: float
    significance: float
    lags: int
    num_observations: int
    table_size: int

    @property
    def is_stationary(self) -> bool:
        """True when the unit-root hypothesis is rejected."""
        return self.statistic < self.critical_value


def critical_value(num_observations: int, significance: float) -> Tuple[float, int]:
    """
    Look up the critical value for the tabulated size nearest to n.

    Returns:
        (negated critical value, tabulated sample size)

    Raises:
        ValueError: If significance is not 0.01, 0.05 or 0.10
    """
    levels = sorted(CRITICAL_VALUES[50])
    match = [level for level in levels if abs(level - significance) < 1e-9]
    if not match:
        raise ValueError(f"significance must be one of {levels}, got {significance}")
    size = min(CRITICAL_VALUES, key=lambda s: (abs(num_observations - s), s))
    return -CRITICAL_VALUES[size][match[0]], size


def adfuller(
    series: Union[TimeSeries, np.ndarray],
    significance: float = 0.05,
    lags: int = 1
) -> ADFResult:
    """
    Run the augmented Dickey-Fuller test.

    Args:
        series: TimeSeries or 1-D array of levels
        significance: 0.01, 0.05 or 0.10
        lags: Number of lagged differences (default: 1)

    Returns:
        ADFResult

    Raises:
        ValueError: If lags is negative, the series is constant or too short
    """
    x = series.values if isinstance(series, TimeSeries) else np.asarray(series, dtype=float).ravel()
    if lags < 0:
        raise ValueError(f"lags must be non-negative, got {lags}")
    if x.size and np.ptp(x) == 0:
        raise ValueError("ADF test needs a non-constant series")

    dx = np.diff(x)
    rows = dx.size - lags
    num_params = 3 + lags
    if rows <= num_params:
        raise ValueError(
            f"Series of length {x.size} is too short for an ADF test with {lags} lag(s)"
        )

    response = dx[lags:]
    columns = [
        np.arange(lags + 1, lags + 1 + rows, dtype=float),  # trend
        x[lags:lags + rows],                                  # x[t-1]
    ]
    for j in range(1, lags + 1):
        columns.append(dx[lags - j:lags - j + rows])
    design = np.column_stack(columns)

    regression = Regression(response, design, add_constant=True)
    statistic = regression.t_statistic(2)
    crit, size = critical_value(x.size, significance)

    return ADFResult(
        statistic=statistic,
        critical_value=crit,
        significance=significance,
        lags=lags,
        num_observations=rows,
        table_size=size,
    )
