"""
Autoregressive model of arbitrary order.

    x[t] - mu = sum_{j=1..p} phi_j * (x[t-j] - mu) + e[t],  Var(e) = sigma2
"""

from typing import List, Optional, Sequence

import numpy as np

from ..core.registry import register_component
from ..data.timeseries import TimeSeries, Longitudinal
from ..numerics.nelder_mead import NelderMead
from ..numerics.regression import Regression
from .base import UnivariateTimeSeriesModel


@register_component('model', 'ar')
class ARModel(UnivariateTimeSeriesModel):
    """
    AR(p) model fitted by least squares or by Nelder-Mead.

    Longitudinal data is fitted with one shared parameter set, pooling
    the lagged observations of every series.

    Args:
        order: p, the number of autoregressive lags (default: 1)
        method: 'ols' (regression on lags) or 'nelder_mead' (direct
            minimisation of the conditional sum of squares)
        max_iterations: Simplex iterations for 'nelder_mead'

    Attributes:
        mu: Process mean
        phi: Autoregressive coefficients, lag 1 first
        sigma2: Innovation variance

    Example:
        >>> model = ARModel(order=2)
        >>> model.set_input(0, ts)
        >>> model.phi
        array([ 0.52, -0.11])
        >>> model.compute_acf(10)
    """

    METHODS = ('ols', 'nelder_mead')

    # Number of MA(infinity) weights used for the theoretical ACF
    ACF_TRUNCATION = 2000

    def __init__(self, order: int = 1, method: str = 'ols', max_iterations: int = 500):
        super().__init__()
        if order < 1:
            raise ValueError(f"order must be at least 1, got {order}")
        if method not in self.METHODS:
            raise ValueError(f"method must be one of {self.METHODS}, got '{method}'")
        self.order = order
        self.method = method
        self.max_iterations = max_iterations

        self.mu = 0.0
        self.phi = np.zeros(order)
        self.sigma2 = 1.0

    def get_description(self) -> str:
        return f"AR({self.order}) model"

    def get_short_description(self) -> str:
        return f"AR({self.order})"

    def set_parameters(self, mu: float, phi: Sequence[float], sigma2: float) -> None:
        """Set parameters directly (e.g. to evaluate the ACF of a known process)."""
        phi = np.asarray(phi, dtype=float).ravel()
        if phi.size != self.order:
            raise ValueError(f"Expected {self.order} coefficients, got {phi.size}")
        if sigma2 <= 0:
            raise ValueError(f"sigma2 must be positive, got {sigma2}")
        self.mu, self.phi, self.sigma2 = float(mu), phi, float(sigma2)

    # ------------------------------------------------------------------
    # Estimation
    # ------------------------------------------------------------------

    def _lagged(self, segments: List[TimeSeries]):
        """Stack (response, lag matrix) rows over every segment."""
        p = self.order
        responses, lags = [], []
        for segment in segments:
            x = segment.values
            if x.size <= p:
                continue
            responses.append(x[p:])
            lags.append(np.column_stack([x[p - j:x.size - j] for j in range(1, p + 1)]))
        if not responses:
            raise ValueError(
                f"Need more than {p} observations in at least one series to fit AR({p})"
            )
        return np.concatenate(responses), np.vstack(lags)

    def _conditional_sum_of_squares(self, params: np.ndarray, y: np.ndarray, lags: np.ndarray) -> float:
        mu, phi = params[0], params[1:]
        errors = (y - mu) - (lags - mu) @ phi
        return float(errors @ errors)

    def fit(self) -> None:
        y, lags = self._lagged(self.data_segments())
        design = np.column_stack([np.ones(y.size), lags])
        if np.linalg.matrix_rank(design) < design.shape[1]:
            raise ValueError(
                f"Lagged design for AR({self.order}) is rank-deficient; is the series constant?"
            )

        if self.method == 'ols':
            regression = Regression(y, lags, add_constant=True, beta_hat_only=True)
            constant, phi = regression.beta_hat[0], regression.beta_hat[1:]
            denominator = 1.0 - phi.sum()
            mu = constant / denominator if denominator != 0 else float(np.mean(y))
        else:
            optimizer = NelderMead()
            start = np.concatenate([[np.mean(y)], np.zeros(self.order)])
            optimizer.minimize(
                lambda params: self._conditional_sum_of_squares(params, y, lags),
                NelderMead.initial_simplex(start),
                self.max_iterations,
            )
            mu, phi = optimizer.arg_min[0], optimizer.arg_min[1:]

        mu = float(mu)
        phi = np.asarray(phi, dtype=float)
        errors = (y - mu) - (lags - mu) @ phi
        sigma2 = float(np.mean(errors ** 2))
        if not sigma2 > 0:
            raise ValueError(f"Fitted innovation variance must be positive, got {sigma2}")

        self.mu, self.phi, self.sigma2 = mu, phi, sigma2

    def _residual_series(self, segment: TimeSeries) -> TimeSeries:
        p = self.order
        x = segment.values
        out = TimeSeries(title=f"resid({segment.title})" if segment.title else 'resid')
        for t in range(p, x.size):
            predicted = self.mu + self.phi @ (x[t - p:t][::-1] - self.mu)
            out.add(segment.timestamp(t), x[t] - predicted)
        return out

    def compute_residuals(self):
        if self.data_is_longitudinal():
            return Longitudinal([self._residual_series(s) for s in self.data_segments()],
                                title='residuals')
        return self._residual_series(self.values)

    # ------------------------------------------------------------------
    # Model properties
    # ------------------------------------------------------------------

    def is_causal(self) -> bool:
        """True if every root of the AR polynomial lies outside the unit circle."""
        companion = np.zeros((self.order, self.order))
        companion[0, :] = self.phi
        if self.order > 1:
            companion[1:, :-1] = np.eye(self.order - 1)
        return bool(np.all(np.abs(np.linalg.eigvals(companion)) < 1.0))

    def psi_weights(self, count: int) -> np.ndarray:
        """First ``count`` coefficients of the MA(infinity) representation."""
        psi = np.zeros(count)
        psi[0] = 1.0
        for k in range(1, count):
            for j in range(1, min(k, self.order) + 1):
                psi[k] += self.phi[j - 1] * psi[k - j]
        return psi

    def compute_acf(self, max_lag: int, normalize: bool = True) -> np.ndarray:
        """
        Theoretical autocovariance at lags 0..max_lag.

        Args:
            max_lag: Largest lag
            normalize: Divide by the lag-0 value (autocorrelation)

        Raises:
            ValueError: If the fitted process is not causal
        """
        if max_lag < 0:
            raise ValueError(f"max_lag must be non-negative, got {max_lag}")
        if not self.is_causal():
            raise ValueError(f"AR coefficients {self.phi} do not define a stationary process")

        psi = self.psi_weights(self.ACF_TRUNCATION + max_lag + 1)
        acf = np.array([
            self.sigma2 * np.dot(psi[:self.ACF_TRUNCATION], psi[h:h + self.ACF_TRUNCATION])
            for h in range(max_lag + 1)
        ])
        if normalize:
            acf = acf / acf[0]
        return acf

    def simulate(self, n: int, rng: Optional[np.random.Generator] = None, burn_in: int = 200) -> np.ndarray:
        """Draw a sample path of length n."""
        rng = rng if rng is not None else np.random.default_rng()
        total = n + burn_in
        x = np.full(total, self.mu)
        noise = rng.normal(scale=np.sqrt(self.sigma2), size=total)
        for t in range(self.order, total):
            x[t] = self.mu + self.phi @ (x[t - self.order:t][::-1] - self.mu) + noise[t]
        return x[burn_in:]
