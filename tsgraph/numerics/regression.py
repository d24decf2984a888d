"""
Least-squares regression with approximate significance.

Example:
    >>> reg = Regression(y, X, add_constant=True)
    >>> reg.beta_hat        # [intercept, slope...]
    >>> reg.p_values        # two-sided, normal approximation
"""

import math
from typing import Optional

import numpy as np

from ..core.interface import InvalidGeometryError


def normal_two_sided_p(z: float) -> float:
    """2 * (1 - Phi(|z|)) for a standard normal Phi."""
    return math.erfc(abs(z) / math.sqrt(2.0))


class Regression:
    """
    Ordinary or weighted least squares.

    Weighted regression rescales every row (including the constant) by
    sqrt(weight) and then solves the ordinary problem.

    Args:
        dependent: Response vector y of length n
        explanatory: Design matrix X of shape (n, k)
        weights: Optional per-row weights (non-negative)
        add_constant: Prepend a column of ones (default: True)
        beta_hat_only: Skip residual, covariance and p-value computation

    Attributes:
        beta_hat: Coefficient estimates, intercept first when add_constant
        sigma: Residual scale estimate
        beta_hat_covariance: sigma^2 (X^T X)^-1
        p_values: Two-sided normal-approximation p-values
        residuals: y - X beta_hat
        fitted: X beta_hat
    """

    def __init__(
        self,
        dependent,
        explanatory,
        weights=None,
        add_constant: bool = True,
        beta_hat_only: bool = False
    ):
        y = np.asarray(dependent, dtype=float).ravel()
        x = np.asarray(explanatory, dtype=float)
        if x.ndim == 1:
            x = x.reshape(-1, 1)
        if x.ndim != 2 or x.shape[0] != y.size:
            raise InvalidGeometryError(
                f"Explanatory matrix {x.shape} does not match {y.size} observations"
            )
        if add_constant:
            x = np.column_stack([np.ones(y.size), x])

        if weights is not None:
            w = np.asarray(weights, dtype=float).ravel()
            if w.size != y.size:
                raise InvalidGeometryError(f"Got {w.size} weights for {y.size} observations")
            if np.any(w < 0):
                raise ValueError("Regression weights must be non-negative")
            root = np.sqrt(w)
            y = y * root
            x = x * root[:, None]

        self.dependent = y
        self.design = x
        self.sigma: Optional[float] = None
        self.beta_hat_covariance: Optional[np.ndarray] = None
        self.p_values: Optional[np.ndarray] = None
        self.residuals: Optional[np.ndarray] = None
        self.fitted: Optional[np.ndarray] = None
        self.beta_hat_only = beta_hat_only
        self._recompute(beta_hat_only)

    @property
    def num_observations(self) -> int:
        return self.design.shape[0]

    @property
    def num_parameters(self) -> int:
        return self.design.shape[1]

    def _recompute(self, beta_hat_only: bool) -> None:
        x, y = self.design, self.dependent
        n, p = x.shape
        xtx = x.T @ x
        xty = x.T @ y

        self.beta_hat = np.zeros(p)
        if np.linalg.norm(xty) == 0:
            return

        self.beta_hat = np.linalg.solve(xtx, xty)
        if beta_hat_only:
            return

        self.fitted = x @ self.beta_hat
        self.residuals = y - self.fitted
        if n <= p:
            raise InvalidGeometryError(
                f"Need more observations ({n}) than parameters ({p}) for standard errors"
            )

        self.sigma = float(np.sqrt(np.var(self.residuals, ddof=1)) * n / (n - p))
        self.beta_hat_covariance = self.sigma ** 2 * np.linalg.inv(xtx)
        std_errors = np.sqrt(np.diag(self.beta_hat_covariance))
        self.p_values = np.array([
            normal_two_sided_p(b / se) if se > 0 else 0.0
            for b, se in zip(self.beta_hat, std_errors)
        ])

    def t_statistic(self, index: int) -> float:
        """beta_hat[index] divided by its standard error."""
        if self.beta_hat_only:
            raise RuntimeError("Standard errors were not computed (beta_hat_only=True)")
        if self.beta_hat_covariance is None:
            raise ValueError("Standard errors are undefined when X^T y is zero")
        se = math.sqrt(self.beta_hat_covariance[index, index])
        if se == 0:
            raise ValueError(f"Coefficient {index} has zero standard error")
        return float(self.beta_hat[index] / se)

    def r_squared(self) -> float:
        """Coefficient of determination about the mean of y."""
        if self.residuals is None:
            raise RuntimeError("Residuals were not computed (beta_hat_only=True)")
        total = np.sum((self.dependent - self.dependent.mean()) ** 2)
        if total == 0:
            return 1.0
        return float(1.0 - np.sum(self.residuals ** 2) / total)
