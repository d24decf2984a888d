"""
Numeric leaf routines used inside nodes: matrix helpers, regression,
Nelder-Mead minimisation and the augmented Dickey-Fuller test.
"""

from .matrix import (
    to_vector,
    to_matrix,
    extract_column,
    submatrix,
    block_matrix,
    hstack,
    vstack,
    column_means,
    covariance,
    correlation,
)
from .regression import Regression
from .nelder_mead import NelderMead, Optimizer, Evaluation
from .adf import adfuller, ADFResult, CRITICAL_VALUES

__all__ = [
    # Matrix
    'to_vector',
    'to_matrix',
    'extract_column',
    'submatrix',
    'block_matrix',
    'hstack',
    'vstack',
    'column_means',
    'covariance',
    'correlation',

    # Estimation
    'Regression',
    'NelderMead',
    'Optimizer',
    'Evaluation',

    # Tests
    'adfuller',
    'ADFResult',
    'CRITICAL_VALUES',
]
