"""
Small matrix helpers on top of numpy.

Size mistakes are programmer errors and raise InvalidGeometryError
immediately instead of letting numpy broadcast silently.
"""

import numpy as np

from ..core.interface import InvalidGeometryError


def _as_matrix(m) -> np.ndarray:
    m = np.asarray(m, dtype=float)
    if m.ndim != 2:
        raise InvalidGeometryError(f"Expected a 2-D matrix, got shape {m.shape}")
    return m


def to_vector(m) -> np.ndarray:
    """Flatten a matrix column by column."""
    return _as_matrix(m).flatten(order='F')


def to_matrix(v, rows: int, cols: int) -> np.ndarray:
    """
    Reshape a vector column by column into rows x cols.

    Raises:
        InvalidGeometryError: If rows * cols != len(v)
    """
    v = np.asarray(v, dtype=float).ravel()
    if rows * cols != v.size:
        raise InvalidGeometryError(
            f"Invalid vector to matrix conversion: {v.size} values into {rows}x{cols}"
        )
    return v.reshape((rows, cols), order='F')


def extract_column(m, column: int) -> np.ndarray:
    """Copy of one column."""
    m = _as_matrix(m)
    if not 0 <= column < m.shape[1]:
        raise InvalidGeometryError(f"Column {column} outside 0..{m.shape[1] - 1}")
    return m[:, column].copy()


def submatrix(m, r0: int, c0: int, r1: int, c1: int) -> np.ndarray:
    """
    Copy of the block m[r0:r1, c0:c1].

    r1 and c1 are one past the last row/column, and the block must be
    non-empty and inside the matrix.

    Raises:
        InvalidGeometryError: On an invalid row or column range
    """
    m = _as_matrix(m)
    rows, cols = m.shape
    if r0 < 0 or r1 < 0 or r0 >= r1 or r0 > rows - 1 or r1 > rows:
        raise InvalidGeometryError(f"Invalid row range [{r0}, {r1}) for {rows} rows")
    if c0 < 0 or c1 < 0 or c0 >= c1 or c0 > cols - 1 or c1 > cols:
        raise InvalidGeometryError(f"Invalid column range [{c0}, {c1}) for {cols} columns")
    return m[r0:r1, c0:c1].copy()


def block_matrix(a, b, c, d) -> np.ndarray:
    """
    Assemble [[A, B], [C, D]].

    Raises:
        InvalidGeometryError: If the blocks do not line up
    """
    a, b, c, d = (_as_matrix(x) for x in (a, b, c, d))
    if (a.shape[0] != b.shape[0] or c.shape[0] != d.shape[0]
            or a.shape[1] != c.shape[1] or b.shape[1] != d.shape[1]):
        raise InvalidGeometryError(
            f"Invalid block sizes: A{a.shape} B{b.shape} C{c.shape} D{d.shape}"
        )
    return np.block([[a, b], [c, d]])


def hstack(m1, m2) -> np.ndarray:
    """[m1 m2]; both must have the same number of rows."""
    m1, m2 = _as_matrix(m1), _as_matrix(m2)
    if m1.shape[0] != m2.shape[0]:
        raise InvalidGeometryError("Matrices to be bound must have the same number of rows")
    return np.hstack([m1, m2])


def vstack(m1, m2) -> np.ndarray:
    """[m1; m2]; both must have the same number of columns."""
    m1, m2 = _as_matrix(m1), _as_matrix(m2)
    if m1.shape[1] != m2.shape[1]:
        raise InvalidGeometryError("Matrices to be bound must have the same number of columns")
    return np.vstack([m1, m2])


def column_means(m) -> np.ndarray:
    """Means down the columns, as a 1 x n row matrix."""
    m = _as_matrix(m)
    if m.shape[0] == 0:
        raise InvalidGeometryError("Cannot average an empty matrix")
    return m.mean(axis=0, keepdims=True)


def covariance(m) -> np.ndarray:
    """
    Population covariance of the row vectors of m.

    Computed as E[X^T X] - mu^T mu, dividing by the row count.
    """
    m = _as_matrix(m)
    mu = column_means(m)
    return m.T @ m / m.shape[0] - mu.T @ mu


def correlation(m) -> np.ndarray:
    """Correlation matrix of the row vectors of m."""
    cov = covariance(m)
    scale = np.sqrt(np.outer(np.diag(cov), np.diag(cov)))
    return cov / scale
