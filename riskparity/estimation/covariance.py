"""
Sample covariance estimation from a window of period returns.

    Σ = (1 / (T − 1)) · Σ_t (r_t − r̄)(r_t − r̄)^T
"""

from __future__ import annotations

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from riskparity.exceptions import (
    InsufficientDataError,
    InvalidCovarianceError,
    InvalidDimensionError,
    MissingDataError,
)

MIN_OBSERVATIONS = 2


def as_return_matrix(returns: NDArray[np.float64] | pd.DataFrame) -> NDArray[np.float64]:
    """Coerce a return window to a finite (T, N) float array.

    Parameters
    ----------
    returns : (T, N) array or DataFrame

    Returns
    -------
    R : (T, N) float64 array
    """
    if isinstance(returns, pd.DataFrame):
        returns = returns.to_numpy()
    R = np.asarray(returns, dtype=np.float64)
    if R.ndim != 2:
        raise InvalidDimensionError(f"returns must be 2-D (T, N), got shape {R.shape}")
    if R.shape[1] == 0:
        raise InvalidDimensionError("returns must have at least one asset column")
    if not np.all(np.isfinite(R)):
        raise MissingDataError("returns contain NaN or infinite values")
    return R


def as_covariance(cov: NDArray[np.float64], atol: float = 1e-12) -> NDArray[np.float64]:
    """Validate a covariance matrix: square, finite and symmetric.

    Parameters
    ----------
    cov : (N, N) array
    atol : float
        Absolute tolerance for the symmetry check.

    Returns
    -------
    cov : (N, N) float64 array
    """
    cov = np.asarray(cov, dtype=np.float64)
    if cov.ndim != 2 or cov.shape[0] != cov.shape[1] or cov.shape[0] == 0:
        raise InvalidDimensionError(f"covariance must be a non-empty square matrix, got shape {cov.shape}")
    if not np.all(np.isfinite(cov)):
        raise InvalidCovarianceError("covariance contains NaN or infinite values")
    if not np.allclose(cov, cov.T, rtol=1e-10, atol=atol):
        raise InvalidCovarianceError("covariance matrix must be symmetric")
    return cov


def estimate_covariance(returns: NDArray[np.float64] | pd.DataFrame) -> NDArray[np.float64]:
    """Unbiased sample covariance of a return window (divides by T − 1).

    Parameters
    ----------
    returns : (T, N) array or DataFrame, T >= 2

    Returns
    -------
    cov : (N, N) covariance matrix
    """
    R = as_return_matrix(returns)
    T = R.shape[0]
    if T < MIN_OBSERVATIONS:
        raise InsufficientDataError(
            "covariance needs at least two observations",
            n_observations=T,
            required=MIN_OBSERVATIONS,
        )
    # np.cov collapses a single column to a 0-d array
    return np.atleast_2d(np.cov(R, rowvar=False, ddof=1))
