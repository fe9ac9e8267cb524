"""
Risk-contribution decomposition of portfolio volatility.

    σ(w)  = sqrt(w^T Σ w)
    RC_i  = w_i (Σw)_i / σ(w),     Σ_i RC_i = σ(w)
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from riskparity.estimation.covariance import as_covariance
from riskparity.exceptions import InvalidDimensionError


def _check_weights(w: NDArray[np.float64], cov: NDArray[np.float64]) -> NDArray[np.float64]:
    w = np.asarray(w, dtype=np.float64)
    if w.ndim != 1 or len(w) != cov.shape[0]:
        raise InvalidDimensionError(
            f"weights of shape {w.shape} do not match covariance of shape {cov.shape}"
        )
    return w


def portfolio_volatility(w: NDArray[np.float64], cov: NDArray[np.float64]) -> float:
    """Total portfolio volatility sqrt(w^T Σ w)."""
    cov = as_covariance(cov)
    w = _check_weights(w, cov)
    # Clip round-off below zero for near-riskless portfolios
    return float(np.sqrt(max(w @ cov @ w, 0.0)))


def risk_contributions(
    w: NDArray[np.float64],
    cov: NDArray[np.float64],
) -> tuple[NDArray[np.float64], float]:
    """Compute each asset's contribution to total portfolio volatility.

    Parameters
    ----------
    w : (N,) portfolio weights
    cov : (N, N) covariance matrix

    Returns
    -------
    rc : (N,) risk contributions, summing to ``total_vol``
    total_vol : float
    """
    cov = as_covariance(cov)
    w = _check_weights(w, cov)
    marginal = cov @ w
    total_vol = float(np.sqrt(max(w @ marginal, 0.0)))
    if total_vol == 0.0:
        return np.zeros_like(w), 0.0
    return w * marginal / total_vol, total_vol


def relative_risk_contributions(
    w: NDArray[np.float64],
    cov: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Fraction of total risk from each asset (RC_i / σ, sums to 1).

    Comparable directly with a risk budget.
    """
    rc, total_vol = risk_contributions(w, cov)
    if total_vol == 0.0:
        return rc
    return rc / total_vol
