"""
Global minimum-variance portfolio strategy.

Minimising ½ w^T Σ w subject to 1^T w = 1 with a Lagrange multiplier
gives the closed form

    w* = Σ⁻¹ 1 / (1^T Σ⁻¹ 1)

No non-negativity constraint is imposed, so weights may be short.
Σ⁻¹ 1 is obtained from a Cholesky solve against the ones vector.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray
from scipy.linalg import LinAlgError, cho_factor, cho_solve

from riskparity.estimation.covariance import as_covariance, estimate_covariance
from riskparity.exceptions import InvalidCovarianceError, SingularCovarianceError

logger = logging.getLogger(__name__)


def min_variance_weights(
    cov: NDArray[np.float64],
    max_condition_number: float = 1e10,
) -> NDArray[np.float64]:
    """Compute fully-invested minimum-variance weights.

    Parameters
    ----------
    cov : (N, N) covariance matrix
    max_condition_number : float
        Matrices with a larger 2-norm condition number are treated as singular.

    Returns
    -------
    w : (N,) weights summing to 1
    """
    cov = as_covariance(cov)
    cond = float(np.linalg.cond(cov))
    if not np.isfinite(cond) or cond > max_condition_number:
        raise SingularCovarianceError(
            "covariance matrix is singular or ill-conditioned", condition_number=cond
        )

    try:
        factor = cho_factor(cov, lower=True)
    except LinAlgError as e:
        min_eig = float(np.linalg.eigvalsh(cov).min())
        raise InvalidCovarianceError(
            "covariance matrix is not positive definite", min_eigenvalue=min_eig
        ) from e

    ones = np.ones(cov.shape[0])
    u = cho_solve(factor, ones)  # Σ⁻¹ 1
    w = u / u.sum()
    logger.debug(f"Min-variance weights {w} (cond={cond:.2e})")
    return w


class MinimumVarianceStrategy:
    """Global minimum-variance portfolio.

    Parameters
    ----------
    cov : (N, N) covariance matrix
    max_condition_number : float
    """

    def __init__(self, cov: NDArray[np.float64], max_condition_number: float = 1e10):
        self.cov = as_covariance(cov)
        self.n_assets = self.cov.shape[0]
        self.max_condition_number = max_condition_number

    def optimal_weights(self) -> NDArray[np.float64]:
        """Closed-form minimum-variance weights (may be negative)."""
        return min_variance_weights(self.cov, self.max_condition_number)

    def portfolio_variance(self, w: NDArray[np.float64] | None = None) -> float:
        """Variance w^T Σ w, at the optimal weights by default."""
        if w is None:
            w = self.optimal_weights()
        return float(w @ self.cov @ w)

    @classmethod
    def from_returns(
        cls,
        returns: NDArray[np.float64],
        max_condition_number: float = 1e10,
    ) -> MinimumVarianceStrategy:
        """Construct from a (T, N) window of historical returns."""
        return cls(cov=estimate_covariance(returns), max_condition_number=max_condition_number)
