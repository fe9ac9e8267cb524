"""Covariance estimation sub-package."""

from riskparity.estimation.covariance import as_covariance, as_return_matrix, estimate_covariance

__all__ = [
    "as_covariance",
    "as_return_matrix",
    "estimate_covariance",
]
