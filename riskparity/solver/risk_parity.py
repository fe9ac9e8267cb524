"""
Risk-parity (risk-budgeting) portfolio solver.

Finds long-only weights whose risk contributions match a budget b:

    w_i (Σw)_i / (w^T Σ w) = b_i   for all i

Working in the unnormalised variable x (w = x / 1^T x), the conditions
become x_i (Σx)_i = b_i. Holding every other coordinate fixed, each one
is the quadratic

    Σ_ii x_i² + z_i x_i − b_i = 0,     z_i = (Σx)_i − Σ_ii x_i

whose non-negative root is taken. Coordinates are updated cyclically,
each using the latest values of all others (Gauss-Seidel).
"""

from __future__ import annotations

import logging
from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray

from riskparity.estimation.covariance import as_covariance, estimate_covariance
from riskparity.exceptions import DegenerateAssetError, InvalidBudgetError, InvalidCovarianceError
from riskparity.risk.contributions import relative_risk_contributions
from riskparity.solver.monitor import ConvergenceMonitor

logger = logging.getLogger(__name__)


class RiskParitySolution(NamedTuple):
    """Output of the risk-parity solver."""
    weights: NDArray[np.float64]    # (N,) long-only weights summing to 1
    converged: bool
    iterations: int                 # sweeps performed
    residual: float                 # max_i |x_i (Σx)_i − b_i| after the last sweep


def validate_budget(
    budget: NDArray[np.float64] | list[float] | None,
    n_assets: int,
    tol: float = 1e-6,
) -> NDArray[np.float64]:
    """Return a validated risk budget, uniform 1/N when ``budget`` is None."""
    if budget is None:
        return np.full(n_assets, 1.0 / n_assets)
    b = np.asarray(budget, dtype=np.float64)
    if b.ndim != 1 or len(b) != n_assets:
        raise InvalidBudgetError(f"budget must have length {n_assets}, got shape {b.shape}")
    if not np.all(np.isfinite(b)):
        raise InvalidBudgetError("budget contains NaN or infinite values")
    if np.any(b < 0):
        raise InvalidBudgetError(f"budget entries must be non-negative, got {b}")
    if abs(b.sum() - 1.0) > tol:
        raise InvalidBudgetError(f"budget must sum to 1, got {b.sum():.6f}")
    return b


class RiskParityStrategy:
    """Risk-budgeting portfolio solved by cyclic coordinate updates.

    Parameters
    ----------
    cov : (N, N) positive-definite covariance matrix
    budget : (N,) target risk shares, default uniform
    tol : float
        Convergence tolerance on max_i |x_i (Σx)_i − b_i|.
    max_iterations : int
        Cap on full sweeps; the last iterate is returned unconverged past it.
    budget_tolerance : float
        Allowed deviation of sum(budget) from 1.
    degenerate_tol : float
        Diagonal entries with magnitude at or below this are zero variance.
    """

    def __init__(
        self,
        cov: NDArray[np.float64],
        budget: NDArray[np.float64] | list[float] | None = None,
        tol: float = 1e-8,
        max_iterations: int = 100,
        budget_tolerance: float = 1e-6,
        degenerate_tol: float = 1e-12,
    ):
        if not np.isfinite(tol) or tol <= 0:
            raise ValueError(f"tol must be positive and finite, got {tol}")
        if not np.isfinite(budget_tolerance) or budget_tolerance <= 0:
            raise ValueError(f"budget_tolerance must be positive and finite, got {budget_tolerance}")
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
        self.cov = as_covariance(cov)
        self.n_assets = self.cov.shape[0]
        self.budget = validate_budget(budget, self.n_assets, budget_tolerance)
        self.tol = tol
        self.max_iterations = max_iterations
        self.degenerate_tol = degenerate_tol
        self.monitor = ConvergenceMonitor(tol=tol)

    def _check_solvable(self) -> None:
        """Reject zero-variance assets and non-positive-definite matrices."""
        diag = np.diag(self.cov)
        degenerate = np.flatnonzero(np.abs(diag) <= self.degenerate_tol)
        if degenerate.size:
            raise DegenerateAssetError(
                "asset has zero variance", asset_index=int(degenerate[0])
            )
        try:
            np.linalg.cholesky(self.cov)
        except np.linalg.LinAlgError as e:
            min_eig = float(np.linalg.eigvalsh(self.cov).min())
            raise InvalidCovarianceError(
                "covariance matrix is not positive definite", min_eigenvalue=min_eig
            ) from e

    def solve(self) -> RiskParitySolution:
        """Run the Gauss-Seidel iteration.

        Returns
        -------
        RiskParitySolution
            Weights, convergence flag, sweeps used and final residual.
        """
        self._check_solvable()
        cov = self.cov
        b = self.budget
        diag = np.diag(cov)
        n = self.n_assets
        self.monitor = ConvergenceMonitor(tol=self.tol)

        # Equal start, scaled so that x^T Σ x = 1
        x = np.full(n, 1.0 / np.sqrt(cov.sum()))
        sigma_x = cov @ x

        for sweep in range(1, self.max_iterations + 1):
            for i in range(n):
                z = sigma_x[i] - diag[i] * x[i]
                x[i] = (-z + np.sqrt(z * z + 4.0 * diag[i] * b[i])) / (2.0 * diag[i])
                sigma_x = cov @ x
            residual = float(np.max(np.abs(x * sigma_x - b)))
            if self.monitor.update(residual, sweep):
                break

        converged = self.monitor.converged
        if not converged:
            logger.warning(
                f"Risk parity did not converge in {sweep} sweeps "
                f"(residual={residual:.2e}, tol={self.tol:.1e})"
            )
        return RiskParitySolution(
            weights=x / x.sum(),
            converged=converged,
            iterations=sweep,
            residual=residual,
        )

    def optimal_weights(self) -> NDArray[np.float64]:
        """Risk-parity weights (the last iterate if unconverged)."""
        return self.solve().weights

    def risk_contributions(self, w: NDArray[np.float64]) -> NDArray[np.float64]:
        """Fraction of total risk from each asset, comparable with ``budget``."""
        return relative_risk_contributions(w, self.cov)

    @classmethod
    def from_returns(
        cls,
        returns: NDArray[np.float64],
        budget: NDArray[np.float64] | list[float] | None = None,
        **kwargs,
    ) -> RiskParityStrategy:
        """Construct from a (T, N) window of historical returns."""
        return cls(cov=estimate_covariance(returns), budget=budget, **kwargs)


def risk_parity_weights(
    cov: NDArray[np.float64],
    budget: NDArray[np.float64] | list[float] | None = None,
    tolerance: float = 1e-8,
    max_iterations: int = 100,
    budget_tolerance: float = 1e-6,
    degenerate_tol: float = 1e-12,
) -> RiskParitySolution:
    """Solve for risk-budgeting weights.

    Returns ``(weights, converged, iterations, residual)``.
    """
    return RiskParityStrategy(
        cov,
        budget=budget,
        tol=tolerance,
        max_iterations=max_iterations,
        budget_tolerance=budget_tolerance,
        degenerate_tol=degenerate_tol,
    ).solve()
