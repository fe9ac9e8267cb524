"""
Convergence monitor for the risk-parity fixed-point solver.

Keeps the residual trail of the Gauss-Seidel sweeps, estimates the
linear contraction rate and warns when the residual stops shrinking.
"""

from __future__ import annotations

import logging

import numpy as np

logger = logging.getLogger(__name__)


class ConvergenceMonitor:
    """Track the per-sweep residual of an iterative solver.

    Parameters
    ----------
    tol : float
        Convergence tolerance on the residual.
    stall_window : int
        Number of consecutive non-decreasing residuals that counts as a stall.
    """

    def __init__(self, tol: float = 1e-8, stall_window: int = 10):
        self.tol = tol
        self.stall_window = stall_window

        self.residuals: list[float] = []
        self.converged = False
        self._stall_count = 0
        self._stall_reported = False

    def update(self, residual: float, sweep: int) -> bool:
        """Record the residual after ``sweep`` and return whether it converged."""
        if self.residuals and residual >= self.residuals[-1]:
            self._stall_count += 1
        else:
            self._stall_count = 0
        self.residuals.append(residual)

        if residual < self.tol:
            self.converged = True
            logger.debug(f"Converged at sweep {sweep} (residual={residual:.2e})")
        elif self._stall_count >= self.stall_window and not self._stall_reported:
            self._stall_reported = True
            logger.warning(
                f"Residual has not decreased for {self._stall_count} sweeps "
                f"(sweep={sweep}, residual={residual:.2e})"
            )

        if sweep % 50 == 0 or sweep < 5:
            logger.debug(f"Sweep {sweep:4d}: residual = {residual:.6e}")
        return self.converged

    def contraction_rate(self) -> float:
        """Geometric-mean ratio of successive residuals (nan if undefined)."""
        r = np.asarray(self.residuals, dtype=np.float64)
        r = r[r > 0]
        if len(r) < 2:
            return float("nan")
        return float(np.exp(np.mean(np.diff(np.log(r)))))

    def summary(self) -> dict:
        """Return summary statistics."""
        if not self.residuals:
            return {"converged": False, "n_sweeps": 0}
        return {
            "converged": self.converged,
            "n_sweeps": len(self.residuals),
            "final_residual": self.residuals[-1],
            "min_residual": min(self.residuals),
            "contraction_rate": self.contraction_rate(),
        }
