"""Risk-parity solver sub-package."""

from riskparity.solver.monitor import ConvergenceMonitor
from riskparity.solver.risk_parity import (
    RiskParitySolution,
    RiskParityStrategy,
    risk_parity_weights,
    validate_budget,
)

__all__ = [
    "ConvergenceMonitor",
    "RiskParitySolution",
    "RiskParityStrategy",
    "risk_parity_weights",
    "validate_budget",
]
