"""
Risk Parity Allocation — Top-level package.

Risk-budgeting portfolio weights via Gauss-Seidel coordinate updates,
equal-weight and minimum-variance baselines, and a walk-forward
backtest comparing them.
"""

from riskparity.backtest import BacktestRecord, WalkForwardBacktester, walk_forward_backtest
from riskparity.benchmarks import equal_weights, min_variance_weights
from riskparity.common import PipelineConfig, load_config
from riskparity.estimation import estimate_covariance
from riskparity.risk import risk_contributions
from riskparity.solver import RiskParitySolution, risk_parity_weights

__version__ = "1.0.0"

__all__ = [
    "BacktestRecord",
    "WalkForwardBacktester",
    "walk_forward_backtest",
    "equal_weights",
    "min_variance_weights",
    "PipelineConfig",
    "load_config",
    "estimate_covariance",
    "risk_contributions",
    "RiskParitySolution",
    "risk_parity_weights",
]
