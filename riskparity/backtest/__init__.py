"""Backtesting sub-package."""

from riskparity.backtest.engine import (
    BacktestRecord,
    WalkForwardBacktester,
    build_strategies,
    summarize,
    walk_forward_backtest,
    weight_table,
)
from riskparity.backtest.metrics import PerformanceMetrics, compute_metrics

__all__ = [
    "BacktestRecord",
    "WalkForwardBacktester",
    "build_strategies",
    "summarize",
    "walk_forward_backtest",
    "weight_table",
    "compute_metrics",
    "PerformanceMetrics",
]
