"""
Performance metrics for walk-forward backtests.

All metrics are annualised unless stated otherwise. Missing periods
(strategy gaps) are dropped before any statistic is computed.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

import numpy as np
import pandas as pd
from numpy.typing import NDArray


@dataclass
class PerformanceMetrics:
    """Container for strategy performance statistics."""
    annualised_return: float
    annualised_volatility: float
    sharpe_ratio: float
    sortino_ratio: float
    max_drawdown: float
    calmar_ratio: float
    var_95: float           # 5% Value at Risk (per period)
    cvar_95: float          # 5% Conditional VaR (per period)
    final_wealth: float
    n_periods: int

    def to_dict(self) -> dict:
        return asdict(self)


def compute_metrics(
    returns: NDArray[np.float64] | pd.Series,
    periods_per_year: float = 12.0,
) -> PerformanceMetrics:
    """Compute performance metrics from simple period returns.

    Parameters
    ----------
    returns : (T,) period returns, NaN for periods without a position
    periods_per_year : float

    Returns
    -------
    PerformanceMetrics
    """
    r = np.asarray(returns, dtype=np.float64)
    r = r[np.isfinite(r)]
    wealth = np.cumprod(np.concatenate([[1.0], 1.0 + r]))

    if len(r) < 2:
        # Not enough data
        return PerformanceMetrics(
            annualised_return=0.0, annualised_volatility=0.0,
            sharpe_ratio=0.0, sortino_ratio=0.0, max_drawdown=0.0,
            calmar_ratio=0.0, var_95=0.0, cvar_95=0.0,
            final_wealth=float(wealth[-1]), n_periods=len(r),
        )

    ann_ret = np.mean(r) * periods_per_year
    ann_vol = np.std(r, ddof=1) * np.sqrt(periods_per_year)
    sharpe = ann_ret / ann_vol if ann_vol > 1e-10 else 0.0

    # Sortino (downside deviation)
    downside = r[r < 0]
    down_vol = np.std(downside, ddof=1) * np.sqrt(periods_per_year) if len(downside) > 1 else 0.0
    sortino = ann_ret / down_vol if down_vol > 1e-10 else 0.0

    peak = np.maximum.accumulate(wealth)
    max_dd = float(((peak - wealth) / peak).max())
    calmar = ann_ret / max_dd if max_dd > 1e-10 else 0.0

    var_95 = float(-np.percentile(r, 5))
    tail = r[r <= -var_95]
    cvar_95 = float(-tail.mean()) if len(tail) > 0 else var_95

    return PerformanceMetrics(
        annualised_return=float(ann_ret),
        annualised_volatility=float(ann_vol),
        sharpe_ratio=float(sharpe),
        sortino_ratio=float(sortino),
        max_drawdown=max_dd,
        calmar_ratio=float(calmar),
        var_95=var_95,
        cvar_95=cvar_95,
        final_wealth=float(wealth[-1]),
        n_periods=len(r),
    )
