"""Unit tests for performance metrics."""

import numpy as np
import pandas as pd

from riskparity.backtest.metrics import compute_metrics


class TestMetrics:
    def test_sharpe_on_near_constant(self):
        """Near-constant monthly return → very high Sharpe."""
        rng = np.random.default_rng(42)
        returns = 0.01 + rng.normal(0, 1e-6, 120)

        m = compute_metrics(returns, periods_per_year=12)
        # Ann return ~ 0.01 * 12 = 0.12
        assert abs(m.annualised_return - 0.12) < 0.001
        assert m.sharpe_ratio > 10
        assert m.max_drawdown == 0.0

    def test_max_drawdown(self):
        """Known drawdown scenario."""
        wealth = np.array([1.0, 1.2, 1.1, 0.8, 0.9, 1.0])
        returns = np.diff(wealth) / wealth[:-1]

        m = compute_metrics(returns)
        # Max drawdown: peak=1.2, trough=0.8 → dd = 0.4/1.2 = 33.3%
        assert abs(m.max_drawdown - 1 / 3) < 1e-12
        assert abs(m.final_wealth - 1.0) < 1e-12

    def test_gaps_are_dropped(self):
        returns = pd.Series([0.01, np.nan, 0.02, np.nan, -0.01])
        m = compute_metrics(returns)
        assert m.n_periods == 3
        assert abs(m.final_wealth - 1.01 * 1.02 * 0.99) < 1e-12

    def test_too_few_periods(self):
        m = compute_metrics(np.array([np.nan, 0.05]))
        assert m.n_periods == 1
        assert m.annualised_return == 0
        assert abs(m.final_wealth - 1.05) < 1e-12

    def test_zero_returns(self):
        """All-zero returns should not crash."""
        m = compute_metrics(np.zeros(100))
        assert m.annualised_return == 0
        assert m.sharpe_ratio == 0
        assert m.final_wealth == 1.0
