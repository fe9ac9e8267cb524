"""
Walk-forward backtesting engine.

At each rebalance date the strategy sees only the trailing window of
returns before that date; the resulting weights are held unchanged
until the next rebalance date and applied to the realised returns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from riskparity.backtest.metrics import PerformanceMetrics, compute_metrics
from riskparity.benchmarks.equal_weight import equal_weights
from riskparity.benchmarks.min_variance import min_variance_weights
from riskparity.common.config import BacktestConfig, PipelineConfig
from riskparity.estimation.covariance import as_return_matrix, estimate_covariance
from riskparity.exceptions import (
    DegenerateAssetError,
    InsufficientDataError,
    InvalidCovarianceError,
    InvalidDimensionError,
    SolverConvergenceError,
)
from riskparity.solver.risk_parity import risk_parity_weights

logger = logging.getLogger(__name__)

# (T, N) trailing return window → (N,) weights
Strategy = Callable[[NDArray[np.float64]], NDArray[np.float64]]

# Errors that void one (strategy, date) pair without stopping the run
RECOVERABLE_ERRORS = (
    InvalidCovarianceError,
    DegenerateAssetError,
    SolverConvergenceError,
    InsufficientDataError,
)


@dataclass
class BacktestRecord:
    """Container for one strategy's backtest output."""

    strategy_name: str
    period_returns: pd.Series           # NaN where the strategy had no weights
    cumulative_returns: pd.Series       # compounded, gaps skipped
    weight_history: pd.DataFrame        # one row per rebalance date
    failures: dict = field(default_factory=dict)  # rebalance date → error message

    def metrics(self, periods_per_year: float = 12.0) -> PerformanceMetrics:
        return compute_metrics(self.period_returns, periods_per_year)


class WalkForwardBacktester:
    """Walk-forward backtest with trailing-window re-estimation.

    Parameters
    ----------
    returns : (T, N) array or DataFrame
        Aligned period returns; a DataFrame index supplies the time labels.
    window_length : int
        Number of trailing periods used at each rebalance date.
    rebalance : int or str
        Rebalance every ``rebalance`` periods, or at the first period of
        each calendar group for a pandas period alias ("M", "Q", "W", ...).
    """

    def __init__(
        self,
        returns: NDArray[np.float64] | pd.DataFrame,
        window_length: int,
        rebalance: int | str = 1,
    ):
        if window_length < 2:
            raise ValueError(f"window_length must be >= 2, got {window_length}")
        R = as_return_matrix(returns)
        if isinstance(returns, pd.DataFrame):
            self.returns = pd.DataFrame(R, index=returns.index, columns=returns.columns)
        else:
            self.returns = pd.DataFrame(R)
        self.window_length = window_length
        self.rebalance = rebalance
        self.n_assets = R.shape[1]
        self.rebalance_positions = self._schedule()
        if len(self.rebalance_positions) == 0:
            raise InsufficientDataError(
                "no rebalance date has a full trailing window",
                n_observations=R.shape[0],
                required=window_length + 1,
            )

    @classmethod
    def from_config(
        cls,
        returns: NDArray[np.float64] | pd.DataFrame,
        cfg: BacktestConfig,
    ) -> WalkForwardBacktester:
        cfg.validate()
        return cls(returns, window_length=cfg.window_length, rebalance=cfg.rebalance)

    def _schedule(self) -> NDArray[np.int64]:
        """Positions of rebalance dates that have a full trailing window."""
        T = len(self.returns)
        L = self.window_length
        if isinstance(self.rebalance, str):
            index = self.returns.index
            if not isinstance(index, pd.DatetimeIndex):
                raise ValueError("calendar rebalancing requires a DatetimeIndex")
            try:
                codes = index.to_period(self.rebalance).asi8
            except (ValueError, TypeError) as e:
                raise ValueError(f"invalid rebalance period alias '{self.rebalance}'") from e
            starts = np.flatnonzero(np.r_[True, np.diff(codes) != 0])
            return starts[starts >= L]
        if isinstance(self.rebalance, bool) or self.rebalance < 1:
            raise ValueError(f"rebalance must be >= 1, got {self.rebalance}")
        return np.arange(L, T, self.rebalance)

    @property
    def rebalance_dates(self) -> pd.Index:
        return self.returns.index[self.rebalance_positions]

    def run(self, strategy_fn: Strategy, strategy_name: str = "strategy") -> BacktestRecord:
        """Run the backtest for a single strategy.

        Parameters
        ----------
        strategy_fn : callable
            (trailing return window) → weights
        strategy_name : str

        Returns
        -------
        BacktestRecord
        """
        R = self.returns.to_numpy()
        T, N = R.shape
        L = self.window_length
        positions = self.rebalance_positions
        ends = np.r_[positions[1:], T]
        start = positions[0]

        # Pre-sized result slots, one per period / rebalance date
        period_returns = np.full(T - start, np.nan)
        weights = np.full((len(positions), N), np.nan)
        failures = {}

        for k, (p, end) in enumerate(zip(positions, ends)):
            date = self.returns.index[p]
            window = R[p - L : p]
            try:
                w = np.asarray(strategy_fn(window), dtype=np.float64)
            except RECOVERABLE_ERRORS as e:
                logger.warning(f"{strategy_name} skipped at {date}: {e}")
                failures[date] = str(e)
                continue
            if w.shape != (N,):
                raise InvalidDimensionError(
                    f"{strategy_name} returned weights of shape {w.shape}, expected ({N},)"
                )
            weights[k] = w
            period_returns[p - start : end - start] = R[p:end] @ w

        index = self.returns.index[start:]
        ret_series = pd.Series(period_returns, index=index, name=strategy_name)
        cumulative = (1.0 + ret_series).cumprod() - 1.0
        weight_history = pd.DataFrame(
            weights, index=self.returns.index[positions], columns=self.returns.columns
        )
        weight_history.index.name = "date"

        logger.info(
            f"{strategy_name}: {len(positions)} rebalances, {len(failures)} gaps, "
            f"{len(index)} periods"
        )
        return BacktestRecord(
            strategy_name=strategy_name,
            period_returns=ret_series,
            cumulative_returns=cumulative,
            weight_history=weight_history,
            failures=failures,
        )

    def run_multiple(self, strategies: dict[str, Strategy]) -> dict[str, BacktestRecord]:
        """Run the backtest for multiple strategies.

        Parameters
        ----------
        strategies : dict mapping name → strategy callable

        Returns
        -------
        dict mapping name → BacktestRecord
        """
        results = {}
        for name, fn in strategies.items():
            results[name] = self.run(fn, strategy_name=name)
        return results


def build_strategies(cfg: PipelineConfig | None = None) -> dict[str, Strategy]:
    """Covariance-based strategy callables named in ``cfg.backtest.strategies``."""
    cfg = cfg or PipelineConfig()
    solver_cfg = cfg.solver

    def equal_weight(window):
        return equal_weights(window.shape[1])

    def min_variance(window):
        return min_variance_weights(
            estimate_covariance(window), cfg.min_variance.max_condition_number
        )

    def risk_parity(window):
        sol = risk_parity_weights(
            estimate_covariance(window),
            budget=solver_cfg.budget,
            tolerance=solver_cfg.tolerance,
            max_iterations=solver_cfg.max_iterations,
            budget_tolerance=solver_cfg.budget_tolerance,
            degenerate_tol=solver_cfg.degenerate_tol,
        )
        if not sol.converged and not solver_cfg.accept_unconverged:
            raise SolverConvergenceError(
                "risk parity did not converge",
                iterations=sol.iterations,
                final_residual=sol.residual,
            )
        return sol.weights

    available = {
        "equal_weight": equal_weight,
        "min_variance": min_variance,
        "risk_parity": risk_parity,
    }
    return {name: available[name] for name in cfg.backtest.strategies}


def walk_forward_backtest(
    returns: NDArray[np.float64] | pd.DataFrame,
    window_length: int,
    strategies: dict[str, Strategy] | None = None,
    rebalance: int | str = 1,
) -> dict[str, BacktestRecord]:
    """Backtest each strategy with trailing-window re-estimation.

    ``strategies`` defaults to equal weight, minimum variance and risk parity.
    """
    if strategies is None:
        strategies = build_strategies()
    engine = WalkForwardBacktester(returns, window_length, rebalance=rebalance)
    return engine.run_multiple(strategies)


def summarize(
    results: dict[str, BacktestRecord],
    periods_per_year: float = 12.0,
) -> pd.DataFrame:
    """Performance metrics table, one row per strategy."""
    rows = {name: rec.metrics(periods_per_year).to_dict() for name, rec in results.items()}
    return pd.DataFrame.from_dict(rows, orient="index")


def weight_table(results: dict[str, BacktestRecord]) -> pd.DataFrame:
    """All weight histories stacked with a (strategy, date) index."""
    return pd.concat(
        {name: rec.weight_history for name, rec in results.items()},
        names=["strategy", "date"],
    )
