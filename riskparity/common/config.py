"""
Configuration system for the risk-parity allocation package.

All parameters are grouped into dataclasses and can be loaded from YAML.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
import yaml

from riskparity.exceptions import ConfigValidationError

KNOWN_STRATEGIES = ("equal_weight", "min_variance", "risk_parity")


# ---------------------------------------------------------------------------
# Dataclass definitions
# ---------------------------------------------------------------------------

@dataclass
class SolverConfig:
    """Parameters for the Gauss-Seidel risk-parity solver."""
    # Stop once max_i |x_i (Σx)_i − b_i| falls below this
    tolerance: float = 1e-8
    # Cap on full coordinate sweeps
    max_iterations: int = 100
    # Target risk shares; None means uniform 1/N
    budget: list[float] | None = None
    budget_tolerance: float = 1e-6
    # Diagonal entries at or below this are treated as zero variance
    degenerate_tol: float = 1e-12
    # Whether the backtest keeps weights from an unconverged solve
    accept_unconverged: bool = True

    def validate(self) -> None:
        if not np.isfinite(self.tolerance) or self.tolerance <= 0:
            raise ConfigValidationError("tolerance must be positive and finite")
        if self.max_iterations < 1:
            raise ConfigValidationError("max_iterations must be >= 1")
        if not np.isfinite(self.budget_tolerance) or self.budget_tolerance <= 0:
            raise ConfigValidationError("budget_tolerance must be positive and finite")
        if not np.isfinite(self.degenerate_tol) or self.degenerate_tol < 0:
            raise ConfigValidationError("degenerate_tol must be non-negative and finite")
        if self.budget is not None:
            b = np.asarray(self.budget, dtype=np.float64)
            if b.ndim != 1 or len(b) == 0:
                raise ConfigValidationError("budget must be a non-empty list")
            if not np.all(np.isfinite(b)):
                raise ConfigValidationError("budget contains NaN or infinite values")
            if np.any(b < 0):
                raise ConfigValidationError("budget entries must be non-negative")
            if abs(b.sum() - 1.0) > self.budget_tolerance:
                raise ConfigValidationError(f"budget must sum to 1, got {b.sum():.6f}")


@dataclass
class MinVarianceConfig:
    """Parameters for the closed-form minimum-variance portfolio."""
    # Covariance matrices above this 2-norm condition number count as singular
    max_condition_number: float = 1e10

    def validate(self) -> None:
        if not np.isfinite(self.max_condition_number) or self.max_condition_number <= 1:
            raise ConfigValidationError("max_condition_number must exceed 1")


@dataclass
class BacktestConfig:
    """Parameters for the walk-forward backtest."""
    # Trailing estimation window, in periods
    window_length: int = 36
    # Rebalance every N periods (int) or on calendar boundaries ("M", "Q", "W", ...)
    rebalance: int | str = 1
    periods_per_year: float = 12.0
    strategies: list[str] = field(default_factory=lambda: list(KNOWN_STRATEGIES))

    def validate(self) -> None:
        if self.window_length < 2:
            raise ConfigValidationError("window_length must be >= 2")
        if isinstance(self.rebalance, bool) or not isinstance(self.rebalance, (int, str)):
            raise ConfigValidationError("rebalance must be an int or a period alias string")
        if isinstance(self.rebalance, int) and self.rebalance < 1:
            raise ConfigValidationError("rebalance must be >= 1 when given as a period count")
        if isinstance(self.rebalance, str):
            try:
                pd.Timestamp("2000-01-31").to_period(self.rebalance)
            except (ValueError, TypeError) as e:
                raise ConfigValidationError(
                    f"rebalance '{self.rebalance}' is not a pandas period alias"
                ) from e
        if not np.isfinite(self.periods_per_year) or self.periods_per_year <= 0:
            raise ConfigValidationError("periods_per_year must be positive")
        if not self.strategies:
            raise ConfigValidationError("At least one strategy required")
        unknown = sorted(set(self.strategies) - set(KNOWN_STRATEGIES))
        if unknown:
            raise ConfigValidationError(
                f"unknown strategies {unknown}; expected a subset of {list(KNOWN_STRATEGIES)}"
            )


@dataclass
class PipelineConfig:
    """Top-level configuration aggregating all sub-configs."""
    solver: SolverConfig = field(default_factory=SolverConfig)
    min_variance: MinVarianceConfig = field(default_factory=MinVarianceConfig)
    backtest: BacktestConfig = field(default_factory=BacktestConfig)

    def validate(self) -> None:
        """Validate all sub-configs."""
        self.solver.validate()
        self.min_variance.validate()
        self.backtest.validate()


# ---------------------------------------------------------------------------
# YAML I/O
# ---------------------------------------------------------------------------

def _nested_dataclass_from_dict(cls: type, data: dict[str, Any]) -> Any:
    """Recursively instantiate nested dataclasses from dict."""
    from dataclasses import fields as dc_fields
    fieldtypes = {f.name: f.type for f in dc_fields(cls)}
    kwargs = {}
    for k, v in data.items():
        if k not in fieldtypes:
            raise ConfigValidationError(f"unknown config key '{k}' for {cls.__name__}")
        ft = fieldtypes[k]
        if isinstance(ft, str):
            ft = globals().get(ft, None)
        if isinstance(v, dict) and ft is not None and hasattr(ft, "__dataclass_fields__"):
            kwargs[k] = _nested_dataclass_from_dict(ft, v)
        else:
            kwargs[k] = v
    return cls(**kwargs)


def load_config(path: str | Path) -> PipelineConfig:
    """Load configuration from a YAML file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raw = {}
    cfg = _nested_dataclass_from_dict(PipelineConfig, raw)
    cfg.validate()
    return cfg


def save_config(cfg: PipelineConfig, path: str | Path) -> None:
    """Save configuration to a YAML file."""
    from dataclasses import asdict
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = asdict(cfg)
    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
