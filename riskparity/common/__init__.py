"""Common utilities and configuration."""

from riskparity.common.config import (
    KNOWN_STRATEGIES,
    BacktestConfig,
    MinVarianceConfig,
    PipelineConfig,
    SolverConfig,
    load_config,
    save_config,
)

__all__ = [
    "KNOWN_STRATEGIES",
    "SolverConfig",
    "MinVarianceConfig",
    "BacktestConfig",
    "PipelineConfig",
    "load_config",
    "save_config",
]
