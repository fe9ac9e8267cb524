"""Baseline allocation strategies sub-package."""

from riskparity.benchmarks.equal_weight import EqualWeightStrategy, equal_weights
from riskparity.benchmarks.min_variance import MinimumVarianceStrategy, min_variance_weights

__all__ = [
    "EqualWeightStrategy",
    "equal_weights",
    "MinimumVarianceStrategy",
    "min_variance_weights",
]
