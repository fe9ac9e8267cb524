"""Equal-weight (1/N) portfolio baseline."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from riskparity.exceptions import InvalidDimensionError


def equal_weights(n: int) -> NDArray[np.float64]:
    """Return ``n`` weights of exactly 1/n."""
    if n <= 0:
        raise InvalidDimensionError(f"number of assets must be positive, got {n}")
    return np.full(n, 1.0 / n)


class EqualWeightStrategy:
    """Uniform allocation across ``n_assets``."""

    def __init__(self, n_assets: int):
        self.n_assets = n_assets

    def optimal_weights(self) -> NDArray[np.float64]:
        return equal_weights(self.n_assets)

    @classmethod
    def from_returns(cls, returns: NDArray[np.float64]) -> EqualWeightStrategy:
        return cls(n_assets=np.asarray(returns).shape[1])
