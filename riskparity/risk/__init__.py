"""Risk-contribution analytics sub-package."""

from riskparity.risk.contributions import (
    portfolio_volatility,
    relative_risk_contributions,
    risk_contributions,
)

__all__ = [
    "portfolio_volatility",
    "relative_risk_contributions",
    "risk_contributions",
]
