"""Unit tests for risk-contribution analytics."""

import numpy as np
import pytest

from riskparity.exceptions import InvalidDimensionError
from riskparity.risk.contributions import (
    portfolio_volatility,
    relative_risk_contributions,
    risk_contributions,
)


@pytest.fixture
def cov():
    return np.array([
        [0.04, 0.006, -0.002],
        [0.006, 0.09, 0.012],
        [-0.002, 0.012, 0.0225],
    ])


class TestRiskContributions:
    @pytest.mark.parametrize("w", [
        [1 / 3, 1 / 3, 1 / 3],
        [0.5, 0.2, 0.3],
        [1.2, -0.5, 0.3],
        [0.0, 0.0, 1.0],
    ])
    def test_sum_equals_total_volatility(self, cov, w):
        w = np.array(w)
        rc, total_vol = risk_contributions(w, cov)
        assert total_vol == pytest.approx(np.sqrt(w @ cov @ w))
        assert rc.sum() == pytest.approx(total_vol, rel=1e-12)

    def test_single_asset_carries_all_risk(self, cov):
        rc, total_vol = risk_contributions(np.array([0.0, 1.0, 0.0]), cov)
        np.testing.assert_allclose(rc, [0.0, 0.3, 0.0])
        assert total_vol == pytest.approx(0.3)

    def test_zero_weights_no_division(self, cov):
        rc, total_vol = risk_contributions(np.zeros(3), cov)
        np.testing.assert_array_equal(rc, 0.0)
        assert total_vol == 0.0

    def test_relative_contributions_sum_to_one(self, cov):
        frac = relative_risk_contributions(np.array([0.5, 0.2, 0.3]), cov)
        assert frac.sum() == pytest.approx(1.0)

    def test_portfolio_volatility(self, cov):
        w = np.array([0.5, 0.2, 0.3])
        assert portfolio_volatility(w, cov) == pytest.approx(np.sqrt(w @ cov @ w))

    def test_dimension_mismatch_raises(self, cov):
        with pytest.raises(InvalidDimensionError):
            risk_contributions(np.array([0.5, 0.5]), cov)

    def test_non_square_covariance_raises(self):
        with pytest.raises(InvalidDimensionError):
            risk_contributions(np.array([0.5, 0.5]), np.ones((2, 3)))
