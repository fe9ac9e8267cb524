"""Unit tests for the equal-weight and minimum-variance baselines."""

import numpy as np
import pytest

from riskparity.benchmarks.equal_weight import EqualWeightStrategy, equal_weights
from riskparity.benchmarks.min_variance import MinimumVarianceStrategy, min_variance_weights
from riskparity.exceptions import InvalidCovarianceError, InvalidDimensionError, SingularCovarianceError


class TestEqualWeight:
    @pytest.mark.parametrize("n", [1, 2, 3, 7, 10])
    def test_exact_one_over_n(self, n):
        w = equal_weights(n)
        assert len(w) == n
        assert np.all(w == 1.0 / n)
        assert w.sum() == pytest.approx(1.0)

    @pytest.mark.parametrize("n", [0, -1])
    def test_non_positive_raises(self, n):
        with pytest.raises(InvalidDimensionError):
            equal_weights(n)

    def test_from_returns(self):
        strat = EqualWeightStrategy.from_returns(np.zeros((5, 4)))
        np.testing.assert_array_equal(strat.optimal_weights(), np.full(4, 0.25))


class TestMinimumVariance:
    def test_identity_gives_equal_weights(self):
        """Σ = I → Σ⁻¹1 ∝ 1."""
        w = min_variance_weights(np.eye(5))
        np.testing.assert_allclose(w, 0.2)

    def test_matches_closed_form(self):
        cov = np.array([[0.04, 0.01], [0.01, 0.09]])
        inv = np.linalg.inv(cov)
        expected = inv @ np.ones(2) / (np.ones(2) @ inv @ np.ones(2))
        w = min_variance_weights(cov)
        np.testing.assert_allclose(w, expected, rtol=1e-12)
        assert w.sum() == pytest.approx(1.0)

    def test_allows_short_positions(self):
        """High correlation with unequal vols shorts the riskier asset."""
        cov = np.array([[0.04, 0.0570], [0.0570, 0.09]])
        w = min_variance_weights(cov)
        assert w.sum() == pytest.approx(1.0)
        assert w[1] < 0

    def test_variance_not_above_equal_weight(self):
        rng = np.random.default_rng(7)
        A = rng.normal(size=(4, 4))
        cov = A @ A.T + 0.1 * np.eye(4)
        mv = MinimumVarianceStrategy(cov)
        ew = np.full(4, 0.25)
        assert mv.portfolio_variance() <= mv.portfolio_variance(ew) + 1e-12

    def test_singular_raises(self):
        cov = np.array([[1.0, 1.0], [1.0, 1.0]])
        with pytest.raises(SingularCovarianceError):
            min_variance_weights(cov)

    def test_ill_conditioned_threshold(self):
        cov = np.diag([1.0, 1e-6])
        np.testing.assert_allclose(min_variance_weights(cov).sum(), 1.0)
        with pytest.raises(SingularCovarianceError) as exc:
            min_variance_weights(cov, max_condition_number=1e3)
        assert exc.value.condition_number == pytest.approx(1e6)

    def test_indefinite_raises(self):
        cov = np.array([[1.0, 2.0], [2.0, 1.0]])
        with pytest.raises(InvalidCovarianceError):
            min_variance_weights(cov)

    def test_from_returns(self):
        rng = np.random.default_rng(11)
        R = rng.normal(0, 0.01, size=(60, 3))
        w = MinimumVarianceStrategy.from_returns(R).optimal_weights()
        assert w.shape == (3,)
        assert w.sum() == pytest.approx(1.0)
