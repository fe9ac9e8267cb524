"""Unit tests for sample covariance estimation."""

import numpy as np
import pandas as pd
import pytest

from riskparity.estimation.covariance import as_covariance, estimate_covariance
from riskparity.exceptions import (
    InsufficientDataError,
    InvalidCovarianceError,
    InvalidDimensionError,
    MissingDataError,
)


class TestEstimateCovariance:
    def test_matches_unbiased_formula(self):
        """Σ = (R − r̄)^T (R − r̄) / (T − 1)."""
        rng = np.random.default_rng(0)
        R = rng.normal(0.0, 0.02, size=(50, 3))
        centred = R - R.mean(axis=0)
        expected = centred.T @ centred / (len(R) - 1)
        np.testing.assert_allclose(estimate_covariance(R), expected, rtol=1e-12)

    def test_two_observations(self):
        R = np.array([[0.01, 0.02], [0.03, -0.02]])
        cov = estimate_covariance(R)
        # Var of two points = (a − b)² / 2
        assert cov[0, 0] == pytest.approx(0.02**2 / 2)
        assert cov[1, 1] == pytest.approx(0.04**2 / 2)
        assert cov[0, 1] == pytest.approx(0.02 * -0.04 / 2)

    def test_symmetric_nonnegative_diagonal(self):
        rng = np.random.default_rng(1)
        cov = estimate_covariance(rng.normal(size=(30, 4)))
        np.testing.assert_allclose(cov, cov.T)
        assert np.all(np.diag(cov) >= 0)

    def test_accepts_dataframe(self):
        rng = np.random.default_rng(2)
        R = rng.normal(size=(20, 2))
        df = pd.DataFrame(R, columns=["A", "B"])
        np.testing.assert_allclose(estimate_covariance(df), estimate_covariance(R))

    def test_single_asset_is_1x1(self):
        cov = estimate_covariance(np.array([[0.01], [0.03], [0.02]]))
        assert cov.shape == (1, 1)
        assert cov[0, 0] == pytest.approx(1e-4)

    def test_deterministic(self):
        R = np.random.default_rng(3).normal(size=(10, 3))
        np.testing.assert_array_equal(estimate_covariance(R), estimate_covariance(R))

    def test_single_row_raises(self):
        with pytest.raises(InsufficientDataError) as exc:
            estimate_covariance(np.array([[0.01, 0.02]]))
        assert exc.value.n_observations == 1
        assert exc.value.required == 2

    def test_one_dimensional_raises(self):
        with pytest.raises(InvalidDimensionError):
            estimate_covariance(np.array([0.01, 0.02, 0.03]))

    def test_nan_raises(self):
        R = np.array([[0.01, np.nan], [0.02, 0.01], [0.0, 0.03]])
        with pytest.raises(MissingDataError):
            estimate_covariance(R)


class TestAsCovariance:
    def test_non_square_raises(self):
        with pytest.raises(InvalidDimensionError):
            as_covariance(np.ones((2, 3)))

    def test_asymmetric_raises(self):
        with pytest.raises(InvalidCovarianceError):
            as_covariance(np.array([[1.0, 0.2], [0.3, 1.0]]))

    def test_returns_float_array(self):
        cov = as_covariance([[1, 0], [0, 2]])
        assert cov.dtype == np.float64
