"""Tests for the normality tests and suite."""

import math

import numpy as np
import pytest

from stats_engine.core.diagnostics import analyze_normality
from stats_engine.core.errors import FailureReason
from stats_engine.core.models.request import RegressionRequest
from stats_engine.core.statistics.normality import (
    jarque_bera_statistic,
    jarque_bera_test,
    kolmogorov_smirnov_statistic,
    kolmogorov_smirnov_test,
    shapiro_wilk_test,
)


class TestKolmogorovSmirnov:
    """KS against a normal with estimated parameters."""

    @pytest.mark.parametrize("seed", range(20))
    def test_statistic_and_p_value_bounds(self, seed):
        rng = np.random.default_rng(seed)
        x = rng.normal(loc=5.0, scale=2.0, size=50)
        result = kolmogorov_smirnov_test(x)
        assert 0.0 <= result.statistic <= 1.0
        assert 0.0 <= result.p_value <= 1.0

    def test_accepts_normal_samples(self):
        accepted = 0
        for seed in range(100):
            rng = np.random.default_rng(500 + seed)
            accepted += int(kolmogorov_smirnov_test(rng.normal(size=40)).passed)
        assert accepted >= 90

    def test_rejects_exponential_samples(self):
        rejections = 0
        for seed in range(50):
            rng = np.random.default_rng(seed)
            result = kolmogorov_smirnov_test(rng.exponential(size=200))
            rejections += int(result.passed is False)
        assert rejections >= 45

    def test_two_point_sample(self):
        # z = -/+ 0.7071, F = 0.2398 / 0.7602; D = max(0.5 - 0.2398, 0.7602 - 0.5)
        values = kolmogorov_smirnov_statistic([0.0, 1.0])
        assert values["statistic"] == pytest.approx(0.26025, abs=1e-4)

    def test_single_value_fails(self):
        result = kolmogorov_smirnov_test([1.0])
        assert result.failure is FailureReason.INSUFFICIENT_OBSERVATIONS
        assert result.passed is True

    def test_constant_sample_fails(self):
        result = kolmogorov_smirnov_test([2.0, 2.0, 2.0, 2.0])
        assert result.failure is FailureReason.ZERO_VARIANCE


class TestJarqueBera:
    """JB on population moments."""

    def test_known_value(self):
        # symmetric: S = 0, K = 2.5625 / 1.5625 = 1.64
        values = jarque_bera_statistic([1.0, 2.0, 3.0, 4.0])
        expected = 4.0 / 6.0 * (1.64 - 3.0) ** 2 / 4.0
        assert values["statistic"] == pytest.approx(expected)
        assert values["p_value"] == pytest.approx(math.exp(-expected / 2.0))
        assert values["extras"]["skewness"] == pytest.approx(0.0, abs=1e-12)

    def test_fewer_than_four_observations(self):
        result = jarque_bera_test([1.0, 2.0, 3.0])
        assert result.statistic is None
        assert result.p_value is None
        assert result.passed is True
        assert result.failure is FailureReason.INSUFFICIENT_OBSERVATIONS

    def test_extras_serialized(self):
        rng = np.random.default_rng(8)
        data = jarque_bera_test(rng.normal(size=40)).to_dict("isNormal")
        for key in ("skewness", "kurtosis", "skewnessStdError", "kurtosisStdError"):
            assert key in data
        assert data["df"] == 2

    def test_skewed_sample_rejected(self):
        rng = np.random.default_rng(21)
        result = jarque_bera_test(rng.exponential(size=300))
        assert result.passed is False


class TestShapiroWilk:
    """Royston approximation."""

    def test_three_equally_spaced_values(self):
        # W = 1 and the exact n = 3 p-value is 1
        result = shapiro_wilk_test([1.0, 2.0, 3.0])
        assert result.statistic == pytest.approx(1.0)
        assert result.p_value == pytest.approx(1.0)

    @pytest.mark.parametrize("n", [4, 5, 8, 11, 12, 30, 100])
    def test_normal_samples_have_high_w(self, n):
        rng = np.random.default_rng(n)
        result = shapiro_wilk_test(rng.normal(size=n))
        assert 0.0 < result.statistic <= 1.0
        assert 0.0 <= result.p_value <= 1.0

    def test_large_normal_sample_w_near_one(self):
        rng = np.random.default_rng(99)
        result = shapiro_wilk_test(rng.normal(size=200))
        assert result.statistic > 0.97

    def test_skewed_sample_rejected(self):
        rng = np.random.default_rng(4)
        result = shapiro_wilk_test(rng.exponential(size=100))
        assert result.statistic < 0.95
        assert result.passed is False

    def test_two_values_fail(self):
        result = shapiro_wilk_test([1.0, 2.0])
        assert result.failure is FailureReason.INSUFFICIENT_OBSERVATIONS

    def test_invariant_to_location_and_scale(self):
        rng = np.random.default_rng(17)
        x = rng.normal(size=25)
        a = shapiro_wilk_test(x)
        b = shapiro_wilk_test(10.0 + 3.0 * x)
        assert a.statistic == pytest.approx(b.statistic)


class TestSuite:
    """analyze_normality end to end."""

    def _request(self, seed=12, n=60):
        rng = np.random.default_rng(seed)
        x = rng.uniform(0.0, 10.0, size=n)
        y = 4.0 - 0.5 * x + rng.normal(size=n)
        return RegressionRequest.from_arrays(y, x)

    def test_response_shape(self):
        data = analyze_normality(self._request()).to_dict()
        assert data["title"] == "Normality Test Results"
        assert set(data["tests"]) == {"kolmogorovSmirnov", "jarqueBera", "shapiroWilk"}
        assert isinstance(data["isNormal"], bool)
        stats = data["residualStats"]
        for key in ("count", "mean", "stdDev", "skewness", "kurtosis", "min", "max"):
            assert key in stats
        assert len(data["visualizations"]["qqPlot"]) == 60
        assert len(data["visualizations"]["histogram"]["bins"]) == 10

    def test_verdict_is_conjunction_of_completed_tests(self):
        report = analyze_normality(self._request())
        completed = [t for t in report.tests.values() if t.completed]
        assert report.verdict == all(t.passed for t in completed)

    def test_small_sample_keeps_going(self):
        request = RegressionRequest.from_arrays([1.0, 3.0, 2.0], [1.0, 2.0, 3.0])
        report = analyze_normality(request)
        assert report.success
        assert not report.tests["jarqueBera"].completed
        assert report.tests["kolmogorovSmirnov"].completed
        assert report.residual_stats.kurtosis is None
