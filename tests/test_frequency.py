"""Tests for the weighted percentile engine."""

import numpy as np
import pytest

from stats_engine.core.errors import InputError, InsufficientObservationsError
from stats_engine.core.models.options import PercentileMethod
from stats_engine.core.models.variable import MissingValueSpec
from stats_engine.core.statistics.frequency import FrequencyCalculator, build_distribution

ONE_TO_TEN = list(range(1, 11))


class TestDistribution:
    """build_distribution collapses and weights cases."""

    def test_collapses_values(self):
        dist = build_distribution([3, 1, 2, 3, 3])
        assert dist.y.tolist() == [1.0, 2.0, 3.0]
        assert dist.c.tolist() == [1.0, 1.0, 3.0]
        assert dist.cc.tolist() == [1.0, 2.0, 5.0]
        assert dist.below.tolist() == [0.0, 1.0, 2.0]
        assert dist.total_weight == 5.0
        assert dist.valid_n == 5

    def test_invalid_weights_are_ignored(self):
        dist = build_distribution([1, 2, 3, 4, 5], weights=[1, 0, -2, float("nan"), 2])
        assert dist.y.tolist() == [1.0, 5.0]
        assert dist.total_weight == 3.0
        assert dist.total_weight_all == 3.0

    def test_missing_values_count_toward_total(self):
        dist = build_distribution([1, 2, -99, None, "x"], missing=MissingValueSpec(discrete=[-99]))
        assert dist.total_weight == 2.0
        assert dist.total_weight_all == 5.0
        assert dist.missing_weight == 3.0

    def test_weight_length_mismatch(self):
        with pytest.raises(InputError):
            build_distribution([1, 2, 3], weights=[1, 1])


class TestTukeyHinges:
    """Tukey's hinges on small samples."""

    def test_one_to_ten(self):
        calc = FrequencyCalculator(ONE_TO_TEN)
        assert calc.percentile(25, "tukeyhinges") == pytest.approx(3.0)
        assert calc.percentile(50, "tukeyhinges") == pytest.approx(5.5)
        assert calc.percentile(75, "tukeyhinges") == pytest.approx(8.0)

    def test_one_to_nine(self):
        calc = FrequencyCalculator(range(1, 10))
        assert calc.percentile(25, PercentileMethod.TUKEY_HINGES) == pytest.approx(3.0)
        assert calc.percentile(50, PercentileMethod.TUKEY_HINGES) == pytest.approx(5.0)
        assert calc.percentile(75, PercentileMethod.TUKEY_HINGES) == pytest.approx(7.0)

    @pytest.mark.parametrize(
        "w, q1, q3",
        [(7, 3.0, 5.0), (8, 3.0, 6.0), (9, 3.0, 7.0), (10, 3.0, 8.0), (11, 4.0, 8.0)],
    )
    def test_hinge_depth_is_rounded_to_a_case(self, w, q1, q3):
        # W = 7: hinge depth (floor(4) + 1) / 2 = 2.5 rounds up to case 3
        calc = FrequencyCalculator(range(1, w + 1))
        assert calc.percentile(25, "tukeyhinges") == q1
        assert calc.percentile(75, "tukeyhinges") == q3

    def test_even_count_median_averages(self):
        calc = FrequencyCalculator(range(1, 9))
        assert calc.percentile(50, "tukeyhinges") == pytest.approx(4.5)

    @pytest.mark.parametrize("p, expected", [(74.5, 8.0), (24.5, 3.0), (49.5, 5.5)])
    def test_half_percentiles_round_up(self, p, expected):
        calc = FrequencyCalculator(ONE_TO_TEN)
        assert calc.percentile(p, "tukeyhinges") == pytest.approx(expected)

    @pytest.mark.parametrize("p", [5, 10, 33.3, 90, 95])
    def test_non_quartiles_fall_back_to_waverage(self, p):
        calc = FrequencyCalculator(ONE_TO_TEN)
        assert calc.percentile(p, "tukeyhinges") == calc.percentile(p, "waverage")

    def test_rounded_p_selects_hinge(self):
        calc = FrequencyCalculator(ONE_TO_TEN)
        assert calc.percentile(24.6, "tukeyhinges") == pytest.approx(3.0)

    def test_weights_rounded_to_counts(self):
        calc = FrequencyCalculator([1, 2, 3, 4], weights=[1.2, 0.3, 2.0, 1.0])
        # counts 1, 1, 2, 1 -> 1, 2, 3, 3, 4
        assert calc.percentile(50, "tukeyhinges") == pytest.approx(3.0)


class TestWeightedAverage:
    """waverage and haverage definitions."""

    def test_tenth_percentile(self):
        calc = FrequencyCalculator(ONE_TO_TEN)
        assert calc.percentile(10) == pytest.approx(1.9)

    def test_median_and_extremes(self):
        calc = FrequencyCalculator(ONE_TO_TEN)
        assert calc.percentile(50) == pytest.approx(5.5)
        assert calc.percentile(0) == 1.0
        assert calc.percentile(100) == 10.0

    def test_weighted_median(self):
        calc = FrequencyCalculator([1, 2, 3], weights=[1, 1, 2])
        # expanded 1, 2, 3, 3 -> rank 2.5
        assert calc.percentile(50) == pytest.approx(2.5)

    def test_haverage(self):
        calc = FrequencyCalculator(ONE_TO_TEN)
        assert calc.percentile(25, "haverage") == pytest.approx(2.75)
        assert calc.percentile(5, "haverage") == 1.0
        assert calc.percentile(99, "haverage") == 10.0

    def test_zero_weight_case_excluded(self):
        calc = FrequencyCalculator([1, 2, 3, 100], weights=[1, 1, 1, 0])
        assert calc.percentile(100) == 3.0


@pytest.mark.parametrize("method", list(PercentileMethod))
def test_single_observation(method):
    calc = FrequencyCalculator([42.0])
    for p in (0, 10, 25, 50, 75, 90, 100):
        assert calc.percentile(p, method) == 42.0


@pytest.mark.parametrize("method", [PercentileMethod.WAVERAGE, PercentileMethod.HAVERAGE])
@pytest.mark.parametrize("seed", range(5))
def test_percentiles_are_monotonic(method, seed):
    rng = np.random.default_rng(seed)
    data = rng.integers(0, 20, size=40).astype(float)
    weights = rng.uniform(0.5, 3.0, size=40)
    calc = FrequencyCalculator(data, weights=weights)
    values = [calc.percentile(p, method) for p in range(0, 101)]
    assert all(b >= a - 1e-12 for a, b in zip(values, values[1:]))
    assert values[0] >= data.min() and values[-1] <= data.max()


@pytest.mark.parametrize("seed", range(5))
def test_hinges_are_ordered(seed):
    rng = np.random.default_rng(seed)
    data = rng.normal(size=int(rng.integers(1, 60)))
    calc = FrequencyCalculator(data)
    q1, q2, q3 = (calc.percentile(p, "tukeyhinges") for p in (25, 50, 75))
    assert data.min() <= q1 <= q2 <= q3 <= data.max()


def test_no_valid_data_raises():
    calc = FrequencyCalculator([None, "", float("nan")])
    with pytest.raises(InsufficientObservationsError):
        calc.percentile(50)


def test_percentile_out_of_range():
    with pytest.raises(InputError):
        FrequencyCalculator([1, 2]).percentile(101)


def test_distribution_is_cached():
    calc = FrequencyCalculator([1, 2, 3])
    assert calc.distribution is calc.distribution


def test_percentiles_mapping():
    result = FrequencyCalculator(ONE_TO_TEN).percentiles((25, 50, 75), "tukeyhinges")
    assert result == {25.0: 3.0, 50.0: 5.5, 75.0: 8.0}


def test_mode_returns_all_ties():
    assert FrequencyCalculator([1, 2, 2, 3, 3]).mode() == [2.0, 3.0]
    assert FrequencyCalculator([]).mode() == []


def test_frequency_table_percentages():
    calc = FrequencyCalculator([1, 1, 2, -9], missing=MissingValueSpec(discrete=[-9]))
    table = calc.frequency_table()
    assert [row["value"] for row in table] == [1.0, 2.0]
    assert table[0]["percent"] == pytest.approx(50.0)
    assert table[0]["validPercent"] == pytest.approx(200.0 / 3.0)
    assert table[-1]["cumulativePercent"] == pytest.approx(100.0)
    assert calc.summary() == {"valid": 3.0, "missing": 1.0, "total": 4.0}


class TestExtremeValues:
    """Highest and lowest cases against the quartile fences."""

    # quartiles 3.75 / 9.25: inner fences -4.5 / 17.5, outer -12.75 / 25.75
    DATA = [5, 100, 1, 2, 3, 4, 20, 6, 7, 8, 9, 10]

    def test_fences(self):
        result = FrequencyCalculator(self.DATA).extreme_values()
        assert result["fences"] == pytest.approx({
            "lowerInner": -4.5,
            "upperInner": 17.5,
            "lowerOuter": -12.75,
            "upperOuter": 25.75,
        })
        assert result["isTruncated"] is False

    def test_highest_cases_are_tagged(self):
        highest = FrequencyCalculator(self.DATA).extreme_values()["highest"]
        assert [(e["caseNumber"], e["value"], e["type"]) for e in highest] == [
            (2, 100.0, "extreme"),
            (7, 20.0, "outlier"),
            (12, 10.0, "normal"),
            (11, 9.0, "normal"),
            (10, 8.0, "normal"),
        ]

    def test_lowest_cases(self):
        lowest = FrequencyCalculator(self.DATA).extreme_values()["lowest"]
        assert [e["caseNumber"] for e in lowest] == [3, 4, 5, 6, 1]
        assert {e["type"] for e in lowest} == {"normal"}

    def test_count_limits_lists(self):
        result = FrequencyCalculator(self.DATA).extreme_values(count=2)
        assert [e["value"] for e in result["highest"]] == [100.0, 20.0]
        assert [e["value"] for e in result["lowest"]] == [1.0, 2.0]

    def test_tie_at_cut_is_partial(self):
        result = FrequencyCalculator([1, 2, 3, 4, 5, 5, 6, 7, 8, 9]).extreme_values()
        lowest = result["lowest"]
        assert [e["caseNumber"] for e in lowest] == [1, 2, 3, 4, 5]
        assert lowest[-1]["isPartial"] is True
        assert not any("isPartial" in e for e in lowest[:-1])
        assert result["highest"][-1]["caseNumber"] == 5
        assert result["highest"][-1]["isPartial"] is True

    def test_zero_iqr_lists_without_fences(self):
        result = FrequencyCalculator([3, 3, 3, 3, 3, 3, 7]).extreme_values()
        assert "fences" not in result
        assert result["highest"] == [
            {"caseNumber": 7, "value": 7.0},
            {"caseNumber": 1, "value": 3.0},
            {"caseNumber": 2, "value": 3.0},
            {"caseNumber": 3, "value": 3.0},
            {"caseNumber": 4, "value": 3.0},
        ]
        assert [e["caseNumber"] for e in result["lowest"]] == [1, 2, 3, 4, 5]

    def test_fewer_cases_than_count(self):
        result = FrequencyCalculator([1, 2, 3]).extreme_values()
        assert result["isTruncated"] is True
        assert len(result["highest"]) == 3

    def test_missing_and_unweighted_cases_skipped(self):
        calc = FrequencyCalculator(
            [1, -99, 2, 3, 4, None],
            weights=[1, 1, 0, 1, 1, 1],
            missing=MissingValueSpec(discrete=[-99]),
        )
        result = calc.extreme_values()
        assert [e["caseNumber"] for e in result["lowest"]] == [1, 4, 5]
        assert result["isTruncated"] is True

    def test_no_valid_data(self):
        assert FrequencyCalculator([None, "x"]).extreme_values() is None

    def test_count_must_be_positive(self):
        with pytest.raises(InputError):
            FrequencyCalculator([1, 2]).extreme_values(count=0)
