"""Tests for the tagged Outcome and failure records."""

import json

import pytest

from stats_engine.core.errors import (
    FailureReason,
    InputError,
    InsufficientObservationsError,
    SingularMatrixError,
)
from stats_engine.core.results.outcome import Outcome
from stats_engine.core.results.test_result import (
    DiagnosticKind,
    DiagnosticReport,
    HypothesisTestResult,
    aggregate_verdict,
    json_safe,
)


def _raise(exc):
    raise exc


class TestOutcome:
    def test_success(self):
        outcome = Outcome.capture(lambda: 42)
        assert outcome.ok
        assert outcome.unwrap() == 42

    def test_numerical_error_captured(self):
        outcome = Outcome.capture(_raise, SingularMatrixError("pivot below tolerance"))
        assert not outcome.ok
        assert outcome.reason is FailureReason.SINGULAR_MATRIX
        assert outcome.message == "pivot below tolerance"
        with pytest.raises(ValueError, match="singular_matrix"):
            outcome.unwrap()

    def test_insufficient_data_captured(self):
        outcome = Outcome.capture(_raise, InsufficientObservationsError("n < 3"))
        assert outcome.reason is FailureReason.INSUFFICIENT_OBSERVATIONS

    def test_input_error_propagates(self):
        with pytest.raises(InputError):
            Outcome.capture(_raise, InputError("empty"))


class TestHypothesisTestResult:
    def test_failed_record(self):
        result = HypothesisTestResult.failed("White", FailureReason.ZERO_VARIANCE, "no spread")
        data = result.to_dict("isHomoscedastic")
        assert data["statistic"] is None
        assert data["pValue"] is None
        assert data["isHomoscedastic"] is True
        assert data["error"] == "Test failed: no spread"
        assert data["failureReason"] == "zero_variance"

    def test_p_value_clipped(self):
        result = HypothesisTestResult.from_statistic("X", 1.0, 1.0000001)
        assert result.p_value == 1.0
        assert result.passed is True

    def test_boundary_rejects(self):
        assert HypothesisTestResult.from_statistic("X", 1.0, 0.05).passed is False


def test_verdict_ignores_failed_tests():
    passed = HypothesisTestResult.from_statistic("A", 1.0, 0.5)
    failed = HypothesisTestResult.failed("B", FailureReason.ZERO_VARIANCE, "x")
    rejected = HypothesisTestResult.from_statistic("C", 9.0, 0.001)
    assert aggregate_verdict([passed, failed]) is True
    assert aggregate_verdict([passed, rejected]) is False
    assert aggregate_verdict([failed]) is True
    assert aggregate_verdict([]) is True


def test_report_to_json():
    report = DiagnosticReport(
        kind=DiagnosticKind.NORMALITY,
        tests={"jarqueBera": HypothesisTestResult.from_statistic("Jarque-Bera", 0.5, 0.78, df=2)},
    )
    data = json.loads(report.to_json())
    assert data["title"] == "Normality Test Results"
    assert data["isNormal"] is True
    assert data["tests"]["jarqueBera"]["df"] == 2


@pytest.mark.parametrize("value, expected", [(float("nan"), None), (float("inf"), None), (1.5, 1.5), (None, None)])
def test_json_safe(value, expected):
    assert json_safe(value) == expected
