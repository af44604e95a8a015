"""stats_engine.core.errors

Exception taxonomy for the statistics engine.

Three families, matching how callers are expected to react:

- InputError: malformed request (missing/empty arrays, mismatched lengths,
  bad shapes). Surfaced immediately, nothing is computed.
- NumericalError: singular design matrix, zero-variance denominator.
  Caught per test and turned into a failed result record.
- InsufficientDataError: too few observations, under-determined fits,
  undersized Goldfeld-Quandt groups. Also turned into failed records.

Every exception carries a FailureReason so result objects can report a
machine-readable tag next to the human-readable message.
"""

from __future__ import annotations

from enum import Enum


class FailureReason(Enum):
    """Named reasons a computation could not produce a value."""
    INVALID_INPUT = "invalid_input"
    SINGULAR_MATRIX = "singular_matrix"
    ZERO_VARIANCE = "zero_variance"
    UNDERDETERMINED = "underdetermined"
    INSUFFICIENT_GROUP_SIZE = "insufficient_group_size"
    INSUFFICIENT_OBSERVATIONS = "insufficient_observations"


class StatsEngineError(Exception):
    """Base class for all engine errors."""

    reason: FailureReason = FailureReason.INVALID_INPUT


class InputError(StatsEngineError, ValueError):
    """Request payload is malformed."""

    reason = FailureReason.INVALID_INPUT


class NumericalError(StatsEngineError):
    """A numerical routine could not produce a stable answer."""


class SingularMatrixError(NumericalError):
    """Matrix is singular (pivot or determinant below tolerance)."""

    reason = FailureReason.SINGULAR_MATRIX


class ZeroVarianceError(NumericalError):
    """A variance used as a denominator is zero."""

    reason = FailureReason.ZERO_VARIANCE


class InsufficientDataError(StatsEngineError):
    """Not enough data for the requested statistic."""

    reason = FailureReason.INSUFFICIENT_OBSERVATIONS


class UnderdeterminedError(InsufficientDataError):
    """Predictor count is not smaller than the observation count."""

    reason = FailureReason.UNDERDETERMINED


class InsufficientGroupSizeError(InsufficientDataError):
    """Goldfeld-Quandt sub-sample too small for a separate fit."""

    reason = FailureReason.INSUFFICIENT_GROUP_SIZE


class InsufficientObservationsError(InsufficientDataError):
    """Sample size below the minimum a test requires."""

    reason = FailureReason.INSUFFICIENT_OBSERVATIONS
