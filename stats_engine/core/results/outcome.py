"""stats_engine.core.results.outcome

Tagged success/failure container.

An Outcome is either a success carrying a value, or a failure carrying a
FailureReason and a message. Callers branch on ``ok`` (or on ``reason``)
instead of testing for None, which keeps "not computed", "failed" and
"not applicable" distinguishable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from ..errors import FailureReason, InsufficientDataError, NumericalError, StatsEngineError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a computation that may fail for a known reason."""

    value: Optional[T] = None
    reason: Optional[FailureReason] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, reason: FailureReason, message: str) -> "Outcome[T]":
        return cls(reason=reason, message=message)

    @classmethod
    def from_error(cls, exc: StatsEngineError) -> "Outcome[T]":
        return cls(reason=exc.reason, message=str(exc))

    @classmethod
    def capture(cls, fn: Callable[..., T], *args, **kwargs) -> "Outcome[T]":
        """Run ``fn`` and turn numerical/insufficiency errors into a failure.

        Input errors are not captured: a malformed request must surface to
        the caller instead of becoming a per-test failure.
        """
        try:
            return cls.success(fn(*args, **kwargs))
        except (NumericalError, InsufficientDataError) as exc:
            logger.info("%s failed: %s", getattr(fn, "__name__", "computation"), exc)
            return cls.from_error(exc)

    def unwrap(self) -> T:
        """Return the value or raise ValueError for a failure."""
        if not self.ok:
            raise ValueError(f"Outcome is a failure ({self.reason.value}): {self.message}")
        return self.value  # type: ignore[return-value]

    def __repr__(self) -> str:
        if self.ok:
            return f"Outcome.success({self.value!r})"
        return f"Outcome.failure({self.reason.value}, {self.message!r})"
