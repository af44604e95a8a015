"""stats_engine.core.statistics.frequency

Weighted frequency distribution and percentiles.

The distribution collapses valid cases to sorted distinct values ``y`` with
weight ``c`` and cumulative weight ``cc``. Percentile definitions operate on
the weight-expanded order statistics: the k-th order statistic (1-based) is
the first ``y_i`` whose cumulative weight reaches k.

Definitions (p on the 0..100 scale, W = total valid weight):
- waverage:    rank r = (p/100)(W - 1) + 1
- haverage:    rank r = (W + 1) p/100
- tukeyhinges: hinges at the case round((floor((W + 1)/2) + 1)/2) from
               each end and the median at depth (W + 1)/2, for p in
               {25, 50, 75} only (p rounded half up)

Non-integer ranks interpolate linearly between neighbouring order statistics.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

import numpy as np

from ..errors import InputError, InsufficientObservationsError
from ..models.options import DEFAULT_PERCENTILES, PercentileMethod
from ..models.variable import MissingValueSpec, coerce_numeric

logger = logging.getLogger(__name__)

_RANK_EPS = 1e-9
_TUKEY_POINTS = (25, 50, 75)


@dataclass(frozen=True)
class FrequencyDistribution:
    """
    Collapsed weighted distribution of one variable.

    Attributes:
        y: Sorted distinct valid values
        c: Weight per distinct value
        cc: Cumulative weight up to and including each value
        below: Weight strictly below each value
        total_weight: W, sum of valid weights
        valid_n: Number of valid cases (unweighted)
        total_weight_all: T, weight of all cases with a usable weight,
            including missing values
    """

    y: np.ndarray
    c: np.ndarray
    cc: np.ndarray
    below: np.ndarray
    total_weight: float
    valid_n: int
    total_weight_all: float

    @property
    def is_empty(self) -> bool:
        return self.y.size == 0

    @property
    def missing_weight(self) -> float:
        return self.total_weight_all - self.total_weight

    def order_statistic(self, k: float) -> float:
        """Value at 1-based position ``k`` of the weight-expanded sample."""
        idx = int(np.searchsorted(self.cc, k - _RANK_EPS, side="left"))
        return float(self.y[min(idx, self.y.size - 1)])


def build_distribution(
    data: Sequence[Any],
    weights: Optional[Sequence[Any]] = None,
    missing: Optional[MissingValueSpec] = None,
) -> FrequencyDistribution:
    """Collapse raw case values into a FrequencyDistribution.

    Cases whose weight is non-finite or not positive are ignored entirely;
    they count neither as valid nor as missing.

    Raises:
        InputError: weights length differs from data length
    """
    values = coerce_numeric(list(data))
    if weights is None:
        w = np.ones(values.size)
    else:
        w = coerce_numeric(list(weights))
        if w.size != values.size:
            raise InputError(
                f"Weights length ({w.size}) does not match data length ({values.size})"
            )

    usable = np.isfinite(w) & (w > 0)
    total_all = float(w[usable].sum())

    mask = usable & (missing or MissingValueSpec()).valid_mask(values)
    y, inverse = np.unique(values[mask], return_inverse=True)
    c = np.bincount(inverse, weights=w[mask], minlength=y.size).astype(float)
    cc = np.cumsum(c)
    logger.debug("Frequency distribution: %d distinct values, W=%g", y.size, float(c.sum()))

    return FrequencyDistribution(
        y=y,
        c=c,
        cc=cc,
        below=cc - c,
        total_weight=float(c.sum()),
        valid_n=int(mask.sum()),
        total_weight_all=total_all,
    )


def _round_half_up(x: float) -> int:
    """Nearest integer with halves rounded up (74.5 -> 75)."""
    return int(math.floor(x + 0.5))


def _interpolate(dist: FrequencyDistribution, r: float) -> float:
    """Linear interpolation between order statistics floor(r) and floor(r) + 1."""
    lower = math.floor(r)
    frac = r - lower
    x_lo = dist.order_statistic(lower)
    if frac <= _RANK_EPS:
        return x_lo
    x_hi = dist.order_statistic(lower + 1)
    return (1.0 - frac) * x_lo + frac * x_hi


def _ranked_percentile(dist: FrequencyDistribution, r: float) -> float:
    if r <= 1.0:
        return float(dist.y[0])
    if r >= dist.total_weight:
        return float(dist.y[-1])
    return _interpolate(dist, r)


def waverage(dist: FrequencyDistribution, p: float) -> float:
    return _ranked_percentile(dist, (p / 100.0) * (dist.total_weight - 1.0) + 1.0)


def haverage(dist: FrequencyDistribution, p: float) -> float:
    return _ranked_percentile(dist, (dist.total_weight + 1.0) * p / 100.0)


def tukey_hinges(dist: FrequencyDistribution, p: float) -> float:
    """Tukey's hinges; percentiles other than 25/50/75 use waverage."""
    target = _round_half_up(p)
    if target not in _TUKEY_POINTS:
        return waverage(dist, p)

    # Hinges need whole cases: round weights to counts, keeping every value.
    counts = np.maximum(1, np.round(dist.c))
    tukey = FrequencyDistribution(
        y=dist.y,
        c=counts,
        cc=np.cumsum(counts),
        below=np.cumsum(counts) - counts,
        total_weight=float(counts.sum()),
        valid_n=dist.valid_n,
        total_weight_all=dist.total_weight_all,
    )
    total = tukey.total_weight

    median_depth = (total + 1.0) / 2.0
    if target == 50:
        # Even counts average the two middle cases.
        return _interpolate(tukey, median_depth)

    # Hinges sit at a whole case: the hinge depth is rounded, never averaged.
    lower = max(1, _round_half_up((math.floor(median_depth) + 1.0) / 2.0))
    if target == 25:
        return tukey.order_statistic(lower)
    return tukey.order_statistic(total + 1 - lower)


_METHODS = {
    PercentileMethod.WAVERAGE: waverage,
    PercentileMethod.HAVERAGE: haverage,
    PercentileMethod.TUKEY_HINGES: tukey_hinges,
}


class FrequencyCalculator:
    """Percentiles, mode and frequency table for one variable.

    The distribution is built on first use and cached on the instance.
    """

    def __init__(
        self,
        data: Sequence[Any],
        weights: Optional[Sequence[Any]] = None,
        missing: Optional[MissingValueSpec] = None,
    ):
        self.data = list(data)
        self.weights = list(weights) if weights is not None else None
        self.missing = missing or MissingValueSpec()

    @cached_property
    def distribution(self) -> FrequencyDistribution:
        return build_distribution(self.data, self.weights, self.missing)

    def percentile(
        self,
        p: float,
        method: Union[PercentileMethod, str] = PercentileMethod.WAVERAGE,
    ) -> float:
        """Percentile ``p`` (0..100) under ``method``.

        Raises:
            InputError: p outside 0..100
            InsufficientObservationsError: no valid weight
        """
        if isinstance(method, str):
            method = PercentileMethod.from_string(method)
        p = float(p)
        if not 0.0 <= p <= 100.0:
            raise InputError(f"Percentile must be between 0 and 100, got {p}")

        dist = self.distribution
        if dist.is_empty or dist.total_weight <= 0.0:
            raise InsufficientObservationsError("No valid observations for percentile")
        return _METHODS[method](dist, p)

    def percentiles(
        self,
        points: Iterable[float] = DEFAULT_PERCENTILES,
        method: Union[PercentileMethod, str] = PercentileMethod.WAVERAGE,
    ) -> Dict[float, float]:
        return {float(p): self.percentile(p, method) for p in points}

    def mode(self) -> List[float]:
        """All values sharing the largest weight, ascending."""
        dist = self.distribution
        if dist.is_empty:
            return []
        top = dist.c.max()
        return [float(v) for v in dist.y[dist.c == top]]

    def frequency_table(self) -> List[Dict[str, float]]:
        dist = self.distribution
        total = dist.total_weight_all if dist.total_weight_all > 0 else dist.total_weight
        valid = dist.total_weight
        rows = []
        for value, freq, cum in zip(dist.y.tolist(), dist.c.tolist(), dist.cc.tolist()):
            rows.append({
                "value": value,
                "frequency": freq,
                "percent": freq / total * 100.0 if total > 0 else 0.0,
                "validPercent": freq / valid * 100.0 if valid > 0 else 0.0,
                "cumulativePercent": cum / valid * 100.0 if valid > 0 else 0.0,
            })
        return rows

    def summary(self) -> Dict[str, float]:
        dist = self.distribution
        return {
            "valid": dist.total_weight,
            "missing": dist.missing_weight,
            "total": dist.total_weight_all,
        }

    def extreme_values(self, count: int = 5) -> Optional[Dict[str, Any]]:
        """Highest and lowest ``count`` cases with Tukey fences.

        Fences come from the waverage quartiles: inner at 1.5 IQR and outer
        at 3 IQR beyond Q1/Q3. Each listed case carries its 1-based case
        number, its value and a ``type`` of ``extreme`` (beyond an outer
        fence), ``outlier`` (between the fences) or ``normal``. The last case
        of a list is flagged ``isPartial`` when the next case in sort order
        ties with it. With IQR = 0 no fences are reported and cases are
        listed untagged. Returns None when there is no valid case.
        """
        if count < 1:
            raise InputError(f"Extreme value count must be positive, got {count}")
        if self.distribution.is_empty:
            return None

        values = coerce_numeric(self.data)
        if self.weights is None:
            usable = np.ones(values.size, dtype=bool)
        else:
            w = coerce_numeric(self.weights)
            usable = np.isfinite(w) & (w > 0)
        mask = usable & self.missing.valid_mask(values)
        entries = [
            {"caseNumber": int(i) + 1, "value": float(values[i])}
            for i in np.flatnonzero(mask)
        ]

        # Stable sorts: tied values stay in case order in both directions.
        ascending = sorted(entries, key=lambda e: e["value"])
        descending = sorted(entries, key=lambda e: e["value"], reverse=True)
        truncated = count > len(entries)

        q1 = self.percentile(25, PercentileMethod.WAVERAGE)
        q3 = self.percentile(75, PercentileMethod.WAVERAGE)
        iqr = q3 - q1
        if iqr == 0.0:
            return {
                "highest": [dict(e) for e in descending[:count]],
                "lowest": [dict(e) for e in ascending[:count]],
                "isTruncated": truncated,
            }

        step = 1.5 * iqr
        fences = {
            "lowerInner": q1 - step,
            "upperInner": q3 + step,
            "lowerOuter": q1 - 2.0 * step,
            "upperOuter": q3 + 2.0 * step,
        }

        def kind(v: float) -> str:
            if v < fences["lowerOuter"] or v > fences["upperOuter"]:
                return "extreme"
            if v < fences["lowerInner"] or v > fences["upperInner"]:
                return "outlier"
            return "normal"

        def pick(ordered: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
            # Sorted input puts extremes first, then outliers, then the rest.
            chosen = [dict(e, type=kind(e["value"])) for e in ordered[:count]]
            if len(ordered) > count and ordered[count]["value"] == chosen[-1]["value"]:
                chosen[-1]["isPartial"] = True
            return chosen

        return {
            "highest": pick(descending),
            "lowest": pick(ascending),
            "isTruncated": truncated,
            "fences": fences,
        }
