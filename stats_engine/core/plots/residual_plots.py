"""Residual plot series generation (renderer-free).

This module provides functions that turn regression residuals into
plot-ready point series. Nothing here draws; a UI renders the points.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..models.variable import VariableInfo
from ..statistics.distributions import normal_ppf

_INV_SQRT_2PI = 0.3989422804014327


def residual_vs_fitted(residuals: Sequence[float], fitted: Sequence[float]) -> List[Dict[str, float]]:
    """Points (fitted, residual), one per case."""
    return [
        {"fitted": float(f), "residual": float(r)}
        for f, r in zip(fitted, residuals)
    ]


def residual_vs_independent(
    residuals: Sequence[float],
    X: np.ndarray,
    variable_infos: Optional[List[VariableInfo]] = None,
) -> List[Dict[str, Any]]:
    """
    One series per predictor of (predictor value, residual) points.

    Args:
        residuals: Residual per case
        X: Observation-major predictor matrix without the intercept column
        variable_infos: Optional predictor metadata for series names

    Returns:
        List of {variable, variableLabel, data} dictionaries
    """
    x_mat = np.asarray(X, dtype=float)
    if x_mat.ndim == 1:
        x_mat = x_mat[:, None]
    infos = variable_infos or []

    series = []
    for j in range(x_mat.shape[1]):
        info = infos[j] if j < len(infos) else None
        name = info.name if info else f"Variable {j + 1}"
        label = info.label if info and info.label else name
        series.append({
            "variable": name,
            "variableLabel": label,
            "data": [
                {"x": float(x), "residual": float(r)}
                for x, r in zip(x_mat[:, j], residuals)
            ],
        })
    return series


def scale_location(residuals: Sequence[float], fitted: Sequence[float]) -> List[Dict[str, float]]:
    """
    Scale-location points (fitted, sqrt(|e / s|)).

    s is the sample standard deviation of the residuals. With zero spread
    every point is reported at 0.
    """
    e = np.asarray(residuals, dtype=float)
    sd = float(np.std(e, ddof=1)) if e.size > 1 else 0.0
    points = []
    for f, r in zip(fitted, e):
        value = math.sqrt(abs(r / sd)) if sd > 0.0 else 0.0
        points.append({"fitted": float(f), "sqrtAbsRes": value})
    return points


def histogram(residuals: Sequence[float], bins: int = 10) -> Dict[str, Any]:
    """
    Histogram of residuals with an overlaid normal density.

    Bin heights are densities (count / (n * width)) so they share the scale
    of the normal curve, which uses the population standard deviation. The
    last bin is closed on the right.

    Args:
        residuals: Residual per case
        bins: Number of equal-width bins

    Returns:
        Dictionary with bins, normalCurve, binWidth, mean and stdDev
    """
    if bins < 1:
        raise ValueError("bins must be at least 1")
    e = np.asarray(residuals, dtype=float)
    n = int(e.size)
    lo, hi = float(e.min()), float(e.max())
    width = (hi - lo) / bins

    counts = [0] * bins
    for value in e:
        # Degenerate (constant) samples land in the first bin.
        idx = int((value - lo) // width) if width > 0 else 0
        counts[min(idx, bins - 1)] += 1

    mean = float(e.mean())
    sd = float(np.std(e))

    bin_list = []
    curve = []
    for i, count in enumerate(counts):
        start = lo + i * width
        center = start + width / 2.0
        density = count / (n * width) if width > 0 else float(count) / n
        bin_list.append({
            "x": center,
            "y": density,
            "count": count,
            "start": start,
            "end": start + width,
        })
        if sd > 0:
            z = (center - mean) / sd
            curve.append({"x": center, "y": _INV_SQRT_2PI / sd * math.exp(-0.5 * z * z)})
        else:
            curve.append({"x": center, "y": 0.0})

    return {
        "bins": bin_list,
        "normalCurve": curve,
        "binWidth": width,
        "mean": mean,
        "stdDev": sd,
    }


def qq_plot(residuals: Sequence[float]) -> List[Dict[str, float]]:
    """Normal Q-Q points with plotting positions (i + 0.5) / n."""
    ordered = np.sort(np.asarray(residuals, dtype=float))
    n = int(ordered.size)
    return [
        {"observed": float(v), "theoretical": normal_ppf((i + 0.5) / n)}
        for i, v in enumerate(ordered)
    ]
