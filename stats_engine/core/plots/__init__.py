"""Plot-ready residual series (renderer-free)."""

from .residual_plots import (
    residual_vs_fitted,
    residual_vs_independent,
    scale_location,
    histogram,
    qq_plot,
)

__all__ = [
    "residual_vs_fitted",
    "residual_vs_independent",
    "scale_location",
    "histogram",
    "qq_plot",
]
