"""Request/response boundary: payload handlers and the thread-pool dispatcher."""

from .handlers import (
    HANDLERS,
    handle_homoscedasticity,
    handle_normality,
    handle_frequency,
    handle_goodness_of_fit,
    handle_message,
)
from .dispatch import AnalysisDispatcher

__all__ = [
    "HANDLERS",
    "handle_homoscedasticity",
    "handle_normality",
    "handle_frequency",
    "handle_goodness_of_fit",
    "handle_message",
    "AnalysisDispatcher",
]
