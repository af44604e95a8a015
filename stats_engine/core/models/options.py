"""
Analysis options for the statistics engine.

This module defines configuration for the regression diagnostics suites,
the percentile engine and the chi-square goodness-of-fit test.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class PercentileMethod(Enum):
    """
    Percentile definitions.

    Supported methods:
    - WAVERAGE: weighted average at rank p(W-1)+1
    - HAVERAGE: weighted average at rank (W+1)p
    - TUKEY_HINGES: Tukey's hinges for quartiles, WAVERAGE otherwise
    """
    WAVERAGE = "waverage"
    HAVERAGE = "haverage"
    TUKEY_HINGES = "tukeyhinges"

    @classmethod
    def from_string(cls, s: str) -> "PercentileMethod":
        """Create PercentileMethod from string (case-insensitive, ignores '_' and ' ')."""
        key = s.lower().strip().replace("_", "").replace(" ", "").replace("'", "")
        if key in ("tukey", "tukeyshinges"):
            key = "tukeyhinges"
        for method in cls:
            if method.value == key:
                return method
        raise ValueError(f"Unknown percentile method: {s}")


@dataclass
class DiagnosticsOptions:
    """
    Options for the residual diagnostic suites.

    Attributes:
        alpha: Significance level for every test decision (default: 0.05)
        run_breusch_pagan: Include the Breusch-Pagan test (default: True)
        run_white: Include the White test (default: True)
        run_goldfeld_quandt: Include the Goldfeld-Quandt test (default: True)
        run_shapiro_wilk: Include the Shapiro-Wilk test (default: True)
        gq_min_observations: Minimum n for Goldfeld-Quandt (default: 20)
        histogram_bins: Number of bins for the residual histogram (default: 10)
        include_visualizations: Build plot point series (default: True)
    """

    alpha: float = 0.05
    run_breusch_pagan: bool = True
    run_white: bool = True
    run_goldfeld_quandt: bool = True
    run_shapiro_wilk: bool = True
    gq_min_observations: int = 20
    histogram_bins: int = 10
    include_visualizations: bool = True

    def __post_init__(self):
        """Validate options after initialization."""
        if not 0 < self.alpha < 1:
            raise ValueError("alpha must be between 0 and 1")

        if self.gq_min_observations < 4:
            raise ValueError("gq_min_observations must be at least 4")

        if self.histogram_bins < 1:
            raise ValueError("histogram_bins must be at least 1")

    @property
    def confidence_level(self) -> float:
        return 1.0 - self.alpha

    def to_dict(self) -> Dict[str, Any]:
        return {
            "alpha": self.alpha,
            "run_breusch_pagan": self.run_breusch_pagan,
            "run_white": self.run_white,
            "run_goldfeld_quandt": self.run_goldfeld_quandt,
            "run_shapiro_wilk": self.run_shapiro_wilk,
            "gq_min_observations": self.gq_min_observations,
            "histogram_bins": self.histogram_bins,
            "include_visualizations": self.include_visualizations,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "DiagnosticsOptions":
        data = data or {}
        return cls(
            alpha=data.get("alpha", 0.05),
            run_breusch_pagan=data.get("run_breusch_pagan", True),
            run_white=data.get("run_white", True),
            run_goldfeld_quandt=data.get("run_goldfeld_quandt", True),
            run_shapiro_wilk=data.get("run_shapiro_wilk", True),
            gq_min_observations=data.get("gq_min_observations", 20),
            histogram_bins=data.get("histogram_bins", 10),
            include_visualizations=data.get("include_visualizations", True),
        )

    @classmethod
    def default(cls) -> "DiagnosticsOptions":
        return cls()

    def __repr__(self) -> str:
        return f"DiagnosticsOptions(alpha={self.alpha}, gq_min_n={self.gq_min_observations})"


DEFAULT_PERCENTILES: Tuple[float, ...] = (5, 10, 25, 50, 75, 90, 95)


@dataclass
class FrequencyOptions:
    """
    Options for the percentile engine.

    Attributes:
        method: Percentile definition (default: WAVERAGE)
        percentiles: Percentile points on the 0..100 scale
    """

    method: PercentileMethod = PercentileMethod.WAVERAGE
    percentiles: Tuple[float, ...] = DEFAULT_PERCENTILES

    def __post_init__(self):
        if isinstance(self.method, str):
            self.method = PercentileMethod.from_string(self.method)
        self.percentiles = tuple(float(p) for p in self.percentiles)
        for p in self.percentiles:
            if not 0.0 <= p <= 100.0:
                raise ValueError("percentiles must be between 0 and 100")

    def to_dict(self) -> Dict[str, Any]:
        return {"method": self.method.value, "percentiles": list(self.percentiles)}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "FrequencyOptions":
        data = data or {}
        return cls(
            method=data.get("method", PercentileMethod.WAVERAGE.value),
            percentiles=tuple(data.get("percentiles", DEFAULT_PERCENTILES)),
        )


@dataclass
class GoodnessOfFitOptions:
    """
    Options for the chi-square goodness-of-fit test.

    Attributes:
        use_specified_range: Count only floored values in [lower, upper]
            (default: False, categories come from the data)
        lower: Lower bound of the range (integer)
        upper: Upper bound of the range (integer)
        expected_values: Relative expected frequencies, one per category;
            None means all categories are equal
        alpha: Significance level (default: 0.05)
    """

    use_specified_range: bool = False
    lower: Optional[int] = None
    upper: Optional[int] = None
    expected_values: Optional[List[float]] = None
    alpha: float = 0.05

    def __post_init__(self):
        """Validate options after initialization."""
        if not 0 < self.alpha < 1:
            raise ValueError("alpha must be between 0 and 1")

        if self.use_specified_range:
            if self.lower is None or self.upper is None:
                raise ValueError("lower and upper are required when use_specified_range is set")
            lower, upper = float(self.lower), float(self.upper)
            if not (lower.is_integer() and upper.is_integer()):
                raise ValueError("lower and upper must be integers")
            self.lower = int(lower)
            self.upper = int(upper)
            if self.lower > self.upper:
                raise ValueError("lower must not exceed upper")

        if self.expected_values is not None:
            self.expected_values = [float(v) for v in self.expected_values]
            if not self.expected_values:
                raise ValueError("expected_values must not be empty")
            if any(v <= 0 for v in self.expected_values):
                raise ValueError("expected_values must be positive")

    @property
    def all_categories_equal(self) -> bool:
        return self.expected_values is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "use_specified_range": self.use_specified_range,
            "lower": self.lower,
            "upper": self.upper,
            "expected_values": list(self.expected_values) if self.expected_values else None,
            "alpha": self.alpha,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "GoodnessOfFitOptions":
        """Create options from a dictionary.

        Also accepts the dialog layout ``expectedRange`` / ``rangeValue`` /
        ``expectedValue`` / ``expectedValueList``.
        """
        data = data or {}
        use_range = data.get("use_specified_range")
        lower = data.get("lower")
        upper = data.get("upper")
        expected = data.get("expected_values")

        if use_range is None and "expectedRange" in data:
            use_range = bool(data["expectedRange"].get("useSpecifiedRange", False))
        if "rangeValue" in data:
            lower = data["rangeValue"].get("lowerValue", lower)
            upper = data["rangeValue"].get("upperValue", upper)
        if expected is None and "expectedValue" in data:
            if not data["expectedValue"].get("allCategoriesEqual", True):
                expected = data.get("expectedValueList")

        return cls(
            use_specified_range=bool(use_range),
            lower=lower,
            upper=upper,
            expected_values=expected,
            alpha=data.get("alpha", 0.05),
        )
