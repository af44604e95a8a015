"""
Result classes for the chi-square goodness-of-fit test.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .test_result import DEFAULT_ALPHA, json_safe

INSUFFICIENT_EMPTY = "empty"
INSUFFICIENT_SINGLE_CATEGORY = "single_category"


def _category_value(value: float) -> Any:
    """Report integral categories as ints."""
    value = float(value)
    return int(value) if value.is_integer() else value


@dataclass
class CategoryFrequencies:
    """
    Observed and expected counts per category.

    Attributes:
        categories: Category values in ascending order
        observed: Observed count per category
        expected: Expected count per category
        n: Number of counted observations
    """

    categories: List[float]
    observed: List[int]
    expected: List[float]
    n: int

    @property
    def residuals(self) -> List[float]:
        return [o - e for o, e in zip(self.observed, self.expected)]

    @property
    def category_count(self) -> int:
        return len(self.categories)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "categoryList": [_category_value(c) for c in self.categories],
            "observedN": list(self.observed),
            "expectedN": [json_safe(e) for e in self.expected],
            "residual": [json_safe(r) for r in self.residuals],
            "N": self.n,
        }


@dataclass
class GoodnessOfFitResult:
    """
    Chi-square goodness-of-fit outcome for one variable.

    When ``has_insufficient_data`` is True the statistic, df and p-value are
    None and ``insufficient_type`` names the reason(s).
    """

    frequencies: Optional[CategoryFrequencies]
    chi_square: Optional[float] = None
    df: Optional[int] = None
    p_value: Optional[float] = None
    alpha: float = DEFAULT_ALPHA
    has_insufficient_data: bool = False
    insufficient_type: List[str] = field(default_factory=list)

    @property
    def significant(self) -> Optional[bool]:
        """True when observed counts differ from expected at level alpha."""
        if self.p_value is None:
            return None
        return self.p_value <= self.alpha

    @classmethod
    def insufficient(
        cls,
        frequencies: Optional[CategoryFrequencies],
        reasons: List[str],
        alpha: float = DEFAULT_ALPHA,
    ) -> "GoodnessOfFitResult":
        return cls(
            frequencies=frequencies,
            alpha=alpha,
            has_insufficient_data=True,
            insufficient_type=list(reasons),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frequencies": self.frequencies.to_dict() if self.frequencies else None,
            "testStatistics": {
                "ChiSquare": json_safe(self.chi_square),
                "DF": self.df,
                "PValue": json_safe(self.p_value),
            },
            "metadata": {
                "hasInsufficientData": self.has_insufficient_data,
                "insufficientType": list(self.insufficient_type),
            },
        }
