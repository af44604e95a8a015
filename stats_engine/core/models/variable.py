"""
Variable metadata and missing-value handling.

A variable declares its user-missing codes either as a discrete list, an
inclusive numeric range, or both. System-missing values (None, NaN, inf,
non-numeric text) are always excluded.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np


def coerce_numeric(values: Sequence[Any]) -> np.ndarray:
    """Convert raw case values to floats; anything non-numeric becomes NaN."""
    out = np.empty(len(values), dtype=float)
    for i, raw in enumerate(values):
        if raw is None or isinstance(raw, bool):
            out[i] = np.nan
            continue
        if isinstance(raw, str):
            raw = raw.strip()
            if raw == "":
                out[i] = np.nan
                continue
        try:
            out[i] = float(raw)
        except (TypeError, ValueError):
            out[i] = np.nan
    return out


@dataclass
class MissingValueSpec:
    """
    User-missing value definition for one variable.

    Attributes:
        discrete: Individual codes treated as missing (e.g. -99)
        range: Inclusive (low, high) interval treated as missing
    """

    discrete: List[float] = field(default_factory=list)
    range: Optional[Tuple[float, float]] = None

    def __post_init__(self):
        self.discrete = [float(v) for v in self.discrete]
        if self.range is not None:
            low, high = (float(self.range[0]), float(self.range[1]))
            if low > high:
                raise ValueError("missing range low must not exceed high")
            self.range = (low, high)

    @property
    def is_empty(self) -> bool:
        return not self.discrete and self.range is None

    def is_missing(self, value: float) -> bool:
        """True if ``value`` is system- or user-missing."""
        if value is None or not np.isfinite(value):
            return True
        if value in self.discrete:
            return True
        if self.range is not None and self.range[0] <= value <= self.range[1]:
            return True
        return False

    def valid_mask(self, values: np.ndarray) -> np.ndarray:
        """Boolean mask of valid (non-missing) entries of a float array."""
        arr = np.asarray(values, dtype=float)
        mask = np.isfinite(arr)
        if self.discrete:
            mask &= ~np.isin(arr, self.discrete)
        if self.range is not None:
            mask &= ~((arr >= self.range[0]) & (arr <= self.range[1]))
        return mask

    def to_dict(self) -> Dict[str, Any]:
        return {
            "discrete": list(self.discrete),
            "range": {"min": self.range[0], "max": self.range[1]} if self.range else None,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "MissingValueSpec":
        """Create from a dictionary.

        Accepts ``discrete``/``values`` for codes and ``range`` given either as
        ``{"min", "max"}`` / ``{"low", "high"}`` or a two-element list.
        """
        if not data:
            return cls()
        discrete = data.get("discrete", data.get("values")) or []
        raw_range = data.get("range")
        rng = None
        if isinstance(raw_range, dict):
            low = raw_range.get("min", raw_range.get("low"))
            high = raw_range.get("max", raw_range.get("high"))
            if low is not None and high is not None:
                rng = (low, high)
        elif raw_range is not None:
            rng = (raw_range[0], raw_range[1])
        return cls(discrete=list(discrete), range=rng)


def clean_values(values: Sequence[Any], missing: Optional[MissingValueSpec] = None) -> np.ndarray:
    """Return the valid numeric values of ``values`` in case order."""
    arr = coerce_numeric(list(values))
    spec = missing or MissingValueSpec()
    return arr[spec.valid_mask(arr)]


@dataclass
class VariableInfo:
    """
    Display metadata for a variable.

    Attributes:
        name: Variable name
        label: Optional descriptive label
        missing: User-missing definition
    """

    name: str
    label: str = ""
    missing: MissingValueSpec = field(default_factory=MissingValueSpec)

    @property
    def display_name(self) -> str:
        return self.label or self.name

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "label": self.label, "missing": self.missing.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> "VariableInfo":
        name = data.get("name") or f"Variable {index + 1}"
        return cls(
            name=name,
            label=data.get("label") or "",
            missing=MissingValueSpec.from_dict(data.get("missing")),
        )
