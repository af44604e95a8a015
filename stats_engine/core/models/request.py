"""
Regression diagnostics request.

A request carries the dependent vector, the predictor matrix and predictor
metadata. Predictors may arrive in several shapes; they are normalized to an
observation-major (n x p) matrix before any fitting:

1. flat vector                         -> one predictor column
2. one outer element with > 1 values   -> that element is a single predictor
3. > 1 outer elements, each > 1 values -> variable-major, transposed
4. anything else                       -> already observation-major

Rule 3 cannot tell a square observation-major matrix (e.g. 2 cases x 2
variables) from a variable-major one; it always transposes. Such requests
are flagged with ``orientation_ambiguous`` and a warning is logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..errors import InputError
from .variable import MissingValueSpec, VariableInfo, coerce_numeric

logger = logging.getLogger(__name__)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple, np.ndarray))


def prepare_independent_data(independent_data: Any) -> Tuple[np.ndarray, bool]:
    """Normalize predictor data to an observation-major float matrix.

    Args:
        independent_data: flat vector, list of per-variable vectors, or list
            of per-observation rows

    Returns:
        (matrix of shape (n, p), orientation_ambiguous)

    Raises:
        InputError: empty or ragged input
    """
    if independent_data is None or len(independent_data) == 0:
        raise InputError("Empty data arrays provided for independent variables")

    outer = list(independent_data)
    if not _is_sequence(outer[0]):
        return coerce_numeric(outer)[:, None], False

    rows = [list(r) for r in outer]
    widths = {len(r) for r in rows}
    if len(widths) != 1:
        raise InputError("Independent data arrays have inconsistent lengths")
    width = widths.pop()
    if width == 0:
        raise InputError("Empty data arrays provided for independent variables")

    if len(rows) == 1 and width > 1:
        return coerce_numeric(rows[0])[:, None], False

    if len(rows) > 1 and width > 1:
        ambiguous = len(rows) == width
        if ambiguous:
            logger.warning(
                "Independent data is square (%d x %d); interpreting it as one array per variable",
                width, width,
            )
        matrix = np.vstack([coerce_numeric(r) for r in rows])
        return matrix.T.copy(), ambiguous

    return np.vstack([coerce_numeric(r) for r in rows]), False


@dataclass
class RegressionRequest:
    """
    Normalized input for a regression diagnostics suite.

    Attributes:
        dependent: Dependent values of the retained cases
        independent: Observation-major predictor matrix (n x p)
        variable_infos: Predictor metadata, one per column
        orientation_ambiguous: True if the predictor orientation was guessed
        dropped_cases: Number of cases removed as missing
    """

    dependent: np.ndarray
    independent: np.ndarray
    variable_infos: List[VariableInfo] = field(default_factory=list)
    orientation_ambiguous: bool = False
    dropped_cases: int = 0

    @property
    def n_observations(self) -> int:
        return int(self.dependent.shape[0])

    @property
    def n_predictors(self) -> int:
        return int(self.independent.shape[1])

    def validate(self) -> List[str]:
        """
        Validate shapes for fitting.

        Returns:
            List of error messages (empty if valid)
        """
        errors: List[str] = []
        if self.dependent.size == 0:
            errors.append("No valid cases remain after removing missing values")
            return errors
        if self.independent.shape[0] != self.dependent.shape[0]:
            errors.append(
                f"Dependent variable has {self.dependent.shape[0]} cases but independent "
                f"data has {self.independent.shape[0]}; independent data with several "
                "variables must be given as one array per variable"
            )
        if self.variable_infos and len(self.variable_infos) != self.n_predictors:
            errors.append(
                f"{len(self.variable_infos)} variable infos given for {self.n_predictors} predictors"
            )
        return errors

    @classmethod
    def from_arrays(
        cls,
        dependent: Sequence[Any],
        independent: Any,
        variable_infos: Optional[List[VariableInfo]] = None,
        dependent_missing: Optional[MissingValueSpec] = None,
    ) -> "RegressionRequest":
        """Build a request, dropping every case with a missing value (listwise).

        Raises:
            InputError: if inputs are missing, empty or inconsistent
        """
        if dependent is None or independent is None:
            raise InputError("Missing data: dependent or independent variable data not provided")
        if len(dependent) == 0:
            raise InputError("Empty data arrays provided for dependent variable")

        y = coerce_numeric(list(dependent))
        X, ambiguous = prepare_independent_data(independent)

        infos = list(variable_infos or [])
        if not infos:
            infos = [VariableInfo(name=f"Variable {j + 1}") for j in range(X.shape[1])]

        if X.shape[0] != y.shape[0]:
            # Report through validate() so the message carries the orientation hint.
            request = cls(dependent=y, independent=X, variable_infos=infos,
                          orientation_ambiguous=ambiguous)
            raise InputError("; ".join(request.validate()))

        keep = (dependent_missing or MissingValueSpec()).valid_mask(y)
        for j in range(X.shape[1]):
            spec = infos[j].missing if j < len(infos) else MissingValueSpec()
            keep &= spec.valid_mask(X[:, j])

        request = cls(
            dependent=y[keep],
            independent=X[keep],
            variable_infos=infos,
            orientation_ambiguous=ambiguous,
            dropped_cases=int((~keep).sum()),
        )

        errors = request.validate()
        if errors:
            raise InputError("; ".join(errors))
        if request.dropped_cases:
            logger.debug("Dropped %d cases with missing values", request.dropped_cases)
        return request

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "RegressionRequest":
        """Build a request from the wire payload.

        Expected keys: ``dependentData``, ``independentData``,
        ``independentVariableInfos`` and optionally ``dependentVariableInfo``.
        """
        if not isinstance(payload, dict):
            raise InputError("Request payload must be a mapping")
        infos = [
            VariableInfo.from_dict(info or {}, index=i)
            for i, info in enumerate(payload.get("independentVariableInfos") or [])
        ]
        dep_info = payload.get("dependentVariableInfo") or {}
        return cls.from_arrays(
            payload.get("dependentData"),
            payload.get("independentData"),
            variable_infos=infos,
            dependent_missing=MissingValueSpec.from_dict(dep_info.get("missing")),
        )
