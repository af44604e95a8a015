"""Request handlers.

Each handler takes a JSON-like payload dictionary and returns a JSON-safe
response dictionary. Malformed input never raises out of ``handle_message``:
it is answered with ``{"error": "<message>"}`` and nothing is computed.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from ..core.diagnostics import analyze_homoscedasticity, analyze_normality
from ..core.errors import InputError
from ..core.models.options import DiagnosticsOptions, FrequencyOptions, GoodnessOfFitOptions
from ..core.models.request import RegressionRequest
from ..core.models.variable import MissingValueSpec
from ..core.results.outcome import Outcome
from ..core.results.test_result import json_safe
from ..core.statistics.frequency import FrequencyCalculator
from ..core.statistics.goodness_of_fit import chi_square_goodness_of_fit

logger = logging.getLogger(__name__)

Payload = Dict[str, Any]
Response = Dict[str, Any]


def _require_mapping(payload: Any) -> Payload:
    if not isinstance(payload, dict):
        raise InputError("Request payload must be a mapping")
    return payload


def _percentile_key(p: float) -> str:
    return str(int(p)) if float(p).is_integer() else str(p)


def handle_homoscedasticity(payload: Payload) -> Response:
    payload = _require_mapping(payload)
    request = RegressionRequest.from_payload(payload)
    options = DiagnosticsOptions.from_dict(payload.get("options"))
    return analyze_homoscedasticity(request, options).to_dict()


def handle_normality(payload: Payload) -> Response:
    payload = _require_mapping(payload)
    request = RegressionRequest.from_payload(payload)
    options = DiagnosticsOptions.from_dict(payload.get("options"))
    return analyze_normality(request, options).to_dict()


def handle_frequency(payload: Payload) -> Response:
    """Percentiles, mode and frequency table for one variable.

    Percentiles and extreme values are reported as None when the variable
    has no valid data.
    """
    payload = _require_mapping(payload)
    data = payload.get("data")
    if data is None:
        raise InputError("Missing data: no values provided")

    options = FrequencyOptions.from_dict({
        key: payload[key] for key in ("method", "percentiles") if key in payload
    })
    calculator = FrequencyCalculator(
        data,
        weights=payload.get("weights"),
        missing=MissingValueSpec.from_dict(payload.get("missing")),
    )

    percentiles = {
        _percentile_key(p): json_safe(Outcome.capture(calculator.percentile, p, options.method).value)
        for p in options.percentiles
    }
    return {
        "percentiles": percentiles,
        "method": options.method.value,
        "mode": calculator.mode(),
        "frequencyTable": calculator.frequency_table(),
        "summary": calculator.summary(),
        "extremeValues": calculator.extreme_values(),
    }


def handle_goodness_of_fit(payload: Payload) -> Response:
    payload = _require_mapping(payload)
    data = payload.get("data")
    if data is None:
        raise InputError("Missing data: no values provided")
    options = GoodnessOfFitOptions.from_dict(payload.get("options"))
    missing = MissingValueSpec.from_dict(payload.get("missing"))
    return chi_square_goodness_of_fit(data, options, missing).to_dict()


HANDLERS: Dict[str, Callable[[Payload], Response]] = {
    "homoscedasticity": handle_homoscedasticity,
    "normality": handle_normality,
    "frequency": handle_frequency,
    "goodnessOfFit": handle_goodness_of_fit,
    "goodness_of_fit": handle_goodness_of_fit,
}


def handle_message(kind: str, payload: Payload) -> Response:
    """Route a request to its handler and always return a response dict.

    Args:
        kind: Analysis name (homoscedasticity, normality, frequency, goodnessOfFit)
        payload: Request payload

    Returns:
        The analysis response, or {"error": message} for bad input
    """
    handler = HANDLERS.get(kind)
    if handler is None:
        return {"error": f"Unknown analysis kind: {kind}"}

    logger.debug("Handling %s request", kind)
    try:
        return handler(payload)
    except (InputError, ValueError) as e:
        logger.info("Rejected %s request: %s", kind, e)
        return {"error": str(e)}
    except Exception as e:
        logger.exception("Unexpected error while handling %s request", kind)
        return {"error": f"Unexpected error: {e}"}
