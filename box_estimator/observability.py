from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from .metrics import Counter, Histogram

logger = logging.getLogger("box_estimator")
logger.setLevel(logging.INFO)

ESTIMATE_LATENCY_MS = Histogram(
    "estimate_latency_ms",
    "Estimate latency in milliseconds",
    buckets=(1, 2, 5, 10, 25, 50, 100, 250, 500),
)
ESTIMATE_SUCCESS = Counter("estimate_success_total", "Successful estimates", labelnames=("kind",))
ESTIMATE_ERROR = Counter("estimate_error_total", "Errored estimates", labelnames=("kind",))
VALIDATION_FAILURES = Counter("estimate_validation_failure_total", "Requests rejected by validation")
WHITE_GLOVE_REQUESTS = Counter("estimate_white_glove_total", "Estimates with the White Glove uplift")
BEDROOMS_CLAMPED = Counter(
    "estimate_bedrooms_clamped_total",
    "Estimates whose bedroom input was outside the property range",
    labelnames=("property_type",),
)


class _Span:
    def __init__(self, name: str):
        self.name = name
        self.attributes: Dict[str, Any] = {}

    def set_attribute(self, key: str, value: Any) -> None:
        self.attributes[key] = value
        logger.debug("span_attribute", extra={"span": self.name, "key": key, "value": value})


@contextmanager
def span(name: str, **attributes: Any) -> Iterator[_Span]:
    current = _Span(name)
    for key, value in attributes.items():
        current.set_attribute(key, value)
    yield current


def configure_logging(level: str) -> None:
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))


def record_estimate_success(kind: str, latency_ms: float) -> None:
    ESTIMATE_LATENCY_MS.observe(latency_ms)
    ESTIMATE_SUCCESS.labels(kind=kind).inc()


def record_estimate_error(kind: str) -> None:
    ESTIMATE_ERROR.labels(kind=kind).inc()


def record_validation_failure() -> None:
    VALIDATION_FAILURES.inc()


def record_white_glove() -> None:
    WHITE_GLOVE_REQUESTS.inc()


def record_bedrooms_clamped(property_type: str) -> None:
    BEDROOMS_CLAMPED.labels(property_type=property_type).inc()


def structured_log(event: str, **payload: Any) -> None:
    entry: Dict[str, Any] = {"event": event, **payload}
    logger.info(json.dumps(entry, default=str))
