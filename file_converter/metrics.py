from __future__ import annotations

from prometheus_client import Counter, Gauge

from file_converter.logging_utils import get_logger


logger = get_logger(__name__)


FILE_CONVERSIONS_TOTAL = Counter(
    "file_conversions_total",
    "Total conversions by input kind, output format and status.",
    ["input_kind", "output_format", "status"],
)

FILE_CONVERSION_BYTES_TOTAL = Counter(
    "file_conversion_bytes_total",
    "Total number of converted bytes produced.",
    ["input_kind", "output_format"],
)

FILE_CONVERSION_FAILURES_TOTAL = Counter(
    "file_conversion_failures_total",
    "Total number of failed conversions by error kind.",
    ["kind"],
)

FILE_CONVERSIONS_IN_PROGRESS = Gauge(
    "file_conversions_in_progress",
    "Current number of conversions running against a codec.",
    ["input_kind"],
)


def record_conversion_succeeded(input_kind: str, output_format: str, num_bytes: int) -> None:
    FILE_CONVERSIONS_TOTAL.labels(
        input_kind=input_kind, output_format=output_format, status="succeeded"
    ).inc()
    FILE_CONVERSION_BYTES_TOTAL.labels(
        input_kind=input_kind, output_format=output_format
    ).inc(num_bytes)


def record_conversion_failed(input_kind: str, output_format: str, error_kind: str) -> None:
    """Record a rejected or failed conversion.

    ``input_kind`` is ``"unknown"`` when the request failed before an
    input kind could be resolved.
    """
    FILE_CONVERSIONS_TOTAL.labels(
        input_kind=input_kind, output_format=output_format, status="failed"
    ).inc()
    FILE_CONVERSION_FAILURES_TOTAL.labels(kind=error_kind).inc()


def increment_in_progress(input_kind: str) -> None:
    FILE_CONVERSIONS_IN_PROGRESS.labels(input_kind=input_kind).inc()


def decrement_in_progress(input_kind: str) -> None:
    FILE_CONVERSIONS_IN_PROGRESS.labels(input_kind=input_kind).dec()
