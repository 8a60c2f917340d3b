from __future__ import annotations

from fastapi.testclient import TestClient

from file_converter.main import app
from file_converter.metrics import FILE_CONVERSION_FAILURES_TOTAL, FILE_CONVERSIONS_TOTAL


def _get_metric_value(metric_obj, sample_name: str, **labels: str) -> float:
    """Helper to read the current value of a labelled sample."""
    for metric in metric_obj.collect():
        for sample in metric.samples:
            if sample.name == sample_name and all(
                sample.labels.get(k) == v for k, v in labels.items()
            ):
                return float(sample.value)
    return 0.0


def test_metrics_endpoint_exposes_prometheus_metrics() -> None:
    client = TestClient(app)
    response = client.get("/metrics")
    assert response.status_code == 200
    content_type = response.headers.get("content-type", "")
    assert content_type.startswith("text/plain")
    body = response.text
    assert "file_conversions_total" in body
    assert "file_conversion_failures_total" in body


def test_successful_conversion_updates_metric(jpeg_bytes: bytes) -> None:
    client = TestClient(app)
    labels = {"input_kind": "image", "output_format": "png", "status": "succeeded"}

    before = _get_metric_value(FILE_CONVERSIONS_TOTAL, "file_conversions_total", **labels)

    response = client.post(
        "/api/convert?format=png",
        files={"file": ("photo.jpg", jpeg_bytes, "image/jpeg")},
    )
    assert response.status_code == 200

    after = _get_metric_value(FILE_CONVERSIONS_TOTAL, "file_conversions_total", **labels)
    assert after == before + 1.0


def test_rejected_conversion_updates_failure_metric() -> None:
    client = TestClient(app)

    before = _get_metric_value(
        FILE_CONVERSION_FAILURES_TOTAL,
        "file_conversion_failures_total",
        kind="unsupported_input",
    )

    response = client.post(
        "/api/convert?format=png",
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )
    assert response.status_code == 500

    after = _get_metric_value(
        FILE_CONVERSION_FAILURES_TOTAL,
        "file_conversion_failures_total",
        kind="unsupported_input",
    )
    assert after == before + 1.0
