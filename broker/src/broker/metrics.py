"""
Prometheus metrics for exchange requests.

The request pipeline records one sample per call.  The ``path`` label is
the endpoint without its query string so that order ids do not create
new label values.  Exposing the metrics over HTTP is left to the host
process (``prometheus_client.start_http_server``).
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUESTS = Counter(
    "broker_requests_total",
    "Exchange requests by method, endpoint and HTTP status",
    labelnames=["method", "path", "status"],
)
REQUEST_LATENCY = Histogram(
    "broker_request_latency_seconds",
    "Exchange request latency in seconds",
    labelnames=["method", "path"],
)
TRANSPORT_FAILURES = Counter(
    "broker_transport_failures_total",
    "Exchange requests that failed before a response was observed",
    labelnames=["method", "path"],
)


def endpoint(path: str) -> str:
    return path.split("?", 1)[0]
