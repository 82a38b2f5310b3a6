"""Prometheus metrics for bank API fetches and HTTP request latency"""

from prometheus_client import Counter, Histogram

# Bank API metrics
bank_fetch_latency_histogram = Histogram(
    "starling_fetch_latency_seconds",
    "Bank API response time",
    ["entity"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

bank_fetch_failures_counter = Counter(
    "starling_fetch_failures_total",
    "Failed bank API calls",
    ["error"],  # transport | auth | decode
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_fetch_failure(error: Exception) -> None:
    """Count a failed fetch by error kind"""
    kind = type(error).__name__.removesuffix("Error").lower()
    bank_fetch_failures_counter.labels(error=kind).inc()
