"""
Prometheus metrics for the license gateway.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# License metrics
licenses_generated_total = Counter(
    "licenses_generated_total",
    "Total inactive licenses generated in bulk",
)

licenses_issued_total = Counter(
    "licenses_issued_total",
    "Total licenses issued for confirmed purchases",
    ["source"],
)

licenses_activated_total = Counter(
    "licenses_activated_total",
    "Total licenses moved from inactive to active",
)

# Inbound events
payment_events_total = Counter(
    "payment_events_total",
    "Inbound payment and order events by outcome",
    ["source", "outcome"],
)

# Order annotation
order_annotations_total = Counter(
    "order_annotations_total",
    "Order annotation attempts by outcome",
    ["outcome"],
)
