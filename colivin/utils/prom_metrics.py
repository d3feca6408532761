"""
Prometheus metrics registration and helpers.

Exports:
- observe_request(...): record HTTP request metrics
- observe_action(...): record a household action (task completed, expense paid, ...)
- observe_points(...): record points awarded
- metrics_latest(): return text exposition from correct registry (handles multiprocess)
- CONTENT_TYPE_LATEST: correct Prometheus content type
"""

import os
from prometheus_client import Counter, Histogram, CollectorRegistry, generate_latest, CONTENT_TYPE_LATEST
from prometheus_client import multiprocess


REQUEST_COUNTER = Counter(
    'colivin_http_requests_total', 'Total HTTP requests', ['endpoint', 'status']
)

REQUEST_LATENCY = Histogram(
    'colivin_http_request_latency_seconds', 'HTTP request latency seconds', ['endpoint']
)

ACTION_COUNTER = Counter(
    'colivin_actions_total', 'Household actions performed', ['action']
)

POINTS_AWARDED = Counter(
    'colivin_points_awarded_total', 'Leaderboard points awarded', ['reason']
)


def observe_request(endpoint: str, status: int, latency_seconds: float) -> None:
    REQUEST_COUNTER.labels(endpoint=endpoint, status=str(status)).inc()
    REQUEST_LATENCY.labels(endpoint=endpoint).observe(latency_seconds)


def observe_action(action: str) -> None:
    ACTION_COUNTER.labels(action=action).inc()


def observe_points(reason: str, points: int) -> None:
    if points > 0:
        POINTS_AWARDED.labels(reason=reason).inc(points)


def metrics_latest() -> bytes:
    """Return the Prometheus text exposition, multiprocess-aware if configured."""
    prom_mp_dir = os.getenv('PROMETHEUS_MULTIPROC_DIR')
    if prom_mp_dir:
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        return generate_latest(registry)
    # Default registry
    return generate_latest()
