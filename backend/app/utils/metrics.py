"""Prometheus metrics for scheduling engine operations."""

from prometheus_client import Counter, Histogram

engine_operation_latency_ms = Histogram(
    "engine_operation_latency_ms",
    "Engine operation latency in milliseconds",
    ["operation", "outcome"],
    buckets=[1, 5, 10, 25, 50, 100, 250, 500, 1000],
)

schedule_conflicts_total = Counter(
    "schedule_conflicts_total",
    "Total rejected scheduling mutations",
    ["operation", "reason"],
)

activity_moves_total = Counter(
    "activity_moves_total",
    "Total drag-and-drop activity moves",
    ["placement"],
)


class PrometheusEngineMetrics:
    """Prometheus-based engine metrics implementation."""

    def record_latency(self, operation: str, outcome: str, latency_ms: float) -> None:
        """Record operation latency."""
        engine_operation_latency_ms.labels(operation=operation, outcome=outcome).observe(
            latency_ms
        )

    def inc_conflict(self, operation: str, reason: str) -> None:
        """Increment rejected-mutation counter."""
        schedule_conflicts_total.labels(operation=operation, reason=reason).inc()

    def inc_move(self, placement: str) -> None:
        """Increment move counter (``gap`` or ``after_last``)."""
        activity_moves_total.labels(placement=placement).inc()
