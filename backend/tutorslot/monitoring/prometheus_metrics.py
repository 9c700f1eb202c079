"""
Prometheus metrics for the tutoring reservation backend.

Service timings come from the @measure_operation decorator; reservation
outcomes (created, slot taken, quota exceeded, ...) are counted separately.
"""

from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Own registry: no process/platform collectors in the exposition
REGISTRY = CollectorRegistry()

service_operation_duration_seconds = Histogram(
    "tutorslot_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "tutorslot_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "tutorslot_errors_total",
    "Total number of errors by type",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

reservation_outcomes_total = Counter(
    "tutorslot_reservation_outcomes_total",
    "Reservation operation outcomes",
    ["operation", "outcome"],
    registry=REGISTRY,
)


slot_conflicts_total = Counter(
    "tutorslot_slot_conflicts_total",
    "Bookings rejected because the teacher slot was already held",
    ["source"],
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Thin facade over the module-level collectors."""

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """Timing and count for one decorated service call; failures also bump errors_total."""
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()
        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def record_reservation_outcome(operation: str, outcome: str) -> None:
        reservation_outcomes_total.labels(operation=operation, outcome=outcome).inc()

    @staticmethod
    def record_slot_conflict(source: str) -> None:
        """``source`` is "overlap_check" or "claim_constraint"."""
        slot_conflicts_total.labels(source=source).inc()

    @staticmethod
    def get_metrics() -> bytes:
        return bytes(generate_latest(REGISTRY))

    @staticmethod
    def get_content_type() -> str:
        return str(CONTENT_TYPE_LATEST)


prometheus_metrics = PrometheusMetrics()
