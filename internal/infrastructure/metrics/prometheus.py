"""
Prometheus Metrics for Product Catalog Service.

Defines product creation metrics and the sink that records them. Short-lived
processes push the sink's registry to a Pushgateway before exiting.
"""

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, push_to_gateway

from internal.domain.metrics import UNKNOWN_CATEGORY, OperationMetrics
from internal.domain.product import ProductCategory


PHASE_BUCKETS = [0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]

CATEGORY_LABELS = frozenset(c.value for c in ProductCategory)


def category_label(category: str) -> str:
    """Bound the category label to the known categories."""
    return category if category in CATEGORY_LABELS else UNKNOWN_CATEGORY


class PrometheusMetricsSink:
    """
    Records creation attempts as Prometheus metrics.

    Metrics:
        product_creation_total{category, status}: attempts by outcome.
        product_creation_phase_duration_seconds{phase}: validation,
            persistence and total durations.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        """
        Initialize and register the metrics.

        Args:
            registry: Collector registry; a private one is created if omitted.
        """
        self.registry = registry if registry is not None else CollectorRegistry()
        self.creations_total = Counter(
            'product_creation_total',
            'Total product creation attempts',
            ['category', 'status'],  # status: success, failure
            registry=self.registry,
        )
        self.phase_duration = Histogram(
            'product_creation_phase_duration_seconds',
            'Product creation phase duration in seconds',
            ['phase'],  # validation, persistence, total
            buckets=PHASE_BUCKETS,
            registry=self.registry,
        )

    def emit(self, metrics: OperationMetrics) -> None:
        """
        Record one finished attempt.

        Args:
            metrics: Finished metrics of one attempt.
        """
        status = "success" if metrics.success else "failure"
        self.creations_total.labels(
            category=category_label(metrics.category), status=status
        ).inc()
        self.phase_duration.labels(phase="validation").observe(metrics.validation_duration)
        self.phase_duration.labels(phase="persistence").observe(metrics.persistence_duration)
        self.phase_duration.labels(phase="total").observe(metrics.total_duration)

    def push(self, gateway: str, job: str) -> None:
        """
        Push the recorded metrics to a Prometheus Pushgateway.

        Args:
            gateway: Pushgateway address, e.g. "localhost:9091".
            job: Job label for the pushed group.
        """
        push_to_gateway(gateway, job=job, registry=self.registry)
