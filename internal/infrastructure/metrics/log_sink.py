"""
Structured log sink for product creation metrics.
"""
from internal.domain.metrics import OperationMetrics
from pkg.logger.logger import get_logger


logger = get_logger("product_catalog.metrics")


class LoggingMetricsSink:
    """Writes one structured log record per creation attempt."""

    def emit(self, metrics: OperationMetrics) -> None:
        """
        Log the metrics of one attempt.

        Args:
            metrics: Finished metrics of one attempt.
        """
        logger.info("Product creation metrics", **metrics.to_dict())
