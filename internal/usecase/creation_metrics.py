"""
Metrics recording for product creation.

Each attempt gets a CreationTimer; its finished OperationMetrics are handed to
every configured sink exactly once.
"""
import secrets
import time
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, Protocol, Sequence

from internal.domain.errors import MetricsAlreadyEmittedError
from internal.domain.metrics import UNKNOWN_CATEGORY, OperationMetrics
from internal.domain.product import CreateProductRequest, ProductCategory
from internal.domain.value_objects import OPERATION_ID_LENGTH, OperationId
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


PHASES = ("validation", "persistence")


class MetricsSink(Protocol):
    """Destination for finished operation metrics."""

    def emit(self, metrics: OperationMetrics) -> None:
        """Record metrics without blocking the caller."""
        ...


def _category_text(category: object) -> str:
    parsed = ProductCategory.parse(category)
    if parsed is not None:
        return parsed.value
    return UNKNOWN_CATEGORY


class CreationTimer:
    """Accumulates phase durations for one creation attempt."""

    def __init__(
        self,
        operation_id: str,
        request: CreateProductRequest,
        clock: Callable[[], float],
    ) -> None:
        self.operation_id = operation_id
        self._product_name = request.name if isinstance(request.name, str) else ""
        self._sku = request.sku if isinstance(request.sku, str) else ""
        self._category = _category_text(request.category)
        self._clock = clock
        self._started = clock()
        self._phases = {phase: 0.0 for phase in PHASES}
        self._finished = False

    @contextmanager
    def measure(self, phase: str) -> Iterator[None]:
        """
        Time a block and add it to the named phase.

        Args:
            phase: One of "validation" or "persistence".
        """
        if phase not in self._phases:
            raise ValueError(f"Unknown metrics phase: {phase}")
        start = self._clock()
        try:
            yield
        finally:
            self._phases[phase] += self._clock() - start

    def finish(self, success: bool, error_reason: Optional[str] = None) -> OperationMetrics:
        """
        Stop the total clock and build the metrics record.

        Args:
            success: Whether the product was created.
            error_reason: Failure text or success caveat.

        Returns:
            Frozen OperationMetrics.

        Raises:
            MetricsAlreadyEmittedError: If called more than once.
        """
        if self._finished:
            raise MetricsAlreadyEmittedError(self.operation_id)
        self._finished = True
        return OperationMetrics(
            operation_id=self.operation_id,
            product_name=self._product_name,
            sku=self._sku,
            category=self._category,
            validation_duration=self._phases["validation"],
            persistence_duration=self._phases["persistence"],
            total_duration=self._clock() - self._started,
            success=success,
            error_reason=error_reason,
        )


class MetricsRecorder:
    """
    Creates per-attempt timers and fans finished metrics out to sinks.

    The random source must be cryptographically secure; it is injected so
    that tests can pin operation identifiers.
    """

    def __init__(
        self,
        sinks: Sequence[MetricsSink] = (),
        random_bytes: Callable[[int], bytes] = secrets.token_bytes,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        """
        Initialize the recorder.

        Args:
            sinks: Destinations for finished metrics.
            random_bytes: Secure random source taking a byte count.
            clock: Monotonic clock in seconds.
        """
        self._sinks = tuple(sinks)
        self._random_bytes = random_bytes
        self._clock = clock

    def new_operation_id(self) -> str:
        """Generate an eight-character A-Z0-9 operation identifier."""
        return str(OperationId.from_bytes(self._random_bytes(OPERATION_ID_LENGTH)))

    def start(self, request: CreateProductRequest) -> CreationTimer:
        """
        Begin timing a creation attempt.

        Args:
            request: The creation request being processed.

        Returns:
            CreationTimer with a fresh operation identifier.
        """
        return CreationTimer(self.new_operation_id(), request, self._clock)

    def emit(self, metrics: OperationMetrics) -> None:
        """
        Hand metrics to every sink.

        Sink failures are logged and never reach the caller.

        Args:
            metrics: Finished metrics of one attempt.
        """
        for sink in self._sinks:
            try:
                sink.emit(metrics)
            except Exception as e:
                logger.error(
                    "Metrics sink failed",
                    operation_id=metrics.operation_id,
                    sink=type(sink).__name__,
                    error=str(e),
                )
