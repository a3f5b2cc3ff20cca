"""
Create Product Use Case.

Validates a creation request, persists the resulting product, invalidates the
product list cache and returns the presentation profile. Exactly one metrics
record is emitted per attempt.
"""
import asyncio
from dataclasses import dataclass
from typing import Optional, Protocol

from internal.domain.errors import ProductCreationError, ProductValidationError
from internal.domain.product import CreateProductRequest, Product, ProductProfile
from internal.domain.validation import ValidationOutcome
from internal.usecase.creation_metrics import CreationTimer, MetricsRecorder
from internal.usecase.product_mapper import ProductMapper
from internal.usecase.product_rules import ProductLookup, ProductRuleEngine
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


ALL_PRODUCTS_CACHE_KEY = "all_products"

CANCELLED_REASON = "cancelled"
CANCELLED_AFTER_COMMIT_REASON = "cancelled after commit; cache invalidation not confirmed"


class ProductRepository(ProductLookup, Protocol):
    """Protocol for product repository operations."""

    async def add(self, product: Product) -> None:
        """Stage a new product."""
        ...

    async def commit(self) -> None:
        """Persist staged products as one unit."""
        ...


class CacheService(Protocol):
    """Protocol for cache operations."""

    async def invalidate(self, key: str) -> None:
        """Invalidate cache key."""
        ...


@dataclass(frozen=True)
class InternalFailure:
    """
    Unexpected collaborator failure during creation.

    Attributes:
        reason: Text of the underlying error.
        error: The exception that caused the failure.
    """
    reason: str
    error: Optional[BaseException] = None


@dataclass(frozen=True)
class CreateProductResult:
    """
    Outcome of one creation attempt.

    Exactly one of profile, validation and failure is set.
    """
    operation_id: str
    profile: Optional[ProductProfile] = None
    validation: Optional[ValidationOutcome] = None
    failure: Optional[InternalFailure] = None

    @property
    def is_success(self) -> bool:
        return self.profile is not None

    def unwrap(self) -> ProductProfile:
        """
        Return the profile or raise the matching domain error.

        Raises:
            ProductValidationError: If the request was rejected by the rules.
            ProductCreationError: If a collaborator failed.
        """
        if self.profile is not None:
            return self.profile
        if self.validation is not None:
            raise ProductValidationError(self.validation)
        reason = self.failure.reason if self.failure else "unknown error"
        raise ProductCreationError(reason, operation_id=self.operation_id)

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        if self.profile is not None:
            return {"operation_id": self.operation_id, "product": self.profile.to_dict()}
        if self.validation is not None:
            return {"operation_id": self.operation_id, "errors": self.validation.to_dict()}
        return {
            "operation_id": self.operation_id,
            "error": self.failure.reason if self.failure else "unknown error",
        }


class CreateProductUseCase:
    """
    Use case for creating a new catalog product.

    Holds no state between invocations; concurrent calls are independent.
    """

    def __init__(
        self,
        repository: ProductRepository,
        cache: Optional[CacheService] = None,
        rules: Optional[ProductRuleEngine] = None,
        mapper: Optional[ProductMapper] = None,
        metrics: Optional[MetricsRecorder] = None,
        cache_key: str = ALL_PRODUCTS_CACHE_KEY,
    ) -> None:
        """
        Initialize the use case.

        Args:
            repository: Product repository for lookups and persistence.
            cache: Optional cache service for invalidation.
            rules: Rule engine; built over the repository if not provided.
            mapper: Product mapper; default en_US mapper if not provided.
            metrics: Metrics recorder; records to no sinks if not provided.
            cache_key: Cache key holding the product list.
        """
        self._repository = repository
        self._cache = cache
        self._rules = rules or ProductRuleEngine(repository)
        self._mapper = mapper or ProductMapper()
        self._metrics = metrics or MetricsRecorder()
        self._cache_key = cache_key

    async def execute(self, request: CreateProductRequest) -> CreateProductResult:
        """
        Execute the create product use case.

        This method:
        1. Validates the request against the product rules
        2. Maps it to a Product and persists it
        3. Invalidates the product list cache
        4. Maps the stored Product to its profile
        5. Emits the operation metrics

        Args:
            request: Untrusted creation request.

        Returns:
            CreateProductResult holding the profile, the failed validation
            outcome or the internal failure.

        Raises:
            asyncio.CancelledError: If cancelled; metrics are emitted first.
        """
        timer = self._metrics.start(request)
        operation_id = timer.operation_id
        committed = False

        logger.info(
            "Product creation started",
            operation_id=operation_id,
            product_name=request.name,
            brand=request.brand,
            sku=request.sku,
            category=str(request.category),
        )

        try:
            with timer.measure("validation"):
                outcome = await self._rules.validate(request, operation_id=operation_id)

            if not outcome.is_valid:
                logger.warning(
                    "Product validation failed",
                    operation_id=operation_id,
                    sku=request.sku,
                    errors=outcome.to_dict(),
                )
                self._emit(timer, success=False, error_reason=outcome.summary())
                return CreateProductResult(operation_id=operation_id, validation=outcome)

            product = self._mapper.to_entity(request)

            with timer.measure("persistence"):
                await self._repository.add(product)
                await self._repository.commit()
            committed = True
            logger.info(
                "Product persisted",
                operation_id=operation_id,
                product_id=str(product.id),
            )

            if self._cache:
                await self._cache.invalidate(self._cache_key)
                logger.debug(
                    "Cache invalidated",
                    operation_id=operation_id,
                    key=self._cache_key,
                )

            profile = self._mapper.to_output(product)

        except asyncio.CancelledError:
            logger.warning(
                "Product creation cancelled",
                operation_id=operation_id,
                committed=committed,
            )
            if committed:
                self._emit(timer, success=True, error_reason=CANCELLED_AFTER_COMMIT_REASON)
            else:
                self._emit(timer, success=False, error_reason=CANCELLED_REASON)
            raise

        except Exception as e:
            reason = str(e) or type(e).__name__
            logger.error(
                "Product creation failed",
                operation_id=operation_id,
                sku=request.sku,
                committed=committed,
                error=reason,
                exc_info=True,
            )
            self._emit(timer, success=False, error_reason=reason)
            return CreateProductResult(
                operation_id=operation_id,
                failure=InternalFailure(reason=reason, error=e),
            )

        self._emit(timer, success=True)
        logger.info(
            "Product creation completed",
            operation_id=operation_id,
            product_id=str(profile.id),
        )
        return CreateProductResult(operation_id=operation_id, profile=profile)

    def _emit(
        self,
        timer: CreationTimer,
        success: bool,
        error_reason: Optional[str] = None,
    ) -> None:
        self._metrics.emit(timer.finish(success=success, error_reason=error_reason))
