"""
Create Product Entry Point.

Reads a JSON product payload from a file argument or stdin, creates the
product and prints the resulting profile or the failures as JSON.

Exit codes: 0 created, 1 rejected by validation, 2 internal failure.
"""
import asyncio
import json
import sys
from typing import Optional

import asyncpg
from dotenv import load_dotenv
from pydantic import ValidationError


# Load environment variables before reading settings
load_dotenv()

from config.settings import settings  # noqa: E402
from internal.infrastructure.metrics import (  # noqa: E402
    LoggingMetricsSink,
    PrometheusMetricsSink,
)
from internal.infrastructure.postgres.repository import (  # noqa: E402
    PostgresProductRepository,
    create_pool,
)
from internal.infrastructure.redis.cache import ProductCacheService, RedisCache  # noqa: E402
from internal.transport.dto import CreateProductPayload  # noqa: E402
from internal.usecase.create_product import CreateProductUseCase  # noqa: E402
from internal.usecase.creation_metrics import MetricsRecorder  # noqa: E402
from internal.usecase.product_mapper import ProductMapper, currency_format_for  # noqa: E402
from internal.usecase.product_rules import ProductRuleEngine  # noqa: E402
from pkg.logger.logger import get_logger, setup_logging  # noqa: E402


setup_logging(level=settings.LOG_LEVEL, json_format=settings.json_logs())

logger = get_logger(__name__)


EXIT_CREATED = 0
EXIT_INVALID = 1
EXIT_FAILED = 2


def read_payload(path: Optional[str]) -> str:
    """Read the payload text from a file or stdin."""
    if path and path != "-":
        with open(path, encoding="utf-8") as f:
            return f.read()
    return sys.stdin.read()


def print_json(data: dict) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2, default=str))


async def push_metrics(sink: PrometheusMetricsSink) -> None:
    """Push recorded metrics before the process exits; failures are only logged."""
    try:
        await asyncio.to_thread(sink.push, settings.PUSHGATEWAY_URL, settings.APP_NAME)
    except OSError as e:
        logger.warning("Failed to push metrics", gateway=settings.PUSHGATEWAY_URL, error=str(e))


async def create_product(payload: CreateProductPayload) -> int:
    """
    Wire collaborators from settings and run the use case.

    Args:
        payload: Parsed product payload.

    Returns:
        Process exit code.
    """
    try:
        pool = await create_pool(
            settings.DATABASE_URL,
            min_size=settings.DB_POOL_MIN_SIZE,
            max_size=settings.DB_POOL_MAX_SIZE,
        )
    except (OSError, asyncpg.PostgresError) as e:
        logger.error("Failed to connect to database", error=str(e))
        print_json({"error": f"Database unavailable: {e}"})
        return EXIT_FAILED

    redis_cache: Optional[RedisCache] = RedisCache(redis_url=settings.REDIS_URL)
    try:
        await redis_cache.connect()
    except Exception as e:
        logger.warning("Failed to connect to Redis, cache invalidation disabled", error=str(e))
        redis_cache = None

    sinks = [LoggingMetricsSink()]
    prometheus_sink: Optional[PrometheusMetricsSink] = None
    if settings.PROMETHEUS_ENABLED and settings.PUSHGATEWAY_URL:
        prometheus_sink = PrometheusMetricsSink()
        sinks.append(prometheus_sink)

    repository = PostgresProductRepository(pool)
    use_case = CreateProductUseCase(
        repository=repository,
        cache=ProductCacheService(redis_cache) if redis_cache else None,
        rules=ProductRuleEngine(repository, daily_limit=settings.DAILY_CREATION_LIMIT),
        mapper=ProductMapper(currency=currency_format_for(settings.CURRENCY_LOCALE)),
        metrics=MetricsRecorder(sinks=sinks),
        cache_key=settings.PRODUCTS_CACHE_KEY,
    )

    try:
        result = await use_case.execute(payload.to_request())
    finally:
        if redis_cache:
            await redis_cache.disconnect()
        await pool.close()
        if prometheus_sink:
            await push_metrics(prometheus_sink)

    print_json(result.to_dict())
    if result.is_success:
        return EXIT_CREATED
    if result.validation is not None:
        return EXIT_INVALID
    return EXIT_FAILED


def main() -> None:
    """Main entry point."""
    path = sys.argv[1] if len(sys.argv) > 1 else None

    try:
        payload = CreateProductPayload.model_validate_json(read_payload(path))
    except ValidationError as e:
        print_json({
            "errors": {
                ".".join(str(p) for p in err["loc"]) or "payload": [err["msg"]]
                for err in e.errors()
            }
        })
        sys.exit(EXIT_INVALID)

    sys.exit(asyncio.run(create_product(payload)))


if __name__ == "__main__":
    main()
