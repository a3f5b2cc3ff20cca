"""
PostgreSQL Product Repository.

Implements the repository pattern for Product persistence with asyncpg.
Products are staged with add() and written together by commit().
"""

from datetime import datetime
from typing import List

import asyncpg
from asyncpg import Pool

from internal.domain.errors import PersistenceError
from internal.domain.product import Product


class PostgresProductRepository:
    """
    PostgreSQL implementation of the Product Repository.

    Uses asyncpg for async database operations. The unique constraints on
    ``sku`` and ``(name, brand)`` are the authoritative duplicate guard;
    the existence queries only give early, friendly failures.
    """

    def __init__(self, pool: Pool) -> None:
        """
        Initialize the repository.

        Args:
            pool: asyncpg connection pool.
        """
        self._pool = pool
        self._pending: List[Product] = []

    async def sku_exists(self, sku: str) -> bool:
        """
        Check whether a product with this SKU exists.

        Args:
            sku: Normalized SKU.

        Returns:
            True if a product already uses the SKU.
        """
        async with self._pool.acquire() as conn:
            return await conn.fetchval(
                "SELECT EXISTS (SELECT 1 FROM products WHERE sku = $1)",
                sku,
            )

    async def name_brand_exists(self, name: str, brand: str) -> bool:
        """
        Check whether a product with this name and brand exists.

        Args:
            name: Product name.
            brand: Brand name.

        Returns:
            True if the pair is taken.
        """
        async with self._pool.acquire() as conn:
            return await conn.fetchval(
                """
                SELECT EXISTS (
                    SELECT 1 FROM products WHERE name = $1 AND brand = $2
                )
                """,
                name,
                brand,
            )

    async def count_created_since(self, since: datetime) -> int:
        """
        Count products created at or after an instant.

        Args:
            since: Lower bound (inclusive) on created_at.

        Returns:
            Number of matching products.
        """
        async with self._pool.acquire() as conn:
            return await conn.fetchval(
                "SELECT COUNT(*) FROM products WHERE created_at >= $1",
                since,
            )

    async def add(self, product: Product) -> None:
        """
        Stage a product for the next commit.

        Args:
            product: The product to insert.
        """
        self._pending.append(product)

    async def commit(self) -> None:
        """
        Insert all staged products in a single transaction.

        The staged list is taken before the first await, so products staged
        by concurrent callers are never written by this call.

        Raises:
            PersistenceError: If the insert fails; nothing is written.
        """
        pending, self._pending = self._pending, []
        if not pending:
            return

        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    await conn.executemany(
                        """
                        INSERT INTO products (
                            id, name, brand, sku, category, price,
                            release_date, stock_quantity, is_available,
                            image_url, created_at, updated_at
                        ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12)
                        """,
                        [self._entity_to_row(p) for p in pending],
                    )
        except asyncpg.UniqueViolationError as e:
            raise PersistenceError(f"Product already stored: {getattr(e, 'detail', None) or e}") from e
        except asyncpg.PostgresError as e:
            raise PersistenceError(f"Failed to store product: {e}") from e

    def _entity_to_row(self, product: Product) -> tuple:
        """
        Convert a Product to insert parameters.

        Args:
            product: Product entity.

        Returns:
            Tuple in column order.
        """
        return (
            product.id,
            product.name,
            product.brand,
            product.sku,
            product.category.value,
            product.price,
            product.release_date,
            product.stock_quantity,
            product.is_available,
            product.image_url,
            product.created_at,
            product.updated_at,
        )


async def create_pool(dsn: str, min_size: int = 10, max_size: int = 50) -> Pool:
    """
    Create an asyncpg connection pool.

    Args:
        dsn: Database connection string.
        min_size: Minimum pool size.
        max_size: Maximum pool size.

    Returns:
        asyncpg connection pool.
    """
    return await asyncpg.create_pool(
        dsn=dsn,
        min_size=min_size,
        max_size=max_size,
    )
