"""
Redis infrastructure package.
"""
from .cache import RedisCache, ProductCacheService

__all__ = ["RedisCache", "ProductCacheService"]
