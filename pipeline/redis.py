"""Redis connection utilities."""

from functools import lru_cache

from redis import ConnectionPool, Redis


@lru_cache
def get_redis_pool(redis_url: str) -> ConnectionPool:
    """Get a cached byte-mode Redis connection pool for a URL."""
    return ConnectionPool.from_url(
        redis_url,
        decode_responses=False,
        max_connections=10,
    )


def get_redis_connection(redis_url: str) -> Redis:
    """Get a Redis connection from the pool."""
    pool = get_redis_pool(redis_url)
    return Redis(connection_pool=pool)
