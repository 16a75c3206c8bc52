"""
Cache Service Singleton - Teed Waitlist
waitlist/services/cache.py

Singleton Redis cache plus the keys and TTLs used by the waitlist.
Returns None when Redis is unreachable so callers fall back to Snowflake.
"""
import redis
import structlog
from typing import Optional
from waitlist.services.redis_cache import RedisCache
from waitlist.config import settings

logger = structlog.get_logger(__name__)

CACHE_KEY_SCORING_CONFIG = "scoring_config:current"
CACHE_KEY_BETA_SUMMARY = "beta:summary"

TTL_SCORING_CONFIG = settings.CACHE_TTL_SCORING_CONFIG
TTL_BETA_SUMMARY = settings.CACHE_TTL_BETA_SUMMARY

_cache: Optional[RedisCache] = None


def get_cache() -> Optional[RedisCache]:
    """
    Get or create the Redis cache instance.

    Returns:
        RedisCache if Redis answers a ping, None otherwise.
    """
    global _cache
    if _cache is None:
        try:
            _cache = RedisCache()
            _cache.client.ping()
        except (redis.RedisError, ConnectionError) as e:
            logger.warning("redis_unavailable", error=str(e))
            _cache = None
    return _cache


def reset_cache() -> None:
    """Drop the singleton so the next get_cache() reconnects."""
    global _cache
    _cache = None


def invalidate(*keys: str) -> None:
    """Best-effort delete; a Redis outage must not fail the write path."""
    cache = get_cache()
    if not cache:
        return
    for key in keys:
        try:
            cache.delete(key)
        except redis.RedisError as e:
            logger.warning("cache_invalidate_failed", key=key, error=str(e))
