"""
Redis Cache - Teed Waitlist
waitlist/services/redis_cache.py

Stores pydantic models as JSON under the waitlist key namespace.
"""

from typing import Optional, Type, TypeVar

import redis
import structlog
from pydantic import BaseModel, ValidationError

from waitlist.config import settings

logger = structlog.get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

KEY_PREFIX = "teed:waitlist:"


class RedisCache:
    def __init__(self, prefix: str = KEY_PREFIX):
        self.prefix = prefix
        self.client = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
        )

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str, model: Type[T]) -> Optional[T]:
        """
        Load a cached model.

        A payload that no longer validates (e.g. a config cached before a
        schema change) is dropped and treated as a miss.
        """
        data = self.client.get(self._key(key))
        if not data:
            return None
        try:
            return model.model_validate_json(data)
        except ValidationError:
            logger.warning("cache_payload_invalid", key=key, model=model.__name__)
            self.client.delete(self._key(key))
            return None

    def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        self.client.setex(self._key(key), ttl_seconds, value.model_dump_json())

    def delete(self, key: str) -> None:
        self.client.delete(self._key(key))
