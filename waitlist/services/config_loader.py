"""
Scoring config resolution: Redis cache, then Snowflake, then defaults.
"""

from typing import Optional, Tuple

import redis
import structlog

from waitlist.config import settings
from waitlist.models.enumerations import ConfigSource
from waitlist.repositories.scoring_config_repository import ScoringConfigRepository
from waitlist.scoring.weights import DEFAULT_SCORING_CONFIG, ScoringConfig
from waitlist.services.cache import (
    CACHE_KEY_BETA_SUMMARY,
    CACHE_KEY_SCORING_CONFIG,
    TTL_SCORING_CONFIG,
    get_cache,
    invalidate,
)

logger = structlog.get_logger(__name__)


def default_config() -> ScoringConfig:
    """Defaults with the threshold taken from settings."""
    return DEFAULT_SCORING_CONFIG.model_copy(
        update={"auto_approve_threshold": settings.AUTO_APPROVE_THRESHOLD}
    )


class ScoringConfigLoader:
    """Resolves the active ScoringConfig and records where it came from."""

    def __init__(self, repository: ScoringConfigRepository):
        self.repository = repository

    def get_config(self, force_refresh: bool = False) -> Tuple[ScoringConfig, ConfigSource]:
        cache = get_cache()

        if cache and not force_refresh:
            try:
                cached = cache.get(CACHE_KEY_SCORING_CONFIG, ScoringConfig)
                if cached:
                    return cached, ConfigSource.CACHE
            except redis.RedisError as e:
                logger.warning("scoring_config_cache_read_failed", error=str(e))

        stored = self.repository.get_current()
        if stored:
            config, source = stored, ConfigSource.DATABASE
        else:
            config, source = default_config(), ConfigSource.DEFAULT

        if cache:
            try:
                cache.set(CACHE_KEY_SCORING_CONFIG, config, TTL_SCORING_CONFIG)
            except redis.RedisError as e:
                logger.warning("scoring_config_cache_write_failed", error=str(e))

        return config, source

    def update(
        self,
        overrides: dict,
        updated_by: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> ScoringConfig:
        """Merge overrides into the active config and persist it."""
        current, _ = self.get_config(force_refresh=True)
        new_config = current.with_overrides(overrides, updated_by=updated_by)
        self.repository.save(new_config, reason=reason)
        invalidate(CACHE_KEY_SCORING_CONFIG, CACHE_KEY_BETA_SUMMARY)
        logger.info(
            "scoring_config_updated",
            version=new_config.version,
            threshold=new_config.auto_approve_threshold,
            updated_by=updated_by,
            reason=reason,
        )
        return new_config

    def reset(self, updated_by: Optional[str] = None) -> ScoringConfig:
        self.repository.clear(updated_by=updated_by)
        invalidate(CACHE_KEY_SCORING_CONFIG, CACHE_KEY_BETA_SUMMARY)
        logger.info("scoring_config_reset", updated_by=updated_by)
        return default_config()
