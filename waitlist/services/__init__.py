"""
Services module for the Teed waitlist.

Only the infrastructure clients are imported eagerly. The repositories import
waitlist.services.snowflake, so the workflow services (which import the
repositories) are exposed through lazy getters.
"""

from waitlist.services.cache import get_cache, invalidate
from waitlist.services.redis_cache import RedisCache
from waitlist.services.snowflake import get_snowflake_connection


def get_submission_service():
    """Lazy import to avoid circular dependency."""
    from waitlist.core.dependencies import get_submission_service as _get
    return _get()


def get_approval_service():
    """Lazy import to avoid circular dependency."""
    from waitlist.core.dependencies import get_approval_service as _get
    return _get()


def get_summary_service():
    """Lazy import to avoid circular dependency."""
    from waitlist.core.dependencies import get_summary_service as _get
    return _get()


__all__ = [
    # Infrastructure
    "get_cache",
    "invalidate",
    "RedisCache",
    "get_snowflake_connection",

    # Waitlist services
    "get_approval_service",
    "get_submission_service",
    "get_summary_service",
]
