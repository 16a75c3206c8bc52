"""
Repositories Package - Teed Waitlist
waitlist/repositories/__init__.py

Data access layer for Snowflake database operations.
"""

from waitlist.repositories.base import BaseRepository
from waitlist.repositories.application_repository import ApplicationRepository
from waitlist.repositories.capacity_repository import CapacityRepository
from waitlist.repositories.scoring_config_repository import ScoringConfigRepository

__all__ = [
    "BaseRepository",
    "ApplicationRepository",
    "CapacityRepository",
    "ScoringConfigRepository",
]
