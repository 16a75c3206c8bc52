"""
Dependencies - Teed Waitlist
waitlist/core/dependencies.py

FastAPI dependency injection for repositories and services.
"""

from functools import lru_cache

from waitlist.repositories.application_repository import ApplicationRepository
from waitlist.repositories.capacity_repository import CapacityRepository
from waitlist.repositories.scoring_config_repository import ScoringConfigRepository
from waitlist.services.approval_service import ApprovalService
from waitlist.services.config_loader import ScoringConfigLoader
from waitlist.services.submission_service import SubmissionService
from waitlist.services.summary_service import BetaSummaryService


@lru_cache()
def get_application_repository() -> ApplicationRepository:
    """Get cached ApplicationRepository instance."""
    return ApplicationRepository()


@lru_cache()
def get_capacity_repository() -> CapacityRepository:
    """Get cached CapacityRepository instance."""
    return CapacityRepository()


@lru_cache()
def get_scoring_config_repository() -> ScoringConfigRepository:
    """Get cached ScoringConfigRepository instance."""
    return ScoringConfigRepository()


@lru_cache()
def get_config_loader() -> ScoringConfigLoader:
    return ScoringConfigLoader(get_scoring_config_repository())


@lru_cache()
def get_submission_service() -> SubmissionService:
    return SubmissionService(
        get_application_repository(),
        get_capacity_repository(),
        get_config_loader(),
    )


@lru_cache()
def get_approval_service() -> ApprovalService:
    return ApprovalService(get_application_repository(), get_capacity_repository())


@lru_cache()
def get_summary_service() -> BetaSummaryService:
    return BetaSummaryService(
        get_application_repository(),
        get_capacity_repository(),
        get_config_loader(),
    )
