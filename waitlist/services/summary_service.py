"""
Beta Summary Service - Teed Waitlist
waitlist/services/summary_service.py

Builds the public capacity summary and caches it in Redis for a short TTL.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Mapping, Optional

import redis
import structlog

from waitlist.core.exceptions import RepositoryException
from waitlist.models.capacity import (
    ApprovalMetrics,
    ApprovalVelocity,
    BetaSummary,
    CapacityState,
    WaitlistMetrics,
)
from waitlist.models.enumerations import ApplicationStatus
from waitlist.repositories.application_repository import ApplicationRepository
from waitlist.repositories.capacity_repository import CapacityRepository
from waitlist.scoring.simulation import bucket_scores
from waitlist.services.cache import CACHE_KEY_BETA_SUMMARY, TTL_BETA_SUMMARY, get_cache
from waitlist.services.config_loader import ScoringConfigLoader

logger = structlog.get_logger(__name__)


def build_metrics(rows: List[Dict], threshold: int) -> WaitlistMetrics:
    """Aggregate (status, score) rows into waitlist metrics."""
    counts = {s: 0 for s in ApplicationStatus}
    scores = []
    for row in rows:
        counts[ApplicationStatus(row["status"])] += 1
        scores.append(int(row["score"]))

    return WaitlistMetrics(
        total_size=len(rows),
        pending_count=counts[ApplicationStatus.PENDING],
        approved_count=counts[ApplicationStatus.APPROVED],
        at_capacity_count=counts[ApplicationStatus.AT_CAPACITY],
        avg_score=round(sum(scores) / len(scores), 1) if scores else 0.0,
        score_distribution=bucket_scores(scores, threshold),
    )


def approval_windows(now: datetime) -> Dict[str, datetime]:
    """
    Lower bounds of the approval windows, in UTC.

    Weeks start on Sunday. four_weeks is a rolling 28 days and feeds the
    average weekly pace.
    """
    now = now.astimezone(timezone.utc)
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    # isoweekday: Monday=1 .. Sunday=7
    week = today - timedelta(days=today.isoweekday() % 7)
    return {
        "today": today,
        "week": week,
        "month": today.replace(day=1),
        "four_weeks": now - timedelta(days=28),
    }


def project_capacity_date(remaining: int, per_week: float, today: date) -> Optional[date]:
    """Day the remaining seats are used up at per_week approvals a week."""
    if per_week <= 0:
        return None
    return today + timedelta(days=int(remaining / per_week * 7))


def build_approval_metrics(
    counts: Mapping[str, int], state: CapacityState, today: date
) -> ApprovalMetrics:
    per_week = counts.get("four_weeks", 0) / 4
    velocity = ApprovalVelocity(
        daily=counts.get("today", 0),
        weekly=counts.get("week", 0),
        monthly=counts.get("month", 0),
    )
    return ApprovalMetrics(
        approvals_today=velocity.daily,
        approvals_this_week=velocity.weekly,
        approvals_this_month=velocity.monthly,
        avg_approvals_per_week=round(per_week, 1),
        projected_capacity_date=project_capacity_date(state.spots_remaining, per_week, today),
        approval_velocity=velocity,
    )


class BetaSummaryService:
    def __init__(
        self,
        application_repo: ApplicationRepository,
        capacity_repo: CapacityRepository,
        config_loader: ScoringConfigLoader,
    ):
        self.application_repo = application_repo
        self.capacity_repo = capacity_repo
        self.config_loader = config_loader

    def get_summary(self) -> BetaSummary:
        cache = get_cache()
        if cache:
            try:
                cached = cache.get(CACHE_KEY_BETA_SUMMARY, BetaSummary)
                if cached:
                    return cached.model_copy(update={"cached": True})
            except redis.RedisError as e:
                logger.warning("beta_summary_cache_read_failed", error=str(e))

        state = self.capacity_repo.get_state()
        config, _ = self.config_loader.get_config()
        threshold = config.auto_approve_threshold

        summary = BetaSummary(
            cap=state.beta_cap,
            approved=state.approved_count,
            remaining=state.spots_remaining,
            auto_approve_threshold=threshold,
            waitlist_metrics=build_metrics(self.application_repo.list_status_scores(), threshold),
            approval_metrics=self._approval_metrics(state),
            cached=False,
        )

        if cache:
            try:
                cache.set(CACHE_KEY_BETA_SUMMARY, summary, TTL_BETA_SUMMARY)
            except redis.RedisError as e:
                logger.warning("beta_summary_cache_write_failed", error=str(e))

        return summary

    def _approval_metrics(self, state: CapacityState) -> ApprovalMetrics:
        """Zeroed metrics when the counts cannot be read; the rest of the summary still renders."""
        now = datetime.now(timezone.utc)
        try:
            counts = self.application_repo.count_approvals_since(approval_windows(now))
        except RepositoryException as e:
            logger.warning("approval_metrics_failed", error=str(e))
            return ApprovalMetrics()
        return build_approval_metrics(counts, state, now.date())
