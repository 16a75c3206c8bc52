"""
Approval Service - Teed Waitlist
waitlist/services/approval_service.py

Manual (admin) approval of waiting applications. Seats are taken through the
same gate and compare-and-swap loop as submissions, with the score threshold
lifted, so manual approvals respect the cap exactly like automatic ones.
"""

from typing import List, Sequence
from uuid import UUID

import structlog

from waitlist.config import settings
from waitlist.core.exceptions import InsufficientCapacityException, RepositoryException
from waitlist.models.admin import BulkApproveItem, BulkApproveResponse
from waitlist.models.enumerations import ApplicationStatus
from waitlist.repositories.application_repository import ApplicationRepository
from waitlist.repositories.capacity_repository import CapacityRepository
from waitlist.services.cache import CACHE_KEY_BETA_SUMMARY, invalidate
from waitlist.services.submission_service import gate_with_seat_claim, release_claimed_seat

logger = structlog.get_logger(__name__)


class ApprovalService:
    def __init__(
        self,
        application_repo: ApplicationRepository,
        capacity_repo: CapacityRepository,
    ):
        self.application_repo = application_repo
        self.capacity_repo = capacity_repo

    def bulk_approve(self, application_ids: Sequence[UUID]) -> BulkApproveResponse:
        """
        Approve each listed application that is not approved yet.

        The batch is refused up front when it asks for more seats than remain.
        Individual failures (unknown ID, already approved, lost the last seat)
        are reported per item and do not stop the rest of the batch.

        Raises:
            InsufficientCapacityException: len(ids) > spots remaining
        """
        ids = list(dict.fromkeys(application_ids))
        state = self.capacity_repo.get_state()
        if len(ids) > state.spots_remaining:
            raise InsufficientCapacityException(state.spots_remaining, len(ids))

        found = {app.id: app for app in self.application_repo.get_by_ids(ids)}
        results: List[BulkApproveItem] = []

        for app_id in ids:
            app = found.get(app_id)
            if app is None:
                results.append(BulkApproveItem(application_id=app_id, success=False, error="not found"))
                continue
            if app.status == ApplicationStatus.APPROVED:
                results.append(
                    BulkApproveItem(application_id=app_id, email=app.email, success=False, error="already approved")
                )
                continue

            decision = gate_with_seat_claim(
                self.capacity_repo,
                app.score,
                honeypot_triggered=False,
                threshold=0,
                max_attempts=settings.SEAT_CLAIM_MAX_ATTEMPTS,
            )
            if not decision.claims_seat:
                results.append(
                    BulkApproveItem(application_id=app_id, email=app.email, success=False, error=decision.reason)
                )
                continue

            try:
                transitioned = self.application_repo.mark_approved(app_id)
            except RepositoryException as e:
                release_claimed_seat(self.capacity_repo, logger.bind(application_id=str(app_id)))
                logger.error("bulk_approve_item_failed", application_id=str(app_id), error=str(e))
                results.append(BulkApproveItem(application_id=app_id, email=app.email, success=False, error=str(e)))
                continue

            if not transitioned:
                release_claimed_seat(self.capacity_repo, logger.bind(application_id=str(app_id)))
                results.append(
                    BulkApproveItem(application_id=app_id, email=app.email, success=False, error="already approved")
                )
                continue

            results.append(BulkApproveItem(application_id=app_id, email=app.email, success=True))

        approved = sum(1 for r in results if r.success)
        if approved:
            invalidate(CACHE_KEY_BETA_SUMMARY)

        remaining = self.capacity_repo.get_state().spots_remaining
        logger.info(
            "bulk_approve_completed",
            requested=len(ids),
            approved=approved,
            failed=len(ids) - approved,
            spots_remaining=remaining,
        )
        return BulkApproveResponse(
            requested=len(ids),
            approved=approved,
            failed=len(ids) - approved,
            results=results,
            spots_remaining=remaining,
        )
