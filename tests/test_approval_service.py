# tests/test_approval_service.py

"""
Approval Service Tests - manual approvals share the seat-claim path
"""

import pytest

from waitlist.core.exceptions import InsufficientCapacityException, RepositoryException
from waitlist.models.enumerations import ApplicationStatus


class TestBulkApprove:

    def test_approves_regardless_of_score(self, approval_service, application_repo, capacity_repo):
        app = application_repo.add("zero@example.com", 0)

        result = approval_service.bulk_approve([app.id])

        assert result.approved == 1
        assert capacity_repo.approved_count == 1
        assert application_repo.get_by_email("zero@example.com").status == ApplicationStatus.APPROVED

    def test_duplicate_ids_count_once(self, approval_service, application_repo, capacity_repo):
        app = application_repo.add("dup@example.com", 50)

        result = approval_service.bulk_approve([app.id, app.id])

        assert result.requested == 1
        assert capacity_repo.approved_count == 1

    def test_insufficient_capacity_rejects_whole_batch(self, approval_service, application_repo, capacity_repo):
        capacity_repo.beta_cap = 1
        ids = [application_repo.add(f"b{i}@example.com", 50).id for i in range(3)]

        with pytest.raises(InsufficientCapacityException) as exc_info:
            approval_service.bulk_approve(ids)

        assert exc_info.value.remaining == 1
        assert exc_info.value.requested == 3
        assert capacity_repo.approved_count == 0

    def test_failed_status_update_releases_seat(self, approval_service, application_repo, capacity_repo):
        app = application_repo.add("flaky@example.com", 50)

        def broken_mark(application_id, approved_at=None):
            raise RepositoryException("update failed")

        application_repo.mark_approved = broken_mark
        result = approval_service.bulk_approve([app.id])

        assert result.approved == 0
        assert result.results[0].error == "update failed"
        assert capacity_repo.approved_count == 0

    def test_seat_taken_mid_batch_reports_at_capacity(self, approval_service, application_repo, capacity_repo):
        capacity_repo.beta_cap = 2
        first = application_repo.add("first@example.com", 50)
        second = application_repo.add("second@example.com", 50)
        original_mark = application_repo.mark_approved

        def mark_then_fill(application_id, approved_at=None):
            # a concurrent submission takes the last seat
            capacity_repo.approved_count = capacity_repo.beta_cap
            return original_mark(application_id, approved_at)

        application_repo.mark_approved = mark_then_fill
        result = approval_service.bulk_approve([first.id, second.id])

        assert result.approved == 1
        assert result.results[1].error == "at_capacity"
        assert capacity_repo.approved_count == 2
