# tests/conftest.py

"""
Pytest Fixtures - Shared services, clients and data for all tests

The API runs against the in-memory repositories in tests/fakes.py, injected
through app.dependency_overrides, so no Snowflake or Redis is needed.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

from waitlist.config import settings
from waitlist.core import dependencies
from waitlist.core.security import limiter
from waitlist.main import app
from waitlist.services.approval_service import ApprovalService
from waitlist.services.config_loader import ScoringConfigLoader
from waitlist.services.submission_service import SubmissionService
from waitlist.services.summary_service import BetaSummaryService

from tests.fakes import (
    FakeApplicationRepository,
    FakeCapacityRepository,
    FakeScoringConfigRepository,
)

ADMIN_TOKEN = "test-admin-token"


# =============================================================================
# SHARED FIXTURES
# =============================================================================

@pytest.fixture(autouse=True)
def no_redis():
    """Run every test as if Redis were unreachable."""
    with patch("waitlist.services.cache.get_cache", return_value=None), \
         patch("waitlist.services.config_loader.get_cache", return_value=None), \
         patch("waitlist.services.summary_service.get_cache", return_value=None):
        yield


@pytest.fixture
def capacity_repo():
    return FakeCapacityRepository()


@pytest.fixture
def application_repo():
    return FakeApplicationRepository()


@pytest.fixture
def config_repo():
    return FakeScoringConfigRepository()


@pytest.fixture
def config_loader(config_repo):
    return ScoringConfigLoader(config_repo)


@pytest.fixture
def submission_service(application_repo, capacity_repo, config_loader):
    return SubmissionService(application_repo, capacity_repo, config_loader)


@pytest.fixture
def approval_service(application_repo, capacity_repo):
    return ApprovalService(application_repo, capacity_repo)


@pytest.fixture
def client(application_repo, capacity_repo, config_repo, config_loader, submission_service, approval_service):
    """TestClient wired to the in-memory repositories."""
    overrides = {
        dependencies.get_application_repository: lambda: application_repo,
        dependencies.get_capacity_repository: lambda: capacity_repo,
        dependencies.get_scoring_config_repository: lambda: config_repo,
        dependencies.get_config_loader: lambda: config_loader,
        dependencies.get_submission_service: lambda: submission_service,
        dependencies.get_approval_service: lambda: approval_service,
        dependencies.get_summary_service: lambda: BetaSummaryService(
            application_repo, capacity_repo, config_loader
        ),
    }
    app.dependency_overrides.update(overrides)
    limiter.enabled = False
    with TestClient(app) as test_client:
        yield test_client
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_API_TOKEN", SecretStr(ADMIN_TOKEN))
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


# =============================================================================
# SAMPLE ANSWERS
# =============================================================================

@pytest.fixture
def qualifying_answers():
    """Scores 80 with the default weights."""
    return {
        "role": "creator",
        "purchaseTimeline": "immediately",
        "communityInvolvement": "very_active",
        "referralSource": "tour_player",
        "equipmentInterests": ["drivers", "irons", "putters"],
        "brandAffinities": ["titleist", "taylormade", "ping"],
        "golfFrequency": "daily",
        "bagValue": "5000+",
    }


@pytest.fixture
def valid_submission(qualifying_answers):
    return {
        "email": "Jordan.Player@Example.com",
        "displayName": "Jordan",
        "termsAccepted": True,
        **qualifying_answers,
    }
