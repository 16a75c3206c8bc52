"""
Admin Router - Teed Waitlist
waitlist/routers/admin.py

Scoring-config management, capacity changes and bulk approval.
Every route requires the admin Bearer token.
"""

from typing import Any, Dict

import structlog
from fastapi import APIRouter, Depends, Query, status
from pydantic import ValidationError

from waitlist.config import settings
from waitlist.core.dependencies import (
    get_application_repository,
    get_approval_service,
    get_capacity_repository,
    get_config_loader,
)
from waitlist.core.security import require_admin
from waitlist.models.admin import (
    BulkApproveRequest,
    BulkApproveResponse,
    CapacityResponse,
    ScoreTestRequest,
    ScoreTestResponse,
    ScoringConfigResponse,
    ScoringConfigUpdate,
    SimulationRequest,
    SimulationResponse,
)
from waitlist.models.application import ErrorResponse
from waitlist.models.capacity import CapacityUpdate
from waitlist.models.enumerations import ApplicationStatus, ConfigSource
from waitlist.repositories.application_repository import ApplicationRepository
from waitlist.repositories.capacity_repository import CapacityRepository
from waitlist.routers.waitlist import raise_error
from waitlist.scoring.capacity_gate import decide
from waitlist.scoring.score_calculator import score_application
from waitlist.scoring.simulation import simulate_config_change, summarize_scores
from waitlist.scoring.weights import SCORED_FIELDS, ScoringConfig
from waitlist.services.approval_service import ApprovalService
from waitlist.services.cache import CACHE_KEY_BETA_SUMMARY, invalidate
from waitlist.services.config_loader import ScoringConfigLoader

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix=f"{settings.API_V1_PREFIX}/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
    responses={401: {"model": ErrorResponse, "description": "Missing or invalid admin token"}},
)



#  Helpers


def apply_candidate(config: ScoringConfig, overrides: Dict[str, Any]) -> ScoringConfig:
    """Merge candidate overrides, turning validation failures into a 422."""
    try:
        return config.with_overrides(overrides)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(part) for part in err.get("loc", []))
        raise_error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "INVALID_SCORING_CONFIG",
            f"{field}: {err.get('msg')}" if field else err.get("msg", "Invalid scoring config"),
        )



#  Scoring Config


@router.get(
    "/scoring-config",
    response_model=ScoringConfigResponse,
    summary="Current scoring config",
    description="Active config and where it was loaded from. Optionally includes statistics over pending applications.",
)
def get_scoring_config(
    include_stats: bool = Query(False, description="Include pending-score statistics"),
    loader: ScoringConfigLoader = Depends(get_config_loader),
    application_repo: ApplicationRepository = Depends(get_application_repository),
) -> ScoringConfigResponse:
    config, source = loader.get_config()
    statistics = None
    if include_stats:
        scores = [
            row["score"]
            for row in application_repo.list_status_scores()
            if row["status"] == ApplicationStatus.PENDING.value
        ]
        statistics = summarize_scores(scores, config.auto_approve_threshold)
    return ScoringConfigResponse(config=config, source=source, statistics=statistics)


@router.put(
    "/scoring-config",
    response_model=ScoringConfigResponse,
    summary="Update scoring config",
    description="Partial update: tables given replace the stored ones, the rest is kept. Recorded in config history.",
)
def update_scoring_config(
    update: ScoringConfigUpdate,
    actor: str = Depends(require_admin),
    loader: ScoringConfigLoader = Depends(get_config_loader),
) -> ScoringConfigResponse:
    overrides = update.overrides()
    if not overrides:
        raise_error(status.HTTP_400_BAD_REQUEST, "NO_CHANGES", "No scoring config changes supplied")

    unknown = sorted(set(update.weights) - set(SCORED_FIELDS))
    if unknown:
        raise_error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "INVALID_SCORING_CONFIG",
            f"Unknown weight tables: {', '.join(unknown)}",
            {"allowed": list(SCORED_FIELDS)},
        )

    current, _ = loader.get_config(force_refresh=True)
    apply_candidate(current, overrides)

    config = loader.update(overrides, updated_by=actor, reason=update.reason)
    return ScoringConfigResponse(config=config, source=ConfigSource.DATABASE)


@router.post(
    "/scoring-config/test",
    response_model=ScoreTestResponse,
    summary="Score sample answers",
    description="Scores the given answers with the active or a candidate config and reports the gate decision it would produce.",
)
def test_scoring_config(
    request: ScoreTestRequest,
    loader: ScoringConfigLoader = Depends(get_config_loader),
    capacity_repo: CapacityRepository = Depends(get_capacity_repository),
) -> ScoreTestResponse:
    config, _ = loader.get_config()
    if request.test_config:
        config = apply_candidate(config, request.test_config)

    result = score_application(request.answers, config)
    decision = decide(
        result.score,
        capacity_repo.get_state(),
        request.honeypot_triggered,
        config.auto_approve_threshold,
    )
    return ScoreTestResponse(
        score=result.score,
        raw_total=result.raw_total,
        breakdown=result.breakdown,
        config_version=result.config_version,
        threshold=config.auto_approve_threshold,
        would_auto_approve=result.score >= config.auto_approve_threshold,
        projected_status=decision.status,
        reason=decision.reason,
    )


@router.post(
    "/scoring-config/simulate",
    response_model=SimulationResponse,
    summary="Simulate a config change",
    description="Rescores up to sample_size pending applications with a candidate config and compares the outcome.",
)
def simulate_scoring_config(
    request: SimulationRequest,
    loader: ScoringConfigLoader = Depends(get_config_loader),
    application_repo: ApplicationRepository = Depends(get_application_repository),
) -> SimulationResponse:
    current, _ = loader.get_config()
    candidate = apply_candidate(current, request.test_config)

    pending = application_repo.list_by_status(ApplicationStatus.PENDING, limit=request.sample_size)
    result = simulate_config_change(
        [{"email": app.email, "answers": app.answers} for app in pending],
        current,
        candidate,
        request.test_threshold,
    )
    logger.info(
        "scoring_config_simulated",
        sample_size=result.sample_size,
        gained=result.statistics["gained_auto_approval"],
        lost=result.statistics["lost_auto_approval"],
    )
    return SimulationResponse(
        sample_size=result.sample_size,
        changes=result.changes,
        statistics=result.statistics,
    )


@router.post(
    "/scoring-config/reset",
    response_model=ScoringConfigResponse,
    summary="Reset scoring config to defaults",
)
def reset_scoring_config(
    actor: str = Depends(require_admin),
    loader: ScoringConfigLoader = Depends(get_config_loader),
) -> ScoringConfigResponse:
    config = loader.reset(updated_by=actor)
    return ScoringConfigResponse(config=config, source=ConfigSource.DEFAULT)



#  Capacity & Approval


@router.put(
    "/capacity",
    response_model=CapacityResponse,
    responses={409: {"model": ErrorResponse, "description": "Cap below approved count"}},
    summary="Change the beta cap",
)
def update_capacity(
    update: CapacityUpdate,
    capacity_repo: CapacityRepository = Depends(get_capacity_repository),
) -> CapacityResponse:
    state = capacity_repo.set_cap(update.beta_cap)
    invalidate(CACHE_KEY_BETA_SUMMARY)
    logger.info("beta_cap_updated", beta_cap=state.beta_cap, approved_count=state.approved_count)
    return CapacityResponse.from_state(state)


@router.post(
    "/waitlist/bulk-approve",
    response_model=BulkApproveResponse,
    responses={409: {"model": ErrorResponse, "description": "Not enough seats for the batch"}},
    summary="Approve applications by id",
    description="Approves each listed application regardless of score, claiming one seat per approval.",
)
def bulk_approve(
    request: BulkApproveRequest,
    service: ApprovalService = Depends(get_approval_service),
) -> BulkApproveResponse:
    return service.bulk_approve(request.application_ids)
