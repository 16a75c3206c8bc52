"""
Beta Router - Teed Waitlist
waitlist/routers/beta.py

Public beta capacity summary, cached in Redis for a short TTL.
"""

from fastapi import APIRouter, Depends

from waitlist.config import settings
from waitlist.core.dependencies import get_summary_service
from waitlist.models.capacity import BetaSummary
from waitlist.services.summary_service import BetaSummaryService

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/beta", tags=["Beta"])


@router.get(
    "/summary",
    response_model=BetaSummary,
    summary="Beta capacity summary",
    description="Seat cap, approved count, remaining seats and waitlist metrics. Cached for 30 seconds.",
)
def get_beta_summary(
    service: BetaSummaryService = Depends(get_summary_service),
) -> BetaSummary:
    return service.get_summary()
