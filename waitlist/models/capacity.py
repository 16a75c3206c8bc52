from datetime import date, datetime, timezone
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CapacityState(BaseModel):
    """
    Snapshot of the beta seat counter.

    Instances are immutable; the gate returns a new snapshot rather than
    mutating the one it was given.
    """

    model_config = ConfigDict(frozen=True)

    beta_cap: int = Field(..., ge=0, description="Maximum number of approved seats")
    approved_count: int = Field(..., ge=0, description="Applications currently approved")

    @model_validator(mode="after")
    def validate_within_cap(self):
        """approved_count can never exceed beta_cap."""
        if self.approved_count > self.beta_cap:
            raise ValueError("approved_count must be <= beta_cap")
        return self

    @property
    def spots_remaining(self) -> int:
        return self.beta_cap - self.approved_count

    @property
    def is_full(self) -> bool:
        return self.approved_count >= self.beta_cap


class CapacityUpdate(BaseModel):
    """Admin request to move the beta cap."""

    beta_cap: int = Field(..., ge=0, le=1_000_000, description="New maximum number of approved seats")


class WaitlistMetrics(BaseModel):
    total_size: int = 0
    pending_count: int = 0
    approved_count: int = 0
    at_capacity_count: int = 0
    avg_score: float = 0.0
    score_distribution: Dict[str, int] = Field(
        default_factory=lambda: {"high": 0, "medium": 0, "low": 0}
    )


class ApprovalVelocity(BaseModel):
    daily: int = 0
    weekly: int = 0
    monthly: int = 0


class ApprovalMetrics(BaseModel):
    """Approvals over recent windows, counted on approved_at."""

    approvals_today: int = 0
    approvals_this_week: int = 0
    approvals_this_month: int = 0
    avg_approvals_per_week: float = 0.0
    projected_capacity_date: Optional[date] = Field(
        default=None,
        description="Day the remaining seats run out at the four-week pace; null when the pace is zero",
    )
    approval_velocity: ApprovalVelocity = Field(default_factory=ApprovalVelocity)


class BetaSummary(BaseModel):
    """Public beta capacity summary."""

    cap: int
    approved: int
    remaining: int
    auto_approve_threshold: int
    waitlist_metrics: WaitlistMetrics
    approval_metrics: ApprovalMetrics = Field(default_factory=ApprovalMetrics)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    cached: Optional[bool] = None
