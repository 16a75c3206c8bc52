from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from waitlist.models.capacity import CapacityState
from waitlist.models.enumerations import ApplicationStatus, ConfigSource
from waitlist.scoring.simulation import ScoreChange, ScoreStatistics
from waitlist.scoring.weights import ScoringConfig


class ScoringConfigResponse(BaseModel):
    config: ScoringConfig
    source: ConfigSource
    statistics: Optional[ScoreStatistics] = None


class ScoringConfigUpdate(BaseModel):
    """
    Partial update to the scoring config.

    Tables given in `weights` replace the stored table whole; fields left
    out keep their current value.
    """

    weights: Dict[str, Any] = Field(default_factory=dict)
    auto_approve_threshold: Optional[int] = Field(default=None, ge=0, le=100)
    version: Optional[str] = Field(default=None, max_length=20)
    description: Optional[str] = Field(default=None, max_length=500)
    reason: Optional[str] = Field(default=None, max_length=500)

    def overrides(self) -> Dict[str, Any]:
        data = dict(self.weights)
        for key in ("auto_approve_threshold", "version", "description"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


class ScoreTestRequest(BaseModel):
    answers: Dict[str, Any] = Field(default_factory=dict)
    test_config: Optional[Dict[str, Any]] = None
    honeypot_triggered: bool = False


class ScoreTestResponse(BaseModel):
    score: int
    raw_total: int
    breakdown: Dict[str, int]
    config_version: str
    threshold: int
    would_auto_approve: bool
    projected_status: ApplicationStatus
    reason: str


class SimulationRequest(BaseModel):
    test_config: Dict[str, Any] = Field(default_factory=dict)
    test_threshold: Optional[int] = Field(default=None, ge=0, le=100)
    sample_size: int = Field(default=100, ge=1, le=1000)


class SimulationResponse(BaseModel):
    sample_size: int
    changes: List[ScoreChange]
    statistics: Dict[str, Any]


class CapacityResponse(BaseModel):
    beta_cap: int
    approved_count: int
    spots_remaining: int

    @classmethod
    def from_state(cls, state: CapacityState) -> "CapacityResponse":
        return cls(
            beta_cap=state.beta_cap,
            approved_count=state.approved_count,
            spots_remaining=state.spots_remaining,
        )


class BulkApproveRequest(BaseModel):
    application_ids: List[UUID] = Field(..., min_length=1, max_length=500)


class BulkApproveItem(BaseModel):
    application_id: UUID
    success: bool
    email: Optional[str] = None
    error: Optional[str] = None


class BulkApproveResponse(BaseModel):
    requested: int
    approved: int
    failed: int
    results: List[BulkApproveItem]
    spots_remaining: int
