"""
Scoring Weights
waitlist/scoring/weights.py

Versioned weight table for waitlist scoring. One configuration object is
shared by submission-time scoring, the admin test/simulate endpoints and the
beta summary, so the tables cannot drift apart.

Shape:
    score = Σ lookup(field)                       (categorical fields)
          + |equipment_interests| × per-item weight
          + |brand_affinities|    × per-item weight
          + golf_frequency bonus + bag_value bonus
    clamped to [0, total_cap]

Every change to a point value gets a new `version` (with_overrides bumps the
patch number when the caller gives none). The version is stored with each
application so historical scores stay explainable.
"""

from datetime import datetime, timezone
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from waitlist.models.enumerations import (
    BagValue,
    CommunityInvolvement,
    GolfFrequency,
    HandicapRange,
    PurchaseTimeline,
    ReferralSource,
    Role,
)

DEFAULT_CONFIG_VERSION = "2.0.0"
DEFAULT_AUTO_APPROVE_THRESHOLD = 75

# Fields that change a score. Editing any of them needs a new version.
SCORED_FIELDS = (
    "role",
    "handicap_range",
    "purchase_timeline",
    "community_involvement",
    "referral_source",
    "equipment_interest_weight",
    "brand_affinity_weight",
    "golf_frequency_bonus",
    "bag_value_bonus",
    "total_cap",
)


def _lower_keys(table: Dict[str, int]) -> Dict[str, int]:
    return {k.strip().lower(): v for k, v in table.items()}


def bump_version(version: str) -> str:
    """
    Next patch version: "2.0.0" -> "2.0.1", "2.0.0-beta" -> "2.0.0-beta.1".
    """
    head, _, last = version.rpartition(".")
    if last.isdigit():
        return f"{head}.{int(last) + 1}" if head else str(int(last) + 1)
    return f"{version}.1"


class ScoringConfig(BaseModel):
    """Point tables and auto-approval threshold."""

    model_config = ConfigDict(extra="forbid")

    version: str = DEFAULT_CONFIG_VERSION

    role: Dict[str, int] = Field(default_factory=lambda: {
        Role.TOUR_PLAYER.value: 25,
        Role.CREATOR.value: 20,
        Role.CONTENT_CREATOR.value: 20,
        Role.COACH.value: 20,
        Role.FITTER.value: 20,
        Role.INDUSTRY.value: 15,
        Role.ENTHUSIAST.value: 10,
        Role.CASUAL.value: 5,
    })
    handicap_range: Dict[str, int] = Field(default_factory=lambda: {
        HandicapRange.SCRATCH_TO_5.value: 15,
        HandicapRange.SIX_TO_10.value: 12,
        HandicapRange.ELEVEN_TO_20.value: 8,
        HandicapRange.TWENTY_ONE_PLUS.value: 5,
    })
    purchase_timeline: Dict[str, int] = Field(default_factory=lambda: {
        PurchaseTimeline.IMMEDIATELY.value: 10,
        PurchaseTimeline.THREE_MONTHS.value: 7,
        PurchaseTimeline.SIX_MONTHS.value: 5,
        PurchaseTimeline.BROWSING.value: 2,
    })
    community_involvement: Dict[str, int] = Field(default_factory=lambda: {
        CommunityInvolvement.VERY_ACTIVE.value: 15,
        CommunityInvolvement.SOMEWHAT_ACTIVE.value: 10,
        CommunityInvolvement.OCCASIONAL.value: 5,
        CommunityInvolvement.LURKER.value: 2,
    })
    referral_source: Dict[str, int] = Field(default_factory=lambda: {
        ReferralSource.TOUR_PLAYER.value: 10,
        ReferralSource.EXISTING_MEMBER.value: 8,
        ReferralSource.INDUSTRY_CONTACT.value: 7,
        ReferralSource.SOCIAL_MEDIA.value: 3,
        ReferralSource.SEARCH.value: 2,
        ReferralSource.OTHER.value: 1,
    })

    equipment_interest_weight: int = Field(default=3, ge=0, le=100)
    brand_affinity_weight: int = Field(default=2, ge=0, le=100)

    # Secondary modifiers: only the listed tiers earn a bonus
    golf_frequency_bonus: Dict[str, int] = Field(default_factory=lambda: {
        GolfFrequency.DAILY.value: 5,
        GolfFrequency.WEEKLY.value: 3,
    })
    bag_value_bonus: Dict[str, int] = Field(default_factory=lambda: {
        BagValue.OVER_5000.value: 5,
        BagValue.FROM_3000_TO_5000.value: 3,
    })

    total_cap: int = Field(default=100, ge=1, le=100)
    auto_approve_threshold: int = Field(default=DEFAULT_AUTO_APPROVE_THRESHOLD, ge=0, le=100)

    description: Optional[str] = "Default scoring configuration"
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_by: Optional[str] = None

    @field_validator(
        "role",
        "handicap_range",
        "purchase_timeline",
        "community_involvement",
        "referral_source",
        "golf_frequency_bonus",
        "bag_value_bonus",
    )
    @classmethod
    def validate_points(cls, table: Dict[str, int]) -> Dict[str, int]:
        """Point values are non-negative; keys are matched case-insensitively."""
        for key, points in table.items():
            if points < 0 or points > 100:
                raise ValueError(f"points for '{key}' must be in [0, 100], got {points}")
        return _lower_keys(table)

    def with_overrides(self, overrides: dict, updated_by: Optional[str] = None) -> "ScoringConfig":
        """
        New config with top-level fields replaced; tables are replaced whole.

        Unknown field names raise ValidationError. When a scored field
        changes and no version is given, the patch version is bumped.
        """
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        data["updated_at"] = datetime.now(timezone.utc)
        if updated_by:
            data["updated_by"] = updated_by
        candidate = ScoringConfig.model_validate(data)

        if overrides.get("version") is None and self.scores_differ(candidate):
            candidate = candidate.model_copy(update={"version": bump_version(self.version)})
        return candidate

    def scores_differ(self, other: "ScoringConfig") -> bool:
        return any(getattr(self, name) != getattr(other, name) for name in SCORED_FIELDS)


DEFAULT_SCORING_CONFIG = ScoringConfig()
