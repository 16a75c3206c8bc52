# waitlist/scoring/score_calculator.py
"""
Application Score Calculator
-----------------------------
Scores a waitlist application from its categorical survey answers.

Formula:
    raw = role + handicap_range + purchase_timeline
        + community_involvement + referral_source
        + |equipment_interests| × equipment_interest_weight
        + |brand_affinities| × brand_affinity_weight
        + golf_frequency bonus + bag_value bonus
    score = clamp(raw, 0, total_cap)

The function is total: missing keys, unknown choices, wrong types and
non-mapping input all contribute zero. The same answers and config always
produce the same score.
"""
import structlog
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel

from waitlist.scoring.utils import clamp, distinct_items, first_present, normalize_choice
from waitlist.scoring.weights import DEFAULT_SCORING_CONFIG, ScoringConfig

logger = structlog.get_logger(__name__)

# Accepted spellings per field, first match wins
FIELD_KEYS: Dict[str, tuple] = {
    "role": ("role",),
    "handicap_range": ("handicap_range", "handicapRange"),
    "equipment_interests": ("equipment_interests", "equipmentInterests", "equipment_interest"),
    "brand_affinities": ("brand_affinities", "brandAffinities", "brand_affinity"),
    "purchase_timeline": ("purchase_timeline", "purchaseTimeline"),
    "community_involvement": ("community_involvement", "communityInvolvement"),
    "referral_source": ("referral_source", "referralSource"),
    "golf_frequency": ("golf_frequency", "golfFrequency"),
    "bag_value": ("bag_value", "bagValue"),
}

# field name -> ScoringConfig lookup table attribute
_LOOKUP_FIELDS: Dict[str, str] = {
    "role": "role",
    "handicap_range": "handicap_range",
    "purchase_timeline": "purchase_timeline",
    "community_involvement": "community_involvement",
    "referral_source": "referral_source",
    "golf_frequency": "golf_frequency_bonus",
    "bag_value": "bag_value_bonus",
}


@dataclass
class ScoreResult:
    """Output of score_application()."""
    score: int                      # Final score in [0, total_cap]
    raw_total: int                  # Sum before the cap
    breakdown: Dict[str, int] = field(default_factory=dict)
    config_version: str = ""

    @property
    def capped(self) -> bool:
        return self.raw_total > self.score


def _as_mapping(answers: Any) -> Mapping[str, Any]:
    if isinstance(answers, BaseModel):
        return answers.model_dump()
    if isinstance(answers, Mapping):
        return answers
    return {}


def score_application(
    answers: Any,
    config: Optional[ScoringConfig] = None,
) -> ScoreResult:
    """
    Score survey answers against a weight table.

    Args:
        answers: Mapping (or WaitlistAnswers model) of survey fields. Unknown
                 keys are ignored.
        config: Weight table; defaults to DEFAULT_SCORING_CONFIG.

    Returns:
        ScoreResult with the capped score and the per-field breakdown.
    """
    config = config or DEFAULT_SCORING_CONFIG
    data = _as_mapping(answers)
    breakdown: Dict[str, int] = {}

    for field_name, table_name in _LOOKUP_FIELDS.items():
        choice = normalize_choice(first_present(data, FIELD_KEYS[field_name]))
        table = getattr(config, table_name)
        breakdown[field_name] = table.get(choice, 0) if choice else 0

    equipment = distinct_items(first_present(data, FIELD_KEYS["equipment_interests"]))
    brands = distinct_items(first_present(data, FIELD_KEYS["brand_affinities"]))
    breakdown["equipment_interests"] = len(equipment) * config.equipment_interest_weight
    breakdown["brand_affinities"] = len(brands) * config.brand_affinity_weight

    raw_total = sum(breakdown.values())
    score = clamp(raw_total, 0, config.total_cap)

    logger.debug(
        "application_scored",
        config_version=config.version,
        breakdown=breakdown,
        raw_total=raw_total,
        score=score,
    )

    return ScoreResult(
        score=score,
        raw_total=raw_total,
        breakdown=breakdown,
        config_version=config.version,
    )


def compute_score(answers: Any, config: Optional[ScoringConfig] = None) -> int:
    """Capped integer score for answers. Never raises."""
    return score_application(answers, config).score
