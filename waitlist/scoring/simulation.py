"""
Score statistics and what-if simulation for weight changes.

Used by the admin scoring-config endpoints and the beta summary. Everything
here works on plain lists so it can be exercised without a database.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from waitlist.scoring.score_calculator import score_application
from waitlist.scoring.weights import ScoringConfig

MEDIUM_SCORE_FLOOR = 50
CHANGES_PREVIEW_LIMIT = 10


@dataclass
class ScoreStatistics:
    pending_applications: int
    average_score: float
    score_distribution: Dict[int, int]
    would_auto_approve: int


@dataclass
class ScoreChange:
    email: str
    current_score: int
    new_score: int
    score_diff: int
    current_auto_approve: bool
    new_auto_approve: bool


@dataclass
class SimulationResult:
    sample_size: int
    changes: List[ScoreChange] = field(default_factory=list)
    statistics: Dict[str, Any] = field(default_factory=dict)


def summarize_scores(scores: Sequence[int], threshold: int) -> ScoreStatistics:
    """Average (1 dp), per-score histogram and auto-approval count."""
    if not scores:
        return ScoreStatistics(0, 0.0, {}, 0)
    average = round(sum(scores) / len(scores), 1)
    distribution = dict(sorted(Counter(scores).items()))
    eligible = sum(1 for s in scores if s >= threshold)
    return ScoreStatistics(len(scores), average, distribution, eligible)


def bucket_scores(scores: Iterable[int], threshold: int) -> Dict[str, int]:
    """high >= threshold, medium >= 50, low below that."""
    buckets = {"high": 0, "medium": 0, "low": 0}
    for s in scores:
        if s >= threshold:
            buckets["high"] += 1
        elif s >= MEDIUM_SCORE_FLOOR:
            buckets["medium"] += 1
        else:
            buckets["low"] += 1
    return buckets


def simulate_config_change(
    applications: Sequence[Mapping[str, Any]],
    current_config: ScoringConfig,
    test_config: ScoringConfig,
    test_threshold: Optional[int] = None,
) -> SimulationResult:
    """
    Rescore applications under a candidate config.

    Args:
        applications: Dicts with at least "email" and "answers".
        current_config: Config in force today.
        test_config: Candidate config.
        test_threshold: Overrides test_config.auto_approve_threshold.

    Returns:
        SimulationResult with the first CHANGES_PREVIEW_LIMIT changes and
        aggregate statistics over the whole sample.
    """
    threshold = test_threshold if test_threshold is not None else test_config.auto_approve_threshold
    changes: List[ScoreChange] = []

    for app in applications:
        answers = app.get("answers") or {}
        current = score_application(answers, current_config).score
        new = score_application(answers, test_config).score
        changes.append(
            ScoreChange(
                email=app.get("email", ""),
                current_score=current,
                new_score=new,
                score_diff=new - current,
                current_auto_approve=current >= current_config.auto_approve_threshold,
                new_auto_approve=new >= threshold,
            )
        )

    total = len(changes)
    statistics = {
        "total_applications": total,
        "average_score_change": round(sum(c.score_diff for c in changes) / total, 2) if total else 0.0,
        "current_auto_approve_count": sum(1 for c in changes if c.current_auto_approve),
        "new_auto_approve_count": sum(1 for c in changes if c.new_auto_approve),
        "gained_auto_approval": sum(1 for c in changes if c.new_auto_approve and not c.current_auto_approve),
        "lost_auto_approval": sum(1 for c in changes if c.current_auto_approve and not c.new_auto_approve),
        "threshold": threshold,
    }

    return SimulationResult(
        sample_size=total,
        changes=changes[:CHANGES_PREVIEW_LIMIT],
        statistics=statistics,
    )
