"""
scoring/ : Waitlist scoring & capacity gate

Modules:
    utils.py             - Total helpers for reading survey answers
    weights.py           - Versioned ScoringConfig weight table
    score_calculator.py  - compute_score / score_application
    capacity_gate.py     - decide(): honeypot, threshold and seat-cap rules
    simulation.py        - Score statistics and config-change simulation
"""

from waitlist.scoring.capacity_gate import GateDecision, decide
from waitlist.scoring.score_calculator import ScoreResult, compute_score, score_application
from waitlist.scoring.weights import DEFAULT_SCORING_CONFIG, ScoringConfig

__all__ = [
    "DEFAULT_SCORING_CONFIG",
    "GateDecision",
    "ScoreResult",
    "ScoringConfig",
    "compute_score",
    "decide",
    "score_application",
]
