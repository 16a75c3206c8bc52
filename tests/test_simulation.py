# tests/test_simulation.py

"""
Simulation Tests - score statistics, buckets and config-change simulation
"""

from waitlist.scoring.simulation import (
    CHANGES_PREVIEW_LIMIT,
    bucket_scores,
    simulate_config_change,
    summarize_scores,
)
from waitlist.scoring.weights import DEFAULT_SCORING_CONFIG


class TestSummarizeScores:

    def test_empty(self):
        stats = summarize_scores([], 75)
        assert stats.pending_applications == 0
        assert stats.average_score == 0.0
        assert stats.score_distribution == {}

    def test_statistics(self):
        stats = summarize_scores([80, 40, 40, 75], 75)
        assert stats.pending_applications == 4
        assert stats.average_score == 58.8
        assert stats.score_distribution == {40: 2, 75: 1, 80: 1}
        assert stats.would_auto_approve == 2


class TestBucketScores:

    def test_boundaries(self):
        assert bucket_scores([75, 74, 50, 49, 0, 100], 75) == {"high": 2, "medium": 2, "low": 2}

    def test_threshold_below_medium_floor(self):
        assert bucket_scores([40, 30, 10], 30) == {"high": 2, "medium": 0, "low": 1}


class TestSimulateConfigChange:

    def test_gains_and_losses(self):
        applications = [
            {"email": "casual@example.com", "answers": {"role": "casual"}},
            {"email": "star@example.com", "answers": {
                "role": "tour_player", "handicap_range": "0-5", "purchase_timeline": "immediately",
                "community_involvement": "very_active", "referral_source": "tour_player",
            }},
        ]
        candidate = DEFAULT_SCORING_CONFIG.with_overrides({"role": {"casual": 80, "tour_player": 0}})

        result = simulate_config_change(applications, DEFAULT_SCORING_CONFIG, candidate)

        assert result.sample_size == 2
        assert result.statistics["gained_auto_approval"] == 1
        assert result.statistics["lost_auto_approval"] == 1
        assert result.statistics["current_auto_approve_count"] == 1
        assert result.statistics["new_auto_approve_count"] == 1
        by_email = {c.email: c for c in result.changes}
        assert by_email["casual@example.com"].new_score == 80
        assert by_email["star@example.com"].current_score == 75
        assert by_email["star@example.com"].new_score == 50

    def test_threshold_override(self):
        applications = [{"email": "a@example.com", "answers": {"role": "casual"}}]
        result = simulate_config_change(applications, DEFAULT_SCORING_CONFIG, DEFAULT_SCORING_CONFIG, test_threshold=5)
        assert result.statistics["threshold"] == 5
        assert result.statistics["gained_auto_approval"] == 1
        assert result.statistics["average_score_change"] == 0.0

    def test_changes_preview_is_limited(self):
        applications = [{"email": f"u{i}@example.com", "answers": {}} for i in range(25)]
        result = simulate_config_change(applications, DEFAULT_SCORING_CONFIG, DEFAULT_SCORING_CONFIG)
        assert result.sample_size == 25
        assert len(result.changes) == CHANGES_PREVIEW_LIMIT

    def test_empty_sample(self):
        result = simulate_config_change([], DEFAULT_SCORING_CONFIG, DEFAULT_SCORING_CONFIG)
        assert result.sample_size == 0
        assert result.changes == []
        assert result.statistics["average_score_change"] == 0.0
