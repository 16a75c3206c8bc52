# tests/test_score_calculator.py
"""
Score Calculator Tests
tests/test_score_calculator.py

Point tables, multi-select counting, aliases, capping and totality.
"""

import pytest

from waitlist.models.application import WaitlistAnswers
from waitlist.scoring.score_calculator import compute_score, score_application
from waitlist.scoring.utils import clamp, distinct_items, first_present, normalize_choice
from waitlist.scoring.weights import DEFAULT_SCORING_CONFIG, ScoringConfig


class TestComputeScore:

    def test_qualifying_answers_score_80(self, qualifying_answers):
        assert compute_score(qualifying_answers) == 80

    def test_casual_only_scores_5(self):
        assert compute_score({"role": "casual"}) == 5

    def test_empty_answers_score_zero(self):
        assert compute_score({}) == 0

    @pytest.mark.parametrize("answers", [None, "role=creator", 42, ["creator"]])
    def test_non_mapping_input_scores_zero(self, answers):
        assert compute_score(answers) == 0

    def test_unknown_choices_score_zero(self):
        answers = {"role": "astronaut", "handicapRange": "plus-3", "bagValue": "priceless"}
        assert compute_score(answers) == 0

    def test_unknown_keys_are_ignored(self):
        assert compute_score({"role": "coach", "favourite_course": "St Andrews"}) == 20

    def test_choices_are_case_and_whitespace_insensitive(self):
        assert compute_score({"role": "  Tour_Player "}) == 25

    def test_handicap_ranges(self):
        assert compute_score({"handicap_range": "0-5"}) == 15
        assert compute_score({"handicap_range": "6-10"}) == 12
        assert compute_score({"handicap_range": "11-20"}) == 8
        assert compute_score({"handicap_range": "21+"}) == 5

    def test_only_top_frequency_and_bag_tiers_earn_bonus(self):
        assert compute_score({"golf_frequency": "weekly", "bag_value": "3000-5000"}) == 6
        assert compute_score({"golf_frequency": "monthly", "bag_value": "under_1000"}) == 0


class TestMultiSelect:

    def test_each_distinct_equipment_item_counts(self):
        assert compute_score({"equipment_interests": ["drivers", "wedges"]}) == 6

    def test_duplicates_count_once(self):
        assert compute_score({"equipment_interests": ["Drivers", "drivers ", "DRIVERS"]}) == 3

    def test_bare_string_counts_as_no_items(self):
        assert compute_score({"brand_affinities": "titleist"}) == 0

    def test_blank_and_non_string_items_are_skipped(self):
        assert compute_score({"brand_affinities": ["ping", "", None, 7]}) == 2

    def test_legacy_singular_keys_are_accepted(self):
        answers = {"equipment_interest": ["putters"], "brand_affinity": ["ping", "cobra"]}
        assert compute_score(answers) == 3 + 4


class TestScoreApplication:

    def test_breakdown_sums_to_raw_total(self, qualifying_answers):
        result = score_application(qualifying_answers)
        assert sum(result.breakdown.values()) == result.raw_total == 80
        assert result.breakdown["role"] == 20
        assert result.breakdown["equipment_interests"] == 9
        assert result.breakdown["brand_affinities"] == 6
        assert result.config_version == DEFAULT_SCORING_CONFIG.version
        assert result.capped is False

    def test_score_is_capped_at_total_cap(self):
        answers = {
            "role": "tour_player",
            "handicap_range": "0-5",
            "purchase_timeline": "immediately",
            "community_involvement": "very_active",
            "referral_source": "tour_player",
            "equipment_interests": ["a", "b", "c", "d", "e"],
            "brand_affinities": ["f", "g", "h", "i", "j"],
            "golf_frequency": "daily",
            "bag_value": "5000+",
        }
        result = score_application(answers)
        assert result.raw_total == 110
        assert result.score == 100
        assert result.capped is True

    def test_accepts_answers_model(self, qualifying_answers):
        model = WaitlistAnswers.model_validate(qualifying_answers)
        assert score_application(model).score == 80

    def test_custom_config_changes_the_score(self):
        config = ScoringConfig(role={"casual": 40}, version="test")
        result = score_application({"role": "casual"}, config)
        assert result.score == 40
        assert result.config_version == "test"

    def test_same_input_same_output(self, qualifying_answers):
        first = score_application(qualifying_answers)
        second = score_application(dict(qualifying_answers))
        assert first == second


class TestUtils:

    def test_clamp(self):
        assert clamp(-4) == 0
        assert clamp(55) == 55
        assert clamp(140) == 100

    def test_normalize_choice(self):
        assert normalize_choice(" Daily ") == "daily"
        assert normalize_choice("   ") is None
        assert normalize_choice(3) is None

    def test_distinct_items(self):
        assert distinct_items(["A", "a", "b"]) == {"a", "b"}
        assert distinct_items("ab") == set()
        assert distinct_items(None) == set()

    def test_first_present_skips_none(self):
        assert first_present({"a": None, "b": 2}, ("a", "b")) == 2
        assert first_present({}, ("a",)) is None
