# tests/test_models.py

"""
Model Tests - submission parsing, capacity snapshot and scoring config validation
"""

import pytest
from pydantic import ValidationError

from waitlist.models.admin import ScoringConfigUpdate
from waitlist.models.application import WaitlistAnswers, WaitlistSubmission
from waitlist.models.capacity import CapacityState, CapacityUpdate
from waitlist.scoring.weights import DEFAULT_SCORING_CONFIG, ScoringConfig, bump_version



# SUBMISSION MODEL TESTS


class TestWaitlistSubmission:

    def test_camel_case_aliases(self, valid_submission):
        submission = WaitlistSubmission.model_validate(valid_submission)
        assert submission.display_name == "Jordan"
        assert submission.purchase_timeline == "immediately"
        assert submission.equipment_interests == ["drivers", "irons", "putters"]

    def test_legacy_singular_aliases(self):
        submission = WaitlistSubmission.model_validate({
            "email": "legacy@example.com",
            "display_name": "Legacy",
            "terms_accepted": True,
            "equipment_interest": ["wedges"],
            "brand_affinity": ["mizuno"],
        })
        assert submission.equipment_interests == ["wedges"]
        assert submission.brand_affinities == ["mizuno"]

    def test_terms_must_be_accepted(self, valid_submission):
        with pytest.raises(ValidationError) as exc_info:
            WaitlistSubmission.model_validate({**valid_submission, "termsAccepted": False})
        assert "You must accept the terms" in str(exc_info.value)

    def test_invalid_email_rejected(self, valid_submission):
        with pytest.raises(ValidationError):
            WaitlistSubmission.model_validate({**valid_submission, "email": "nope"})

    def test_empty_display_name_rejected(self, valid_submission):
        with pytest.raises(ValidationError):
            WaitlistSubmission.model_validate({**valid_submission, "displayName": ""})

    @pytest.mark.parametrize(
        "phone, triggered",
        [(None, False), ("", False), ("   ", False), ("555-0100", True)],
    )
    def test_honeypot(self, valid_submission, phone, triggered):
        submission = WaitlistSubmission.model_validate({**valid_submission, "contactPhone": phone})
        assert submission.honeypot_triggered is triggered

    def test_answers_excludes_identity_fields(self, valid_submission):
        answers = WaitlistSubmission.model_validate(valid_submission).answers()
        assert isinstance(answers, WaitlistAnswers)
        dumped = answers.model_dump()
        assert "email" not in dumped
        assert "contact_phone" not in dumped
        assert dumped["role"] == "creator"

    def test_unknown_fields_ignored(self, valid_submission):
        submission = WaitlistSubmission.model_validate({**valid_submission, "favouriteClub": "7-iron"})
        assert not hasattr(submission, "favouriteClub")

    def test_malformed_answers_become_empty(self, valid_submission):
        submission = WaitlistSubmission.model_validate({
            **valid_submission,
            "equipmentInterests": "drivers",
            "brandAffinities": ["titleist", 7, None],
            "golfFrequency": 5,
            "role": {"name": "creator"},
        })
        assert submission.equipment_interests == []
        assert submission.brand_affinities == ["titleist"]
        assert submission.golf_frequency is None
        assert submission.role is None

    def test_too_many_items_still_rejected(self, valid_submission):
        with pytest.raises(ValidationError):
            WaitlistSubmission.model_validate(
                {**valid_submission, "equipmentInterests": [f"club{i}" for i in range(51)]}
            )



# CAPACITY MODEL TESTS


class TestCapacityState:

    def test_spots_remaining(self):
        state = CapacityState(beta_cap=150, approved_count=10)
        assert state.spots_remaining == 140
        assert state.is_full is False

    def test_full(self):
        assert CapacityState(beta_cap=5, approved_count=5).is_full

    def test_approved_cannot_exceed_cap(self):
        with pytest.raises(ValidationError):
            CapacityState(beta_cap=5, approved_count=6)

    def test_negative_values_rejected(self):
        with pytest.raises(ValidationError):
            CapacityState(beta_cap=-1, approved_count=0)

    def test_frozen(self):
        state = CapacityState(beta_cap=5, approved_count=1)
        with pytest.raises(ValidationError):
            state.approved_count = 2

    def test_capacity_update_bounds(self):
        assert CapacityUpdate(beta_cap=0).beta_cap == 0
        with pytest.raises(ValidationError):
            CapacityUpdate(beta_cap=-5)



# SCORING CONFIG MODEL TESTS


class TestScoringConfig:

    def test_defaults(self):
        config = ScoringConfig()
        assert config.version == "2.0.0"
        assert config.auto_approve_threshold == 75
        assert config.total_cap == 100
        assert config.equipment_interest_weight == 3
        assert config.brand_affinity_weight == 2

    def test_keys_are_lowercased(self):
        config = ScoringConfig(role={"Tour_Player": 30})
        assert config.role == {"tour_player": 30}

    @pytest.mark.parametrize("points", [-1, 101])
    def test_points_out_of_range_rejected(self, points):
        with pytest.raises(ValidationError):
            ScoringConfig(referral_source={"search": points})

    def test_threshold_bounds(self):
        with pytest.raises(ValidationError):
            ScoringConfig(auto_approve_threshold=101)

    def test_with_overrides_replaces_only_given_fields(self):
        updated = DEFAULT_SCORING_CONFIG.with_overrides(
            {"auto_approve_threshold": 60, "role": {"casual": 10}, "description": None},
            updated_by="ops",
        )
        assert updated.auto_approve_threshold == 60
        assert updated.role == {"casual": 10}
        assert updated.handicap_range == DEFAULT_SCORING_CONFIG.handicap_range
        assert updated.description == DEFAULT_SCORING_CONFIG.description
        assert updated.updated_by == "ops"
        assert DEFAULT_SCORING_CONFIG.auto_approve_threshold == 75

    def test_point_change_bumps_version(self):
        updated = DEFAULT_SCORING_CONFIG.with_overrides({"role": {"creator": 0}})
        assert updated.version == "2.0.1"
        assert updated.with_overrides({"brand_affinity_weight": 4}).version == "2.0.2"

    def test_threshold_change_keeps_version(self):
        updated = DEFAULT_SCORING_CONFIG.with_overrides({"auto_approve_threshold": 60})
        assert updated.version == DEFAULT_SCORING_CONFIG.version

    def test_explicit_version_wins(self):
        updated = DEFAULT_SCORING_CONFIG.with_overrides({"role": {"creator": 0}, "version": "3.0.0"})
        assert updated.version == "3.0.0"

    def test_unchanged_tables_keep_version(self):
        updated = DEFAULT_SCORING_CONFIG.with_overrides({"role": dict(DEFAULT_SCORING_CONFIG.role)})
        assert updated.version == DEFAULT_SCORING_CONFIG.version

    def test_unknown_table_rejected(self):
        with pytest.raises(ValidationError):
            DEFAULT_SCORING_CONFIG.with_overrides({"roles": {"creator": 99}})

    @pytest.mark.parametrize(
        "version, expected",
        [("2.0.0", "2.0.1"), ("2.0.9", "2.0.10"), ("7", "8"), ("2.0.0-beta", "2.0.0-beta.1")],
    )
    def test_bump_version(self, version, expected):
        assert bump_version(version) == expected

    def test_json_round_trip_keeps_tables(self):
        restored = ScoringConfig.model_validate_json(DEFAULT_SCORING_CONFIG.model_dump_json())
        assert restored.bag_value_bonus == DEFAULT_SCORING_CONFIG.bag_value_bonus


class TestScoringConfigUpdate:

    def test_overrides_merge_weights_and_scalars(self):
        update = ScoringConfigUpdate(weights={"role": {"casual": 8}}, auto_approve_threshold=70, reason="x")
        assert update.overrides() == {"role": {"casual": 8}, "auto_approve_threshold": 70}

    def test_empty_update(self):
        assert ScoringConfigUpdate(reason="noop").overrides() == {}
