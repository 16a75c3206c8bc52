# tests/test_config.py

"""
Settings Tests - defaults, environment overrides and production guards
"""

import pytest
from pydantic import ValidationError

from waitlist.config import Settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DEFAULT_BETA_CAP", raising=False)
        monkeypatch.delenv("AUTO_APPROVE_THRESHOLD", raising=False)
        s = Settings(_env_file=None)
        assert s.DEFAULT_BETA_CAP == 150
        assert s.AUTO_APPROVE_THRESHOLD == 75
        assert s.SEAT_CLAIM_MAX_ATTEMPTS >= 1
        assert s.API_V1_PREFIX == "/api/v1"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_BETA_CAP", "300")
        monkeypatch.setenv("submit_rate_limit", "3/minute")
        s = Settings(_env_file=None)
        assert s.DEFAULT_BETA_CAP == 300
        assert s.SUBMIT_RATE_LIMIT == "3/minute"

    def test_threshold_out_of_range(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, AUTO_APPROVE_THRESHOLD=120)

    def test_production_requires_admin_token(self):
        with pytest.raises(ValidationError, match="ADMIN_API_TOKEN"):
            Settings(
                _env_file=None,
                APP_ENV="production",
                SECRET_KEY="x" * 40,
                ADMIN_API_TOKEN=None,
            )

    def test_production_rejects_short_secret(self):
        with pytest.raises(ValidationError, match="SECRET_KEY"):
            Settings(_env_file=None, APP_ENV="production", SECRET_KEY="short", ADMIN_API_TOKEN="t" * 32)

    def test_production_rejects_debug(self):
        with pytest.raises(ValidationError, match="DEBUG"):
            Settings(
                _env_file=None,
                APP_ENV="production",
                DEBUG=True,
                SECRET_KEY="x" * 40,
                ADMIN_API_TOKEN="t" * 32,
            )

    def test_valid_production(self):
        s = Settings(_env_file=None, APP_ENV="production", SECRET_KEY="x" * 40, ADMIN_API_TOKEN="t" * 32)
        assert s.ADMIN_API_TOKEN.get_secret_value() == "t" * 32
