"""Application configuration with validation."""
from typing import Optional, Literal
from functools import lru_cache
from pydantic import Field, model_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Waitlist service settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Teed Waitlist API"
    APP_VERSION: str = "2.0.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"
    SECRET_KEY: SecretStr = SecretStr("dev-secret-key-change-me")

    # API
    API_V1_PREFIX: str = "/api/v1"
    SUBMIT_RATE_LIMIT: str = Field(
        default="10/minute",
        description="slowapi limit string applied per client IP to submissions",
    )
    STATUS_RATE_LIMIT: str = Field(
        default="30/minute",
        description="slowapi limit string applied per client IP to status lookups",
    )
    ADMIN_API_TOKEN: Optional[SecretStr] = None

    # Snowflake
    SNOWFLAKE_ACCOUNT: str = ""
    SNOWFLAKE_USER: str = ""
    SNOWFLAKE_PASSWORD: SecretStr = SecretStr("")
    SNOWFLAKE_DATABASE: str = "TEED"
    SNOWFLAKE_SCHEMA: str = "WAITLIST"
    SNOWFLAKE_WAREHOUSE: str = "COMPUTE_WH"
    SNOWFLAKE_ROLE: str = ""

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_TTL_SCORING_CONFIG: int = 300  # 5 minutes
    CACHE_TTL_BETA_SUMMARY: int = 30

    # Beta gate
    DEFAULT_BETA_CAP: int = Field(default=150, ge=0)
    AUTO_APPROVE_THRESHOLD: int = Field(default=75, ge=0, le=100)
    SEAT_CLAIM_MAX_ATTEMPTS: int = Field(default=5, ge=1, le=50)

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure production has required security settings."""
        if self.APP_ENV == "production":
            if self.DEBUG:
                raise ValueError("DEBUG must be False in production")
            if len(self.SECRET_KEY.get_secret_value()) < 32:
                raise ValueError("SECRET_KEY must be ≥32 characters in production")
            if self.ADMIN_API_TOKEN is None:
                raise ValueError("ADMIN_API_TOKEN is required in production")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
