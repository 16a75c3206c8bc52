from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID, uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator

from waitlist.models.enumerations import ApplicationStatus


class WaitlistAnswers(BaseModel):
    """
    Categorical survey answers used for scoring.

    Accepts snake_case, camelCase and the legacy singular form-field names.
    Values are kept as plain strings: unknown choices are valid input and
    simply score zero.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    role: Optional[str] = Field(default=None, max_length=50)
    handicap_range: Optional[str] = Field(
        default=None,
        max_length=20,
        validation_alias=AliasChoices("handicap_range", "handicapRange"),
    )
    equipment_interests: List[str] = Field(
        default_factory=list,
        max_length=50,
        validation_alias=AliasChoices(
            "equipment_interests", "equipmentInterests", "equipment_interest"
        ),
    )
    brand_affinities: List[str] = Field(
        default_factory=list,
        max_length=50,
        validation_alias=AliasChoices(
            "brand_affinities", "brandAffinities", "brand_affinity"
        ),
    )
    purchase_timeline: Optional[str] = Field(
        default=None,
        max_length=50,
        validation_alias=AliasChoices("purchase_timeline", "purchaseTimeline"),
    )
    community_involvement: Optional[str] = Field(
        default=None,
        max_length=50,
        validation_alias=AliasChoices("community_involvement", "communityInvolvement"),
    )
    referral_source: Optional[str] = Field(
        default=None,
        max_length=50,
        validation_alias=AliasChoices("referral_source", "referralSource"),
    )
    golf_frequency: Optional[str] = Field(
        default=None,
        max_length=50,
        validation_alias=AliasChoices("golf_frequency", "golfFrequency"),
    )
    bag_value: Optional[str] = Field(
        default=None,
        max_length=50,
        validation_alias=AliasChoices("bag_value", "bagValue"),
    )

    @field_validator(
        "role",
        "handicap_range",
        "purchase_timeline",
        "community_involvement",
        "referral_source",
        "golf_frequency",
        "bag_value",
        mode="before",
    )
    @classmethod
    def drop_non_string_choice(cls, v):
        """A malformed answer scores zero instead of rejecting the application."""
        return v if isinstance(v, str) else None

    @field_validator("equipment_interests", "brand_affinities", mode="before")
    @classmethod
    def keep_string_items(cls, v):
        """Only lists count as multi-select answers; non-string items are dropped."""
        if not isinstance(v, (list, tuple, set)):
            return []
        return [item for item in v if isinstance(item, str)]


class WaitlistSubmission(WaitlistAnswers):
    """Body of POST /waitlist/submit."""

    email: EmailStr = Field(..., description="Applicant email, unique per application")
    display_name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        validation_alias=AliasChoices("display_name", "displayName"),
    )
    city_region: Optional[str] = Field(
        default=None,
        max_length=100,
        validation_alias=AliasChoices("city_region", "cityRegion"),
    )
    terms_accepted: bool = Field(
        ...,
        validation_alias=AliasChoices("terms_accepted", "termsAccepted"),
    )
    # Honeypot: hidden in the form, real users leave it empty
    contact_phone: Optional[str] = Field(
        default=None,
        max_length=200,
        validation_alias=AliasChoices("contact_phone", "contactPhone"),
    )

    @field_validator("terms_accepted")
    @classmethod
    def require_terms(cls, v: bool) -> bool:
        if not v:
            raise ValueError("You must accept the terms to join the waitlist")
        return v

    @property
    def honeypot_triggered(self) -> bool:
        return bool(self.contact_phone and self.contact_phone.strip())

    def answers(self) -> WaitlistAnswers:
        """Only the scored survey fields."""
        return WaitlistAnswers.model_validate(
            self.model_dump(include=set(WaitlistAnswers.model_fields))
        )


class WaitlistApplication(BaseModel):
    """A stored waitlist application."""

    id: UUID = Field(default_factory=uuid4)
    email: str
    display_name: str
    city_region: Optional[str] = None
    answers: dict = Field(default_factory=dict)
    score: int = Field(..., ge=0, le=100)
    status: ApplicationStatus = ApplicationStatus.PENDING
    honeypot_triggered: bool = False
    config_version: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    approved_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubmissionResponse(BaseModel):
    status: ApplicationStatus
    score: int
    spots_remaining: int
    message: str


class ApplicationStatusResponse(BaseModel):
    """Public status lookup. Score and timestamps stay admin-only."""

    status: ApplicationStatus
    message: str


class ErrorResponse(BaseModel):
    """
    Standard error response model.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict] = Field(default=None, description="Additional error details")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
