"""
Submission Service - Teed Waitlist
waitlist/services/submission_service.py

Orchestrates one waitlist submission:

    normalise -> duplicate check -> score -> gate + seat claim -> persist

The seat claim is the only step that touches shared state. It reads a fresh
CapacityState, runs the pure gate, and commits the increment with a
compare-and-swap on the count it read. A lost race re-reads and re-decides,
so concurrent submissions near the cap can never push approved_count past
beta_cap.
"""

import hashlib
import html
import re
import unicodedata
from datetime import datetime, timezone
from typing import Optional

import structlog

from waitlist.config import settings
from waitlist.core.exceptions import DuplicateEntityException, SeatClaimConflictException
from waitlist.models.application import (
    SubmissionResponse,
    WaitlistApplication,
    WaitlistSubmission,
)
from waitlist.models.enumerations import ApplicationStatus
from waitlist.repositories.application_repository import ApplicationRepository
from waitlist.repositories.capacity_repository import CapacityRepository
from waitlist.scoring.capacity_gate import GateDecision, decide
from waitlist.scoring.score_calculator import score_application
from waitlist.services.cache import CACHE_KEY_BETA_SUMMARY, invalidate
from waitlist.services.config_loader import ScoringConfigLoader

logger = structlog.get_logger(__name__)

DISPLAY_NAME_MAX_LENGTH = 50

STATUS_MESSAGES = {
    ApplicationStatus.APPROVED: "Congratulations! You've been approved for Teed.club beta access.",
    ApplicationStatus.AT_CAPACITY: (
        "You qualified for the beta, but it is currently at capacity. "
        "You'll be first in line when more spots open."
    ),
    ApplicationStatus.PENDING: "Thank you for your interest! You've been added to the waitlist.",
}

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def hash_email(email: str) -> str:
    """Short SHA-256 prefix so logs never carry the raw address."""
    return hashlib.sha256(email.lower().encode("utf-8")).hexdigest()[:8]


def sanitize_display_name(name: Optional[str], email: str = "") -> str:
    """
    Strip markup and control characters, collapse whitespace, cap length.

    Falls back to the local part of the email when nothing printable is left.
    """
    cleaned = _WHITESPACE_RE.sub(" ", _TAG_RE.sub("", html.unescape(name or "")))
    cleaned = "".join(ch for ch in cleaned if unicodedata.category(ch)[0] != "C")
    cleaned = cleaned.strip()[:DISPLAY_NAME_MAX_LENGTH].strip()
    if not cleaned and email:
        return sanitize_display_name(email.split("@")[0])
    return cleaned


def gate_with_seat_claim(
    capacity_repo: CapacityRepository,
    score: int,
    honeypot_triggered: bool,
    threshold: int,
    max_attempts: int,
) -> GateDecision:
    """
    Read capacity, decide, and commit the seat atomically.

    Raises:
        SeatClaimConflictException: every attempt lost the compare-and-swap
    """
    for attempt in range(1, max_attempts + 1):
        state = capacity_repo.get_state()
        decision = decide(score, state, honeypot_triggered, threshold)
        if not decision.claims_seat:
            return decision
        if capacity_repo.claim_seat(expected_count=state.approved_count):
            return decision
        logger.info(
            "seat_claim_conflict",
            attempt=attempt,
            observed_count=state.approved_count,
            beta_cap=state.beta_cap,
        )
    raise SeatClaimConflictException(max_attempts)


def release_claimed_seat(capacity_repo: CapacityRepository, log) -> bool:
    """
    Give back a seat whose application could not be saved.

    Never raises, so the caller can re-raise the error that caused the release.
    """
    try:
        return capacity_repo.release_seat()
    except Exception as e:
        log.error("seat_release_failed", error=str(e), error_type=type(e).__name__)
        return False


class SubmissionService:
    """Scores and gates new waitlist applications."""

    def __init__(
        self,
        application_repo: ApplicationRepository,
        capacity_repo: CapacityRepository,
        config_loader: ScoringConfigLoader,
        max_claim_attempts: Optional[int] = None,
    ):
        self.application_repo = application_repo
        self.capacity_repo = capacity_repo
        self.config_loader = config_loader
        self.max_claim_attempts = max_claim_attempts or settings.SEAT_CLAIM_MAX_ATTEMPTS

    def submit(self, submission: WaitlistSubmission) -> SubmissionResponse:
        email = normalize_email(submission.email)
        email_hash = hash_email(email)
        log = logger.bind(email_hash=email_hash)

        if self.application_repo.get_by_email(email) is not None:
            raise DuplicateEntityException("An application already exists for this email")

        honeypot = submission.honeypot_triggered
        if honeypot:
            log.warning(
                "honeypot_triggered",
                field_value_length=len(submission.contact_phone or ""),
            )

        config, config_source = self.config_loader.get_config()
        answers = submission.answers().model_dump()
        result = score_application(answers, config)

        decision = gate_with_seat_claim(
            self.capacity_repo,
            result.score,
            honeypot,
            config.auto_approve_threshold,
            self.max_claim_attempts,
        )

        now = datetime.now(timezone.utc)
        application = WaitlistApplication(
            email=email,
            display_name=sanitize_display_name(submission.display_name, email),
            city_region=submission.city_region,
            answers=answers,
            score=result.score,
            status=decision.status,
            honeypot_triggered=honeypot,
            config_version=config.version,
            created_at=now,
            approved_at=now if decision.claims_seat else None,
        )

        try:
            self.application_repo.create(application)
        except Exception:
            if decision.claims_seat:
                released = release_claimed_seat(self.capacity_repo, log)
                log.error("approval_persist_failed", seat_released=released)
            raise

        invalidate(CACHE_KEY_BETA_SUMMARY)

        log.info(
            "application_submitted",
            score=result.score,
            status=decision.status.value,
            reason=decision.reason,
            config_version=config.version,
            config_source=config_source.value,
            approved_count=decision.capacity_state_after.approved_count,
            beta_cap=decision.capacity_state_after.beta_cap,
        )

        return SubmissionResponse(
            status=decision.status,
            score=result.score,
            spots_remaining=decision.capacity_state_after.spots_remaining,
            message=STATUS_MESSAGES[decision.status],
        )

    def get_status(self, email: str) -> Optional[WaitlistApplication]:
        return self.application_repo.get_by_email(normalize_email(email))
