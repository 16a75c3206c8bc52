"""
scoring/capacity_gate.py

Decides the status of a scored application against the beta seat cap.

Rules, evaluated in order:
    1. honeypot triggered        -> pending  (bots never auto-approve)
    2. score < threshold         -> pending
    3. approved_count >= cap     -> at_capacity
    4. otherwise                 -> approved, approved_count + 1

decide() is pure. It never reads or writes storage; callers commit the
returned capacity snapshot with a conditional update guarded by the count
they observed (see CapacityRepository.claim_seat) and re-run decide() on a
fresh snapshot when that update loses a race.
"""

from dataclasses import dataclass

from waitlist.models.capacity import CapacityState
from waitlist.models.enumerations import ApplicationStatus
from waitlist.scoring.weights import DEFAULT_AUTO_APPROVE_THRESHOLD


@dataclass(frozen=True)
class GateDecision:
    """Output of decide()."""
    status: ApplicationStatus
    capacity_state_after: CapacityState
    reason: str

    @property
    def claims_seat(self) -> bool:
        return self.status == ApplicationStatus.APPROVED


def decide(
    score: int,
    capacity_state: CapacityState,
    honeypot_triggered: bool,
    threshold: int = DEFAULT_AUTO_APPROVE_THRESHOLD,
) -> GateDecision:
    """
    Map (score, capacity, honeypot) to a status.

    Args:
        score: Application score in [0, 100].
        capacity_state: Freshly read capacity snapshot.
        honeypot_triggered: True when the hidden form field was filled in.
        threshold: Minimum score for auto-approval.

    Returns:
        GateDecision. capacity_state_after differs from capacity_state only
        when the status is approved.

    Examples:
        >>> state = CapacityState(beta_cap=150, approved_count=10)
        >>> decide(80, state, False).capacity_state_after.approved_count
        11
    """
    if honeypot_triggered:
        return GateDecision(ApplicationStatus.PENDING, capacity_state, "honeypot")

    if score < threshold:
        return GateDecision(ApplicationStatus.PENDING, capacity_state, "below_threshold")

    if capacity_state.approved_count >= capacity_state.beta_cap:
        return GateDecision(ApplicationStatus.AT_CAPACITY, capacity_state, "at_capacity")

    after = CapacityState(
        beta_cap=capacity_state.beta_cap,
        approved_count=capacity_state.approved_count + 1,
    )
    return GateDecision(ApplicationStatus.APPROVED, after, "auto_approved")
