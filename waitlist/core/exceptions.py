"""
Custom Exceptions - Teed Waitlist
waitlist/core/exceptions.py

Exception classes for repository operations and the seat-claim workflow.
Scoring and the capacity gate never raise; everything here belongs to the
storage layer or the callers around it.
"""


class RepositoryException(Exception):
    """Base exception for repository operations."""

    pass


class EntityNotFoundException(RepositoryException):
    """Entity not found in database."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with ID {entity_id} not found")


class DuplicateEntityException(RepositoryException):
    """Unique constraint violation (e.g. a second application for one email)."""

    def __init__(self, message: str = "Entity already exists"):
        self.message = message
        super().__init__(message)


class DatabaseConnectionException(RepositoryException):
    """Database connection failure."""

    def __init__(self, message: str = "Database connection failed"):
        self.message = message
        super().__init__(message)


class SeatClaimConflictException(RepositoryException):
    """Every compare-and-swap attempt on the capacity row lost a race."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Could not claim a beta seat after {attempts} attempts")


class InsufficientCapacityException(Exception):
    """A bulk approval asked for more seats than remain."""

    def __init__(self, remaining: int, requested: int):
        self.remaining = remaining
        self.requested = requested
        super().__init__(
            f"Insufficient capacity. Only {remaining} slots available, "
            f"but trying to approve {requested} applications."
        )


class InvalidCapacityException(Exception):
    """A new beta cap would fall below the number of approved seats."""

    def __init__(self, beta_cap: int, approved_count: int):
        self.beta_cap = beta_cap
        self.approved_count = approved_count
        super().__init__(
            f"beta_cap {beta_cap} is below the current approved count {approved_count}"
        )
