"""
Core Package - Teed Waitlist
waitlist/core/__init__.py

Core infrastructure: dependencies, exceptions, security.
"""

from waitlist.core.exceptions import (
    DatabaseConnectionException,
    DuplicateEntityException,
    EntityNotFoundException,
    InsufficientCapacityException,
    InvalidCapacityException,
    RepositoryException,
    SeatClaimConflictException,
)

__all__ = [
    "DatabaseConnectionException",
    "DuplicateEntityException",
    "EntityNotFoundException",
    "InsufficientCapacityException",
    "InvalidCapacityException",
    "RepositoryException",
    "SeatClaimConflictException",
]
