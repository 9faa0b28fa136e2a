"""Reservations domain - Booking lifecycle, worker assignment and rating"""

from .assignment import AssignmentPolicy, FixedAssignmentPolicy, RandomAssignmentPolicy
from .repository import ReservationRepository
from .service import ReservationService, can_rate

__all__ = [
    "AssignmentPolicy",
    "FixedAssignmentPolicy",
    "RandomAssignmentPolicy",
    "ReservationRepository",
    "ReservationService",
    "can_rate",
]
