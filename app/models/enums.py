"""Enum types for the candidate pipeline."""

from enum import Enum


class CandidateStatus(str, Enum):
    """Hiring pipeline status of a candidate."""
    screening = "screening"
    testing = "testing"
    interview = "interview"
    hired = "hired"
    rejected = "rejected"


TERMINAL_STATUSES: frozenset[CandidateStatus] = frozenset(
    {CandidateStatus.hired, CandidateStatus.rejected}
)


def is_terminal(status: CandidateStatus) -> bool:
    """Return True when no further transition is offered from *status*."""
    return status in TERMINAL_STATUSES


def can_transition(current: CandidateStatus, new: CandidateStatus) -> bool:
    """Return True when moving from *current* to *new* is offered to a user."""
    return not is_terminal(current) and current != new
