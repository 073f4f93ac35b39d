"""Error kinds raised by the candidate registry.

Routers translate these into HTTP responses; the registry itself never
formats user-facing messages beyond the exception text.
"""

from __future__ import annotations


class RegistryError(Exception):
    """Base class for every registry failure."""


class LedgerUnavailableError(RegistryError):
    """The ledger failed its availability probe or could not be read."""


class CandidateDecodeError(RegistryError):
    """Stored bytes could not be decoded into a candidate record."""


class UnauthenticatedError(RegistryError):
    """A write was attempted without a caller address."""


class SubmissionFailedError(RegistryError):
    """A ledger write failed."""


class UserRejectedError(SubmissionFailedError):
    """The signer declined to authorize a ledger write."""


class CandidateNotFoundError(RegistryError):
    """No record is stored under the requested candidate key."""

    def __init__(self, candidate_id: str) -> None:
        super().__init__(f"Candidate not found: {candidate_id}")
        self.candidate_id = candidate_id


class NotOwnerError(RegistryError):
    """The caller does not own the candidate it tried to modify."""


class ConflictError(RegistryError):
    """The stored record changed since the caller last read it."""

    def __init__(self, candidate_id: str, expected: int, actual: int) -> None:
        super().__init__(
            f"Candidate {candidate_id} is at version {actual}, expected {expected}"
        )
        self.candidate_id = candidate_id
        self.expected = expected
        self.actual = actual


class InvalidTransitionError(RegistryError):
    """The requested status change is not offered from the current status."""
