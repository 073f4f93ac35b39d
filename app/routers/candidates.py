"""Candidate registry endpoints.

GET    /api/v1/candidates               -- list, most recent first
POST   /api/v1/candidates               -- create (requires caller address)
PATCH  /api/v1/candidates/{id}/status   -- move a candidate along the pipeline

Owner-only updates and the terminal-status rule are enforced here, before
the registry is asked to write.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.errors import (
    CandidateDecodeError,
    CandidateNotFoundError,
    ConflictError,
    InvalidTransitionError,
    LedgerUnavailableError,
    NotOwnerError,
    RegistryError,
    SubmissionFailedError,
    UnauthenticatedError,
    UserRejectedError,
)
from app.models.candidate import Candidate, CandidateDraft, StatusUpdate
from app.models.enums import CandidateStatus, can_transition
from app.routers.dependencies import get_caller, get_registry
from app.services.registry import RegistrySynchronizer

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _http_error(exc: RegistryError) -> HTTPException:
    """Map a registry error onto an HTTP status and message."""
    if isinstance(exc, UnauthenticatedError):
        return HTTPException(status_code=401, detail="Please connect wallet first")
    if isinstance(exc, UserRejectedError):
        return HTTPException(status_code=403, detail="Transaction rejected by user")
    if isinstance(exc, NotOwnerError):
        return HTTPException(status_code=403, detail=str(exc))
    if isinstance(exc, CandidateNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, (ConflictError, InvalidTransitionError)):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, CandidateDecodeError):
        return HTTPException(status_code=422, detail=f"Stored record unreadable: {exc}")
    if isinstance(exc, SubmissionFailedError):
        return HTTPException(status_code=502, detail=f"Submission failed: {exc}")
    if isinstance(exc, LedgerUnavailableError):
        return HTTPException(status_code=503, detail="Ledger is not available")
    return HTTPException(status_code=500, detail=str(exc))


# ---------------------------------------------------------------------------
# GET /
# ---------------------------------------------------------------------------

@router.get("", response_model=list[Candidate])
async def list_candidates(
    status: CandidateStatus | None = Query(
        default=None,
        description="Only return candidates in this status",
    ),
    registry: RegistrySynchronizer = Depends(get_registry),
) -> list[Candidate]:
    """Return all indexed candidates sorted by timestamp, newest first."""
    try:
        candidates = await registry.load_all()
    except RegistryError as exc:
        raise _http_error(exc) from exc

    if status is not None:
        candidates = [c for c in candidates if c.status == status]
    return candidates


# ---------------------------------------------------------------------------
# POST /
# ---------------------------------------------------------------------------

@router.post("", response_model=Candidate, status_code=201)
async def create_candidate(
    draft: CandidateDraft,
    caller: str | None = Depends(get_caller),
    registry: RegistrySynchronizer = Depends(get_registry),
) -> Candidate:
    """Record a new candidate owned by the caller."""
    try:
        return await registry.create(draft, caller)
    except RegistryError as exc:
        logger.error(
            "create_candidate_failed",
            extra={"caller": caller, "error_message": str(exc)},
        )
        raise _http_error(exc) from exc


# ---------------------------------------------------------------------------
# PATCH /{candidate_id}/status
# ---------------------------------------------------------------------------

@router.patch("/{candidate_id}/status", response_model=Candidate)
async def update_candidate_status(
    candidate_id: str,
    body: StatusUpdate,
    caller: str | None = Depends(get_caller),
    registry: RegistrySynchronizer = Depends(get_registry),
) -> Candidate:
    """Move a candidate to a new status.

    Only the owner may do this, and ``hired`` / ``rejected`` are final.
    """
    try:
        if caller is None:
            raise UnauthenticatedError("A caller address is required for writes")

        current = await registry.get(candidate_id)
        if not current.is_owned_by(caller):
            raise NotOwnerError(f"{caller} does not own candidate {candidate_id}")
        if not can_transition(current.status, body.status):
            raise InvalidTransitionError(
                f"Cannot move candidate {candidate_id} "
                f"from {current.status.value} to {body.status.value}"
            )

        return await registry.update_status(
            candidate_id,
            body.status,
            caller,
            expected_version=body.expected_version,
        )
    except RegistryError as exc:
        logger.error(
            "update_candidate_status_failed",
            extra={
                "candidate_id": candidate_id,
                "caller": caller,
                "error_message": str(exc),
            },
        )
        raise _http_error(exc) from exc
