"""Candidate registry synchronization.

Derives the candidate list from the ledger and writes changes back:

1. ``load_all``: probe, resolve the index, then read each record on its own.
   A record that cannot be read or decoded is logged and left out.
2. ``create``: write the record, then append its id to the index. The two
   writes are not atomic; if the second fails the record is an orphan.
3. ``update_status``: read-modify-write of a single record. Last write wins
   unless the caller passes the version it last saw.

No retries happen here; every failure reaches the caller once.
"""

from __future__ import annotations

import logging
import random
import secrets
import time
from collections.abc import Callable

from app.core.constants import ID_SUFFIX_ALPHABET, ID_SUFFIX_LENGTH, USER_REJECTED_MARKERS
from app.core.errors import (
    CandidateDecodeError,
    CandidateNotFoundError,
    ConflictError,
    LedgerUnavailableError,
    NotOwnerError,
    SubmissionFailedError,
    UnauthenticatedError,
    UserRejectedError,
)
from app.db.ledger import Ledger, LedgerWriteRejected
from app.models.candidate import Candidate, CandidateDraft
from app.models.enums import CandidateStatus
from app.services.codec import candidate_key, decode, encode, opaque_payload
from app.services.index import append_index, read_index

logger = logging.getLogger(__name__)


def new_candidate_id(clock: Callable[[], float] = time.time) -> str:
    """Return ``<epoch-ms>-<7 random base36 chars>``."""
    suffix = "".join(secrets.choice(ID_SUFFIX_ALPHABET) for _ in range(ID_SUFFIX_LENGTH))
    return f"{int(clock() * 1000)}-{suffix}"


def _placeholder_score() -> int:
    return random.randint(0, 99)


def _submission_error(exc: Exception, action: str) -> SubmissionFailedError:
    """Classify a failed write as declined by the signer or as a plain failure."""
    message = str(exc) or exc.__class__.__name__
    if isinstance(exc, LedgerWriteRejected) or any(
        marker in message.lower() for marker in USER_REJECTED_MARKERS
    ):
        return UserRejectedError(f"{action} rejected by user: {message}")
    return SubmissionFailedError(f"{action} failed: {message}")


def _require_caller(caller: str | None) -> str:
    if not caller or not caller.strip():
        raise UnauthenticatedError("A caller address is required for writes")
    return caller.strip()


class RegistrySynchronizer:
    """Reads and writes candidate records against a ``Ledger``.

    Parameters
    ----------
    ledger:
        Backend implementing ``is_available``, ``get_data`` and ``set_data``.
    enforce_owner:
        When set, ``update_status`` refuses callers other than the record
        owner. Off by default: ownership is then the caller's responsibility.
    clock:
        Returns the current Unix time in seconds.
    score_source:
        Produces the placeholder score of new candidates.
    """

    def __init__(
        self,
        ledger: Ledger,
        enforce_owner: bool = False,
        clock: Callable[[], float] = time.time,
        score_source: Callable[[], int] = _placeholder_score,
    ) -> None:
        self.ledger = ledger
        self.enforce_owner = enforce_owner
        self._clock = clock
        self._score_source = score_source

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    async def load_all(self) -> list[Candidate]:
        """Return every indexed candidate, most recent first.

        Raises ``LedgerUnavailableError`` if the probe or the index read
        fails; per-record failures only shrink the result.
        """
        try:
            available = await self.ledger.is_available()
        except Exception as exc:
            logger.error("ledger_unavailable", extra={"error": str(exc)})
            raise LedgerUnavailableError(f"Ledger probe failed: {exc}") from exc
        if not available:
            logger.error("ledger_unavailable", extra={"error": "probe returned false"})
            raise LedgerUnavailableError("Ledger is not available")

        try:
            candidate_ids = await read_index(self.ledger)
        except Exception as exc:
            logger.error("ledger_unavailable", extra={"error": str(exc)})
            raise LedgerUnavailableError(f"Index read failed: {exc}") from exc

        candidates: list[Candidate] = []
        for candidate_id in candidate_ids:
            try:
                data = await self.ledger.get_data(candidate_key(candidate_id))
            except Exception as exc:
                logger.error(
                    "candidate_read_failed",
                    extra={"candidate_id": candidate_id, "error": str(exc)},
                )
                continue

            if not data:
                logger.warning(
                    "candidate_index_dangling",
                    extra={"candidate_id": candidate_id},
                )
                continue

            try:
                candidates.append(decode(data, candidate_id))
            except CandidateDecodeError as exc:
                logger.error(
                    "candidate_decode_failed",
                    extra={"candidate_id": candidate_id, "error": str(exc)},
                )

        # list.sort is stable: equal timestamps keep index order
        candidates.sort(key=lambda c: c.timestamp, reverse=True)

        logger.info(
            "candidates_loaded",
            extra={"indexed": len(candidate_ids), "loaded": len(candidates)},
        )
        return candidates

    async def get(self, candidate_id: str) -> Candidate:
        """Read one record by id, without consulting the index."""
        try:
            data = await self.ledger.get_data(candidate_key(candidate_id))
        except Exception as exc:
            raise LedgerUnavailableError(f"Read of {candidate_id} failed: {exc}") from exc
        if not data:
            raise CandidateNotFoundError(candidate_id)
        return decode(data, candidate_id)

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    async def create(self, draft: CandidateDraft, caller: str | None) -> Candidate:
        """Store a new candidate owned by *caller* and index it."""
        owner = _require_caller(caller)

        candidate = Candidate(
            id=new_candidate_id(self._clock),
            name=draft.name,
            position=draft.position,
            score=self._score_source(),
            stage=draft.stage,
            encrypted_data=opaque_payload(draft),
            timestamp=int(self._clock()),
            owner=owner,
            status=CandidateStatus.screening,
        )

        try:
            await self.ledger.set_data(candidate_key(candidate.id), encode(candidate))
        except Exception as exc:
            raise _submission_error(exc, "Candidate write") from exc

        try:
            await append_index(self.ledger, candidate.id)
        except Exception as exc:
            logger.error(
                "candidate_index_orphan",
                extra={"candidate_id": candidate.id, "error": str(exc)},
            )
            raise _submission_error(exc, "Index update") from exc

        logger.info(
            "candidate_created",
            extra={"candidate_id": candidate.id, "owner": owner},
        )
        return candidate

    async def update_status(
        self,
        candidate_id: str,
        new_status: CandidateStatus,
        caller: str | None,
        expected_version: int | None = None,
    ) -> Candidate:
        """Rewrite the record of *candidate_id* with *new_status*.

        Terminal statuses are not enforced here. When *expected_version* is
        given and the stored record has moved on, ``ConflictError`` is raised
        and nothing is written. The version check and the write are separate
        ledger calls, so a concurrent writer can still slip in between.
        """
        caller = _require_caller(caller)
        key = candidate_key(candidate_id)

        try:
            data = await self.ledger.get_data(key)
        except Exception as exc:
            raise _submission_error(exc, "Candidate read") from exc
        if not data:
            raise CandidateNotFoundError(candidate_id)

        current = decode(data, candidate_id)

        if self.enforce_owner and not current.is_owned_by(caller):
            raise NotOwnerError(f"{caller} does not own candidate {candidate_id}")

        if expected_version is not None and expected_version != current.version:
            raise ConflictError(candidate_id, expected_version, current.version)

        updated = current.model_copy(
            update={"status": CandidateStatus(new_status), "version": current.version + 1}
        )

        try:
            await self.ledger.set_data(key, encode(updated))
        except Exception as exc:
            raise _submission_error(exc, "Status update") from exc

        logger.info(
            "candidate_status_updated",
            extra={
                "candidate_id": candidate_id,
                "from_status": current.status.value,
                "to_status": updated.status.value,
                "version": updated.version,
            },
        )
        return updated
