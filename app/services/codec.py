"""Candidate record codec.

Records are stored as compact UTF-8 JSON objects with named fields, so that
older records missing a field still decode (``status`` falls back to
``screening``, ``version`` to 0).
"""

from __future__ import annotations

import base64
import json

from pydantic import ValidationError

from app.core.constants import CANDIDATE_KEY_PREFIX, OPAQUE_PAYLOAD_PREFIX
from app.core.errors import CandidateDecodeError
from app.models.candidate import Candidate, CandidateDraft


def candidate_key(candidate_id: str) -> str:
    """Return the ledger key holding the record for *candidate_id*."""
    return f"{CANDIDATE_KEY_PREFIX}{candidate_id}"


def encode(candidate: Candidate) -> bytes:
    payload = candidate.model_dump(mode="json", by_alias=True)
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")


def decode(data: bytes, candidate_id: str | None = None) -> Candidate:
    """Decode stored bytes into a ``Candidate``.

    The id taken from the ledger key (*candidate_id*) wins over any id
    embedded in the payload. Raises ``CandidateDecodeError`` on anything
    that is not a well-formed record.
    """
    try:
        payload = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CandidateDecodeError(f"Malformed candidate payload: {exc}") from exc

    if not isinstance(payload, dict):
        raise CandidateDecodeError(
            f"Candidate payload must be an object, got {type(payload).__name__}"
        )

    if candidate_id is not None:
        payload["id"] = candidate_id
    if "id" not in payload:
        raise CandidateDecodeError("Candidate payload carries no id")

    try:
        return Candidate.model_validate(payload)
    except ValidationError as exc:
        raise CandidateDecodeError(
            f"Invalid candidate {payload['id']!r}: {exc.error_count()} field error(s)"
        ) from exc


def opaque_payload(draft: CandidateDraft) -> str:
    """Build the ``encryptedData`` blob shown in place of a ciphertext.

    This is base64 of the draft JSON behind a marker prefix. It provides no
    confidentiality.
    """
    raw = json.dumps(draft.model_dump(), separators=(",", ":")).encode("utf-8")
    return OPAQUE_PAYLOAD_PREFIX + base64.b64encode(raw).decode("ascii")
