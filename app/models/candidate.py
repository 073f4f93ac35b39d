"""Pydantic models for candidate records.

``Candidate`` mirrors the JSON object stored under ``candidate_<id>``.
The stored field name for the opaque payload is ``encryptedData``; Python
code uses ``encrypted_data``. Keys the model does not know, written by
other clients of the same ledger, are kept as extra fields and written back
unchanged.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.constants import DEFAULT_STAGE, SCORE_MAX, SCORE_MIN
from app.models.enums import CandidateStatus


class CandidateDraft(BaseModel):
    """Caller input for creating a candidate."""
    name: str
    position: str
    stage: str = DEFAULT_STAGE

    @field_validator("name", "position")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class StatusUpdate(BaseModel):
    """Request body for a status transition."""
    status: CandidateStatus
    expected_version: int | None = None


class Candidate(BaseModel):
    """Full candidate record as stored on the ledger."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    name: str
    position: str
    score: int = Field(default=0, ge=SCORE_MIN, le=SCORE_MAX)
    stage: str = ""
    encrypted_data: str = Field(default="", alias="encryptedData")
    timestamp: int
    owner: str = ""
    status: CandidateStatus = CandidateStatus.screening
    version: int = 0

    def is_owned_by(self, address: str | None) -> bool:
        """Case-insensitive address comparison against ``owner``."""
        if not address:
            return False
        return self.owner.lower() == address.lower()
