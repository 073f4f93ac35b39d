"""Application constants.

Ledger key layout, opaque payload marker and candidate pipeline rules.
The key names are persisted state and must not change.
"""

# ---------------------------------------------------------------------------
# Ledger key layout
# ---------------------------------------------------------------------------
INDEX_KEY: str = "candidate_keys"
CANDIDATE_KEY_PREFIX: str = "candidate_"

# ---------------------------------------------------------------------------
# Candidate creation
# ---------------------------------------------------------------------------
# Marker prepended to the base64 draft blob stored as ``encryptedData``.
# Cosmetic only: the blob is plain base64, not ciphertext.
OPAQUE_PAYLOAD_PREFIX: str = "FHE-"

ID_SUFFIX_ALPHABET: str = "0123456789abcdefghijklmnopqrstuvwxyz"
ID_SUFFIX_LENGTH: int = 7

SCORE_MIN: int = 0
SCORE_MAX: int = 100

DEFAULT_STAGE: str = "screening"

# ---------------------------------------------------------------------------
# Write rejection
# Substrings in a signer/transport error message meaning the caller declined.
# ---------------------------------------------------------------------------
USER_REJECTED_MARKERS: tuple[str, ...] = (
    "user rejected",
    "user denied",
)

# ---------------------------------------------------------------------------
# HTTP identity header
# ---------------------------------------------------------------------------
CALLER_ADDRESS_HEADER: str = "X-Caller-Address"
