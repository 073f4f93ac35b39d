"""Candidate index maintenance.

The ledger has no key listing, so the ids of all candidates live in a single
JSON array under ``candidate_keys``. Only ids present there are visible to
readers.
"""

from __future__ import annotations

import json
import logging

from app.core.constants import INDEX_KEY
from app.db.ledger import Ledger

logger = logging.getLogger(__name__)


def _parse_index(data: bytes) -> list[str]:
    keys = json.loads(data.decode("utf-8"))
    if not isinstance(keys, list) or not all(isinstance(k, str) for k in keys):
        raise ValueError("index is not a list of strings")
    return keys


async def read_index(ledger: Ledger) -> list[str]:
    """Return the ordered candidate ids, or ``[]`` when none are stored.

    An undecodable index is logged and read as empty.
    """
    data = await ledger.get_data(INDEX_KEY)
    if not data:
        return []

    try:
        return _parse_index(data)
    except (UnicodeDecodeError, ValueError) as exc:
        # json.JSONDecodeError is a ValueError
        logger.error(
            "candidate_index_decode_failed",
            extra={"key": INDEX_KEY, "error": str(exc), "size": len(data)},
        )
        return []


async def append_index(ledger: Ledger, candidate_id: str) -> list[str]:
    """Append *candidate_id* to the index and write it back.

    No duplicate check and no conditional write: two concurrent appends can
    lose one of the ids.
    """
    keys = await read_index(ledger)
    keys.append(candidate_id)
    await ledger.set_data(INDEX_KEY, json.dumps(keys).encode("utf-8"))
    return keys
