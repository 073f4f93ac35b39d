"""Key-value ledger clients.

The registry only needs three operations from its store of record:
an availability probe, ``get_data(key)`` returning empty bytes for an
absent key, and ``set_data(key, value)`` overwriting the whole value.

Two backends are provided:

* ``SupabaseLedger`` keeps one row per key in a ``ledger_entries`` table
  (``key text primary key, value bytea``) and writes with an upsert.
* ``InMemoryLedger`` keeps a process-local dict, for local runs and tests.

``get_ledger()`` returns a lazily-initialized, process-wide instance chosen
by ``settings.LEDGER_BACKEND``.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx
from postgrest import APIError
from supabase import AsyncClient, acreate_client

from app.core.config import settings

logger = logging.getLogger(__name__)

# PostgreSQL insufficient_privilege, returned by PostgREST when RLS refuses a write
_PERMISSION_DENIED_CODES = {"42501", "PGRST301"}


class LedgerError(Exception):
    """Transport or storage failure talking to the ledger."""


class LedgerWriteRejected(LedgerError):
    """The ledger or its signer refused to authorize a write."""


class Ledger(Protocol):
    """Operations the registry consumes from a ledger backend."""

    async def is_available(self) -> bool: ...

    async def get_data(self, key: str) -> bytes: ...

    async def set_data(self, key: str, value: bytes) -> None: ...


# ---------------------------------------------------------------------------
# In-memory backend
# ---------------------------------------------------------------------------

class InMemoryLedger:
    """Dict-backed ledger. Every write is immediately visible."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})
        self.available = True

    async def is_available(self) -> bool:
        return self.available

    async def get_data(self, key: str) -> bytes:
        return self._data.get(key, b"")

    async def set_data(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def keys(self) -> list[str]:
        return list(self._data)


# ---------------------------------------------------------------------------
# Supabase backend
# ---------------------------------------------------------------------------

def _to_bytea(value: bytes) -> str:
    """PostgREST accepts bytea as a ``\\x``-prefixed hex string."""
    return "\\x" + value.hex()


def _from_bytea(raw: object) -> bytes:
    if raw is None:
        return b""
    if isinstance(raw, str):
        if raw.startswith("\\x"):
            try:
                return bytes.fromhex(raw[2:])
            except ValueError as exc:
                raise LedgerError(f"Malformed bytea value: {exc}") from exc
        return raw.encode("utf-8")
    raise LedgerError(f"Unexpected bytea representation: {type(raw).__name__}")


class SupabaseLedger:
    """Ledger stored in a Supabase table, one row per key."""

    def __init__(
        self,
        url: str,
        key: str,
        table: str = "ledger_entries",
        client: AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._key = key
        self._table = table
        self._client = client

    async def _get_client(self) -> AsyncClient:
        if self._client is None:
            if not self._url or not self._key:
                raise LedgerError("SUPABASE_URL and SUPABASE_KEY must be set")
            self._client = await acreate_client(self._url, self._key)
        return self._client

    async def is_available(self) -> bool:
        try:
            client = await self._get_client()
            result = await client.table(self._table).select("key").limit(1).execute()
        except Exception:
            logger.warning("ledger_probe_failed", exc_info=True)
            return False
        return result is not None

    async def get_data(self, key: str) -> bytes:
        client = await self._get_client()
        try:
            result = (
                await client.table(self._table)
                .select("value")
                .eq("key", key)
                .limit(1)
                .execute()
            )
        except APIError as exc:
            raise LedgerError(f"Read of {key!r} failed: {exc.message}") from exc
        except (httpx.HTTPError, OSError) as exc:
            # OSError covers the builtin TimeoutError and refused connections
            raise LedgerError(f"Read of {key!r} failed: {exc}") from exc

        if not result.data:
            return b""
        return _from_bytea(result.data[0].get("value"))

    async def set_data(self, key: str, value: bytes) -> None:
        client = await self._get_client()
        try:
            await (
                client.table(self._table)
                .upsert({"key": key, "value": _to_bytea(value)}, on_conflict="key")
                .execute()
            )
        except APIError as exc:
            if exc.code in _PERMISSION_DENIED_CODES:
                raise LedgerWriteRejected(
                    f"Write of {key!r} rejected: {exc.message}"
                ) from exc
            raise LedgerError(f"Write of {key!r} failed: {exc.message}") from exc
        except (httpx.HTTPError, OSError) as exc:
            raise LedgerError(f"Write of {key!r} failed: {exc}") from exc


# ---------------------------------------------------------------------------
# Process-wide instance
# ---------------------------------------------------------------------------

_ledger: Ledger | None = None


def get_ledger() -> Ledger:
    """Return the singleton ledger, creating it on first call."""
    global _ledger
    if _ledger is None:
        backend = settings.LEDGER_BACKEND.lower()
        if backend == "memory":
            _ledger = InMemoryLedger()
        elif backend == "supabase":
            _ledger = SupabaseLedger(
                settings.SUPABASE_URL,
                settings.SUPABASE_KEY,
                table=settings.LEDGER_TABLE,
            )
        else:
            raise ValueError(f"Unknown LEDGER_BACKEND: {settings.LEDGER_BACKEND}")
        logger.info("ledger_initialized", extra={"backend": backend})
    return _ledger
