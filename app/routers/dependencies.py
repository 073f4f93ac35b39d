"""Shared FastAPI dependencies for the candidate routers."""

from __future__ import annotations

from fastapi import Header

from app.core.config import settings
from app.core.constants import CALLER_ADDRESS_HEADER
from app.db.ledger import get_ledger
from app.services.registry import RegistrySynchronizer


def get_registry() -> RegistrySynchronizer:
    """Build a synchronizer over the process-wide ledger."""
    return RegistrySynchronizer(
        get_ledger(),
        enforce_owner=settings.ENFORCE_OWNERSHIP,
    )


def get_caller(
    caller: str | None = Header(default=None, alias=CALLER_ADDRESS_HEADER),
) -> str | None:
    """Return the caller address header, or None when not connected."""
    if caller is None or not caller.strip():
        return None
    return caller.strip()
