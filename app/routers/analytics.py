"""Dashboard analytics endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.core.errors import LedgerUnavailableError
from app.models.analytics import PipelineStats
from app.routers.dependencies import get_registry
from app.services.analytics import compute_pipeline_stats
from app.services.registry import RegistrySynchronizer

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/pipeline", response_model=PipelineStats)
async def analytics_pipeline(
    registry: RegistrySynchronizer = Depends(get_registry),
) -> PipelineStats:
    """Return status counts, average score and hire rate."""
    try:
        candidates = await registry.load_all()
    except LedgerUnavailableError as exc:
        raise HTTPException(status_code=503, detail="Ledger is not available") from exc
    return compute_pipeline_stats(candidates)
