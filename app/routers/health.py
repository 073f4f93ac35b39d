"""Health check endpoint.

Returns service status including ledger reachability and the configured
backend.
"""

import logging
from typing import Any

from fastapi import APIRouter
from starlette.responses import JSONResponse

from app.core.config import settings
from app.db.ledger import get_ledger

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check() -> Any:
    """Return 200 when the ledger answers its probe, 503 otherwise."""
    ledger_status = "disconnected"

    try:
        if await get_ledger().is_available():
            ledger_status = "connected"
    except Exception:
        logger.warning("Health check: ledger probe failed", exc_info=True)

    payload: dict[str, str] = {
        "status": "ok" if ledger_status == "connected" else "degraded",
        "ledger": ledger_status,
        "backend": settings.LEDGER_BACKEND,
    }

    if ledger_status != "connected":
        return JSONResponse(status_code=503, content=payload)

    return payload
