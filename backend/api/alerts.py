"""
Alerts API
Endpoints for submitting tier configs and inspecting the scanner.

Endpoints:
    POST /api/update-alert-config        → Replace a user's tier config
    GET  /api/alert-config/{user_id}     → Get a user's normalized config
    GET  /api/alerts/history             → Recently delivered pushes
    GET  /api/alerts/stats               → Scanner, resolver and dispatch stats
    GET  /internal/run-alerts            → Run one scan cycle now
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, HTTPException, Query
from pydantic import BaseModel

from alerts import get_alert_engine
from core import get_logger
from db import ConfigValidationError, get_config_store
from services import get_scanner

logger = get_logger(__name__)

router = APIRouter(tags=["Alerts"])
internal_router = APIRouter(prefix="/internal", tags=["Internal"])


class AckResponse(BaseModel):
    """Acknowledgement for config submissions and manual runs"""
    ok: bool = True
    summary: Optional[Dict[str, Any]] = None


# =============================================================================
# Config Submission
# =============================================================================

@router.post("/update-alert-config", response_model=AckResponse, response_model_exclude_none=True)
async def update_alert_config(
    payload: Any = Body(
        None,
        examples=[{
            "userId": "u1",
            "currency": "USD",
            "assets": [{"symbol": "XRP", "tier1": 0.5, "tier2": 0.6, "tier3": 0.7, "thresholdPct": 5}]
        }]
    )
):
    """
    Replace the caller's tier config.

    Accepts tier1/tier2/tier3 or an explicit tiersUSD list, and
    thresholdPct or the legacy alertWithinPct.
    """
    store = get_config_store()
    try:
        store.set_config(payload)
    except ConfigValidationError as e:
        logger.info("Rejected config submission: %s", e)
        raise HTTPException(400, str(e))

    return AckResponse()


@router.get("/alert-config/{user_id}")
async def get_alert_config(user_id: str):
    """Get a user's stored config"""
    cfg = get_config_store().get_config(user_id)
    if cfg is None:
        raise HTTPException(404, f"No config for user: {user_id}")
    return cfg.to_dict()


# =============================================================================
# Scanner Inspection
# =============================================================================

@router.get("/alerts/history")
async def get_history(limit: int = Query(default=50, le=200)):
    """Recently delivered pushes, newest first"""
    history = get_alert_engine().get_history(limit)
    return {
        "count": len(history),
        "alerts": history
    }


@router.get("/alerts/stats")
async def get_stats():
    """Get scanner statistics"""
    return get_scanner().stats()


@internal_router.get("/run-alerts", response_model=AckResponse)
async def run_alerts():
    """Run one scan cycle immediately (manual trigger for testing)"""
    try:
        summary = await get_scanner().run_cycle()
    except Exception:
        logger.exception("runAlertCheck error")
        raise HTTPException(500, "runAlertCheck failed")

    return AckResponse(summary=summary.to_dict())
