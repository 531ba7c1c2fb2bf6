"""Local status endpoints (no upstream calls).

Routes
------
GET /          Service description and endpoint list
GET /health    200 when a token is configured, 500 otherwise
GET /logs      Last 50 relay log lines plus buffer size
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from airtable_relay.api.deps import get_relay
from airtable_relay.service import RelayService

router = APIRouter()


@router.get("/", response_model=dict[str, Any])
def service_status(relay: RelayService = Depends(get_relay)) -> dict[str, Any]:
    return relay.status()


@router.get("/health")
def health(relay: RelayService = Depends(get_relay)) -> JSONResponse:
    payload = relay.health()
    return JSONResponse(status_code=200 if payload["hasToken"] else 500, content=payload)


@router.get("/logs", response_model=dict[str, Any])
def recent_logs(relay: RelayService = Depends(get_relay)) -> dict[str, Any]:
    """Return the most recent relay log entries, oldest first."""
    return relay.recent_logs()
