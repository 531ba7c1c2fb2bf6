"""Upstream connectivity probe.

Routes
------
POST /test    Call ``/meta/bases`` and report how many bases were found
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from airtable_relay.airtable.client import UpstreamError
from airtable_relay.api.deps import get_relay
from airtable_relay.service import RelayService
from airtable_relay.time_utils import utc_now_iso

router = APIRouter()


@router.post("/test", response_model=None)
async def connectivity_test(
    relay: RelayService = Depends(get_relay),
) -> dict[str, Any] | JSONResponse:
    try:
        return await relay.test_connection()
    except UpstreamError as exc:
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": exc.message, "timestamp": utc_now_iso()},
        )
