"""Base and table endpoints relayed to the Airtable metadata API.

Routes
------
GET  /bases                      List bases  -> {bases: [{id, name, permissionLevel}]}
GET  /bases/{base_id}/tables     List tables -> {tables: [{id, name, primaryFieldId, fieldCount}]}
POST /bases/{base_id}/tables     Create a table (default schema when no fields given)

Upstream failures return HTTP 500 with ``{error, details}``.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from airtable_relay.airtable.client import UpstreamError
from airtable_relay.airtable.models import FieldDefinition
from airtable_relay.api.deps import get_relay
from airtable_relay.service import MissingTableNameError, RelayService

router = APIRouter()


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class TableCreate(BaseModel):
    name: Optional[str] = None
    fields: Optional[list[FieldDefinition]] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _upstream_failure(error: str, exc: UpstreamError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": error, "details": exc.details})


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("", response_model=None)
async def list_bases_endpoint(
    relay: RelayService = Depends(get_relay),
) -> dict[str, Any] | JSONResponse:
    """Return every base the token can see, in upstream order."""
    try:
        bases = await relay.list_bases()
    except UpstreamError as exc:
        return _upstream_failure("Failed to fetch bases", exc)
    return {"bases": bases}


@router.get("/{base_id}/tables", response_model=None)
async def list_tables_endpoint(
    base_id: str,
    relay: RelayService = Depends(get_relay),
) -> dict[str, Any] | JSONResponse:
    try:
        tables = await relay.list_tables(base_id)
    except UpstreamError as exc:
        return _upstream_failure("Failed to fetch tables", exc)
    return {"tables": tables}


@router.post("/{base_id}/tables", response_model=None)
async def create_table_endpoint(
    base_id: str,
    body: Optional[TableCreate] = None,
    relay: RelayService = Depends(get_relay),
) -> dict[str, Any] | JSONResponse:
    """Create a table in *base_id* and return the table upstream created."""
    body = body or TableCreate()
    try:
        return await relay.create_table(base_id, body.name, body.fields)
    except MissingTableNameError as exc:
        return JSONResponse(status_code=400, content={"error": str(exc)})
    except UpstreamError as exc:
        return _upstream_failure("Failed to create table", exc)
