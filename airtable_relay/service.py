"""Relay operations, independent of the HTTP layer.

:class:`RelayService` owns the log buffer and the metadata client.  Each
operation makes at most one upstream call, projects the result into the
relay's smaller response shapes, and records progress/failure lines in the
buffer (mirrored to the stdlib logger).  Upstream failures are logged here and
re-raised as :class:`~airtable_relay.airtable.client.UpstreamError` for the
caller to turn into a response.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from airtable_relay.airtable.client import AirtableMetaClient, UpstreamError
from airtable_relay.airtable.models import FieldDefinition, default_fields
from airtable_relay.config import Settings
from airtable_relay.logbuffer import RECENT_LIMIT, LogBuffer
from airtable_relay.time_utils import utc_now_iso

logger = logging.getLogger(__name__)

ENDPOINTS = [
    "GET / - Service status",
    "GET /health - Health check",
    "GET /logs - View recent logs",
    "GET /bases - List all bases",
    "GET /bases/:baseId/tables - List tables in a base",
    "POST /bases/:baseId/tables - Create new table",
    "POST /test - Test the service",
]


class MissingTableNameError(ValueError):
    """Create-table request without a usable ``name``."""

    def __init__(self) -> None:
        super().__init__("Table name is required")


class RelayService:
    def __init__(
        self,
        settings: Settings,
        client: AirtableMetaClient,
        logs: Optional[LogBuffer] = None,
    ) -> None:
        self.settings = settings
        self.client = client
        self.logs = logs if logs is not None else LogBuffer()

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    def record(self, message: str, level: int = logging.INFO) -> str:
        """Append *message* to the buffer and the process log."""
        entry = self.logs.append(message)
        logger.log(level, message)
        return entry

    # ------------------------------------------------------------------
    # Local operations (no upstream call)
    # ------------------------------------------------------------------
    def status(self) -> dict[str, Any]:
        return {
            "status": "active",
            "service": self.settings.service_name,
            "endpoints": list(ENDPOINTS),
            "timestamp": utc_now_iso(),
        }

    def health(self) -> dict[str, Any]:
        """Healthy iff a token is configured; never calls upstream."""
        healthy = self.settings.has_token
        return {
            "status": "healthy" if healthy else "unhealthy",
            "hasToken": healthy,
            "timestamp": utc_now_iso(),
        }

    def recent_logs(self) -> dict[str, Any]:
        return {"logs": self.logs.recent(RECENT_LIMIT), "total": len(self.logs)}

    # ------------------------------------------------------------------
    # Upstream operations
    # ------------------------------------------------------------------
    async def list_bases(self) -> list[dict[str, Any]]:
        """Return ``{id, name, permissionLevel}`` per base, in upstream order."""
        self.record("Fetching all bases")
        try:
            result = await self.client.list_bases()
        except UpstreamError as exc:
            self.record(f"Error fetching bases: {exc.message}", logging.WARNING)
            raise

        bases = [
            {"id": b.id, "name": b.name, "permissionLevel": b.permissionLevel}
            for b in result.bases
        ]
        self.record(f"Found {len(bases)} bases")
        return bases

    async def list_tables(self, base_id: str) -> list[dict[str, Any]]:
        """Return ``{id, name, primaryFieldId, fieldCount}`` per table in *base_id*."""
        self.record(f"Fetching tables for base {base_id}")
        try:
            result = await self.client.list_tables(base_id)
        except UpstreamError as exc:
            self.record(f"Error fetching tables: {exc.message}", logging.WARNING)
            raise

        tables = [
            {
                "id": t.id,
                "name": t.name,
                "primaryFieldId": t.primaryFieldId,
                "fieldCount": t.field_count,
            }
            for t in result.tables
        ]
        self.record(f"Found {len(tables)} tables in base {base_id}")
        return tables

    async def create_table(
        self,
        base_id: str,
        name: Optional[str],
        fields: Optional[Sequence[FieldDefinition]] = None,
    ) -> dict[str, Any]:
        """Create table *name* in *base_id*.

        An empty or missing *fields* sequence is replaced by
        :func:`~airtable_relay.airtable.models.default_fields`.  The returned
        table is what upstream reported, not an echo of the request.

        Raises:
            MissingTableNameError: *name* is missing or empty (no upstream call).
            UpstreamError: The create call failed.
        """
        if not name:
            raise MissingTableNameError()

        self.record(f'Creating table "{name}" in base {base_id}')
        table_fields = list(fields) if fields else default_fields()
        try:
            created = await self.client.create_table(base_id, name, table_fields)
        except UpstreamError as exc:
            self.record(f"Error creating table: {exc.message}", logging.WARNING)
            raise

        self.record(f'Successfully created table "{name}" with ID: {created.id}')
        return {
            "success": True,
            "table": {"id": created.id, "name": created.name, "fields": created.fields},
        }

    async def test_connection(self) -> dict[str, Any]:
        """Probe ``/meta/bases``; only the count is reported."""
        self.record("Testing Airtable connection")
        try:
            result = await self.client.list_bases()
        except UpstreamError as exc:
            self.record(f"Test failed: {exc.message}", logging.WARNING)
            raise

        count = len(result.bases)
        self.record(f"Test successful - found {count} bases")
        return {
            "success": True,
            "message": "Airtable connection working",
            "basesFound": count,
            "timestamp": utc_now_iso(),
        }
