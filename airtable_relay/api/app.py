"""FastAPI application factory.

Lifespan
--------
On startup the app opens a single ``httpx.AsyncClient`` for the Airtable
metadata API and builds the :class:`~airtable_relay.service.RelayService`
(shared across all requests via ``request.app.state.relay``).  On shutdown
it closes the HTTP client.

Routers
-------
    /          — service status, health, recent logs
    /bases     — base / table listing and table creation
    /test      — upstream connectivity probe
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from airtable_relay.airtable.client import AirtableMetaClient, build_http_client
from airtable_relay.config import Settings, load_settings
from airtable_relay.logbuffer import LogBuffer
from airtable_relay.service import RelayService

from airtable_relay.api.routers import bases as bases_router
from airtable_relay.api.routers import diagnostics as diagnostics_router
from airtable_relay.api.routers import status as status_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the upstream HTTP client on startup and close it on shutdown."""
    settings: Settings = app.state.settings
    http = build_http_client(settings)
    relay = RelayService(settings, AirtableMetaClient(http), logs=app.state.logs)
    app.state.relay = relay
    relay.record(f"{settings.service_name} started on port {settings.port}")
    try:
        yield
    finally:
        await http.aclose()


def create_app(
    settings: Optional[Settings] = None,
    logs: Optional[LogBuffer] = None,
) -> FastAPI:
    """Return a fully-configured FastAPI application instance.

    Args:
        settings: Resolved configuration.  Defaults to :func:`load_settings`.
        logs: Log buffer to record into.  A fresh one is created by default.
    """
    if settings is None:
        settings = load_settings()

    app = FastAPI(
        title="Airtable Relay",
        description=(
            "Relays requests to the Airtable metadata API: list bases, "
            "list tables in a base and create tables with field schemas."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.logs = logs if logs is not None else LogBuffer()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(status_router.router, tags=["status"])
    app.include_router(bases_router.router, prefix="/bases", tags=["bases"])
    app.include_router(diagnostics_router.router, tags=["diagnostics"])

    return app
