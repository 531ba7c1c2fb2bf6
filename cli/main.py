"""Airtable relay CLI — entry-point for the server and one-shot relay calls.

Usage:
    python cli/main.py --help

Commands:
    serve          run the HTTP relay (uvicorn)
    bases          list bases visible to the configured token
    tables         list tables in a base
    create-table   create a table (default schema unless --fields-file)
    test           connectivity probe against the metadata API
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that
# `from airtable_relay.xxx import ...` works when the CLI is invoked as
# `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import json
import os
from typing import Any, Awaitable, Callable, NoReturn, Optional, TypeVar

import typer
from pydantic import TypeAdapter, ValidationError

from airtable_relay.airtable.client import AirtableMetaClient, UpstreamError, build_http_client
from airtable_relay.airtable.models import FieldDefinition
from airtable_relay.config import load_settings
from airtable_relay.logging_setup import setup_logging
from airtable_relay.service import MissingTableNameError, RelayService

T = TypeVar("T")

app = typer.Typer(
    name="airtable-relay",
    help="Airtable metadata relay CLI.",
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _run_relay(call: Callable[[RelayService], Awaitable[T]]) -> T:
    """Build a short-lived :class:`RelayService`, run *call*, close the client."""
    settings = load_settings()
    setup_logging(settings.log_level)

    async def _main() -> T:
        async with build_http_client(settings) as http:
            relay = RelayService(settings, AirtableMetaClient(http))
            return await call(relay)

    return asyncio.run(_main())


def _fail(prefix: str, exc: UpstreamError) -> NoReturn:
    typer.echo(f"[{prefix}] {exc.message}", err=True)
    if exc.details != exc.message:
        typer.echo(json.dumps(exc.details, indent=2), err=True)
    raise typer.Exit(1)


def _load_fields(path: Path) -> list[FieldDefinition]:
    try:
        raw: Any = json.loads(path.read_text(encoding="utf-8"))
        return TypeAdapter(list[FieldDefinition]).validate_python(raw)
    except (OSError, ValueError, ValidationError) as exc:
        typer.echo(f"[create-table] Invalid fields file {str(path)!r}: {exc}", err=True)
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default: HOST or 0.0.0.0)."),
    port: Optional[int] = typer.Option(None, help="Listen port (default: PORT or 3000)."),
    reload: bool = typer.Option(False, help="Reload on code changes (development)."),
) -> None:
    """Run the HTTP relay with uvicorn."""
    import uvicorn

    settings = load_settings()
    setup_logging(settings.log_level)
    host = host or settings.host
    port = port or settings.port
    # create_app() re-reads settings from the environment, reload workers included.
    os.environ["HOST"] = host
    os.environ["PORT"] = str(port)
    uvicorn.run(
        "airtable_relay.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


# ---------------------------------------------------------------------------
# One-shot relay calls
# ---------------------------------------------------------------------------
@app.command("bases")
def bases() -> None:
    """List all bases visible to the configured token."""
    try:
        result = _run_relay(lambda relay: relay.list_bases())
    except UpstreamError as exc:
        _fail("bases", exc)
    if not result:
        typer.echo("[bases] No bases found.")
        return
    for b in result:
        typer.echo(f"  {b['id']}  {b['name']!r}  ({b['permissionLevel']})")


@app.command("tables")
def tables(
    base_id: str = typer.Argument(..., help="Base ID (starts with 'app')."),
) -> None:
    """List tables in a base."""
    try:
        result = _run_relay(lambda relay: relay.list_tables(base_id))
    except UpstreamError as exc:
        _fail("tables", exc)
    if not result:
        typer.echo(f"[tables] No tables in base {base_id}.")
        return
    for t in result:
        typer.echo(f"  {t['id']}  {t['name']!r}  fields={t['fieldCount']}")


@app.command("create-table")
def create_table(
    base_id: str = typer.Argument(..., help="Base ID (starts with 'app')."),
    name: str = typer.Option(..., help="Name of the new table."),
    fields_file: Optional[Path] = typer.Option(
        None, "--fields-file", help="JSON file holding an array of field definitions."
    ),
) -> None:
    """Create a table; uses the default schema when no fields file is given."""
    fields = _load_fields(fields_file) if fields_file else None
    try:
        result = _run_relay(lambda relay: relay.create_table(base_id, name, fields))
    except MissingTableNameError as exc:
        typer.echo(f"[create-table] {exc}", err=True)
        raise typer.Exit(1)
    except UpstreamError as exc:
        _fail("create-table", exc)
    table = result["table"]
    typer.echo(f"[create-table] Created table {table['name']!r} with ID: {table['id']}")


@app.command("test")
def test_connection() -> None:
    """Check that the metadata API is reachable with the configured token."""
    try:
        result = _run_relay(lambda relay: relay.test_connection())
    except UpstreamError as exc:
        _fail("test", exc)
    typer.echo(f"[test] {result['message']} - found {result['basesFound']} bases")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
