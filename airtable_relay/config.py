"""Centralised settings for the Airtable relay.

All runtime configuration is resolved here in one place, once, at startup.
Values can be overridden via environment variables or a `.env` file in the
project root (loaded by :func:`load_settings`).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# .env lives in the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"

SERVICE_NAME = "Airtable Table Creator"
DEFAULT_PORT = 3000
DEFAULT_BASE_URL = "https://api.airtable.com/v0"


@dataclass(frozen=True)
class Settings:
    # ------------------------------------------------------------------
    # Upstream credential / endpoint
    # ------------------------------------------------------------------
    airtable_token: str = ""
    airtable_base_url: str = DEFAULT_BASE_URL
    request_timeout: float = 30.0

    # ------------------------------------------------------------------
    # HTTP server
    # ------------------------------------------------------------------
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = "INFO"

    service_name: str = SERVICE_NAME

    @property
    def has_token(self) -> bool:
        """``True`` when a bearer credential is configured."""
        return bool(self.airtable_token)


def _resolve_token(environ: dict[str, str]) -> str:
    """``AIRTABLE_TOKEN`` wins over ``AIRTABLE_PAT``; empty values fall through."""
    return environ.get("AIRTABLE_TOKEN") or environ.get("AIRTABLE_PAT") or ""


def load_settings(environ: dict[str, str] | None = None, *, dotenv: bool = True) -> Settings:
    """Resolve a :class:`Settings` value from the environment.

    Args:
        environ: Mapping to read from.  Defaults to ``os.environ``.
        dotenv: Load the project ``.env`` into ``os.environ`` first
            (existing variables are never overridden).

    Returns:
        An immutable :class:`Settings`.  A missing token is not an error here;
        it only degrades ``/health``.
    """
    if dotenv:
        load_dotenv(_env_path, override=False)
    env = dict(os.environ if environ is None else environ)

    return Settings(
        airtable_token=_resolve_token(env),
        airtable_base_url=env.get("AIRTABLE_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        request_timeout=float(env.get("REQUEST_TIMEOUT", "30.0")),
        host=env.get("HOST", "0.0.0.0"),
        port=int(env.get("PORT") or DEFAULT_PORT),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
    )
