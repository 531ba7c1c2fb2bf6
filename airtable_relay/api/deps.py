"""Request-scoped dependencies."""

from __future__ import annotations

from fastapi import Request

from airtable_relay.service import RelayService


def get_relay(request: Request) -> RelayService:
    """Return the :class:`RelayService` built by the app lifespan."""
    return request.app.state.relay
