"""Async client for the Airtable metadata API.

Endpoints
---------
GET  /meta/bases                      List bases visible to the token
GET  /meta/bases/{baseId}/tables      List tables (with fields) in a base
POST /meta/bases/{baseId}/tables      Create a table

Every call is a single request; there is no retry, pagination or caching.
Failures surface as :class:`UpstreamError` (transport error or non-2xx) or
:class:`UpstreamContractError` (2xx with a body that does not match the
expected schema).
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from airtable_relay.airtable.models import (
    BaseListResponse,
    CreatedTable,
    FieldDefinition,
    TableListResponse,
)
from airtable_relay.config import Settings

_M = TypeVar("_M", bound=BaseModel)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class UpstreamError(Exception):
    """The metadata API call failed.

    Attributes:
        message: Short human-readable reason, also used for log lines.
        details: Upstream error payload (JSON or text) or the failure message.
        status_code: Upstream HTTP status, ``None`` for transport errors.
    """

    def __init__(
        self,
        message: str,
        details: Any = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = message if details is None else details
        self.status_code = status_code


class UpstreamContractError(UpstreamError):
    """A successful upstream response did not have the expected shape."""


def _response_details(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


def _parse(model: type[_M], payload: Any) -> _M:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        problems = [
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()
        ]
        raise UpstreamContractError(
            f"Unexpected upstream response for {model.__name__}",
            details=problems,
        ) from exc


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

def build_http_client(settings: Settings, **kwargs: Any) -> httpx.AsyncClient:
    """Return an ``httpx.AsyncClient`` pre-configured for the metadata API."""
    return httpx.AsyncClient(
        base_url=settings.airtable_base_url,
        headers={
            "Authorization": f"Bearer {settings.airtable_token}",
            "Content-Type": "application/json",
        },
        timeout=settings.request_timeout,
        **kwargs,
    )


class AirtableMetaClient:
    """Thin typed wrapper around the three metadata endpoints."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        try:
            response = await self._http.request(method, path, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise UpstreamError(
                f"Request failed with status code {status}",
                details=_response_details(exc.response),
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(str(exc) or type(exc).__name__) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamContractError(
                "Upstream returned a non-JSON body",
                details=response.text,
                status_code=response.status_code,
            ) from exc

    async def list_bases(self) -> BaseListResponse:
        payload = await self._request("GET", "/meta/bases")
        return _parse(BaseListResponse, payload)

    async def list_tables(self, base_id: str) -> TableListResponse:
        payload = await self._request("GET", f"/meta/bases/{quote(base_id, safe='')}/tables")
        return _parse(TableListResponse, payload)

    async def create_table(
        self,
        base_id: str,
        name: str,
        fields: Sequence[FieldDefinition],
    ) -> CreatedTable:
        """Create table *name* in *base_id* with the given field schema."""
        body = {"name": name, "fields": [f.to_payload() for f in fields]}
        payload = await self._request(
            "POST", f"/meta/bases/{quote(base_id, safe='')}/tables", json=body
        )
        return _parse(CreatedTable, payload)
