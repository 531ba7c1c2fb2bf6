"""Tests for airtable_relay.airtable — metadata client and schemas.

``respx`` patches ``httpx`` at the transport layer so no real network calls
are made.  pytest-asyncio runs the ``async`` tests (``asyncio_mode = "auto"``).
"""

from __future__ import annotations

import json

import httpx
import pytest
import respx

from airtable_relay.airtable.client import (
    AirtableMetaClient,
    UpstreamContractError,
    UpstreamError,
    build_http_client,
)
from airtable_relay.airtable.models import FieldDefinition, default_fields
from airtable_relay.config import Settings

BASE_URL = "https://api.airtable.com/v0"


@pytest.fixture()
def settings() -> Settings:
    return Settings(airtable_token="patTEST123")


@pytest.fixture()
async def meta(settings):
    async with build_http_client(settings) as http:
        yield AirtableMetaClient(http)


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class TestDefaultFields:
    def test_exact_default_schema(self):
        payload = [f.to_payload() for f in default_fields()]
        assert payload == [
            {"name": "Name", "type": "singleLineText"},
            {"name": "Notes", "type": "multilineText"},
            {
                "name": "Status",
                "type": "singleSelect",
                "options": {
                    "choices": [
                        {"name": "Active", "color": "greenBright"},
                        {"name": "Inactive", "color": "redBright"},
                        {"name": "Pending", "color": "yellowBright"},
                    ]
                },
            },
            {"name": "Created", "type": "createdTime"},
        ]

    def test_fresh_list_each_call(self):
        first = default_fields()
        first.pop()
        assert len(default_fields()) == 4


class TestFieldDefinition:
    def test_extra_keys_forwarded(self):
        f = FieldDefinition.model_validate(
            {"name": "Amount", "type": "currency", "options": {"precision": 2, "symbol": "$"}, "x": 1}
        )
        assert f.to_payload() == {
            "name": "Amount",
            "type": "currency",
            "options": {"precision": 2, "symbol": "$"},
            "x": 1,
        }

    def test_explicit_null_extra_key_forwarded(self):
        f = FieldDefinition.model_validate(
            {"name": "A", "type": "number", "options": {"precision": None}, "x": None}
        )
        assert f.to_payload() == {
            "name": "A",
            "type": "number",
            "options": {"precision": None},
            "x": None,
        }

    def test_unset_optional_keys_omitted(self):
        assert FieldDefinition(name="A", type="number").to_payload() == {"name": "A", "type": "number"}


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class TestRequests:
    async def test_sends_bearer_and_content_type(self, meta):
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.get("/meta/bases").mock(
                return_value=httpx.Response(200, json={"bases": []})
            )
            await meta.list_bases()

        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer patTEST123"
        assert request.headers["Content-Type"] == "application/json"

    async def test_list_bases_parses(self, meta):
        body = {
            "bases": [
                {"id": "app1", "name": "One", "permissionLevel": "create", "extra": True},
                {"id": "app2", "name": "Two", "permissionLevel": "read"},
            ]
        }
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/meta/bases").mock(return_value=httpx.Response(200, json=body))
            result = await meta.list_bases()

        assert [b.id for b in result.bases] == ["app1", "app2"]

    async def test_list_tables_field_count(self, meta):
        body = {
            "tables": [
                {"id": "tbl1", "name": "A", "primaryFieldId": "fld1", "fields": [{"id": "fld1"}, {"id": "fld2"}]},
                {"id": "tbl2", "name": "B", "primaryFieldId": "fld3"},
            ]
        }
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/meta/bases/appX/tables").mock(return_value=httpx.Response(200, json=body))
            result = await meta.list_tables("appX")

        assert [t.field_count for t in result.tables] == [2, 0]

    async def test_base_id_is_single_path_segment(self, meta):
        with respx.mock as mock:
            route = mock.route(method="GET").mock(
                return_value=httpx.Response(200, json={"tables": []})
            )
            await meta.list_tables("app/../x")

        assert route.calls.last.request.url.raw_path == b"/v0/meta/bases/app%2F..%2Fx/tables"

    async def test_create_table_body(self, meta):
        fields = [FieldDefinition(name="Title", type="singleLineText")]
        with respx.mock(base_url=BASE_URL) as mock:
            route = mock.post("/meta/bases/appX/tables").mock(
                return_value=httpx.Response(
                    200,
                    json={"id": "tblNew", "name": "Projects", "primaryFieldId": "fldA", "fields": [{"id": "fldA"}]},
                )
            )
            created = await meta.create_table("appX", "Projects", fields)

        assert json.loads(route.calls.last.request.content) == {
            "name": "Projects",
            "fields": [{"name": "Title", "type": "singleLineText"}],
        }
        assert created.id == "tblNew"
        assert created.fields == [{"id": "fldA"}]


class TestErrors:
    async def test_http_error_carries_upstream_payload(self, meta):
        err = {"error": {"type": "AUTHENTICATION_REQUIRED", "message": "Authentication required"}}
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/meta/bases").mock(return_value=httpx.Response(401, json=err))
            with pytest.raises(UpstreamError) as info:
                await meta.list_bases()

        assert info.value.status_code == 401
        assert info.value.message == "Request failed with status code 401"
        assert info.value.details == err
        assert not isinstance(info.value, UpstreamContractError)

    async def test_http_error_with_text_body(self, meta):
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/meta/bases").mock(return_value=httpx.Response(502, text="Bad Gateway"))
            with pytest.raises(UpstreamError) as info:
                await meta.list_bases()

        assert info.value.details == "Bad Gateway"

    async def test_network_error(self, meta):
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/meta/bases").mock(side_effect=httpx.ConnectError("connection refused"))
            with pytest.raises(UpstreamError) as info:
                await meta.list_bases()

        assert info.value.status_code is None
        assert info.value.message == "connection refused"
        assert info.value.details == "connection refused"

    async def test_schema_mismatch_is_contract_error(self, meta):
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/meta/bases").mock(return_value=httpx.Response(200, json={"records": []}))
            with pytest.raises(UpstreamContractError) as info:
                await meta.list_bases()

        assert any(d.startswith("bases:") for d in info.value.details)

    async def test_non_json_success_is_contract_error(self, meta):
        with respx.mock(base_url=BASE_URL) as mock:
            mock.get("/meta/bases").mock(return_value=httpx.Response(200, text="<html>"))
            with pytest.raises(UpstreamContractError):
                await meta.list_bases()
