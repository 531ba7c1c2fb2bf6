"""Airtable metadata API package — typed client and schemas."""

from airtable_relay.airtable.client import (
    AirtableMetaClient,
    UpstreamContractError,
    UpstreamError,
    build_http_client,
)
from airtable_relay.airtable.models import FieldDefinition, default_fields

__all__ = [
    "AirtableMetaClient",
    "UpstreamError",
    "UpstreamContractError",
    "build_http_client",
    "FieldDefinition",
    "default_fields",
]
