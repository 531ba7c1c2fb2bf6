"""Pydantic schemas for the Airtable metadata API.

Upstream responses are validated into these models before the relay
projects them.  Unknown keys in upstream payloads are ignored; unknown keys
in caller-supplied field definitions are forwarded untouched.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


# ---------------------------------------------------------------------------
# Field definitions (request side)
# ---------------------------------------------------------------------------

class SelectChoice(BaseModel):
    name: str
    color: Optional[str] = None


class FieldDefinition(BaseModel):
    """One column of a table schema, as sent to ``POST /meta/bases/{id}/tables``."""

    model_config = ConfigDict(extra="allow")

    name: str
    type: str
    description: Optional[str] = None
    options: Optional[dict[str, Any]] = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


def default_fields() -> list[FieldDefinition]:
    """Schema used when a table is created without explicit fields."""
    status_choices = [
        SelectChoice(name="Active", color="greenBright"),
        SelectChoice(name="Inactive", color="redBright"),
        SelectChoice(name="Pending", color="yellowBright"),
    ]
    return [
        FieldDefinition(name="Name", type="singleLineText"),
        FieldDefinition(name="Notes", type="multilineText"),
        FieldDefinition(
            name="Status",
            type="singleSelect",
            options={"choices": [c.model_dump() for c in status_choices]},
        ),
        FieldDefinition(name="Created", type="createdTime"),
    ]


# ---------------------------------------------------------------------------
# Upstream responses
# ---------------------------------------------------------------------------

class UpstreamBase(BaseModel):
    id: str
    name: str
    permissionLevel: Optional[str] = None


class BaseListResponse(BaseModel):
    """``GET /meta/bases``"""

    bases: list[UpstreamBase]
    offset: Optional[str] = None


class UpstreamTable(BaseModel):
    id: str
    name: str
    primaryFieldId: Optional[str] = None
    fields: Optional[list[dict[str, Any]]] = None

    @property
    def field_count(self) -> int:
        return len(self.fields) if self.fields else 0


class TableListResponse(BaseModel):
    """``GET /meta/bases/{baseId}/tables``"""

    tables: list[UpstreamTable]


class CreatedTable(BaseModel):
    """``POST /meta/bases/{baseId}/tables``"""

    id: str
    name: str
    primaryFieldId: Optional[str] = None
    fields: Optional[list[dict[str, Any]]] = None
