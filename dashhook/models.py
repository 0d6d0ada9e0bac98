"""
Pydantic v2 models for the inbound record snapshot and the outbound
StatusDashboard webhook payload.

Reference: https://developer.servicenow.com/dev.do#!/reference/api/latest/rest/c_TableAPI
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


# ---------------------------------------------------------------------------
# Inbound record snapshot (posted by the ticketing platform)
# ---------------------------------------------------------------------------
class FieldValue(BaseModel):
    """Table API ``sysparm_display_value=all`` shape."""
    value: Optional[str] = None
    display_value: Optional[str] = None


class JournalEntry(BaseModel):
    element: str                         # comments (customer visible) / work_notes
    value: str                           # rendered entry, header line first
    created_on: datetime
    created_by: Optional[str] = None


class IncidentSnapshot(BaseModel):
    """Top-level trigger body: one incident as seen by an insert/update rule."""
    sys_id: str
    operation: Literal["insert", "update"]
    current: dict[str, FieldValue] = Field(default_factory=dict)
    previous: Optional[dict[str, FieldValue]] = None
    journal: list[JournalEntry] = Field(default_factory=list)
    relations: dict[str, list[dict[str, Optional[str]]]] = Field(default_factory=dict)

    @field_validator("current", "previous", mode="before")
    @classmethod
    def _wrap_plain_values(cls, fields):
        # Plain strings are accepted as both value and display value.
        if not isinstance(fields, dict):
            return fields
        return {
            name: {"value": raw, "display_value": raw} if isinstance(raw, str) or raw is None else raw
            for name, raw in fields.items()
        }

    @field_validator("relations", mode="before")
    @classmethod
    def _unwrap_relation_cells(cls, relations):
        # Rows may come in the value/display_value shape; joins use the value.
        if not isinstance(relations, dict):
            return relations
        return {
            table: [_unwrap_row(row) for row in rows] if isinstance(rows, list) else rows
            for table, rows in relations.items()
        }


def _unwrap_row(row):
    if not isinstance(row, dict):
        return row
    return {col: cell.get("value") if isinstance(cell, dict) else cell for col, cell in row.items()}


# ---------------------------------------------------------------------------
# Outbound payload
# ---------------------------------------------------------------------------
class TimelineUpdate(BaseModel):
    status: Literal["update"] = "update"
    update: str


class StatusEvent(BaseModel):
    """Webhook body; field order is the serialized key order."""
    id: str
    type: Literal["incident"] = "incident"
    status: str                          # investigating / identified / resolved / unknown
    services: list[str] = Field(default_factory=list)
    timeline: bool = False               # no automatic 'investigating' entry
    severity_hide: bool = False
    suppress_notif: Optional[bool] = None
    description: str
    severity: Optional[str] = None
    update: Optional[TimelineUpdate] = None


class Description(BaseModel):
    text: str
    suppress_notification: bool = False


class WebhookOutcome(BaseModel):
    status: int
    body: str
