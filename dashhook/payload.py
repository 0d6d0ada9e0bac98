"""
Assembles one StatusEvent from an incident record.
"""

from __future__ import annotations

from dashhook.config import Settings
from dashhook.mapping import (
    compose_description,
    extract_update,
    map_severity,
    map_status,
    resolve_services,
)
from dashhook.models import StatusEvent
from dashhook.platform import IncidentRecord


async def build_status_event(record: IncidentRecord, settings: Settings) -> StatusEvent:
    description = compose_description(
        record.get_field("short_description") or "",
        record.get_field("description"),
        settings.suppress_marker,
        settings.include_long_description,
    )

    return StatusEvent(
        id=record.sys_id,
        status=map_status(record.get_display_value("state"), settings.status_mapping),
        services=await resolve_services(record, settings),
        severity_hide=settings.severity_hide,
        suppress_notif=True if description.suppress_notification else None,
        description=description.text,
        severity=(
            map_severity(record.get_display_value("impact"), settings.severity_mapping)
            if settings.severity_include
            else None
        ),
        update=extract_update(record, record.operation == "update"),
    )


def serialize(event: StatusEvent) -> bytes:
    """Compact JSON; this exact body is both signed and sent."""
    return event.model_dump_json(exclude_none=True).encode()
