"""
Field mapping and normalization: incident fields → StatusDashboard values.

Everything here is a pure function of the record and the settings, except
``resolve_services`` which awaits the record's relation query.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from dashhook.config import Settings
from dashhook.models import Description, TimelineUpdate
from dashhook.platform import IncidentRecord

logger = logging.getLogger("dashhook.mapping")

UNKNOWN = "unknown"
COMMENTS_FIELD = "comments"


# ---------------------------------------------------------------------------
# Field mapper
# ---------------------------------------------------------------------------
def map_status(state_label: Optional[str], table: Mapping[str, str]) -> str:
    # Unmapped states go out as "unknown"; the dashboard rejects them.
    logger.debug("Incident state: %s", state_label)
    return table.get(state_label or "", UNKNOWN)


def map_severity(impact_label: Optional[str], table: Mapping[str, str]) -> str:
    logger.debug("Incident impact: %s", impact_label)
    return table.get(impact_label or "", UNKNOWN)


# ---------------------------------------------------------------------------
# Description composer
# ---------------------------------------------------------------------------
def compose_description(
    short_desc: str,
    long_desc: Optional[str],
    suppress_marker: str,
    include_long: bool,
) -> Description:
    """Outbound description text plus the notification-suppression flag.

    Only the first marker occurrence in the short description is removed;
    the long description is appended untouched.
    """
    suppress = False
    if suppress_marker and suppress_marker in short_desc:
        short_desc = short_desc.replace(suppress_marker, "", 1).strip()
        suppress = True

    if include_long and long_desc:
        return Description(text=f"{short_desc} {long_desc}", suppress_notification=suppress)
    return Description(text=short_desc, suppress_notification=suppress)


# ---------------------------------------------------------------------------
# Affected-entity resolver
# ---------------------------------------------------------------------------
async def resolve_services(record: IncidentRecord, settings: Settings) -> list[str]:
    """Primary service first, then impacted services in query order, no dupes.

    A failing relation query propagates (``RelationQueryError``).
    """
    services: dict[str, None] = {}

    primary = record.get_field(settings.primary_service_field)
    if primary:
        logger.debug(
            "Found incident primary business service: %s",
            record.get_display_value(settings.primary_service_field),
        )
        services[primary] = None

    rows = await record.query_related(
        settings.relation_table,
        {settings.relation_task_field: record.sys_id},
    )
    for row in rows:
        service_id = row.get(settings.relation_service_field)
        if not service_id:
            continue
        logger.debug("Found incident impacted service: %s", service_id)
        services.setdefault(service_id, None)

    return list(services)


# ---------------------------------------------------------------------------
# Update extractor
# ---------------------------------------------------------------------------
def clean_comment(entry: str) -> str:
    """Drop the platform header line and any run of trailing blank lines."""
    if "\n" in entry:
        entry = entry.split("\n", 1)[1]
    return _strip_trailing_blanks(entry)


def _strip_trailing_blanks(text: str) -> str:
    # Cut at the first newline of the trailing whitespace when it holds two or more.
    tail = text[len(text.rstrip()):]
    if tail.count("\n") < 2:
        return text
    return text[:len(text) - len(tail) + tail.index("\n")]


def extract_update(record: IncidentRecord, is_update: bool) -> Optional[TimelineUpdate]:
    if not is_update:
        logger.debug("New incident detected")
        return None

    logger.debug("Incident update detected")
    if not record.changes(COMMENTS_FIELD):
        logger.debug("Incident update detected with no customer visible comments")
        return None

    last_comment = record.journal_entry(COMMENTS_FIELD)
    if not last_comment:
        logger.debug("Comments field changed but the last comment could not be read")
        return None

    logger.debug("Customer visible comment on this incident: %r", last_comment)
    cleaned = clean_comment(last_comment)
    if not cleaned:
        logger.debug("Last customer visible comment is empty after cleaning; no update sent")
        return None

    logger.debug("Last customer visible comment (cleaned): %r", cleaned)
    return TimelineUpdate(update=cleaned)
