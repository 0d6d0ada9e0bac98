"""
Debug summary of an outbound StatusEvent.

Kept apart from the pipeline so the log layout can change without touching
payload construction.
"""

from __future__ import annotations

import logging

from dashhook.models import StatusEvent

logger = logging.getLogger("dashhook.handlers")

STATUS_UPPER = {
    "investigating": "INVESTIGATING",
    "identified": "IDENTIFIED",
    "monitoring": "MONITORING",
    "resolved": "RESOLVED",
    "unknown": "UNKNOWN (will be rejected)",
}


def log_status_event(event: StatusEvent) -> None:
    """Log a structured summary of the event about to be sent."""
    if not logger.isEnabledFor(logging.DEBUG):
        return

    status_label = STATUS_UPPER.get(event.status, event.status.upper())

    separator = "=" * 64
    logger.debug(separator)
    logger.debug("STATUS EVENT  [%s]  %s", status_label, event.description)
    logger.debug("  ID       : %s", event.id)
    if event.severity is not None:
        hidden = " (hidden)" if event.severity_hide else ""
        logger.debug("  Severity : %s%s", event.severity, hidden)
    logger.debug("  Services : %s", ", ".join(event.services) or "-")
    if event.suppress_notif:
        logger.debug("  Notify   : suppressed")
    if event.update:
        logger.debug("  Update   : %s", event.update.update)
    logger.debug(separator)
