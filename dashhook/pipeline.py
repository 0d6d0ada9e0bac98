"""
One trigger invocation: build → sign → send, strictly in that order.
"""

from __future__ import annotations

import logging
from typing import Optional

import aiohttp

from dashhook.client import DashboardClient
from dashhook.config import Settings
from dashhook.handlers import log_status_event
from dashhook.models import WebhookOutcome
from dashhook.payload import build_status_event, serialize
from dashhook.platform import IncidentRecord

logger = logging.getLogger("dashhook.pipeline")


async def deliver_incident(
    record: IncidentRecord,
    settings: Settings,
    session: Optional[aiohttp.ClientSession] = None,
) -> Optional[WebhookOutcome]:
    """Build the StatusEvent for ``record`` and post it to the dashboard.

    Relation lookup failures propagate before anything is sent; signing and
    delivery failures are logged and never raised.
    """
    event = await build_status_event(record, settings)
    log_status_event(event)
    body = serialize(event)

    if session is None:
        async with aiohttp.ClientSession() as own_session:
            return await _sign_and_send(DashboardClient(own_session, settings), body)
    return await _sign_and_send(DashboardClient(session, settings), body)


async def _sign_and_send(client: DashboardClient, body: bytes) -> Optional[WebhookOutcome]:
    signature = await client.sign(body)
    return await client.send(body, signature)
