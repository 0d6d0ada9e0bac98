"""
Outbound StatusDashboard calls: optional signature fetch, then webhook POST.

Neither call raises to the caller. A failed signature degrades to an
unsigned send; a failed send is logged and dropped.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp

from dashhook.config import Settings
from dashhook.models import WebhookOutcome

logger = logging.getLogger("dashhook.client")


class DashboardClient:
    def __init__(self, session: aiohttp.ClientSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings

    async def sign(self, body: bytes) -> Optional[str]:
        """Return a signature for ``body``, or None when unsigned.

        No request is made when no secret is configured.
        """
        secret = self._settings.secret
        if not secret:
            return None

        headers = {
            self._settings.secret_header: secret,
            "Content-Type": "application/json",
        }
        try:
            async with self._session.post(self._settings.signature_url, data=body, headers=headers) as resp:
                if resp.status != 201:
                    logger.error("Failed to retrieve webhook signature. Status: %s", resp.status)
                    return None
                data = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.error("Error retrieving webhook signature: %s", exc)
            return None

        signature = data.get("signature") if isinstance(data, dict) else None
        if not signature:
            logger.error("Signature endpoint answered 201 without a signature")
            return None
        return signature

    async def send(self, body: bytes, signature: Optional[str] = None) -> Optional[WebhookOutcome]:
        headers = {"Content-Type": "application/json"}
        if signature:
            headers[self._settings.signature_header] = signature

        try:
            async with self._session.post(self._settings.webhook_url, data=body, headers=headers) as resp:
                outcome = WebhookOutcome(status=resp.status, body=await resp.text(errors="replace"))
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.error("Error sending webhook: %s", exc)
            return None

        logger.info("Webhook sent. Status: %s Response: %s", outcome.status, outcome.body)
        return outcome
