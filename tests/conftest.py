"""
Shared fixtures: incident snapshots and an in-process fake StatusDashboard.
"""

from __future__ import annotations

import json
from typing import Any

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from dashhook.models import IncidentSnapshot
from dashhook.platform import SnapshotRecord

INCIDENT_ID = "9d385017c611228701d22104cc95c371"
ENDPOINT = "a183eb2c73db4e897002275aefc78826"

BASE_FIELDS: dict[str, Any] = {
    "short_description": "Outage {-}",
    "description": "",
    "state": {"value": "1", "display_value": "New"},
    "impact": {"value": "1", "display_value": "1 - High"},
}


def build_snapshot(
    operation: str = "insert",
    current: dict[str, Any] | None = None,
    previous: dict[str, Any] | None = None,
    journal: list[dict[str, Any]] | None = None,
    services: list[str] | None = None,
) -> IncidentSnapshot:
    fields = dict(BASE_FIELDS)
    fields.update(current or {})
    return IncidentSnapshot(
        sys_id=INCIDENT_ID,
        operation=operation,
        current=fields,
        previous=previous,
        journal=journal or [],
        relations={
            "task_cmdb_ci_service": [
                {"task": INCIDENT_ID, "cmdb_ci_service": svc} for svc in (services or [])
            ],
        },
    )


@pytest.fixture
def make_record():
    """Factory for ``SnapshotRecord`` built on top of ``BASE_FIELDS``."""
    def _make(**kwargs: Any) -> SnapshotRecord:
        return SnapshotRecord(build_snapshot(**kwargs))
    return _make


# ---------------------------------------------------------------------------
# Fake StatusDashboard
# ---------------------------------------------------------------------------
class FakeDashboard:
    def __init__(self) -> None:
        self.base_url = ""
        self.signature_status = 201
        self.signature_payload: Any = {"signature": "sig-abc123"}
        self.webhook_status = 200
        self.webhook_body = json.dumps({"received": True}).encode()
        self.signature_requests: list[dict[str, Any]] = []
        self.webhook_requests: list[dict[str, Any]] = []

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/webhooks/integration/{endpoint}/signature", self._signature)
        app.router.add_post("/webhooks/integration/{endpoint}/", self._webhook)
        return app

    @staticmethod
    async def _capture(request: web.Request) -> dict[str, Any]:
        return {
            "endpoint": request.match_info["endpoint"],
            "headers": request.headers.copy(),
            "body": await request.read(),
        }

    async def _signature(self, request: web.Request) -> web.Response:
        self.signature_requests.append(await self._capture(request))
        return web.json_response(self.signature_payload, status=self.signature_status)

    async def _webhook(self, request: web.Request) -> web.Response:
        self.webhook_requests.append(await self._capture(request))
        return web.Response(body=self.webhook_body, status=self.webhook_status,
                            content_type="application/json", charset="utf-8")


@pytest_asyncio.fixture
async def dashboard():
    fake = FakeDashboard()
    server = TestServer(fake.make_app())
    await server.start_server()
    fake.base_url = f"http://{server.host}:{server.port}"
    yield fake
    await server.close()
