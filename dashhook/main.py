"""
DashHook: FastAPI trigger endpoint.
Receives incident insert/update snapshots from the ticketing platform and
forwards them to StatusDashboard in the background, so the platform's
record mutation is never held up by webhook delivery.
"""

import logging
from datetime import datetime, timezone

from fastapi import BackgroundTasks, FastAPI, HTTPException, status
from fastapi.responses import JSONResponse

from dashhook.config import Settings, configure_logging
from dashhook.models import IncidentSnapshot
from dashhook.pipeline import deliver_incident
from dashhook.platform import SnapshotRecord

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger("dashhook")

settings = Settings.from_env()
configure_logging(settings)

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------
app = FastAPI(
    title="DashHook",
    description="Incident → StatusDashboard webhook adapter",
    version="1.0.0",
)


async def _deliver_in_background(snapshot: IncidentSnapshot) -> None:
    try:
        await deliver_incident(SnapshotRecord(snapshot), settings)
    except Exception:
        logger.exception("Webhook for incident %s aborted", snapshot.sys_id)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@app.get("/health", tags=["ops"])
async def health() -> dict[str, str]:
    return {"status": "ok", "time": datetime.now(timezone.utc).isoformat()}


@app.post("/trigger/incident", tags=["triggers"], status_code=status.HTTP_202_ACCEPTED)
async def receive_incident_trigger(
    snapshot: IncidentSnapshot,
    background_tasks: BackgroundTasks,
) -> JSONResponse:
    if not settings.endpoint:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                            detail="StatusDashboard endpoint not configured")

    logger.debug("Trigger received: %s %s", snapshot.operation, snapshot.sys_id)
    background_tasks.add_task(_deliver_in_background, snapshot)
    return JSONResponse({"accepted": snapshot.operation, "id": snapshot.sys_id},
                        status_code=status.HTTP_202_ACCEPTED)
