"""
Deployment configuration for the incident → StatusDashboard adapter.

Everything the pipeline needs is carried by one frozen ``Settings`` object,
built once from the environment and passed explicitly into each invocation.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, Json

ENV_PREFIX = "DASHHOOK_"

DEFAULT_STATUS_MAPPING = {
    "New": "investigating",
    "In Progress": "identified",
    "On Hold": "identified",
    "Resolved": "resolved",
    "Closed": "resolved",
    "Cancelled": "resolved",
}

# Standard StatusDashboard severities are minor_performance / major_performance /
# minor_outage / major_outage; custom ones need enabling on the dashboard side.
DEFAULT_SEVERITY_MAPPING = {
    "1 - High": "High",
    "2 - Medium": "Medium",
    "3 - Low": "Low",
}


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_url: str = "https://www.statusdashboard.com"
    endpoint: str = ""                   # integration id, e.g. a183eb2c73db4e897002275aefc78826
    secret: str = ""                     # empty disables signing
    product: str = "statusdashboard"     # x-<product>-secret / x-<product>-signature

    status_mapping: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_STATUS_MAPPING))
    severity_mapping: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_SEVERITY_MAPPING))

    severity_include: bool = True
    severity_hide: bool = False
    include_long_description: bool = True
    suppress_marker: str = "{-}"
    debug: bool = False

    # Source-record field names (ServiceNow defaults)
    primary_service_field: str = "business_service"
    relation_table: str = "task_cmdb_ci_service"
    relation_task_field: str = "task"
    relation_service_field: str = "cmdb_ci_service"

    @property
    def webhook_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/webhooks/integration/{self.endpoint}/"

    @property
    def signature_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/webhooks/integration/{self.endpoint}/signature"

    @property
    def secret_header(self) -> str:
        return f"x-{self.product}-secret"

    @property
    def signature_header(self) -> str:
        return f"x-{self.product}-signature"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from ``DASHHOOK_*`` variables; unset ones keep defaults.

        Mapping tables are JSON objects; flags use pydantic bool parsing
        (true/false, 1/0, yes/no, on/off) and reject anything else.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        for name in ("base_url", "endpoint", "secret", "product", "suppress_marker"):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None:
                values[name] = raw

        for name in ("severity_include", "severity_hide", "include_long_description", "debug"):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None:
                values[name] = raw.strip().lower()

        for name in ("status_mapping", "severity_mapping"):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw:
                values[name] = _MappingJson.model_validate({"table": raw}).table

        return cls(**values)


class _MappingJson(BaseModel):
    table: Json[dict[str, str]]


def configure_logging(settings: Settings) -> None:
    """Raise the package logger to DEBUG when the debug flag is set."""
    level = logging.DEBUG if settings.debug else logging.INFO
    logging.getLogger("dashhook").setLevel(level)
