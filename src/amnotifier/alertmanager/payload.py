"""
Alertmanager API v2 alert payloads.

One ``AlertmanagerAlert`` describes one endpoint transition: firing when the
endpoint starts failing, resolved when it recovers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from amnotifier.alerting.alert import Alert
from amnotifier.alertmanager.config import Config
from amnotifier.endpoint.models import Endpoint, Result

ALERT_NAME = "GatusEndpointDown"
JOB_NAME = "gatus"


def format_timestamp(value: datetime) -> str:
    """RFC3339 timestamp with a ``Z`` suffix for UTC."""
    return value.isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class AlertmanagerAlert:
    """An alert in Alertmanager API v2 format."""

    labels: dict[str, str]
    annotations: dict[str, str]
    starts_at: datetime | None = None
    ends_at: datetime | None = None

    @property
    def is_resolved(self) -> bool:
        return self.ends_at is not None

    def to_dict(self) -> dict[str, Any]:
        """Wire representation; unset timestamps are omitted."""
        data: dict[str, Any] = {
            "labels": dict(self.labels),
            "annotations": dict(self.annotations),
        }
        if self.starts_at is not None:
            data["startsAt"] = format_timestamp(self.starts_at)
        if self.ends_at is not None:
            data["endsAt"] = format_timestamp(self.ends_at)
        return data


def build_alert(
    cfg: Config,
    endpoint: Endpoint,
    alert: Alert,
    result: Result,
    resolved: bool,
) -> AlertmanagerAlert:
    """
    Build the payload for one endpoint transition.

    Extra labels and annotations from ``cfg`` are applied last and may replace
    any of the fixed keys.

    Args:
        cfg: Effective (validated) provider configuration
        endpoint: Endpoint whose health changed
        alert: Alert definition that triggered
        result: Latest health-check result
        resolved: True if the endpoint recovered, False if it is failing

    Returns:
        The alert payload
    """
    now = datetime.now(timezone.utc)

    # Core Prometheus labels
    labels = {
        "alertname": ALERT_NAME,
        "instance": endpoint.url,
        "job": JOB_NAME,
        "severity": cfg.default_severity,
        "endpoint": endpoint.name,
    }
    if endpoint.group:
        labels["group"] = endpoint.group
    labels.update(cfg.extra_labels or {})

    annotations: dict[str, str] = {}
    if resolved:
        annotations["summary"] = f"Endpoint {endpoint.name} is now healthy"
        annotations["description"] = (
            f"Endpoint {endpoint.name} ({endpoint.url}) has recovered "
            "and is now passing health checks"
        )
        ends_at: datetime | None = now
    else:
        annotations["summary"] = f"Endpoint {endpoint.name} is down"
        description = f"Endpoint {endpoint.name} ({endpoint.url}) has failed health checks"
        if result.errors:
            description += f". Errors: {', '.join(result.errors)}"
        annotations["description"] = description
        ends_at = None

    if alert.get_description():
        annotations["alert_description"] = alert.get_description()
    annotations.update(cfg.extra_annotations or {})

    return AlertmanagerAlert(
        labels=labels,
        annotations=annotations,
        starts_at=now,
        ends_at=ends_at,
    )
