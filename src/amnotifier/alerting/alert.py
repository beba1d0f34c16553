"""
Alert definitions attached to endpoints.

An alert carries the thresholds the scheduler uses to decide when to fire,
an optional human description, and an optional provider override: a
fragment in the same shape as the provider configuration that takes
precedence over everything else for this one alert.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AlertType(StrEnum):
    """Alert provider types."""
    ALERTMANAGER = "alertmanager"


DEFAULT_FAILURE_THRESHOLD = 3
DEFAULT_SUCCESS_THRESHOLD = 2


@dataclass
class Alert:
    """Alert definition for one endpoint."""

    type: str = AlertType.ALERTMANAGER
    enabled: bool | None = None
    failure_threshold: int = DEFAULT_FAILURE_THRESHOLD
    success_threshold: int = DEFAULT_SUCCESS_THRESHOLD
    description: str | None = None
    send_on_resolved: bool | None = None
    provider_override: dict[str, Any] = field(default_factory=dict)

    def get_description(self) -> str:
        return self.description or ""

    def is_enabled(self) -> bool:
        return True if self.enabled is None else self.enabled

    def is_sending_on_resolved(self) -> bool:
        return bool(self.send_on_resolved)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": str(self.type),
            "enabled": self.is_enabled(),
            "failure-threshold": self.failure_threshold,
            "success-threshold": self.success_threshold,
            "description": self.description,
            "send-on-resolved": self.is_sending_on_resolved(),
            "provider-override": dict(self.provider_override),
        }


class AlertDocument(BaseModel):
    """Schema of an alert (``default-alert`` or an endpoint's alert entry)."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    type: AlertType = AlertType.ALERTMANAGER
    enabled: bool | None = None
    failure_threshold: int = Field(DEFAULT_FAILURE_THRESHOLD, alias="failure-threshold")
    success_threshold: int = Field(DEFAULT_SUCCESS_THRESHOLD, alias="success-threshold")
    description: str | None = None
    send_on_resolved: bool | None = Field(None, alias="send-on-resolved")
    provider_override: dict[str, Any] = Field(default_factory=dict, alias="provider-override")

    def to_alert(self) -> Alert:
        return Alert(
            type=self.type,
            enabled=self.enabled,
            failure_threshold=(
                self.failure_threshold if self.failure_threshold > 0 else DEFAULT_FAILURE_THRESHOLD
            ),
            success_threshold=(
                self.success_threshold if self.success_threshold > 0 else DEFAULT_SUCCESS_THRESHOLD
            ),
            description=self.description,
            send_on_resolved=self.send_on_resolved,
            provider_override=dict(self.provider_override),
        )
