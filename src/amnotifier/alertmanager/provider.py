"""
Alertmanager alert provider.

Resolves the effective configuration for an alert, builds the Alertmanager
payload and POSTs it to ``<url>/api/v2/alerts``. Each ``send`` makes exactly
one attempt; retrying is up to the caller.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Mapping, Sequence

import httpx
from pydantic import Field, ValidationError

from amnotifier.alerting.alert import Alert, AlertDocument
from amnotifier.alertmanager.config import (
    Config,
    ConfigDocument,
    Override,
    OverrideDocument,
    config_from_override,
)
from amnotifier.alertmanager.payload import AlertmanagerAlert, build_alert
from amnotifier.clients.http import HttpClientFactory, get_http_client
from amnotifier.core.errors import (
    ConfigurationError,
    RemoteRejectionError,
    SerializationError,
    TransportError,
)
from amnotifier.endpoint.models import Endpoint, Result
from amnotifier.logging import bind_context

ALERTS_API_PATH = "/api/v2/alerts"


def alerts_url(base_url: str) -> str:
    """Alertmanager alerts endpoint for ``base_url``."""
    url = base_url.removesuffix("/")
    if not url.endswith(ALERTS_API_PATH):
        url += ALERTS_API_PATH
    return url


@dataclass(frozen=True)
class AlertProvider:
    """Configuration necessary for sending alerts to Alertmanager."""

    default_config: Config
    default_alert: Alert | None = None
    overrides: tuple[Override, ...] = ()
    client_factory: HttpClientFactory = field(default=get_http_client, repr=False, compare=False)

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any] | None,
        *,
        client_factory: HttpClientFactory | None = None,
    ) -> AlertProvider:
        """
        Build a provider from its YAML configuration section.

        Raises:
            ConfigurationError: If the section does not match the schema
        """
        try:
            document = ProviderDocument.model_validate(dict(data or {}))
        except ValidationError as exc:
            raise ConfigurationError(
                f"invalid alertmanager provider configuration: {exc.error_count()} validation error(s)",
                details={"errors": str(exc)},
            ) from exc
        return document.to_provider(client_factory=client_factory)

    def validate(self) -> None:
        """Validate the default configuration without altering it."""
        self.default_config.copy().validate()

    def get_default_alert(self) -> Alert | None:
        return self.default_alert

    def get_config(self, group: str, alert: Alert) -> Config:
        """
        Effective configuration for ``alert`` on an endpoint in ``group``.

        Layers, lowest precedence first: provider default, the first override
        whose group matches, the alert's own provider override. The result
        shares no mutable state with the provider.

        Raises:
            OverrideParseError: If the alert override does not match the schema
            ConfigurationError: If no URL is set after all layers
        """
        cfg = self.default_config.copy()

        for override in self.overrides:
            if override.group == group:
                cfg.merge(override.config)
                break

        if alert.provider_override:
            cfg.merge(config_from_override(alert.provider_override))

        cfg.validate()
        return cfg

    def validate_overrides(self, group: str, alert: Alert) -> None:
        """Check that the group and alert overrides resolve to a valid config."""
        self.get_config(group, alert)

    def send(self, endpoint: Endpoint, alert: Alert, result: Result, resolved: bool) -> None:
        """
        Send one alert for ``endpoint`` to Alertmanager.

        Raises:
            ConfigurationError: If the effective config is invalid
            DeliveryError: If the alert could not be delivered
        """
        cfg = self.get_config(endpoint.group, alert)
        payload = build_alert(cfg, endpoint, alert, result, resolved)
        self.send_alerts(cfg, [payload], endpoint=endpoint.key)

    def send_alerts(
        self,
        cfg: Config,
        alerts: Sequence[AlertmanagerAlert],
        **log_context: Any,
    ) -> None:
        """POST ``alerts`` to the Alertmanager API described by ``cfg``."""
        try:
            body = json.dumps([alert.to_dict() for alert in alerts])
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"failed to marshal alerts: {exc}") from exc

        url = alerts_url(cfg.url)
        log = bind_context(url=url, alerts=len(alerts), **log_context)
        log.info("alertmanager_alert_sending")

        request_kwargs: dict[str, Any] = {}
        if cfg.timeout > timedelta(0):
            request_kwargs["timeout"] = cfg.timeout.total_seconds()

        try:
            with self.client_factory(cfg.client_config) as client:
                response = client.post(
                    url,
                    content=body,
                    headers={"Content-Type": "application/json"},
                    **request_kwargs,
                )
        except httpx.InvalidURL as exc:
            raise ConfigurationError(
                f"invalid alertmanager URL: {exc}", details={"url": cfg.url}
            ) from exc
        except httpx.HTTPError as exc:
            log.warning("alertmanager_alert_failed", error=str(exc))
            raise TransportError(
                f"failed to send request to Alertmanager: {exc}", details={"url": url}
            ) from exc

        if not 200 <= response.status_code < 300:
            log.warning("alertmanager_alert_rejected", status=response.status_code)
            raise RemoteRejectionError(response.status_code, response.text)

        log.info("alertmanager_alert_sent", status=response.status_code)


class ProviderDocument(ConfigDocument):
    """Schema of the ``alertmanager`` provider section."""

    default_alert: AlertDocument | None = Field(None, alias="default-alert")
    overrides: list[OverrideDocument] = Field(default_factory=list)

    def to_provider(self, *, client_factory: HttpClientFactory | None = None) -> AlertProvider:
        return AlertProvider(
            default_config=self.to_config(),
            default_alert=self.default_alert.to_alert() if self.default_alert else None,
            overrides=tuple(override.to_override() for override in self.overrides),
            client_factory=client_factory or get_http_client,
        )
