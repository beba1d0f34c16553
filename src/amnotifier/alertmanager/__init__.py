"""
Alertmanager notification provider.

Turns endpoint health transitions into Alertmanager API v2 alerts, with
layered per-group and per-alert configuration overrides.
"""

from amnotifier.alertmanager.config import (
    Config,
    ConfigDocument,
    Override,
    OverrideDocument,
    config_from_override,
    parse_config_override,
)
from amnotifier.alertmanager.payload import AlertmanagerAlert, build_alert
from amnotifier.alertmanager.provider import AlertProvider, ProviderDocument, alerts_url

__all__ = [
    "AlertmanagerAlert",
    "AlertProvider",
    "alerts_url",
    "build_alert",
    "Config",
    "config_from_override",
    "ConfigDocument",
    "Override",
    "OverrideDocument",
    "parse_config_override",
    "ProviderDocument",
]
