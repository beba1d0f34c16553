"""
Configuration file loading.

Search order:
1. Explicit path (--config flag)
2. AMNOTIFIER_CONFIG_PATH environment variable
3. config/config.yaml (current directory)
4. config.yaml (current directory)

The provider section is read from ``alerting.alertmanager``; a document
without an ``alerting`` key is taken as the provider section itself.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import structlog
import yaml

from amnotifier.alertmanager.provider import AlertProvider
from amnotifier.clients.http import HttpClientFactory
from amnotifier.config.settings import get_settings
from amnotifier.core.errors import ConfigurationError

logger = structlog.get_logger()

_ENV_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def get_config_path(explicit_path: str | Path | None = None) -> Path | None:
    """
    Find the configuration file to use.

    Returns:
        Path to config file or None if not found
    """
    if explicit_path:
        path = Path(explicit_path)
        return path if path.exists() else None

    env_path = get_settings().config_path
    if env_path:
        path = Path(env_path)
        return path if path.exists() else None

    for candidate in (Path.cwd() / "config" / "config.yaml", Path.cwd() / "config.yaml"):
        if candidate.exists():
            return candidate

    return None


def expand_env(text: str) -> str:
    """Replace ``${VAR}`` with the corresponding env var value (left as-is if unset)."""
    return _ENV_RE.sub(lambda m: os.environ.get(m.group(1), m.group(0)), text)


def extract_provider_section(data: dict[str, Any]) -> dict[str, Any]:
    """Return the ``alertmanager`` provider section of a config document."""
    if "alerting" not in data:
        return data

    alerting = data.get("alerting") or {}
    if not isinstance(alerting, dict):
        raise ConfigurationError("'alerting' must be a mapping")
    section = alerting.get("alertmanager")
    if section is None:
        raise ConfigurationError("no alerting.alertmanager section in configuration")
    if not isinstance(section, dict):
        raise ConfigurationError("'alerting.alertmanager' must be a mapping")
    return section


def parse_provider(text: str, *, client_factory: HttpClientFactory | None = None) -> AlertProvider:
    """
    Build and validate a provider from YAML text.

    Raises:
        ConfigurationError: If the YAML is invalid or the provider config is unusable
    """
    try:
        data = yaml.safe_load(expand_env(text)) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"invalid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError("configuration must be a mapping")

    provider = AlertProvider.from_dict(extract_provider_section(data), client_factory=client_factory)
    provider.validate()
    if provider.default_alert is not None:
        for override in provider.overrides:
            provider.validate_overrides(override.group, provider.default_alert)
    return provider


def load_provider(
    path: str | Path | None = None,
    *,
    client_factory: HttpClientFactory | None = None,
) -> AlertProvider:
    """
    Load the Alertmanager provider from a configuration file.

    Args:
        path: Optional explicit config file path
        client_factory: Optional HTTP client factory for the provider

    Raises:
        ConfigurationError: If no file is found or its content is invalid
    """
    config_path = get_config_path(path)
    if config_path is None:
        raise ConfigurationError(
            "configuration file not found",
            details={"path": str(path) if path else "<search>"},
        )

    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            f"cannot read configuration: {exc}", details={"path": str(config_path)}
        ) from exc

    provider = parse_provider(text, client_factory=client_factory)
    logger.debug(
        "loaded_alertmanager_config",
        path=str(config_path),
        overrides=len(provider.overrides),
    )
    return provider
