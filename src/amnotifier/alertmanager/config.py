"""
Alertmanager provider configuration.

``Config`` holds the settings of one provider instance. Configs are layered:
the provider default, then the first matching group override, then an
alert-level override. Each layer is applied with ``Config.merge`` on a copy,
so the provider's stored configuration is never touched.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from amnotifier.clients.http import ClientConfig, ClientConfigDocument
from amnotifier.core.durations import format_duration, parse_duration
from amnotifier.core.errors import ConfigurationError, OverrideParseError

DEFAULT_TIMEOUT = timedelta(seconds=10)
DEFAULT_SEVERITY = "critical"


@dataclass
class Config:
    """Settings for sending alerts to one Alertmanager."""

    url: str = ""
    timeout: timedelta = timedelta(0)
    default_severity: str = ""
    extra_labels: dict[str, str] | None = None
    extra_annotations: dict[str, str] | None = None
    client_config: ClientConfig | None = None

    def validate(self) -> None:
        """
        Check the config and fill in defaults for unset fields.

        Mutates the receiver, so call it on an effective copy rather than on
        a provider's stored default.

        Raises:
            ConfigurationError: If no URL is set
        """
        if not self.url:
            raise ConfigurationError("alertmanager URL not set")
        if self.timeout <= timedelta(0):
            self.timeout = DEFAULT_TIMEOUT
        if not self.default_severity:
            self.default_severity = DEFAULT_SEVERITY

    def merge(self, override: Config) -> None:
        """Apply every field that is set on ``override`` to this config."""
        if override.client_config is not None:
            self.client_config = override.client_config
        if override.url:
            self.url = override.url
        if override.timeout > timedelta(0):
            self.timeout = override.timeout
        if override.default_severity:
            self.default_severity = override.default_severity
        if override.extra_labels:
            self.extra_labels = {**(self.extra_labels or {}), **override.extra_labels}
        if override.extra_annotations:
            self.extra_annotations = {**(self.extra_annotations or {}), **override.extra_annotations}

    def copy(self) -> Config:
        """Shallow copy with private label/annotation maps."""
        return replace(
            self,
            extra_labels=dict(self.extra_labels) if self.extra_labels is not None else None,
            extra_annotations=(
                dict(self.extra_annotations) if self.extra_annotations is not None else None
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "url": self.url,
            "timeout": format_duration(self.timeout),
            "default-severity": self.default_severity,
            "extra-labels": dict(self.extra_labels or {}),
            "extra-annotations": dict(self.extra_annotations or {}),
        }
        if self.client_config is not None:
            data["client"] = self.client_config.to_dict()
        return data


@dataclass(frozen=True)
class Override:
    """Config fragment applied to endpoints of one group."""

    group: str
    config: Config


def _stringify_mapping(value: Any) -> Any:
    # YAML turns ``port: 8080`` into an int; label values are always strings
    if not isinstance(value, dict):
        return value
    result: dict[Any, Any] = {}
    for key, item in value.items():
        if item is None:
            item = ""
        elif isinstance(item, bool):
            item = "true" if item else "false"
        elif isinstance(item, (int, float)):
            item = str(item)
        result[str(key)] = item
    return result


class ConfigDocument(BaseModel):
    """Schema of a provider config section or an alert-level override."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    url: str = ""
    timeout: timedelta = timedelta(0)
    default_severity: str = Field("", alias="default-severity")
    extra_labels: dict[str, str] | None = Field(None, alias="extra-labels")
    extra_annotations: dict[str, str] | None = Field(None, alias="extra-annotations")
    client: ClientConfigDocument | None = None

    @field_validator("url", "default_severity", mode="before")
    @classmethod
    def _null_as_unset(cls, value: Any) -> Any:
        # ``url:`` with no value is YAML null; treat it as not set
        return "" if value is None else value

    @field_validator("timeout", mode="before")
    @classmethod
    def _parse_timeout(cls, value: Any) -> timedelta:
        return parse_duration(value)

    @field_validator("extra_labels", "extra_annotations", mode="before")
    @classmethod
    def _stringify_values(cls, value: Any) -> Any:
        return _stringify_mapping(value)

    def to_config(self) -> Config:
        return Config(
            url=self.url,
            timeout=self.timeout,
            default_severity=self.default_severity,
            extra_labels=dict(self.extra_labels) if self.extra_labels is not None else None,
            extra_annotations=(
                dict(self.extra_annotations) if self.extra_annotations is not None else None
            ),
            client_config=self.client.to_client_config() if self.client is not None else None,
        )


class OverrideDocument(ConfigDocument):
    """Schema of one entry of the ``overrides`` list."""

    group: str

    @field_validator("group", mode="before")
    @classmethod
    def _null_group(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_override(self) -> Override:
        return Override(group=self.group, config=self.to_config())


def parse_config_override(blob: bytes | str) -> Config:
    """
    Parse an alert-level override blob into a config fragment.

    Args:
        blob: YAML (or JSON) text in the provider config schema

    Returns:
        Config with only the fields the blob sets

    Raises:
        OverrideParseError: If the blob is not valid YAML or does not match the schema
    """
    try:
        data = yaml.safe_load(blob)
    except yaml.YAMLError as exc:
        raise OverrideParseError(f"invalid provider override: {exc}") from exc

    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise OverrideParseError(
            "provider override must be a mapping",
            details={"type": type(data).__name__},
        )
    return config_from_override(data)


def config_from_override(data: Mapping[str, Any]) -> Config:
    """
    Validate an already decoded alert-level override.

    Values may be plain YAML scalars or Python objects such as a
    ``timedelta`` timeout.

    Raises:
        OverrideParseError: If the mapping does not match the schema
    """
    try:
        document = ConfigDocument.model_validate(dict(data))
    except ValidationError as exc:
        raise OverrideParseError(
            f"invalid provider override: {exc.error_count()} validation error(s)",
            details={"errors": "; ".join(_describe_errors(exc))},
        ) from exc
    return document.to_config()


def _describe_errors(exc: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
        for error in exc.errors()
    ]
