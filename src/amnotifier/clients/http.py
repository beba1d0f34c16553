"""
HTTP client factory.

Builds ``httpx.Client`` instances from the ``client`` section of a provider
configuration. The provider asks the factory for a fresh client per delivery
and overrides the per-request timeout with its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from amnotifier.core.durations import parse_duration

DEFAULT_USER_AGENT = "amnotifier/0.1.0"
DEFAULT_CLIENT_TIMEOUT = timedelta(seconds=10)


@dataclass(frozen=True)
class ClientConfig:
    """Transport settings shared by every request a provider makes."""

    insecure: bool = False
    ignore_redirect: bool = False
    timeout: timedelta = DEFAULT_CLIENT_TIMEOUT
    proxy_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "insecure": self.insecure,
            "ignore-redirect": self.ignore_redirect,
            "timeout": self.timeout.total_seconds(),
            "proxy-url": self.proxy_url,
        }


class ClientConfigDocument(BaseModel):
    """Schema of the ``client`` YAML section."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    insecure: bool = False
    ignore_redirect: bool = Field(False, alias="ignore-redirect")
    timeout: timedelta = DEFAULT_CLIENT_TIMEOUT
    proxy_url: str | None = Field(None, alias="proxy-url")

    @field_validator("timeout", mode="before")
    @classmethod
    def _parse_timeout(cls, value: Any) -> timedelta:
        return parse_duration(value)

    def to_client_config(self) -> ClientConfig:
        return ClientConfig(
            insecure=self.insecure,
            ignore_redirect=self.ignore_redirect,
            timeout=self.timeout or DEFAULT_CLIENT_TIMEOUT,
            proxy_url=self.proxy_url or None,
        )


HttpClientFactory = Callable[[ClientConfig | None], httpx.Client]


def get_http_client(config: ClientConfig | None = None) -> httpx.Client:
    """Create an HTTP client configured from ``config`` (defaults when None)."""
    config = config or ClientConfig()
    return httpx.Client(
        timeout=config.timeout.total_seconds(),
        verify=not config.insecure,
        follow_redirects=not config.ignore_redirect,
        proxy=config.proxy_url,
        headers={"User-Agent": DEFAULT_USER_AGENT},
    )
