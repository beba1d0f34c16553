"""
Descriptors of monitored endpoints and their health-check results.

These are produced by the health-check scheduler; the notifier only reads
them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

_KEY_UNSAFE_RE = re.compile(r"[\s/_,.#+&]")


@dataclass(frozen=True)
class Endpoint:
    """An endpoint being monitored."""

    name: str
    url: str
    group: str = ""

    @property
    def key(self) -> str:
        """Stable identifier combining group and name (``core_api-health``)."""
        name = _KEY_UNSAFE_RE.sub("-", self.name.lower())
        if not self.group:
            return f"_{name}"
        group = _KEY_UNSAFE_RE.sub("-", self.group.lower())
        return f"{group}_{name}"


@dataclass
class Result:
    """Outcome of a single health check."""

    success: bool = False
    errors: list[str] = field(default_factory=list)
    http_status: int = 0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "errors": list(self.errors),
            "http_status": self.http_status,
            "timestamp": self.timestamp.isoformat(),
        }
