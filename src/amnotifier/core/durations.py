"""
Duration parsing for configuration values.

Timeouts in YAML are written the way Go writes them (``500ms``, ``10s``,
``1m30s``, ``2h``). Bare numbers are taken as seconds.
"""

from __future__ import annotations

import re
from datetime import timedelta

_COMPONENT_RE = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h)")

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(value: str | int | float | timedelta | None) -> timedelta:
    """
    Parse a duration value into a timedelta.

    Args:
        value: ``"10s"``-style string, number of seconds, timedelta or None

    Returns:
        Parsed timedelta (zero for None or empty string)

    Raises:
        ValueError: If the value is negative or not a recognised duration
    """
    if value is None:
        return timedelta(0)
    if isinstance(value, timedelta):
        if value < timedelta(0):
            raise ValueError(f"duration must not be negative: {value!r}")
        return value
    if isinstance(value, bool):
        raise ValueError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        if value < 0:
            raise ValueError(f"duration must not be negative: {value!r}")
        return timedelta(seconds=value)
    if not isinstance(value, str):
        raise ValueError(f"invalid duration: {value!r}")

    text = value.strip()
    if not text:
        return timedelta(0)
    if text.startswith("-"):
        raise ValueError(f"duration must not be negative: {value!r}")

    try:
        return timedelta(seconds=float(text))
    except ValueError:
        pass

    total = 0.0
    position = 0
    for match in _COMPONENT_RE.finditer(text):
        if match.start() != position:
            break
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        position = match.end()

    if position == 0 or position != len(text):
        raise ValueError(f"invalid duration: {value!r}")
    return timedelta(seconds=total)


def format_duration(value: timedelta) -> str:
    """Render a timedelta the way it would be written in YAML (``1m30s``)."""
    total_ms = round(value.total_seconds() * 1000)
    if total_ms == 0:
        return "0s"
    if total_ms < 1000:
        return f"{total_ms}ms"

    hours, rest_ms = divmod(total_ms, 3_600_000)
    minutes, rest_ms = divmod(rest_ms, 60_000)
    seconds = rest_ms / 1000

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if seconds:
        parts.append(f"{seconds:g}s")
    return "".join(parts)
