"""Core modules for amnotifier - error taxonomy and duration helpers."""

from amnotifier.core.durations import format_duration, parse_duration
from amnotifier.core.errors import (
    AmNotifierError,
    ConfigurationError,
    DeliveryError,
    ExitCode,
    OverrideParseError,
    RemoteRejectionError,
    SerializationError,
    TransportError,
    format_error_message,
    main_with_error_handling,
)

__all__ = [
    # Errors
    "ExitCode",
    "AmNotifierError",
    "ConfigurationError",
    "OverrideParseError",
    "DeliveryError",
    "SerializationError",
    "TransportError",
    "RemoteRejectionError",
    "main_with_error_handling",
    "format_error_message",
    # Durations
    "parse_duration",
    "format_duration",
]
