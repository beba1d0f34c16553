"""
Unified error handling for amnotifier.

Every failure the notifier can surface is an ``AmNotifierError`` subclass so
callers (the alert dispatcher or the CLI) can catch one base type and still
tell configuration mistakes apart from delivery failures.

Exit Codes:
- 0: Success
- 10: Configuration error (missing URL, malformed override)
- 11: Delivery error (transport failure, remote rejection, serialization)
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    CONFIG_ERROR = 10
    DELIVERY_ERROR = 11
    UNKNOWN_ERROR = 127


class AmNotifierError(Exception):
    """Base exception for amnotifier errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(AmNotifierError):
    """Raised when the effective provider configuration is unusable."""

    exit_code = ExitCode.CONFIG_ERROR


class OverrideParseError(ConfigurationError):
    """Raised when an alert-level override does not match the config schema."""


class DeliveryError(AmNotifierError):
    """Raised when an alert could not be delivered to Alertmanager."""

    exit_code = ExitCode.DELIVERY_ERROR


class SerializationError(DeliveryError):
    """Raised when the alert payload cannot be encoded as JSON."""


class TransportError(DeliveryError):
    """Raised for network-level failures (connect, DNS, timeout)."""


class RemoteRejectionError(DeliveryError):
    """Raised when Alertmanager answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(
            f"Alertmanager returned status {status_code}: {body}",
            details={"status_code": status_code},
        )
        self.status_code = status_code
        self.body = body


# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
    report: Callable[[str], None] | None = None,
) -> Callable[[F], F]:
    """
    Decorator for CLI main functions that provides unified error handling.

    Args:
        show_traceback: If True, show full traceback for unexpected errors
        log_errors: If True, log errors to structlog
        report: Called with the formatted message of an AmNotifierError,
            e.g. to print it for the user

    Exit codes:
        - AmNotifierError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130 (standard for SIGINT)
        - Other exceptions: Returns 127 (unknown error)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)
            except AmNotifierError as e:
                if log_errors:
                    logger.error(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        exit_code=e.exit_code,
                        **e.details,
                    )
                if report is not None:
                    report(format_error_message(e))
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return 130
            except Exception as e:
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=ExitCode.UNKNOWN_ERROR,
                    )
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: AmNotifierError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg
