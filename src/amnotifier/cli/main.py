"""
amnotifier command line.

Commands:
    validate  Load the provider configuration and show the effective config
    preview   Print the alert payload that would be sent, without sending it
    send      Deliver one alert to Alertmanager
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

import yaml

from amnotifier.alerting.alert import Alert
from amnotifier.alertmanager.config import Config
from amnotifier.alertmanager.payload import build_alert
from amnotifier.alertmanager.provider import AlertProvider, alerts_url
from amnotifier.cli.ux import (
    console,
    error,
    header,
    info,
    print_json,
    print_key_value,
    print_mapping_table,
    success,
    warning,
)
from amnotifier.config.loader import load_provider
from amnotifier.config.settings import get_settings
from amnotifier.core.errors import ConfigurationError, OverrideParseError, main_with_error_handling
from amnotifier.endpoint.models import Endpoint, Result
from amnotifier.logging import configure_logging


def _print_config(cfg: Config) -> None:
    data = cfg.to_dict()
    print_key_value(
        {
            "url": data["url"],
            "alerts endpoint": alerts_url(cfg.url),
            "timeout": data["timeout"],
            "default severity": data["default-severity"],
        },
        title="Effective configuration",
    )
    if cfg.extra_labels:
        print_mapping_table("Extra labels", cfg.extra_labels)
    if cfg.extra_annotations:
        print_mapping_table("Extra annotations", cfg.extra_annotations)


def _read_override_file(path: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"cannot read override file: {exc}", details={"path": path}) from exc
    except yaml.YAMLError as exc:
        raise OverrideParseError(f"invalid override file: {exc}", details={"path": path}) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise OverrideParseError("override file must contain a mapping", details={"path": path})
    return data


def _build_alert_definition(
    provider: AlertProvider,
    description: str | None,
    override_file: str | None,
) -> Alert:
    alert = provider.get_default_alert() or Alert()
    changes: dict[str, Any] = {}
    if description:
        changes["description"] = description
    if override_file:
        changes["provider_override"] = _read_override_file(override_file)
    return replace(alert, **changes) if changes else alert


@main_with_error_handling(report=error)
def validate_command(config: str | None, group: str = "") -> int:
    """Load the provider and print the effective config for ``group``."""
    provider = load_provider(config)
    header("Alertmanager provider")
    info(f"{len(provider.overrides)} group override(s) configured")

    default_alert = provider.get_default_alert()
    if default_alert is None:
        warning("No default-alert configured")

    cfg = provider.get_config(group, default_alert or Alert())
    _print_config(cfg)

    success("Configuration is valid")
    return 0


@main_with_error_handling(report=error)
def preview_command(
    config: str | None,
    endpoint: Endpoint,
    result: Result,
    resolved: bool = False,
    description: str | None = None,
    override_file: str | None = None,
) -> int:
    """Print the JSON body that ``send`` would POST."""
    provider = load_provider(config)
    alert = _build_alert_definition(provider, description, override_file)
    cfg = provider.get_config(endpoint.group, alert)
    payload = build_alert(cfg, endpoint, alert, result, resolved)

    console.print(f"[cyan]POST[/cyan] {alerts_url(cfg.url)}")
    print_json(json.dumps([payload.to_dict()], indent=2))
    return 0


@main_with_error_handling(report=error)
def send_command(
    config: str | None,
    endpoint: Endpoint,
    result: Result,
    resolved: bool = False,
    description: str | None = None,
    override_file: str | None = None,
) -> int:
    """Deliver one alert for ``endpoint``."""
    provider = load_provider(config)
    alert = _build_alert_definition(provider, description, override_file)
    provider.send(endpoint, alert, result, resolved)

    state = "resolved" if resolved else "firing"
    success(f"Sent {state} alert for endpoint {endpoint.name}")
    return 0


def _add_alert_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--name", required=True, help="Endpoint name")
    parser.add_argument("--url", required=True, help="Endpoint URL")
    parser.add_argument("--group", default="", help="Endpoint group")
    parser.add_argument(
        "--error",
        dest="errors",
        action="append",
        default=[],
        help="Health-check error (repeatable)",
    )
    parser.add_argument("--resolved", action="store_true", help="Send a resolved alert")
    parser.add_argument("--description", default=None, help="Alert description")
    parser.add_argument(
        "--override-file",
        default=None,
        help="YAML file with an alert-level provider override",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="amnotifier",
        description="Send endpoint health alerts to Alertmanager",
    )
    parser.add_argument("--config", default=None, help="Path to configuration file")
    parser.add_argument("--log-level", default=None, help="Log level (default: INFO)")
    parser.add_argument(
        "--log-format",
        choices=["json", "console"],
        default=None,
        help="Log output format",
    )
    subparsers = parser.add_subparsers(dest="command")

    validate_parser = subparsers.add_parser("validate", help="Validate the provider configuration")
    validate_parser.add_argument("--group", default="", help="Show the effective config for this group")

    preview_parser = subparsers.add_parser("preview", help="Print the alert payload without sending")
    _add_alert_arguments(preview_parser)

    send_parser = subparsers.add_parser("send", help="Send one alert to Alertmanager")
    _add_alert_arguments(send_parser)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(
        args.log_level or settings.log_level,
        args.log_format or settings.log_format,
    )

    if args.command == "validate":
        return validate_command(args.config, group=args.group)

    if args.command in ("preview", "send"):
        endpoint = Endpoint(name=args.name, url=args.url, group=args.group)
        result = Result(success=args.resolved, errors=list(args.errors))
        command = preview_command if args.command == "preview" else send_command
        return command(
            args.config,
            endpoint,
            result,
            resolved=args.resolved,
            description=args.description,
            override_file=args.override_file,
        )

    parser.print_help()
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
