#!/usr/bin/env python3
"""Render a configured notification template and send it to Opsgenie.

Usage::

    # Send the "app-degraded" template to one team
    python scripts/send_alert.py --template app-degraded --recipient team-x \\
        --var name=checkout

    # Variables from a YAML/JSON file, several recipients
    python scripts/send_alert.py --template app-degraded --vars event.yaml \\
        --recipient team-x --recipient team-y

    # Render only and print the request body
    python scripts/send_alert.py --template app-degraded --var name=checkout \\
        --recipient team-x --dry-run
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Any

import structlog
import yaml

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from notifier.core.config import load_settings  # noqa: E402
from notifier.core.logging import setup_logging  # noqa: E402
from notifier.core.types import Destination  # noqa: E402
from notifier.routing.exceptions import RoutingError  # noqa: E402
from notifier.routing.factory import create_notifier_stack  # noqa: E402
from notifier.services.exceptions import NotificationServiceError  # noqa: E402
from notifier.services.opsgenie import build_alert_request  # noqa: E402
from notifier.templating.exceptions import TemplateError  # noqa: E402

logger = structlog.get_logger(__name__)


def _load_variables(args: argparse.Namespace) -> dict[str, Any]:
    variables: dict[str, Any] = {}
    if args.vars:
        raw = yaml.safe_load(Path(args.vars).read_text())
        if raw is not None and not isinstance(raw, dict):
            raise ValueError(f"{args.vars} must contain a mapping")
        variables.update(raw or {})
    for item in args.var:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise ValueError(f"--var expects key=value, got {item!r}")
        variables[key] = yaml.safe_load(value) if value else ""
    return variables


async def run(args: argparse.Namespace) -> int:
    """Render the template and send it to every recipient."""
    try:
        settings = load_settings(args.config)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"Invalid config: {exc}", file=sys.stderr)
        return 1
    setup_logging(level=args.log_level, config=settings.logging)

    try:
        variables = _load_variables(args)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"Invalid variables: {exc}", file=sys.stderr)
        return 1

    destinations = [Destination(recipient=r) for r in args.recipient]

    try:
        dispatcher = create_notifier_stack(settings)
    except (TemplateError, ValueError) as exc:
        logger.error("notifier_config_invalid", error=str(exc))
        return 1

    try:
        if args.dry_run:
            notification = dispatcher.render(args.template, variables)
            for dest in destinations:
                request = build_alert_request(notification, dest)
                print(json.dumps(request.to_payload(), indent=2, sort_keys=True))
            return 0

        results = await dispatcher.notify(args.template, variables, destinations)
    except (TemplateError, RoutingError, NotificationServiceError) as exc:
        logger.error("notify_failed", template=args.template, error=str(exc))
        return 1
    except Exception:
        logger.exception("notify_error", template=args.template)
        return 1
    finally:
        await dispatcher.close()

    for dest, result in zip(destinations, results):
        logger.info(
            "alert_accepted",
            recipient=dest.recipient,
            request_id=getattr(result, "request_id", ""),
        )
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Render a notification template and send it as an Opsgenie alert.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument("--template", required=True, help="Configured template name")
    parser.add_argument(
        "--recipient",
        action="append",
        required=True,
        help="Recipient key (Opsgenie team); repeatable",
    )
    parser.add_argument("--vars", default=None, help="YAML/JSON file with template variables")
    parser.add_argument(
        "--var",
        action="append",
        default=[],
        help="Template variable as key=value (value parsed as YAML); repeatable",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override: DEBUG, INFO, WARNING, ERROR",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Render and print the request body without sending",
    )
    args = parser.parse_args()

    code = asyncio.run(run(args))
    sys.exit(code)


if __name__ == "__main__":
    main()
