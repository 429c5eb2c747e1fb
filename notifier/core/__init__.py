"""Core module — config, types, logging."""

from notifier.core.config import Settings, get_settings, load_settings, reset_settings
from notifier.core.logging import setup_logging
from notifier.core.types import (
    Destination,
    Notification,
    NotificationTemplate,
    OpsgenieNotification,
    OpsgenieSpec,
    Responder,
    SchemaVariant,
    TemplatedOpsgenieSpec,
    parse_opsgenie_spec,
)

__all__ = [
    "Destination",
    "Notification",
    "NotificationTemplate",
    "OpsgenieNotification",
    "OpsgenieSpec",
    "Responder",
    "SchemaVariant",
    "Settings",
    "TemplatedOpsgenieSpec",
    "get_settings",
    "load_settings",
    "parse_opsgenie_spec",
    "reset_settings",
    "setup_logging",
]
