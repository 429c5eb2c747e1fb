"""Notification services for delivering rendered notifications."""

from notifier.services.backend import AlertBackend, AlertRequest, AlertResult, OpsgenieAlertBackend
from notifier.services.base import NotificationService
from notifier.services.exceptions import (
    BackendError,
    MissingCredentialError,
    NotificationServiceError,
    UnknownServiceError,
)
from notifier.services.opsgenie import ALERT_SOURCE, OpsgenieService, build_alert_request

__all__ = [
    "ALERT_SOURCE",
    "AlertBackend",
    "AlertRequest",
    "AlertResult",
    "BackendError",
    "MissingCredentialError",
    "NotificationService",
    "NotificationServiceError",
    "OpsgenieAlertBackend",
    "OpsgenieService",
    "UnknownServiceError",
    "build_alert_request",
]
