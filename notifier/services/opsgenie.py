"""Opsgenie notification service."""

from __future__ import annotations

from types import MappingProxyType

import structlog

from notifier.core.config import OpsgenieConfig
from notifier.core.types import Destination, Notification, Responder
from notifier.services.backend import AlertBackend, AlertRequest, AlertResult, OpsgenieAlertBackend
from notifier.services.base import NotificationService
from notifier.services.exceptions import MissingCredentialError

logger = structlog.get_logger(__name__)

ALERT_SOURCE = "Argo CD"


def build_alert_request(notification: Notification, destination: Destination) -> AlertRequest:
    """Assemble the create-alert body for one destination.

    The recipient becomes the single team responder. Payload fields stay
    empty when the notification was never rendered for Opsgenie.
    """
    request = AlertRequest(
        message=notification.message,
        responders=[Responder(type="team", id=destination.recipient)],
        source=ALERT_SOURCE,
    )
    payload = notification.opsgenie
    if payload is not None:
        request.alias = payload.alias
        request.description = payload.description
        request.entity = payload.entity
        request.priority = payload.priority
        request.user = payload.user
        request.note = payload.note
        request.actions = payload.actions
        request.tags = payload.tags
        request.details = payload.details
        request.visible_to = payload.visible_to
    return request


class OpsgenieService(NotificationService):
    """Sends rendered notifications as Opsgenie alerts.

    The API key is looked up per call from the recipient; the backend and its
    HTTP session are created once and shared by all sends.
    """

    name = "opsgenie"

    def __init__(self, config: OpsgenieConfig, backend: AlertBackend | None = None) -> None:
        self._api_keys = MappingProxyType(
            {recipient: key.get_secret_value() for recipient, key in config.api_keys.items()}
        )
        self._backend = backend or OpsgenieAlertBackend(config.api_url, config.timeout_secs)

    @property
    def recipients(self) -> list[str]:
        return sorted(self._api_keys)

    async def send(self, notification: Notification, destination: Destination) -> AlertResult:
        """Create one alert for *destination*.

        Raises:
            MissingCredentialError: no key for the recipient; nothing is sent.
            BackendError: the API rejected the alert.
            aiohttp.ClientError: transport failure.
        """
        api_key = self._api_keys.get(destination.recipient)
        if api_key is None:
            raise MissingCredentialError(destination.recipient)

        request = build_alert_request(notification, destination)
        result = await self._backend.create_alert(request, api_key)
        logger.info(
            "alert_created",
            recipient=destination.recipient,
            alias=request.alias,
            request_id=result.request_id,
        )
        return result

    async def close(self) -> None:
        await self._backend.close()
