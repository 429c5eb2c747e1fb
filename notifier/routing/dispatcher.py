"""Central notification dispatcher: renders named templates and sends them."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from notifier.core.types import Destination, Notification
from notifier.routing.exceptions import UnknownTemplateError
from notifier.services.base import NotificationService
from notifier.services.exceptions import UnknownServiceError
from notifier.templating.binding import VariableBinding
from notifier.templating.templater import NotificationTemplater

logger = structlog.get_logger(__name__)


class NotificationDispatcher:
    """Routes a rendered template to the service of each destination.

    - Templates are compiled up front; ``notify`` only renders.
    - A notification is rendered once per call and shared by its destinations.
    - Render errors are raised before anything is sent.
    - Send errors are logged and re-raised; later destinations are skipped.
    """

    def __init__(
        self,
        templaters: Mapping[str, NotificationTemplater] | None = None,
        services: Iterable[NotificationService] | None = None,
    ) -> None:
        self._templaters: dict[str, NotificationTemplater] = dict(templaters or {})
        self._services: dict[str, NotificationService] = {s.name: s for s in services or []}

    @property
    def template_names(self) -> list[str]:
        return sorted(self._templaters)

    def render(
        self,
        template_name: str,
        variables: Mapping[str, Any] | VariableBinding,
    ) -> Notification:
        """Render *template_name* into a fresh notification without sending it."""
        templater = self._templaters.get(template_name)
        if templater is None:
            raise UnknownTemplateError(template_name)
        return templater.render(variables)

    async def notify(
        self,
        template_name: str,
        variables: Mapping[str, Any] | VariableBinding,
        destinations: Iterable[Destination],
    ) -> list[Any]:
        """Render *template_name* and send it to every destination.

        Returns:
            One service result per destination, in order.
        """
        destinations = list(destinations)
        for dest in destinations:
            if dest.service not in self._services:
                raise UnknownServiceError(dest.service)

        notification = self.render(template_name, variables)

        results: list[Any] = []
        for dest in destinations:
            service = self._services[dest.service]
            try:
                result = await service.send(notification, dest)
            except Exception:
                logger.exception(
                    "notification_send_failed",
                    template=template_name,
                    service=dest.service,
                    recipient=dest.recipient,
                )
                raise
            logger.info(
                "notification_sent",
                template=template_name,
                service=dest.service,
                recipient=dest.recipient,
            )
            results.append(result)
        return results

    # ── Lifecycle ───────────────────────────────────────────────

    async def close(self) -> None:
        for service in self._services.values():
            try:
                await service.close()
            except Exception:
                logger.exception("service_close_error", service=service.name)
