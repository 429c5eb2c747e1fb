"""Base class for notification services."""

from __future__ import annotations

import abc
from typing import Any

from notifier.core.types import Destination, Notification


class NotificationService(abc.ABC):
    """Delivers a rendered notification to one destination."""

    name: str = ""

    @abc.abstractmethod
    async def send(self, notification: Notification, destination: Destination) -> Any:
        """Send *notification*. Raises on failure; never retries."""

    @abc.abstractmethod
    async def close(self) -> None:
        """Release resources (HTTP sessions, etc.)."""
