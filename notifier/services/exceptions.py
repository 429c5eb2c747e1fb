"""Exception hierarchy for notification services."""

from __future__ import annotations


class NotificationServiceError(Exception):
    """Base exception for all service errors."""


class MissingCredentialError(NotificationServiceError):
    """No API key is configured for the destination's recipient."""

    def __init__(self, recipient: str) -> None:
        self.recipient = recipient
        super().__init__(f"no API key configured for recipient {recipient}")


class BackendError(NotificationServiceError):
    """The alert backend rejected the request."""

    def __init__(self, status: int, body: str = "") -> None:
        self.status = status
        self.body = body
        super().__init__(f"alert backend returned HTTP {status}: {body[:200]}")


class UnknownServiceError(NotificationServiceError):
    """A destination names a service that is not configured."""

    def __init__(self, service: str) -> None:
        self.service = service
        super().__init__(f"notification service {service!r} is not configured")
