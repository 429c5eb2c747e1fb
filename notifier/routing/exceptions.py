"""Routing exceptions."""

from __future__ import annotations


class RoutingError(Exception):
    """Base exception for routing errors."""


class UnknownTemplateError(RoutingError):
    """No template with the requested name is configured."""

    def __init__(self, template: str) -> None:
        self.template = template
        super().__init__(f"notification template {template!r} is not configured")
