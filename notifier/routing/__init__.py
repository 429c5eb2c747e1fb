"""Routing of named templates to notification services."""

from notifier.routing.dispatcher import NotificationDispatcher
from notifier.routing.exceptions import RoutingError, UnknownTemplateError
from notifier.routing.factory import compile_templates, create_notifier_stack

__all__ = [
    "NotificationDispatcher",
    "RoutingError",
    "UnknownTemplateError",
    "compile_templates",
    "create_notifier_stack",
]
