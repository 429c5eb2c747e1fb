"""Execute a compiled rendering plan against a variable binding."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

import yaml
from pydantic import ConfigDict, TypeAdapter, ValidationError

from notifier.core.types import Notification, OpsgenieNotification, Responder, SchemaVariant
from notifier.templating.binding import VariableBinding
from notifier.templating.exceptions import RenderError
from notifier.templating.field import FieldTemplate
from notifier.templating.plan import RenderingPlan

Variables = Mapping[str, Any]

_LENIENT = ConfigDict(coerce_numbers_to_str=True)

# Templated-schema fields whose rendered text is decoded into structure.
_DECODERS: dict[str, TypeAdapter[Any]] = {
    "visible_to": TypeAdapter(list[Responder]),
    "actions": TypeAdapter(list[str], config=_LENIENT),
    "tags": TypeAdapter(list[str], config=_LENIENT),
    "details": TypeAdapter(dict[str, str], config=_LENIENT),
}


def _decode(name: str, text: str) -> Any:
    if not text.strip():
        return None
    try:
        data = yaml.safe_load(text)
        return _DECODERS[name].validate_python(data)
    except (yaml.YAMLError, ValidationError) as exc:
        raise RenderError(f"cannot decode rendered value {text!r}: {exc}", field=name) from exc


def render(
    plan: RenderingPlan,
    notification: Notification,
    variables: Variables | VariableBinding,
) -> None:
    """Populate ``notification.opsgenie`` from *plan* and *variables*.

    Pass-through values are copied first. Templated fields are then written
    one at a time; on the first ``RenderError`` rendering stops and fields
    already written stay written, so a notification whose render raised must
    not be sent.
    """
    binding = VariableBinding.of(variables)
    if notification.opsgenie is None:
        notification.opsgenie = OpsgenieNotification()
    payload = notification.opsgenie

    for name, value in plan.passthrough.items():
        setattr(payload, name, copy.copy(value))

    decode = plan.variant is SchemaVariant.TEMPLATED
    for name, field in plan.fields.items():
        text = field.render(binding)
        if decode and name in _DECODERS:
            setattr(payload, name, _decode(name, text))
        else:
            setattr(payload, name, text)


class Templater:
    """Reusable render function bound to one plan.

    Holds no per-call state, so one instance serves concurrent renders.
    """

    def __init__(self, plan: RenderingPlan) -> None:
        self._plan = plan

    @property
    def plan(self) -> RenderingPlan:
        return self._plan

    def __call__(self, notification: Notification, variables: Variables | VariableBinding) -> None:
        render(self._plan, notification, variables)


class NotificationTemplater:
    """Renders a whole notification: envelope message plus Opsgenie payload."""

    def __init__(
        self,
        name: str,
        message: FieldTemplate,
        opsgenie: Templater | None = None,
    ) -> None:
        self._name = name
        self._message = message
        self._opsgenie = opsgenie

    @property
    def name(self) -> str:
        return self._name

    @property
    def opsgenie(self) -> Templater | None:
        return self._opsgenie

    def __call__(self, notification: Notification, variables: Variables | VariableBinding) -> None:
        binding = VariableBinding.of(variables)
        notification.message = self._message.render(binding)
        if self._opsgenie is not None:
            self._opsgenie(notification, binding)

    def render(self, variables: Variables | VariableBinding) -> Notification:
        """Render into a fresh ``Notification``."""
        notification = Notification()
        self(notification, variables)
        return notification
