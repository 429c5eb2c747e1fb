"""Compile notification specs into reusable rendering plans."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

import structlog
from jinja2 import Environment, StrictUndefined

from notifier.core.types import NotificationTemplate, OpsgenieSpecType
from notifier.templating.field import FieldTemplate, compile_field
from notifier.templating.plan import RenderingPlan
from notifier.templating.templater import NotificationTemplater, Templater

logger = structlog.get_logger(__name__)


class TemplateCompiler:
    """Compiles every templated field of a spec exactly once.

    All templates share one Jinja2 environment configured with
    ``StrictUndefined``, so referencing an unbound variable fails at render
    time instead of producing an empty string. Extra callables can be exposed
    to templates as globals (``functions``) or filters (``filters``).

    Usage::

        compiler = TemplateCompiler(functions={"upper": str.upper})
        plan = compiler.compile(OpsgenieSpec(alias="svc-{{ name }}"))
        notification = Notification()
        render(plan, notification, {"name": "checkout"})
    """

    def __init__(
        self,
        functions: Mapping[str, Callable[..., Any]] | None = None,
        filters: Mapping[str, Callable[..., Any]] | None = None,
    ) -> None:
        self._env = Environment(
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
        )
        if functions:
            self._env.globals.update(functions)
        if filters:
            self._env.filters.update(filters)

    @property
    def environment(self) -> Environment:
        return self._env

    def compile_field(self, name: str, source: str) -> FieldTemplate:
        return compile_field(name, source, self._env)

    def compile(self, spec: OpsgenieSpecType, name: str = "") -> RenderingPlan:
        """Build a plan for *spec*.

        Raises:
            CompileError: for the first field whose template is invalid.
        """
        fields = {
            field_name: compile_field(field_name, source, self._env)
            for field_name, source in spec.templated_fields().items()
        }
        plan = RenderingPlan(
            name=name,
            variant=spec.variant,
            fields=MappingProxyType(fields),
            passthrough=MappingProxyType(spec.structured_fields()),
        )
        logger.debug(
            "template_compiled",
            template=name,
            variant=spec.variant.value,
            fields=len(fields),
        )
        return plan

    def compile_notification(self, template: NotificationTemplate) -> NotificationTemplater:
        """Compile the message and, if present, the Opsgenie spec of *template*."""
        message = compile_field("message", template.message, self._env)
        opsgenie: Templater | None = None
        if template.opsgenie is not None:
            opsgenie = Templater(self.compile(template.opsgenie, name=template.name))
        return NotificationTemplater(template.name, message, opsgenie)
