"""Convenience factory for wiring templates and services from settings."""

from __future__ import annotations

import structlog

from notifier.core.config import Settings
from notifier.core.types import NotificationTemplate, parse_opsgenie_spec
from notifier.routing.dispatcher import NotificationDispatcher
from notifier.services.backend import AlertBackend
from notifier.services.opsgenie import OpsgenieService
from notifier.templating.compiler import TemplateCompiler
from notifier.templating.exceptions import CompileError
from notifier.templating.templater import NotificationTemplater

logger = structlog.get_logger(__name__)


def compile_templates(
    settings: Settings,
    compiler: TemplateCompiler | None = None,
) -> dict[str, NotificationTemplater]:
    """Compile every configured template under the active schema variant.

    Raises:
        CompileError: the first invalid template field; nothing is returned.
        pydantic.ValidationError: an Opsgenie block has the wrong schema.
    """
    compiler = compiler or TemplateCompiler()
    templaters: dict[str, NotificationTemplater] = {}
    for name, cfg in settings.templates.items():
        spec = None
        if cfg.opsgenie is not None:
            spec = parse_opsgenie_spec(cfg.opsgenie, settings.schema_variant)
        template = NotificationTemplate(name=name, message=cfg.message, opsgenie=spec)
        try:
            templaters[name] = compiler.compile_notification(template)
        except CompileError as exc:
            logger.error("template_compile_failed", template=name, field=exc.field, error=str(exc))
            raise
    return templaters


def create_notifier_stack(
    settings: Settings,
    backend: AlertBackend | None = None,
    compiler: TemplateCompiler | None = None,
) -> NotificationDispatcher:
    """Build a dispatcher with compiled templates and the Opsgenie service."""
    templaters = compile_templates(settings, compiler)
    service = OpsgenieService(settings.opsgenie, backend=backend)
    logger.info(
        "notifier_ready",
        templates=len(templaters),
        schema_variant=settings.schema_variant.value,
        recipients=len(service.recipients),
    )
    return NotificationDispatcher(templaters=templaters, services=[service])
