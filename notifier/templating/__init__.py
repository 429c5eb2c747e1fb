"""Template compilation and rendering for notification specs."""

from notifier.templating.binding import VariableBinding
from notifier.templating.compiler import TemplateCompiler
from notifier.templating.exceptions import (
    CompileError,
    RenderError,
    TemplateError,
    UndefinedVariableError,
    VariableTypeError,
)
from notifier.templating.field import FieldTemplate, compile_field
from notifier.templating.plan import RenderingPlan
from notifier.templating.templater import NotificationTemplater, Templater, render

__all__ = [
    "CompileError",
    "FieldTemplate",
    "NotificationTemplater",
    "RenderError",
    "RenderingPlan",
    "TemplateCompiler",
    "TemplateError",
    "Templater",
    "UndefinedVariableError",
    "VariableBinding",
    "VariableTypeError",
    "compile_field",
    "render",
]
