"""Exception hierarchy for template compilation and rendering."""

from __future__ import annotations


class TemplateError(Exception):
    """Base exception for all templating errors."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        if field:
            message = f"{field}: {message}"
        super().__init__(message)


class CompileError(TemplateError):
    """Template text is not valid; raised at configuration-load time."""


class RenderError(TemplateError):
    """Evaluating a compiled template failed for a given binding."""


class UndefinedVariableError(RenderError):
    """A binding lookup referenced a name that is not bound."""


class VariableTypeError(RenderError):
    """A bound value does not have the type the caller asked for."""
