"""A single compiled, reusable template for one string field."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from jinja2 import Environment, Template, TemplateError as JinjaTemplateError, UndefinedError

from notifier.templating.binding import VariableBinding
from notifier.templating.exceptions import CompileError, RenderError, UndefinedVariableError

# Errors a template body can raise while evaluating against a binding.
_RENDER_ERRORS: tuple[type[Exception], ...] = (
    JinjaTemplateError,
    TypeError,
    ValueError,
    LookupError,
    ArithmeticError,
    AttributeError,
)


class FieldTemplate:
    """Compiled template for one named field.

    Instances are immutable after construction; ``render`` may be called
    concurrently with different bindings.
    """

    __slots__ = ("_name", "_source", "_template")

    def __init__(self, name: str, source: str, template: Template | None) -> None:
        self._name = name
        self._source = source
        self._template = template

    @property
    def name(self) -> str:
        return self._name

    @property
    def source(self) -> str:
        return self._source

    def render(self, binding: Mapping[str, Any] | VariableBinding) -> str:
        """Evaluate the template against *binding*.

        The binding is also visible to the template as ``vars`` (unless a
        variable of that name is bound), exposing the checked accessor:
        ``{{ vars.lookup("replicas", "int") }}``.

        Raises:
            UndefinedVariableError: a referenced name or attribute is unbound.
            VariableTypeError: ``vars.lookup`` found a value of the wrong type.
            RenderError: a value the template cannot operate on.
            No partial output is returned in any case.
        """
        if self._template is None:
            return ""
        binding = VariableBinding.of(binding)
        context: dict[str, Any] = dict(binding)
        context.setdefault("vars", binding)
        try:
            return self._template.render(context)
        except RenderError as exc:
            if exc.field is None:
                raise type(exc)(str(exc), field=self._name) from exc
            raise
        except UndefinedError as exc:
            raise UndefinedVariableError(str(exc), field=self._name) from exc
        except _RENDER_ERRORS as exc:
            raise RenderError(str(exc), field=self._name) from exc

    def __repr__(self) -> str:
        return f"FieldTemplate(name={self._name!r}, source={self._source!r})"


def compile_field(name: str, source: str, environment: Environment) -> FieldTemplate:
    """Compile *source* for field *name*.

    An empty source compiles to a template that always renders ``""``.

    Raises:
        CompileError: if *source* is not valid template syntax.
    """
    if not source:
        return FieldTemplate(name, source, None)
    try:
        template = environment.from_string(source)
    except JinjaTemplateError as exc:
        raise CompileError(str(exc), field=name) from exc
    return FieldTemplate(name, source, template)
