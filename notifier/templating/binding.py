"""Read-only variable bindings supplied per render call."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any, TypeVar

from notifier.templating.exceptions import UndefinedVariableError, VariableTypeError

T = TypeVar("T")

TYPE_NAMES: dict[str, type] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "list": list,
    "dict": dict,
    "mapping": Mapping,
}


class VariableBinding(Mapping[str, Any]):
    """Name -> value mapping handed to templates.

    The binding takes a shallow snapshot of the caller's mapping and exposes
    no mutators. ``lookup`` is the checked accessor: it raises instead of
    returning a default so a missing or mistyped value is always an error.

    Usage::

        binding = VariableBinding({"app": {"name": "checkout"}})
        binding.lookup("app", dict)["name"]
    """

    __slots__ = ("_vars",)

    def __init__(self, variables: Mapping[str, Any] | None = None) -> None:
        self._vars: Mapping[str, Any] = MappingProxyType(dict(variables or {}))

    @classmethod
    def of(cls, variables: Mapping[str, Any] | VariableBinding | None) -> VariableBinding:
        if isinstance(variables, VariableBinding):
            return variables
        return cls(variables)

    def lookup(self, name: str, expected_type: type[T] | str = object) -> T:  # type: ignore[assignment]
        """Return the value bound to *name*, checked against *expected_type*.

        *expected_type* may be a type or one of the names in ``TYPE_NAMES``
        (templates cannot reference Python types directly).
        """
        if isinstance(expected_type, str):
            try:
                expected_type = TYPE_NAMES[expected_type]
            except KeyError:
                raise VariableTypeError(f"unknown type name {expected_type!r}") from None
        try:
            value = self._vars[name]
        except KeyError:
            raise UndefinedVariableError(f"variable {name!r} is not defined") from None
        if not isinstance(value, expected_type):
            raise VariableTypeError(
                f"variable {name!r} is {type(value).__name__}, "
                f"expected {expected_type.__name__}"
            )
        return value

    def __getitem__(self, name: str) -> Any:
        return self._vars[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)

    def __repr__(self) -> str:
        return f"VariableBinding({dict(self._vars)!r})"
