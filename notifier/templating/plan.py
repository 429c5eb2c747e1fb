"""Rendering plan, the compiled form of one Opsgenie spec."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from notifier.core.types import SchemaVariant
from notifier.templating.field import FieldTemplate


@dataclass(frozen=True)
class RenderingPlan:
    """One ``FieldTemplate`` per templated field of a spec.

    ``fields`` holds exactly the OpsgenieSpec's templated fields (empty ones
    included). ``passthrough`` holds its structured values by
    reference; they are never parsed as templates.
    """

    name: str
    variant: SchemaVariant
    fields: Mapping[str, FieldTemplate]
    passthrough: Mapping[str, Any]

    def field_names(self) -> list[str]:
        return list(self.fields)
