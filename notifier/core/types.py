"""Domain types for notification templates and their rendered payloads."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field


class SchemaVariant(StrEnum):
    """Which shape the Opsgenie block of a template has.

    Only one variant is active per deployment (``Settings.schema_variant``).
    """

    STRUCTURED = "structured"  # message-like strings templated, lists/maps passed through
    TEMPLATED = "templated"  # every field is a template string


class Responder(BaseModel):
    """An Opsgenie responder / visibleTo entry."""

    model_config = ConfigDict(frozen=True)

    type: str
    id: str = ""
    name: str = ""
    username: str = ""

    def to_payload(self) -> dict[str, str]:
        return self.model_dump(exclude_defaults=True)


# ── Template specs ──────────────────────────────────────────────

# Message-like fields shared by both schema variants, in render order.
MESSAGE_FIELDS: tuple[str, ...] = (
    "alias",
    "description",
    "entity",
    "priority",
    "user",
    "note",
)

# Fields that are structured in the canonical schema.
STRUCTURED_FIELDS: tuple[str, ...] = ("visible_to", "actions", "tags", "details")


class OpsgenieSpec(BaseModel):
    """Opsgenie part of a template: templated strings + structured pass-through."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    variant: ClassVar[SchemaVariant] = SchemaVariant.STRUCTURED

    alias: str = ""
    description: str = ""
    entity: str = ""
    priority: str = ""
    user: str = ""
    note: str = ""
    visible_to: list[Responder] | None = Field(default=None, alias="visibleTo")
    actions: list[str] | None = None
    tags: list[str] | None = None
    details: dict[str, str] | None = None

    def templated_fields(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in MESSAGE_FIELDS}

    def structured_fields(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in STRUCTURED_FIELDS}


class TemplatedOpsgenieSpec(BaseModel):
    """Opsgenie part of a template where every field is a template string.

    ``visibleTo``, ``actions`` and ``tags`` must render to a YAML/JSON list and
    ``details`` to a YAML/JSON mapping.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    variant: ClassVar[SchemaVariant] = SchemaVariant.TEMPLATED

    alias: str = ""
    description: str = ""
    entity: str = ""
    priority: str = ""
    user: str = ""
    note: str = ""
    visible_to: str = Field(default="", alias="visibleTo")
    actions: str = ""
    tags: str = ""
    details: str = ""

    def templated_fields(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in MESSAGE_FIELDS + STRUCTURED_FIELDS}

    def structured_fields(self) -> dict[str, Any]:
        return {}


OpsgenieSpecType = OpsgenieSpec | TemplatedOpsgenieSpec

_SPEC_CLASSES: dict[SchemaVariant, type[OpsgenieSpec] | type[TemplatedOpsgenieSpec]] = {
    SchemaVariant.STRUCTURED: OpsgenieSpec,
    SchemaVariant.TEMPLATED: TemplatedOpsgenieSpec,
}


def parse_opsgenie_spec(data: dict[str, Any], variant: SchemaVariant) -> OpsgenieSpecType:
    """Validate a raw Opsgenie block against the active schema variant.

    Raises:
        pydantic.ValidationError: if *data* does not match the variant's shape.
    """
    return _SPEC_CLASSES[SchemaVariant(variant)].model_validate(data)


class NotificationTemplate(BaseModel):
    """A named template: envelope message plus the Opsgenie spec."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    message: str = ""
    opsgenie: OpsgenieSpecType | None = None


# ── Rendered output ─────────────────────────────────────────────


class OpsgenieNotification(BaseModel):
    """Rendered Opsgenie payload, overwritten in place on every render."""

    model_config = ConfigDict(populate_by_name=True)

    alias: str = ""
    description: str = ""
    visible_to: list[Responder] | None = Field(default=None, alias="visibleTo")
    actions: list[str] | None = None
    tags: list[str] | None = None
    details: dict[str, str] | None = None
    entity: str = ""
    priority: str = ""
    user: str = ""
    note: str = ""


class Notification(BaseModel):
    """Notification envelope handed to services."""

    message: str = ""
    opsgenie: OpsgenieNotification | None = None


class Destination(BaseModel):
    """Where a notification goes: a service plus an opaque recipient key."""

    model_config = ConfigDict(frozen=True)

    recipient: str
    service: str = "opsgenie"
