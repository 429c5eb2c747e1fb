"""Tests for the renderer — payload population, failure behaviour, concurrency."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from notifier.core.types import (
    Notification,
    OpsgenieNotification,
    OpsgenieSpec,
    Responder,
    TemplatedOpsgenieSpec,
)
from notifier.templating.compiler import TemplateCompiler
from notifier.templating.exceptions import RenderError, UndefinedVariableError, VariableTypeError
from notifier.templating.templater import Templater, render


# ── Helpers ─────────────────────────────────────────────────────


def _plan(**kw: object):
    return TemplateCompiler().compile(OpsgenieSpec(**kw))  # type: ignore[arg-type]


def _templated_plan(**kw: object):
    return TemplateCompiler().compile(TemplatedOpsgenieSpec(**kw))  # type: ignore[arg-type]


# ── Structured schema ──────────────────────────────────────────


class TestRender:
    def test_end_to_end_fields(self) -> None:
        plan = _plan(alias="svc-{{ name }}", priority="P1")
        n = Notification()
        render(plan, n, {"name": "checkout"})
        assert n.opsgenie is not None
        assert n.opsgenie.alias == "svc-checkout"
        assert n.opsgenie.priority == "P1"
        assert n.opsgenie.description == ""

    def test_all_message_fields(self) -> None:
        plan = _plan(
            alias="{{ a }}",
            description="{{ a }}-d",
            entity="{{ a }}-e",
            priority="P{{ p }}",
            user="{{ a }}-u",
            note="{{ a }}-n",
        )
        n = Notification()
        render(plan, n, {"a": "x", "p": 3})
        assert n.opsgenie == OpsgenieNotification(
            alias="x",
            description="x-d",
            entity="x-e",
            priority="P3",
            user="x-u",
            note="x-n",
        )

    def test_creates_payload_lazily(self) -> None:
        n = Notification()
        assert n.opsgenie is None
        render(_plan(), n, {})
        assert isinstance(n.opsgenie, OpsgenieNotification)

    def test_overwrites_existing_payload_in_place(self) -> None:
        payload = OpsgenieNotification(alias="old", note="old note")
        n = Notification(opsgenie=payload)
        render(_plan(alias="new"), n, {})
        assert n.opsgenie is payload
        assert payload.alias == "new"
        assert payload.note == ""

    def test_passthrough_copied(self) -> None:
        spec_actions = ["Restart", "Rollback"]
        plan = _plan(
            actions=spec_actions,
            tags=["prod"],
            details={"runbook": "https://x"},
            visibleTo=[Responder(type="team", name="sre")],
        )
        n = Notification()
        render(plan, n, {})
        assert n.opsgenie is not None
        assert n.opsgenie.actions == spec_actions
        assert n.opsgenie.actions is not spec_actions
        assert n.opsgenie.tags == ["prod"]
        assert n.opsgenie.details == {"runbook": "https://x"}
        assert n.opsgenie.visible_to == [Responder(type="team", name="sre")]

    def test_templater_callable(self) -> None:
        templater = Templater(_plan(alias="{{ name }}"))
        n = Notification()
        templater(n, {"name": "x"})
        assert n.opsgenie is not None
        assert n.opsgenie.alias == "x"


class TestRenderFailure:
    def test_missing_variable_raises(self) -> None:
        plan = _plan(alias="svc-{{ name }}")
        with pytest.raises(UndefinedVariableError) as exc_info:
            render(plan, Notification(), {})
        assert exc_info.value.field == "alias"
        assert isinstance(exc_info.value, RenderError)

    def test_checked_lookup_type_mismatch(self) -> None:
        plan = _plan(priority='P{{ vars.lookup("level", "int") }}')
        n = Notification()
        render(plan, n, {"level": 1})
        assert n.opsgenie is not None
        assert n.opsgenie.priority == "P1"
        with pytest.raises(VariableTypeError) as exc_info:
            render(plan, Notification(), {"level": "high"})
        assert exc_info.value.field == "priority"

    def test_fields_before_failure_stay_written(self) -> None:
        plan = _plan(alias="a-{{ x }}", description="{{ missing }}", note="n")
        n = Notification()
        with pytest.raises(RenderError):
            render(plan, n, {"x": 1})
        assert n.opsgenie is not None
        assert n.opsgenie.alias == "a-1"
        assert n.opsgenie.note == ""

    def test_passthrough_written_even_on_failure(self) -> None:
        plan = _plan(alias="{{ missing }}", tags=["prod"])
        n = Notification()
        with pytest.raises(RenderError):
            render(plan, n, {})
        assert n.opsgenie is not None
        assert n.opsgenie.tags == ["prod"]


# ── Templated schema ───────────────────────────────────────────


class TestTemplatedSchema:
    def test_decodes_structured_fields(self) -> None:
        plan = _templated_plan(
            alias="{{ app }}",
            visibleTo='[{"type": "team", "name": "{{ team }}"}]',
            actions="",
            tags='["{{ env }}", "argocd"]',
            details="team: {{ team }}\nreplicas: {{ replicas }}",
        )
        n = Notification()
        render(plan, n, {"app": "guestbook", "team": "sre", "env": "prod", "replicas": 3})
        assert n.opsgenie is not None
        assert n.opsgenie.alias == "guestbook"
        assert n.opsgenie.visible_to == [Responder(type="team", name="sre")]
        assert n.opsgenie.actions is None
        assert n.opsgenie.tags == ["prod", "argocd"]
        assert n.opsgenie.details == {"team": "sre", "replicas": "3"}

    def test_yaml_sequence(self) -> None:
        plan = _templated_plan(
            tags="{% for t in tags %}- {{ t }}\n{% endfor %}",
        )
        n = Notification()
        render(plan, n, {"tags": ["a", "b"]})
        assert n.opsgenie is not None
        assert n.opsgenie.tags == ["a", "b"]

    def test_wrong_shape_is_render_error(self) -> None:
        plan = _templated_plan(tags="{{ env }}")
        with pytest.raises(RenderError) as exc_info:
            render(plan, Notification(), {"env": "prod"})
        assert exc_info.value.field == "tags"

    def test_invalid_yaml_is_render_error(self) -> None:
        plan = _templated_plan(details="{{ key }}: [unclosed")
        with pytest.raises(RenderError) as exc_info:
            render(plan, Notification(), {"key": "k"})
        assert exc_info.value.field == "details"


# ── Concurrency ────────────────────────────────────────────────


class TestConcurrency:
    def test_shared_plan_no_cross_contamination(self) -> None:
        plan = _plan(
            alias="svc-{{ name }}",
            description="{% for i in range(50) %}{{ name }}{% endfor %}",
            tags=["shared"],
        )
        templater = Templater(plan)
        names = [f"app-{i}" for i in range(200)]

        def _render(name: str) -> Notification:
            n = Notification()
            templater(n, {"name": name})
            return n

        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(pool.map(_render, names))

        for name, n in zip(names, results):
            assert n.opsgenie is not None
            assert n.opsgenie.alias == f"svc-{name}"
            assert n.opsgenie.description == name * 50
            assert n.opsgenie.tags == ["shared"]

    def test_envelopes_do_not_share_passthrough_lists(self) -> None:
        plan = _plan(tags=["shared"])
        a, b = Notification(), Notification()
        render(plan, a, {})
        render(plan, b, {})
        assert a.opsgenie is not None and b.opsgenie is not None
        a.opsgenie.tags.append("only-a")  # type: ignore[union-attr]
        assert b.opsgenie.tags == ["shared"]
