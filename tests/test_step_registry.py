import logging
from dataclasses import dataclass
from typing import ClassVar

import pytest

from repoconfig.steps import ApplyStep, InitStep, PlanStep
from repoconfig.steps.registry import get_step_registry
from stepkit.step_registry import StepRegistry
from stepkit.step_types import StepRef


@dataclass(frozen=True)
class _EchoStep:
    meta: object
    extra_args: tuple[str, ...] = ()

    step_type: ClassVar[str] = "echo"

    def run(self) -> str:
        return " ".join(self.extra_args)


def _echo_ref() -> StepRef:
    return StepRef(id="echo", builder=lambda meta, extra_args: _EchoStep(meta, tuple(extra_args)))


def test_default_registry_has_builtin_step_types_only():
    registry = get_step_registry()
    assert registry.available() == ("apply", "init", "plan")
    assert "custom" not in registry
    assert registry.find("custom") is None


def test_default_registry_builds_matching_variants():
    registry = get_step_registry()
    meta = object()
    assert isinstance(registry.get("init").build(meta), InitStep)
    assert isinstance(registry.get("plan").build(meta, ["-x"]), PlanStep)
    step = registry.get("apply").build(meta, ("-auto",))
    assert isinstance(step, ApplyStep)
    assert step.extra_args == ("-auto",)
    assert step.meta is meta


def test_describe_lists_docs_sorted_by_id():
    rows = get_step_registry().describe()
    assert [row["step_type"] for row in rows] == ["apply", "init", "plan"]
    assert all(row["doc"] for row in rows)


def test_registry_rejects_duplicate_ids():
    with pytest.raises(ValueError, match=r"Duplicate step type id: echo"):
        StepRegistry.from_refs([_echo_ref(), _echo_ref()])

    with pytest.raises(ValueError, match=r"Duplicate step type id: init"):
        get_step_registry().with_refs([StepRef(id="init", builder=lambda meta, extra_args: None)])


def test_registry_get_unknown_lists_available():
    with pytest.raises(ValueError, match=r"Unknown step type id: custom \(available: apply, init, plan\)"):
        get_step_registry().get("custom")


def test_with_refs_returns_extended_copy():
    base = get_step_registry()
    extended = base.with_refs([_echo_ref()])
    assert "echo" in extended
    assert "echo" not in base
    step = extended.get("echo").build(logging.getLogger("x"), ["hello", "world"])
    assert step.run() == "hello world"


def test_step_ref_rejects_mismatched_step_type():
    ref = StepRef(id="other", builder=lambda meta, extra_args: _EchoStep(meta, tuple(extra_args)))
    with pytest.raises(ValueError, match=r"mismatched step_type: expected=other got='echo'"):
        ref.build(object())


def test_step_ref_validates_fields():
    with pytest.raises(TypeError, match=r"StepRef\.id must be a non-empty string"):
        StepRef(id="  ", builder=lambda meta, extra_args: None)
    with pytest.raises(TypeError, match=r"StepRef\.builder must be callable"):
        StepRef(id="x", builder="not callable")  # type: ignore[arg-type]
