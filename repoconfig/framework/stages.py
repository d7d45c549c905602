from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Sequence

from repoconfig.framework.config import APPLY_STAGE_NAME, PLAN_STAGE_NAME
from repoconfig.framework.errors import StageRunError
from repoconfig.framework.meta import Step


def run_steps(stage_name: str, steps: Sequence[Step]) -> str:
    """Run steps in order, stopping at the first failure.

    Non-empty outputs are joined with newlines. On failure a StageRunError
    carries the output collected so far.
    """

    outputs = ""
    for step in steps:
        try:
            out = step.run()
        except Exception as exc:
            step.meta.log.error("%s stage: %s step failed: %s", stage_name, step.step_type, exc)
            raise StageRunError(stage_name, step.step_type, exc, output=outputs) from exc
        if out:
            outputs += "\n" + out
    return outputs


def describe_steps(stage_name: str, steps: Sequence[Step]) -> dict[str, Any]:
    payload: dict[str, Any] = {"stage": stage_name}
    if steps:
        meta = steps[0].meta
        payload.update(
            {
                "workspace": meta.workspace,
                "dir": meta.dir_relative_to_repo_root,
                "absolute_path": meta.absolute_path,
                "terraform_version": None if meta.terraform_version is None else str(meta.terraform_version),
                "username": meta.username,
                "extra_comment_args": list(meta.extra_comment_args),
            }
        )
    payload["steps"] = [
        {"step_type": step.step_type, "extra_args": list(step.extra_args)} for step in steps
    ]
    return payload


@dataclass(frozen=True)
class PlanStage:
    steps: tuple[Step, ...]

    name: ClassVar[str] = PLAN_STAGE_NAME

    def run(self) -> str:
        return run_steps(self.name, self.steps)

    def describe(self) -> dict[str, Any]:
        return describe_steps(self.name, self.steps)


@dataclass(frozen=True)
class ApplyStage:
    steps: tuple[Step, ...]

    name: ClassVar[str] = APPLY_STAGE_NAME

    def run(self) -> str:
        return run_steps(self.name, self.steps)

    def describe(self) -> dict[str, Any]:
        return describe_steps(self.name, self.steps)
