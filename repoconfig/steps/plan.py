from __future__ import annotations

import os
from dataclasses import dataclass
from typing import ClassVar, Sequence

from repoconfig.framework.meta import StepMeta
from stepkit.step_types import StepRef

KIND_ID = "plan"


def plan_file_path(meta: StepMeta) -> str:
    """Plan output location; one file per workspace inside the project dir."""

    return os.path.join(meta.absolute_path, f"{meta.workspace}.tfplan")


@dataclass(frozen=True)
class PlanStep:
    meta: StepMeta
    extra_args: tuple[str, ...] = ()

    step_type: ClassVar[str] = KIND_ID

    def command_args(self) -> list[str]:
        return [
            "plan",
            "-refresh",
            "-no-color",
            "-out",
            plan_file_path(self.meta),
            "-var",
            f"atlantis_user={self.meta.username}",
            *self.extra_args,
            *self.meta.extra_comment_args,
        ]

    def run(self) -> str:
        return self.meta.run_terraform(self.command_args())


def _build(meta: StepMeta, extra_args: Sequence[str]) -> PlanStep:
    return PlanStep(meta=meta, extra_args=tuple(extra_args))


STEP = StepRef(
    id=KIND_ID,
    builder=_build,
    doc="Write a plan file for the workspace (terraform plan -out).",
)
