from __future__ import annotations

import os
from dataclasses import dataclass
from typing import ClassVar, Sequence

from repoconfig.framework.errors import StepExecutionError, quote
from repoconfig.framework.meta import StepMeta
from repoconfig.steps.plan import plan_file_path
from stepkit.step_types import StepRef

KIND_ID = "apply"


@dataclass(frozen=True)
class ApplyStep:
    meta: StepMeta
    extra_args: tuple[str, ...] = ()

    step_type: ClassVar[str] = KIND_ID

    def command_args(self) -> list[str]:
        return [
            "apply",
            "-no-color",
            *self.extra_args,
            *self.meta.extra_comment_args,
            plan_file_path(self.meta),
        ]

    def run(self) -> str:
        plan_file = plan_file_path(self.meta)
        if not os.path.exists(plan_file):
            raise StepExecutionError(
                f"no plan found at path {quote(self.meta.dir_relative_to_repo_root)} "
                f"and workspace {quote(self.meta.workspace)}: did you run plan?"
            )
        return self.meta.run_terraform(self.command_args())


def _build(meta: StepMeta, extra_args: Sequence[str]) -> ApplyStep:
    return ApplyStep(meta=meta, extra_args=tuple(extra_args))


STEP = StepRef(
    id=KIND_ID,
    builder=_build,
    doc="Apply the workspace's saved plan file (terraform apply).",
)
