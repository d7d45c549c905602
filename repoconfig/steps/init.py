from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Sequence

from repoconfig.framework.meta import StepMeta
from stepkit.step_types import StepRef

KIND_ID = "init"


@dataclass(frozen=True)
class InitStep:
    meta: StepMeta
    extra_args: tuple[str, ...] = ()

    step_type: ClassVar[str] = KIND_ID

    def command_args(self) -> list[str]:
        return ["init", "-no-color", *self.extra_args]

    def run(self) -> str:
        return self.meta.run_terraform(self.command_args())


def _build(meta: StepMeta, extra_args: Sequence[str]) -> InitStep:
    return InitStep(meta=meta, extra_args=tuple(extra_args))


STEP = StepRef(
    id=KIND_ID,
    builder=_build,
    doc="Initialize the project's working directory (terraform init).",
)
