from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Protocol, Sequence

from repoconfig.framework.errors import StepExecutionError


class TerraformExec(Protocol):
    def run_command_with_version(
        self,
        log: logging.Logger,
        path: str,
        args: Sequence[str],
        version: Any,
        workspace: str,
    ) -> str: ...


@dataclass(frozen=True)
class StepMeta:
    """Execution context shared, read-only, by every step of one resolved stage."""

    log: logging.Logger
    workspace: str
    absolute_path: str
    dir_relative_to_repo_root: str
    terraform_version: Any
    terraform_executor: TerraformExec | None
    extra_comment_args: tuple[str, ...]
    username: str

    def run_terraform(self, args: Sequence[str]) -> str:
        if self.terraform_executor is None:
            raise StepExecutionError(
                f"no terraform executor configured (dir={self.dir_relative_to_repo_root} "
                f"workspace={self.workspace})"
            )
        self.log.debug("Running terraform in %s: %s", self.absolute_path, " ".join(args))
        return self.terraform_executor.run_command_with_version(
            self.log,
            self.absolute_path,
            list(args),
            self.terraform_version,
            self.workspace,
        )


class Step(Protocol):
    step_type: ClassVar[str]
    meta: StepMeta
    extra_args: tuple[str, ...]

    def run(self) -> str: ...
