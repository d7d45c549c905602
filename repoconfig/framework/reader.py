"""Resolve the ordered steps of a plan or apply stage for one project/workspace.

Resolution reads `atlantis.yaml` from the repo checkout on every call:

- no file: the built-in default steps
- a project entry matching (dir, workspace) with no workflow: the defaults
- a project entry naming a workflow: that workflow's steps for the stage
- a file that does not declare the project, or names a missing workflow: an error

Nothing is cached between calls.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Literal, Sequence

from repoconfig.foundation.config_io import REPO_CONFIG_FILENAME, read_file_bytes, repo_config_path
from repoconfig.framework.config import (
    APPLY_STAGE_NAME,
    PLAN_STAGE_NAME,
    STAGE_NAMES,
    RepoConfig,
    StepConfig,
    parse_repo_config,
)
from repoconfig.framework.errors import (
    ConfigReadError,
    ConfigSchemaError,
    ConfigValidationError,
    ProjectNotFoundError,
    UnsupportedStepTypeError,
    WorkflowNotFoundError,
)
from repoconfig.framework.meta import Step, StepMeta, TerraformExec
from repoconfig.framework.stages import ApplyStage, PlanStage
from repoconfig.steps.registry import get_step_registry
from stepkit.step_registry import StepRegistry

logger = logging.getLogger(__name__)

UnknownStepPolicy = Literal["skip", "error"]
UNKNOWN_STEP_POLICIES: tuple[str, ...] = ("skip", "error")

DEFAULT_STEP_TYPES: dict[str, tuple[str, ...]] = {
    PLAN_STAGE_NAME: ("init", "plan"),
    APPLY_STAGE_NAME: ("apply",),
}


@dataclass
class Reader:
    terraform_executor: TerraformExec | None = None
    default_tf_version: Any = None
    step_registry: StepRegistry | None = None
    # What to do with a configured step type that has no registered constructor.
    unknown_step_policy: UnknownStepPolicy = "skip"
    read_bytes: Callable[[str], bytes | None] | None = None

    def __post_init__(self) -> None:
        if self.unknown_step_policy not in UNKNOWN_STEP_POLICIES:
            raise ValueError(
                f"unknown_step_policy must be one of: {', '.join(UNKNOWN_STEP_POLICIES)} "
                f"(got {self.unknown_step_policy!r})"
            )

    @property
    def registry(self) -> StepRegistry:
        return self.step_registry if self.step_registry is not None else get_step_registry()

    def read_config(self, repo_dir: str | os.PathLike[str]) -> RepoConfig | None:
        """Return the parsed and validated config for repo_dir, or None if there is no file."""

        config_file = repo_config_path(repo_dir)
        reader = self.read_bytes or read_file_bytes
        try:
            data = reader(config_file)
        except OSError as exc:
            raise ConfigReadError(f"unable to read {REPO_CONFIG_FILENAME} file: {exc}") from exc

        if data is None:
            return None

        try:
            return self.parse_and_validate(data)
        except (ConfigSchemaError, ConfigValidationError) as exc:
            raise exc.__class__(f"parsing {REPO_CONFIG_FILENAME}: {exc}") from exc

    def parse_and_validate(self, config_data: bytes | str) -> RepoConfig:
        return parse_repo_config(config_data)

    def build_plan_stage(
        self,
        log: logging.Logger | None,
        repo_dir: str,
        workspace: str,
        rel_project_path: str,
        extra_comment_args: Sequence[str] = (),
        username: str = "",
    ) -> PlanStage:
        steps = self.build_stage(
            PLAN_STAGE_NAME, log, repo_dir, workspace, rel_project_path, extra_comment_args, username
        )
        return PlanStage(steps=tuple(steps))

    def build_apply_stage(
        self,
        log: logging.Logger | None,
        repo_dir: str,
        workspace: str,
        rel_project_path: str,
        extra_comment_args: Sequence[str] = (),
        username: str = "",
    ) -> ApplyStage:
        steps = self.build_stage(
            APPLY_STAGE_NAME, log, repo_dir, workspace, rel_project_path, extra_comment_args, username
        )
        return ApplyStage(steps=tuple(steps))

    def build_stage(
        self,
        stage_name: str,
        log: logging.Logger | None,
        repo_dir: str,
        workspace: str,
        rel_project_path: str,
        extra_comment_args: Sequence[str] = (),
        username: str = "",
    ) -> list[Step]:
        if stage_name not in STAGE_NAMES:
            raise ValueError(
                f"Unknown stage name: {stage_name!r} (expected one of: {', '.join(STAGE_NAMES)})"
            )
        log = log or logger

        meta = self.build_meta(log, repo_dir, workspace, rel_project_path, extra_comment_args, username)
        defaults = self.default_steps(stage_name, meta)

        config = self.read_config(repo_dir)
        if config is None:
            log.info("no %s file found, continuing with defaults", REPO_CONFIG_FILENAME)
            return defaults

        project = config.find_project(rel_project_path, workspace)
        if project is None:
            raise ProjectNotFoundError(rel_project_path, workspace)

        if not project.workflow:
            log.info("no %s workflow set, continuing with defaults", REPO_CONFIG_FILENAME)
            return defaults

        workflow = config.workflows.get(project.workflow)
        if workflow is None:
            raise WorkflowNotFoundError(project.workflow)

        log.debug(
            "Using workflow %s for %s stage (dir=%s workspace=%s)",
            project.workflow,
            stage_name,
            rel_project_path,
            workspace,
        )
        return self.instantiate_steps(workflow.stage(stage_name).steps, meta)

    def build_meta(
        self,
        log: logging.Logger,
        repo_dir: str,
        workspace: str,
        rel_project_path: str,
        extra_comment_args: Sequence[str],
        username: str,
    ) -> StepMeta:
        return StepMeta(
            log=log,
            workspace=workspace,
            absolute_path=os.path.join(os.fspath(repo_dir), rel_project_path),
            dir_relative_to_repo_root=rel_project_path,
            # The schema has no per-project version override, so this is always the default.
            terraform_version=self.default_tf_version,
            terraform_executor=self.terraform_executor,
            extra_comment_args=tuple(extra_comment_args),
            username=username,
        )

    def default_steps(self, stage_name: str, meta: StepMeta) -> list[Step]:
        registry = self.registry
        return [registry.get(step_type).build(meta) for step_type in DEFAULT_STEP_TYPES[stage_name]]

    def instantiate_steps(self, step_configs: Sequence[StepConfig], meta: StepMeta) -> list[Step]:
        registry = self.registry
        steps: list[Step] = []
        for step_config in step_configs:
            ref = registry.find(step_config.step_type)
            if ref is None:
                if self.unknown_step_policy == "error":
                    raise UnsupportedStepTypeError(step_config.step_type, available=registry.available())
                meta.log.warning(
                    "step type %s is not supported, skipping it (dir=%s workspace=%s)",
                    step_config.step_type,
                    meta.dir_relative_to_repo_root,
                    meta.workspace,
                )
                continue
            steps.append(ref.build(meta, step_config.extra_args))
        return steps
