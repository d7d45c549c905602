from __future__ import annotations

import json


def quote(value: str) -> str:
    """Double-quote a user-supplied value for an error message."""

    return json.dumps(value, ensure_ascii=False)


class RepoConfigError(ValueError):
    """Base class for failures resolving a stage from repo configuration."""


class ConfigReadError(RepoConfigError):
    pass


class ConfigSchemaError(RepoConfigError):
    pass


class ConfigValidationError(RepoConfigError):
    pass


class ProjectNotFoundError(RepoConfigError):
    def __init__(self, dir: str, workspace: str) -> None:
        super().__init__(f"no project with dir {quote(dir)} and workspace {quote(workspace)} defined")
        self.dir = dir
        self.workspace = workspace


class WorkflowNotFoundError(RepoConfigError):
    def __init__(self, workflow: str) -> None:
        super().__init__(f"no workflow with key {quote(workflow)} defined")
        self.workflow = workflow


class UnsupportedStepTypeError(RepoConfigError):
    def __init__(self, step_type: str, *, available: tuple[str, ...] = ()) -> None:
        supported = ", ".join(available) or "<none>"
        super().__init__(f"step type {step_type!r} is not supported (supported: {supported})")
        self.step_type = step_type


class StepExecutionError(RuntimeError):
    pass


class StageRunError(RuntimeError):
    """A step failed while running a stage; `output` holds what earlier steps produced."""

    def __init__(self, stage: str, step_type: str, cause: BaseException, *, output: str) -> None:
        super().__init__(f"{stage} stage: {step_type} step failed: {cause}")
        self.stage = stage
        self.step_type = step_type
        self.output = output
