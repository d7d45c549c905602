from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

from repoconfig.foundation.config_io import REPO_CONFIG_FILENAME, load_yaml_mapping
from repoconfig.framework.errors import ConfigSchemaError, ConfigValidationError
from stepkit.config_namespace import ConfigNamespace

SUPPORTED_VERSION = 2

PLAN_STAGE_NAME = "plan"
APPLY_STAGE_NAME = "apply"
STAGE_NAMES: tuple[str, ...] = (PLAN_STAGE_NAME, APPLY_STAGE_NAME)

StepType = Literal["init", "plan", "apply", "custom"]
# "custom" is reserved: it parses, but no step constructor is registered for it.
STEP_TYPES: tuple[str, ...] = ("init", "plan", "apply", "custom")


@dataclass(frozen=True)
class StepConfig:
    step_type: StepType
    extra_args: tuple[str, ...] = ()

    @classmethod
    def from_namespace(cls, ns: ConfigNamespace) -> "StepConfig":
        step_type = ns.get_str("step_type", nullable=False, choices=STEP_TYPES)
        extra_args = ns.get_list_str("extra_args", default=(), allow_empty=True)
        return cls(step_type=step_type, extra_args=tuple(extra_args))  # type: ignore[arg-type]


@dataclass(frozen=True)
class StageConfig:
    steps: tuple[StepConfig, ...] = ()

    @classmethod
    def from_namespace(cls, ns: ConfigNamespace) -> "StageConfig":
        steps = [StepConfig.from_namespace(item) for item in ns.list_namespaces("steps", default=[])]
        return cls(steps=tuple(steps))


@dataclass(frozen=True)
class WorkflowConfig:
    plan: StageConfig = field(default_factory=StageConfig)
    apply: StageConfig = field(default_factory=StageConfig)

    @classmethod
    def from_namespace(cls, ns: ConfigNamespace) -> "WorkflowConfig":
        return cls(
            plan=StageConfig.from_namespace(ns.namespace(PLAN_STAGE_NAME, default=None)),
            apply=StageConfig.from_namespace(ns.namespace(APPLY_STAGE_NAME, default=None)),
        )

    def stage(self, stage_name: str) -> StageConfig:
        if stage_name == PLAN_STAGE_NAME:
            return self.plan
        if stage_name == APPLY_STAGE_NAME:
            return self.apply
        raise ValueError(f"Unknown stage name: {stage_name!r} (expected one of: {', '.join(STAGE_NAMES)})")


@dataclass(frozen=True)
class ProjectConfig:
    dir: str
    workspace: str = ""
    workflow: str = ""

    @classmethod
    def from_namespace(cls, ns: ConfigNamespace) -> "ProjectConfig":
        # An explicit null reads the same as an omitted key.
        return cls(
            dir=ns.get_str("dir", default="", allow_empty=True) or "",
            workspace=ns.get_str("workspace", default="", allow_empty=True) or "",
            workflow=ns.get_str("workflow", default="", allow_empty=True) or "",
        )

    def matches(self, dir: str, workspace: str) -> bool:
        return self.dir == dir and self.workspace == workspace


@dataclass(frozen=True)
class RepoConfig:
    version: int
    projects: tuple[ProjectConfig, ...] = ()
    workflows: Mapping[str, WorkflowConfig] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, cfg: Mapping[str, Any]) -> "RepoConfig":
        """Deserialize a parsed document, rejecting any key the schema does not declare.

        Raises ConfigSchemaError. Semantic checks live in `validate()`.
        """

        try:
            root = ConfigNamespace.from_value(cfg, path="")
            version = root.get_int("version", default=0)
            projects = tuple(
                ProjectConfig.from_namespace(item)
                for item in root.list_namespaces("projects", default=[])
            )
            workflows = {
                name: WorkflowConfig.from_namespace(item)
                for name, item in root.mapping_namespaces("workflows", default={}).items()
            }
            root.assert_consumed()
        except (TypeError, ValueError) as exc:
            raise ConfigSchemaError(str(exc)) from exc

        return cls(version=version, projects=projects, workflows=workflows)

    def validate(self) -> None:
        """Check structural invariants in a fixed order; the first violation wins."""

        if self.version != SUPPORTED_VERSION:
            raise ConfigValidationError(
                f'unknown version: must have "version: {SUPPORTED_VERSION}" set'
            )

        if not self.projects:
            raise ConfigValidationError("'projects' key must exist and contain at least one element")

        for idx, project in enumerate(self.projects):
            if project.dir == "":
                raise ConfigValidationError(
                    f"project at index {idx} invalid: dir key must be set and non-empty"
                )

    def find_project(self, dir: str, workspace: str) -> ProjectConfig | None:
        for project in self.projects:
            if project.matches(dir, workspace):
                return project
        return None


def parse_repo_config(data: bytes | str) -> RepoConfig:
    try:
        payload = load_yaml_mapping(data)
    except ValueError as exc:
        raise ConfigSchemaError(str(exc)) from exc

    config = RepoConfig.from_dict(payload)
    config.validate()
    return config
