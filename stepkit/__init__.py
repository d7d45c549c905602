"""Reusable step-resolution kernel (strict config reader + step-type registry).

This package is intentionally independent of `repoconfig.*`. File names,
schema versions and the concrete step kinds belong to the consuming
application.
"""

from stepkit.config_namespace import ConfigNamespace, yaml_type_name
from stepkit.step_registry import StepRegistry
from stepkit.step_types import StepBuilder, StepRef

__all__ = [
    "ConfigNamespace",
    "StepBuilder",
    "StepRef",
    "StepRegistry",
    "yaml_type_name",
]
