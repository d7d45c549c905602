from __future__ import annotations

from functools import lru_cache

from stepkit.step_registry import StepRegistry
from stepkit.step_types import StepRef


@lru_cache(maxsize=1)
def get_step_registry() -> StepRegistry:
    # Import side-effect: step modules define `STEP` symbols collected here.
    # No constructor is registered for the reserved "custom" step type.
    from repoconfig import steps  # noqa: PLC0415

    refs: list[StepRef] = []
    exported = getattr(steps, "__all_steps__", None)
    if isinstance(exported, (list, tuple)):
        refs.extend(exported)

    return StepRegistry.from_refs(refs)
