from __future__ import annotations

from repoconfig.steps.apply import STEP as APPLY
from repoconfig.steps.apply import ApplyStep
from repoconfig.steps.init import STEP as INIT
from repoconfig.steps.init import InitStep
from repoconfig.steps.plan import STEP as PLAN
from repoconfig.steps.plan import PlanStep

__all_steps__ = [
    INIT,
    PLAN,
    APPLY,
]

__all__ = ["ApplyStep", "InitStep", "PlanStep"]
