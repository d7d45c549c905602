from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from stepkit.step_types import StepRef


@dataclass(frozen=True)
class StepRegistry:
    _by_id: dict[str, StepRef]

    @classmethod
    def from_refs(cls, refs: Iterable[StepRef]) -> "StepRegistry":
        entries: dict[str, StepRef] = {}
        for ref in refs:
            if ref.id in entries:
                raise ValueError(f"Duplicate step type id: {ref.id}")
            entries[ref.id] = ref
        return cls(_by_id=entries)

    def with_refs(self, refs: Iterable[StepRef]) -> "StepRegistry":
        """Return a copy with `refs` added; existing ids cannot be replaced."""

        return StepRegistry.from_refs([*self._by_id.values(), *refs])

    def available(self) -> tuple[str, ...]:
        return tuple(sorted(self._by_id.keys()))

    def describe(self) -> tuple[dict[str, Any], ...]:
        return tuple(
            {"step_type": ref.id, "doc": ref.doc}
            for ref in sorted(self._by_id.values(), key=lambda r: r.id)
        )

    def __contains__(self, step_type: object) -> bool:
        return isinstance(step_type, str) and step_type in self._by_id

    def find(self, step_type: str) -> StepRef | None:
        return self._by_id.get(step_type)

    def get(self, step_type: str) -> StepRef:
        ref = self._by_id.get(step_type)
        if ref is None:
            available = ", ".join(self.available()) or "<none>"
            raise ValueError(f"Unknown step type id: {step_type} (available: {available})")
        return ref
