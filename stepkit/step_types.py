from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Sequence


class StepBuilder(Protocol):
    def __call__(self, meta: Any, extra_args: Sequence[str]) -> Any:
        ...


@dataclass(frozen=True)
class StepRef:
    id: str
    builder: StepBuilder
    doc: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise TypeError("StepRef.id must be a non-empty string")
        object.__setattr__(self, "id", self.id.strip())

        if self.doc is not None and (not isinstance(self.doc, str) or not self.doc.strip()):
            raise TypeError("StepRef.doc must be a non-empty string or None")
        if not callable(self.builder):
            raise TypeError(f"StepRef.builder must be callable (type={type(self.builder).__name__})")

    def build(self, meta: Any, extra_args: Sequence[str] = ()) -> Any:
        step = self.builder(meta, tuple(extra_args))
        produced = getattr(step, "step_type", None)
        if produced != self.id:
            raise ValueError(
                "Step builder returned mismatched step_type: "
                f"expected={self.id} got={produced!r}"
            )
        return step
