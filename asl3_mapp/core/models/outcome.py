"""
Step outcomes — what happened to each selected step.

Shaped like an execution receipt: one ``StepOutcome`` per step that
was reached, collected into a ``RunReport`` in execution order.
Steps that were never reached (after a fatal failure) have no
outcome at all.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class StepOutcome(BaseModel):
    """Result of one install step."""

    step: str
    status: Literal["ok", "skipped", "failed"] = "ok"
    message: str = ""
    error: str | None = None
    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, step: str, message: str = "", **kwargs: Any) -> StepOutcome:
        return cls(step=step, status="ok", message=message, **kwargs)

    @classmethod
    def skip(cls, step: str, reason: str = "", **kwargs: Any) -> StepOutcome:
        return cls(step=step, status="skipped", message=reason, **kwargs)

    @classmethod
    def failure(cls, step: str, error: str, **kwargs: Any) -> StepOutcome:
        return cls(step=step, status="failed", error=error, **kwargs)


class RunReport(BaseModel):
    """Ordered outcomes of a run."""

    outcomes: list[StepOutcome] = Field(default_factory=list)

    def add(self, outcome: StepOutcome) -> None:
        self.outcomes.append(outcome)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "skipped")

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.failed)

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    @property
    def steps_run(self) -> list[str]:
        return [o.step for o in self.outcomes]

    def to_dict(self) -> dict:
        return {
            "status": "ok" if self.all_ok else "failed",
            "succeeded": self.succeeded,
            "skipped": self.skipped,
            "failed": self.failed,
            "outcomes": [o.model_dump(mode="json") for o in self.outcomes],
        }
