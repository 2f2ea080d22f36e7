"""
Invocation context — immutable facts about this run.

Built once by the privilege guard at startup and passed to every
component that needs to know who invoked the installer or whether
a human is at the terminal.  Never mutated.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


def _now() -> datetime:
    return datetime.now(UTC)


class InvocationContext(BaseModel):
    """Per-run facts captured at startup."""

    model_config = ConfigDict(frozen=True)

    effective_uid: int
    invoking_user: str | None = None  # SUDO_USER; None means not escalated via sudo
    interactive: bool = False         # stdin is a terminal
    started_at: datetime = Field(default_factory=_now)

    @property
    def elevated(self) -> bool:
        return self.effective_uid == 0

    @property
    def valid(self) -> bool:
        """Elevated and traceable to a non-privileged user."""
        return self.elevated and bool(self.invoking_user)
