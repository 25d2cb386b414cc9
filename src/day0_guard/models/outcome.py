"""Terminal result of one pull-request check."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum

from .violation import Violation


class CheckConclusion(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class GuardOutcome:
    """Everything the report emitter needs to describe a finished check."""

    conclusion: CheckConclusion
    window: timedelta
    checked: int = 0
    violations: tuple[Violation, ...] = ()
    lockfiles: tuple[str, ...] = ()
    violations_truncated: bool = False
    dependencies_truncated: bool = False
    check_run_id: int | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.conclusion is CheckConclusion.FAILURE and not self.violations:
            raise ValueError("A failure outcome requires at least one violation")
        if self.conclusion is not CheckConclusion.FAILURE and self.violations:
            raise ValueError(f"A {self.conclusion.value} outcome cannot carry violations")

    def to_dict(self) -> dict[str, object]:
        return {
            "conclusion": self.conclusion.value,
            "windowHours": self.window.total_seconds() / 3600,
            "checked": self.checked,
            "lockfiles": list(self.lockfiles),
            "violations": [v.to_dict() for v in self.violations],
            "violationsTruncated": self.violations_truncated,
            "dependenciesTruncated": self.dependencies_truncated,
        }
