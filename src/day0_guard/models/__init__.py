"""Data models for the Day-0 dependency guard."""

from __future__ import annotations

from .dependency import DEFAULT_MAX_DEPENDENCIES, DependencySet, DependencySpec
from .lockfile import Dialect, LockfileDescriptor, LockfileFormat, ParseResult, ParseStatus
from .outcome import CheckConclusion, GuardOutcome
from .violation import Violation

__all__ = [
    "DEFAULT_MAX_DEPENDENCIES",
    "CheckConclusion",
    "DependencySet",
    "DependencySpec",
    "Dialect",
    "GuardOutcome",
    "LockfileDescriptor",
    "LockfileFormat",
    "ParseResult",
    "ParseStatus",
    "Violation",
]
