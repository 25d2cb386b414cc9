"""Day-0 violation model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Violation:
    """A dependency version published inside the Day-0 window."""

    name: str
    version: str
    published_at: datetime

    def __post_init__(self) -> None:
        if self.published_at.tzinfo is None:
            raise ValueError("published_at must be timezone-aware")

    @property
    def published(self) -> str:
        return self.published_at.isoformat().replace("+00:00", "Z")

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "version": self.version,
            "publishedAt": self.published,
        }
