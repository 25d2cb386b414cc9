"""Flag dependencies whose version was published inside the Day-0 window."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Protocol

from .config import DEFAULT_MAX_VIOLATIONS
from .models import DependencySpec, Violation
from .registry import RegistryError

logger = logging.getLogger(__name__)


class PublishTimeSource(Protocol):
    def publish_times(self, name: str) -> Mapping[str, str] | None: ...


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 registry timestamp; naive values are taken as UTC."""
    try:
        stamp = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return None
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    return stamp


@dataclass(slots=True)
class FreshnessReport:
    violations: list[Violation] = field(default_factory=list)
    # dependencies were left unchecked because the violation cap was reached
    truncated: bool = False


def scan(
    dependencies: Iterable[DependencySpec | str],
    window: timedelta,
    now: datetime,
    registry: PublishTimeSource,
    *,
    max_violations: int = DEFAULT_MAX_VIOLATIONS,
) -> FreshnessReport:
    """Check dependencies in iteration order, stopping at ``max_violations``.

    Each package name is fetched at most once per call. A dependency the
    registry knows nothing about is not a violation; lookup failures are
    logged and skipped. ``truncated`` is set only when the cap was reached
    with dependencies still unvisited.
    """
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")

    report = FreshnessReport()
    violations = report.violations
    times_by_name: dict[str, Mapping[str, str] | None] = {}
    remaining = iter(dependencies)

    for item in remaining:
        spec = DependencySpec.parse(str(item))
        if spec is None:
            continue

        if spec.name not in times_by_name:
            try:
                times_by_name[spec.name] = registry.publish_times(spec.name)
            except RegistryError as exc:
                logger.warning("Registry lookup failed for %s: %s", spec, exc)
                continue

        times = times_by_name[spec.name]
        stamp = times.get(spec.version) if times else None
        if not stamp:
            continue

        published_at = parse_timestamp(stamp)
        if published_at is None:
            logger.warning("Unreadable publish time %r for %s", stamp, spec)
            continue

        if now - published_at < window:
            violations.append(
                Violation(name=spec.name, version=spec.version, published_at=published_at)
            )
            if len(violations) >= max_violations:
                report.truncated = next(remaining, None) is not None
                break

    return report


def check(
    dependencies: Iterable[DependencySpec | str],
    window: timedelta,
    now: datetime,
    registry: PublishTimeSource,
    *,
    max_violations: int = DEFAULT_MAX_VIOLATIONS,
) -> list[Violation]:
    """Return violations in iteration order, stopping at ``max_violations``."""
    return scan(dependencies, window, now, registry, max_violations=max_violations).violations
