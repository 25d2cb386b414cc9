"""Merge parser output from every discovered lockfile into one DependencySet."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from . import parsers
from .blobs import fetch_text
from .discovery import ContentProvider, discover
from .github import GitHubError
from .models import (
    DEFAULT_MAX_DEPENDENCIES,
    DependencySet,
    LockfileDescriptor,
    ParseResult,
    ParseStatus,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CollectionResult:
    """Dependencies gathered for one revision and where they came from."""

    dependencies: DependencySet
    lockfiles: list[str] = field(default_factory=list)
    full_scan: bool = False

    @property
    def truncated(self) -> bool:
        return self.dependencies.overflowed

    def __bool__(self) -> bool:
        return bool(self.dependencies)


def ingest(
    provider: ContentProvider,
    revision: str,
    descriptor: LockfileDescriptor,
    deps: DependencySet,
) -> ParseResult | None:
    """Fetch and parse one lockfile into ``deps``; None when it could not be read."""
    raw = fetch_text(provider, revision, descriptor.path)
    if raw is None:
        return None

    result = parsers.extract(descriptor.format, raw, deps, source=descriptor.path)
    if result.status is ParseStatus.PARSED:
        logger.info(
            "Parsed %s as %s, deps=%d", descriptor.path, result.dialect.value, len(deps)
        )
    elif result.status is ParseStatus.EMPTY:
        logger.warning("No dependencies recognised in %s", descriptor.path)
    return result


def collect_dependencies(
    provider: ContentProvider,
    revision: str,
    *,
    max_dependencies: int = DEFAULT_MAX_DEPENDENCIES,
) -> CollectionResult:
    """Gather the resolved dependency set for ``revision``.

    Root-level lockfiles are tried first; the full tree is only scanned when
    none of them yielded a dependency. The scan stops once the set is full.
    A revision that cannot be resolved is logged and yields whatever was
    collected so far, so callers always get a result.
    """
    result = CollectionResult(dependencies=DependencySet(max_dependencies))
    deps = result.dependencies

    for descriptor in discover(provider, revision):
        parsed = ingest(provider, revision, descriptor, deps)
        if parsed is not None and parsed.ok:
            result.lockfiles.append(descriptor.path)

    if deps:
        return result

    result.full_scan = True
    try:
        lockfiles = discover(provider, revision, full_scan=True)
    except (GitHubError, ValueError) as exc:
        logger.error("Lockfile discovery failed for %s: %s", revision, exc)
        return result

    logger.info("Found lockfiles %s", [d.path for d in lockfiles])
    for descriptor in lockfiles:
        parsed = ingest(provider, revision, descriptor, deps)
        if parsed is None:
            logger.warning("Could not read %s", descriptor.path)
            continue
        if parsed.ok:
            result.lockfiles.append(descriptor.path)
        if deps.is_full:
            logger.info("Dependency cap of %d reached, skipping remaining lockfiles", deps.max_size)
            break

    return result
