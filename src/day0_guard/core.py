"""Core check entrypoints.

``evaluate`` turns a revision into a GuardOutcome; ``run_check`` wraps it in
the check-run lifecycle (in_progress, then success, failure or neutral) and
posts the pull request comment.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Protocol

from . import freshness
from .aggregate import collect_dependencies
from .config import Settings
from .discovery import ContentProvider
from .freshness import PublishTimeSource
from .github import GitHubError
from .models import CheckConclusion, GuardOutcome
from .summary import render_aborted_output, render_check_output, render_comment

logger = logging.getLogger(__name__)


class CheckSink(Protocol):
    """Where check runs and comments are reported."""

    def create_check_run(self, name: str, head_sha: str) -> int: ...

    def complete_check_run(
        self,
        check_run_id: int,
        *,
        conclusion: str,
        title: str,
        summary: str,
        text: str = "",
    ) -> None: ...

    def create_comment(self, issue_number: int, body: str) -> str: ...


class GitHubPort(ContentProvider, CheckSink, Protocol):
    """A single client serving both revision content and check reporting."""


def evaluate(
    provider: ContentProvider,
    registry: PublishTimeSource,
    revision: str,
    settings: Settings,
    now: datetime | None = None,
) -> GuardOutcome:
    """Collect dependencies for ``revision`` and check them against the window."""
    now = now or datetime.now(timezone.utc)

    collected = collect_dependencies(
        provider, revision, max_dependencies=settings.max_dependencies
    )
    if not collected:
        return GuardOutcome(conclusion=CheckConclusion.NEUTRAL, window=settings.window)

    report = freshness.scan(
        collected.dependencies,
        settings.window,
        now,
        registry,
        max_violations=settings.max_violations,
    )
    conclusion = CheckConclusion.FAILURE if report.violations else CheckConclusion.SUCCESS

    return GuardOutcome(
        conclusion=conclusion,
        window=settings.window,
        checked=len(collected.dependencies),
        violations=tuple(report.violations),
        lockfiles=tuple(collected.lockfiles),
        violations_truncated=report.truncated,
        dependencies_truncated=collected.truncated,
    )


def run_check(
    github: GitHubPort,
    registry: PublishTimeSource,
    *,
    head_sha: str,
    pull_number: int,
    settings: Settings,
    now: datetime | None = None,
) -> GuardOutcome:
    """Run the full pull request check and report it.

    The check run is always completed once created: an unexpected error
    during evaluation completes it as neutral and is re-raised, and a failed
    comment is logged after the conclusion is already recorded.

    Returns the outcome with ``check_run_id`` set.
    """
    check_run_id = github.create_check_run(settings.check_name, head_sha)

    try:
        outcome = evaluate(github, registry, head_sha, settings, now=now)
    except Exception:
        logger.exception("Check %s for %s aborted", check_run_id, head_sha)
        github.complete_check_run(
            check_run_id,
            conclusion=CheckConclusion.NEUTRAL.value,
            **render_aborted_output(settings.check_name),
        )
        raise

    github.complete_check_run(
        check_run_id,
        conclusion=outcome.conclusion.value,
        **render_check_output(outcome, settings.check_name),
    )

    try:
        github.create_comment(pull_number, render_comment(outcome))
    except GitHubError as exc:
        logger.warning("Could not comment on pull request #%s: %s", pull_number, exc)

    logger.info(
        "Check %s for %s: %s (%d checked, %d violations)",
        check_run_id,
        head_sha,
        outcome.conclusion.value,
        outcome.checked,
        len(outcome.violations),
    )
    return replace(outcome, check_run_id=check_run_id)
