"""Human-readable rendering of a finished check: PR comment and check-run output."""

from __future__ import annotations

from datetime import timedelta

from .models import CheckConclusion, GuardOutcome

BADGE_FAILURE = "❌ Day-0 packages found"
BADGE_SUCCESS = "✅ No Day-0 packages"
NO_LOCKFILE_SUMMARY = "No lockfile parsed"
ABORTED_SUMMARY = "Check did not complete"
SUPPORTED_LOCKFILES = ("package-lock.json", "pnpm-lock.yaml", "yarn.lock")


def format_window(window: timedelta) -> str:
    """Return e.g. ``24 hours``, ``1 hour`` or ``90 minutes``."""
    minutes = int(window.total_seconds() // 60)
    if minutes % 60:
        return f"{minutes} minute" + ("" if minutes == 1 else "s")
    hours = minutes // 60
    return f"{hours} hour" + ("" if hours == 1 else "s")


def badge(outcome: GuardOutcome) -> str:
    if outcome.conclusion is CheckConclusion.NEUTRAL:
        return NO_LOCKFILE_SUMMARY
    return BADGE_FAILURE if outcome.conclusion is CheckConclusion.FAILURE else BADGE_SUCCESS


def render_comment(outcome: GuardOutcome) -> str:
    """Return the Markdown comment posted on the pull request."""
    if outcome.conclusion is CheckConclusion.NEUTRAL:
        files = " / ".join(f"`{name}`" for name in SUPPORTED_LOCKFILES)
        return (
            f"ℹ️ Day-0 Guard: lockfile not parsed. Ensure {files} is committed "
            "(monorepos supported).\n"
        )

    lines = [f"**{badge(outcome)}**", ""]
    lines.append(f"**Window:** last {format_window(outcome.window)}")
    lines.append(f"**Checked:** {outcome.checked} resolved entries")
    lines.append("")
    lines.append("| Package | Version | Published |")
    lines.append("|---|---|---|")

    for violation in outcome.violations:
        lines.append(f"| `{violation.name}` | `{violation.version}` | {violation.published} |")
    if not outcome.violations:
        lines.append("| — | — | — |")

    if outcome.violations_truncated:
        lines.append("")
        lines.append(f"Only the first {len(outcome.violations)} Day-0 packages are listed.")
    if outcome.dependencies_truncated:
        lines.append("")
        lines.append(
            f"The dependency limit was reached; only {outcome.checked} entries were checked."
        )

    if outcome.conclusion is CheckConclusion.FAILURE:
        lines.append("")
        lines.append("This PR is blocked until dependencies fall outside the Day-0 window.")

    return "\n".join(lines) + "\n"


def render_check_output(outcome: GuardOutcome, title: str) -> dict[str, str]:
    """Return the ``output`` fields for the terminal check-run update."""
    if outcome.conclusion is CheckConclusion.NEUTRAL:
        files = ", ".join(SUPPORTED_LOCKFILES)
        return {
            "title": title,
            "summary": NO_LOCKFILE_SUMMARY,
            "text": f"Supported lockfiles: {files}.",
        }
    return {
        "title": title,
        "summary": badge(outcome),
        "text": (
            f"{len(outcome.violations)} package(s) published in the last "
            f"{format_window(outcome.window)}."
        ),
    }


def render_aborted_output(title: str) -> dict[str, str]:
    """Return the ``output`` fields for a check run whose evaluation raised."""
    return {
        "title": title,
        "summary": ABORTED_SUMMARY,
        "text": "Dependencies were not checked; see the workflow log for the error.",
    }
