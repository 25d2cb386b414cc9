#!/usr/bin/env python3
"""GitHub Actions entrypoint for the Day-0 dependency guard.

Usage (inside a workflow triggered by pull_request):
  python scripts/day0_guard.py [--event-path PATH] [--warn-only] [--verbose]

Reads GITHUB_EVENT_NAME, GITHUB_EVENT_PATH and GITHUB_TOKEN from the
environment. Exit codes: 0 success, neutral or ignored event; 10 Day-0
packages found; 1 configuration or payload error.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from day0_guard.config import ConfigError, load_settings
from day0_guard.github import GitHubError
from day0_guard.log import setup_logging
from day0_guard.models import CheckConclusion
from day0_guard.webhook import PayloadError, handle_event

logger = logging.getLogger("day0_guard.entrypoint")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Day-0 dependency guard")
    parser.add_argument("--event-name", default=os.getenv("GITHUB_EVENT_NAME", ""))
    parser.add_argument("--event-path", type=Path, default=os.getenv("GITHUB_EVENT_PATH"))
    parser.add_argument("--warn-only", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose)

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    token = os.getenv("GITHUB_TOKEN", "")
    if not token:
        print("ERROR: GITHUB_TOKEN is not set", file=sys.stderr)
        return 1
    if not args.event_path:
        print("ERROR: no event payload (set GITHUB_EVENT_PATH or --event-path)", file=sys.stderr)
        return 1

    try:
        payload = json.loads(Path(args.event_path).read_text(encoding="utf-8"))
        outcome = handle_event(args.event_name, payload, token=token, settings=settings)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"ERROR: Failed to read event payload: {exc}", file=sys.stderr)
        return 1
    except PayloadError as exc:
        print(f"ERROR: Event payload failed validation:{exc}", file=sys.stderr)
        return 1
    except GitHubError as exc:
        print(f"ERROR: GitHub API call failed: {exc}", file=sys.stderr)
        return 1

    if outcome is None:
        return 0

    print(json.dumps(outcome.to_dict(), indent=2))

    if outcome.conclusion is CheckConclusion.FAILURE and not (args.warn_only or settings.warn_only):
        return 10
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
