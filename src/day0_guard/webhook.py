"""Entry point for GitHub ``pull_request`` events.

The payload is validated against ``schemas/pull_request_event.schema.json``
before anything talks to GitHub. Events other than ``pull_request`` and
actions other than the ones that move the head revision are ignored.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from .config import Settings
from .core import GitHubPort, run_check
from .freshness import PublishTimeSource
from .github import GitHubClient
from .models import GuardOutcome
from .registry import RegistryClient

logger = logging.getLogger(__name__)

SUPPORTED_EVENT = "pull_request"
SUPPORTED_ACTIONS = frozenset({"opened", "synchronize", "reopened"})

_SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "pull_request_event.schema.json"


class PayloadError(ValueError):
    """Raised when an event payload lacks the fields the guard needs."""


def _load_schema() -> dict:
    return json.loads(_SCHEMA_PATH.read_text(encoding="utf-8"))


def _format_errors(errors: Iterable) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"- {pointer or '<root>'}: {error.message}")
    return "\n".join(messages)


def validate_payload(payload: Any) -> None:
    validator = Draft202012Validator(_load_schema())
    errors = sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.path])
    if errors:
        raise PayloadError("\n" + _format_errors(errors))


@dataclass(frozen=True)
class PullRequestEvent:
    action: str
    repository: str
    number: int
    head_sha: str

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> PullRequestEvent:
        """Validate ``payload`` and pick out the fields the guard uses."""
        validate_payload(payload)
        repo = payload["repository"]
        full_name = repo.get("full_name") or f"{repo['owner']['login']}/{repo['name']}"
        pull_request = payload["pull_request"]
        return cls(
            action=payload["action"],
            repository=full_name,
            number=pull_request["number"],
            head_sha=pull_request["head"]["sha"],
        )


def handle_event(
    event_name: str,
    payload: dict[str, Any],
    *,
    token: str,
    settings: Settings,
    github: GitHubPort | None = None,
    registry: PublishTimeSource | None = None,
    now: datetime | None = None,
) -> GuardOutcome | None:
    """Run the check for a supported event; return None when the event is ignored.

    Raises:
        PayloadError: If a ``pull_request`` payload is missing required fields.
    """
    if event_name != SUPPORTED_EVENT:
        logger.info("Ignoring %s event", event_name)
        return None

    event = PullRequestEvent.from_payload(payload)
    if event.action not in SUPPORTED_ACTIONS:
        logger.info("Ignoring pull_request.%s", event.action)
        return None

    logger.info("Handling pull_request.%s for %s@%s", event.action, event.repository, event.head_sha)

    if github is None:
        github = GitHubClient(
            token,
            event.repository,
            api_url=settings.github_api_url,
            timeout=settings.http_timeout,
        )
    if registry is None:
        registry = RegistryClient(settings.registry_url, timeout=settings.http_timeout)

    return run_check(
        github,
        registry,
        head_sha=event.head_sha,
        pull_number=event.number,
        settings=settings,
        now=now,
    )
