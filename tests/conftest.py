"""Shared fixtures: in-memory stand-ins for GitHub and the npm registry."""

from __future__ import annotations

import base64
import hashlib
from collections import Counter
from datetime import datetime, timedelta, timezone

import pytest

from day0_guard.config import Settings
from day0_guard.github import GitHubError
from day0_guard.registry import RegistryError

NOW = datetime(2025, 9, 15, 12, 0, 0, tzinfo=timezone.utc)
HEAD_SHA = "0123456789abcdef0123456789abcdef01234567"


def iso(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%dT%H:%M:%S.000Z")


class FakeGitHub:
    """Revision content plus check/comment sink backed by a dict of files."""

    def __init__(
        self,
        files: dict[str, str] | None = None,
        *,
        tree_error: Exception | None = None,
        unreadable: set[str] | None = None,
    ) -> None:
        self.files = dict(files or {})
        self.tree_error = tree_error
        self.unreadable = unreadable or set()
        self.calls: Counter[str] = Counter()
        self.content_requests: list[str] = []
        self.check_runs: dict[int, dict] = {}
        self.comments: list[tuple[int, str]] = []

    @staticmethod
    def _sha(path: str) -> str:
        return hashlib.sha1(path.encode()).hexdigest()

    # content provider

    def get_content(self, path, ref):
        self.calls["get_content"] += 1
        self.content_requests.append(path)
        if path in self.unreadable:
            raise GitHubError(f"GET {path} returned 500", status_code=500)
        if path in self.files:
            encoded = base64.b64encode(self.files[path].encode("utf-8")).decode("ascii")
            return {
                "type": "file",
                "path": path,
                "sha": self._sha(path),
                "encoding": "base64",
                "content": encoded,
            }
        prefix = path.rstrip("/") + "/"
        children = [p for p in self.files if p.startswith(prefix)]
        if children:
            return [{"type": "file", "path": p} for p in children]
        return None

    def get_blob(self, sha):
        self.calls["get_blob"] += 1
        raise GitHubError(f"blob {sha} not found", status_code=404)

    def download(self, url):
        self.calls["download"] += 1
        raise GitHubError(f"GET {url} returned 404", status_code=404)

    def get_commit_tree_sha(self, ref):
        self.calls["get_commit_tree_sha"] += 1
        if self.tree_error is not None:
            raise self.tree_error
        return f"tree-{ref}"

    def list_tree(self, tree_sha):
        self.calls["list_tree"] += 1
        entries = []
        seen_dirs = set()
        for path in self.files:
            parts = path.split("/")
            for depth in range(1, len(parts)):
                directory = "/".join(parts[:depth])
                if directory not in seen_dirs:
                    seen_dirs.add(directory)
                    entries.append({"path": directory, "type": "tree"})
            entries.append({"path": path, "type": "blob", "sha": self._sha(path)})
        return entries

    # check sink

    def create_check_run(self, name, head_sha):
        check_run_id = len(self.check_runs) + 1
        self.check_runs[check_run_id] = {"name": name, "head_sha": head_sha, "status": "in_progress"}
        return check_run_id

    def complete_check_run(self, check_run_id, *, conclusion, title, summary, text=""):
        self.check_runs[check_run_id].update(
            status="completed", conclusion=conclusion, title=title, summary=summary, text=text
        )

    def create_comment(self, issue_number, body):
        self.comments.append((issue_number, body))
        return f"https://github.com/acme/app/pull/{issue_number}#issuecomment-{len(self.comments)}"


class FakeRegistry:
    """Maps package name to its ``time`` document; records every lookup."""

    def __init__(
        self,
        times: dict[str, dict[str, str]] | None = None,
        *,
        failing: set[str] | None = None,
    ) -> None:
        self.times = times or {}
        self.failing = failing or set()
        self.lookups: Counter[str] = Counter()

    def publish_times(self, name):
        self.lookups[name] += 1
        if name in self.failing:
            raise RegistryError(f"Failed to fetch {name}: connection reset")
        return self.times.get(name)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def settings():
    return Settings(window=timedelta(hours=24), max_violations=100, max_dependencies=5000)


@pytest.fixture
def fresh_and_stale_registry():
    return FakeRegistry(
        {
            "left-pad": {
                "9.9.9": iso(NOW - timedelta(hours=1)),
                "1.3.0": iso(NOW - timedelta(hours=48)),
            },
            "@babel/core": {"7.2.0": iso(NOW - timedelta(days=400))},
        }
    )
