"""Locate lockfiles in a revision: root candidates first, full tree scan as fallback."""

from __future__ import annotations

from typing import Any, Protocol

from .models import LockfileDescriptor, LockfileFormat

# Probe order for the root fast path.
ROOT_CANDIDATES: tuple[LockfileFormat, ...] = (
    LockfileFormat.PACKAGE_LOCK,
    LockfileFormat.PNPM_LOCK,
    LockfileFormat.YARN_LOCK,
)

EXCLUDES = {"node_modules"}


class ContentProvider(Protocol):
    """What discovery and blob fetching need from the hosting git service."""

    def get_content(self, path: str, ref: str) -> Any | None: ...

    def get_blob(self, sha: str) -> dict[str, Any]: ...

    def download(self, url: str) -> bytes: ...

    def get_commit_tree_sha(self, ref: str) -> str: ...

    def list_tree(self, tree_sha: str) -> list[dict[str, Any]]: ...


def root_candidates() -> list[LockfileDescriptor]:
    return [LockfileDescriptor(path=fmt.value, format=fmt) for fmt in ROOT_CANDIDATES]


def should_skip(path: str) -> bool:
    return any(part in EXCLUDES for part in path.split("/")[:-1])


def scan_tree(provider: ContentProvider, revision: str) -> list[LockfileDescriptor]:
    """Return every lockfile blob in ``revision``'s tree, at any depth, in tree order.

    Raises whatever the provider raises when the revision cannot be resolved.
    """
    tree_sha = provider.get_commit_tree_sha(revision)
    found: list[LockfileDescriptor] = []
    for entry in provider.list_tree(tree_sha):
        if entry.get("type") != "blob":
            continue
        path = entry.get("path")
        if not isinstance(path, str) or should_skip(path):
            continue
        descriptor = LockfileDescriptor.from_path(path)
        if descriptor is not None:
            found.append(descriptor)
    return found


def discover(
    provider: ContentProvider, revision: str, *, full_scan: bool = False
) -> list[LockfileDescriptor]:
    """Return candidate lockfiles for one discovery phase.

    The root phase needs no I/O; the full-scan phase walks the whole tree.
    """
    if full_scan:
        return scan_tree(provider, revision)
    return root_candidates()
