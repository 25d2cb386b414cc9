"""Parse npm package-lock.json to capture resolved transitive dependencies."""

from __future__ import annotations

import json
import logging
from typing import Any

from ..models import DependencySet, Dialect, ParseResult

logger = logging.getLogger(__name__)

_NODE_MODULES_PREFIX = "node_modules/"


def _loads(raw: str) -> Any:
    """Decode JSON, retrying once on the text up to its last closing brace.

    Transport occasionally hands back a document with trailing garbage; the
    retry recovers it. The second failure propagates.
    """
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        end = raw.rfind("}")
        if end < 0:
            raise
        return json.loads(raw[: end + 1])


def _lockfile_version(data: dict[str, Any]) -> int:
    value = data.get("lockfileVersion")
    if isinstance(value, bool):
        return 1
    try:
        return int(value)
    except (TypeError, ValueError):
        return 1


def dialect_of(data: dict[str, Any]) -> Dialect:
    """lockfileVersion 2 and 3 use the ``packages`` map; anything else is v1."""
    return Dialect.NPM_V2PLUS if _lockfile_version(data) >= 2 else Dialect.NPM_V1


def collect_v1(dependencies: dict[str, Any], deps: DependencySet) -> tuple[int, int]:
    """Walk the nested v1 ``dependencies`` tree; return (found, added)."""
    found = added = 0
    for name, info in dependencies.items():
        if not isinstance(info, dict):
            continue
        version = info.get("version")
        if isinstance(version, str) and version:
            found += 1
            added += deps.add(name, version)
        nested = info.get("dependencies")
        if isinstance(nested, dict):
            nested_found, nested_added = collect_v1(nested, deps)
            found += nested_found
            added += nested_added
    return found, added


def collect_v2plus(data: dict[str, Any], deps: DependencySet) -> tuple[int, int]:
    """Read the flat v2+ ``packages`` map keyed by install path; return (found, added)."""
    packages = data.get("packages")
    if not isinstance(packages, dict):
        return 0, 0

    root_name = data.get("name") if isinstance(data.get("name"), str) else ""
    found = added = 0
    for path, info in packages.items():
        if not isinstance(info, dict):
            continue
        version = info.get("version")
        # link-only entries carry no version
        if not isinstance(version, str) or not version:
            continue
        if path == "":
            name = root_name
        else:
            name = path.removeprefix(_NODE_MODULES_PREFIX)
        if not name:
            continue
        found += 1
        added += deps.add(name, version)
    return found, added


def extract(raw: str, deps: DependencySet, *, source: str = "package-lock.json") -> ParseResult:
    """Add every resolved package in an npm lockfile to ``deps``.

    Supports npm v1 (nested ``dependencies`` tree) and v2+ (``packages`` map),
    chosen by ``lockfileVersion``.
    """
    try:
        data = _loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("Failed parsing %s: %s", source, exc)
        return ParseResult.error(f"invalid JSON: {exc.msg}")
    except RecursionError:
        logger.warning("Failed parsing %s: document is nested too deeply", source)
        return ParseResult.error("document is nested too deeply")

    if not isinstance(data, dict):
        logger.warning("Failed parsing %s: top-level value is not an object", source)
        return ParseResult.error("top-level value is not an object")

    dialect = dialect_of(data)
    if dialect is Dialect.NPM_V2PLUS:
        found, added = collect_v2plus(data, deps)
    else:
        dependencies = data.get("dependencies")
        try:
            found, added = (
                collect_v1(dependencies, deps) if isinstance(dependencies, dict) else (0, 0)
            )
        except RecursionError:
            # entries added before the walk gave up stay in deps
            logger.warning("Failed walking %s: dependency tree is nested too deeply", source)
            return ParseResult.error("dependency tree is nested too deeply")

    return ParseResult.from_counts(dialect, found=found, added=added)
