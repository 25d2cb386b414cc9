"""Parse pnpm-lock.yaml to capture resolved dependencies.

The document is scanned line by line rather than loaded as YAML: a line
holding a two-space-indented ``key:`` contributes ``key@version`` when the
very next line carries a ``version:`` field. Entries whose version is not on
the immediately following line are not seen.
"""

from __future__ import annotations

import re

from ..models import DependencySet, Dialect, ParseResult

_KEY_LINE = re.compile(r"^\s{2}([^:@\s][^:]*):\s*$")
_VERSION_FIELD = re.compile(r"version:\s+(.+?)\s*$")


def extract(raw: str, deps: DependencySet, *, source: str = "pnpm-lock.yaml") -> ParseResult:
    """Add ``key@version`` pairs found in consecutive pnpm lock lines to ``deps``."""
    lines = raw.splitlines()
    found = added = 0

    for current, following in zip(lines, lines[1:]):
        key = _KEY_LINE.match(current)
        if key is None or "version:" not in following:
            continue
        version = _VERSION_FIELD.search(following)
        if version is None:
            continue
        found += 1
        added += deps.add(key.group(1), version.group(1))

    return ParseResult.from_counts(Dialect.PNPM, found=found, added=added)
