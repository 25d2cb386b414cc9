"""Parse classic (v1) yarn.lock to capture resolved dependencies."""

from __future__ import annotations

import re

from ..models import DependencySet, Dialect, ParseResult

_STANZA_BREAK = re.compile(r"\r?\n[ \t]*\r?\n")
_VERSION_FIELD = re.compile(r'version\s+"([^"]+)"')


def _header(stanza: str) -> str:
    for line in stanza.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("#"):
            return stripped
    return ""


def package_name(header: str) -> str:
    """Derive the package name from a stanza header.

    Only the first selector is considered, so a stanza whose selectors alias
    different packages is reported under the first one. Scoped selectors
    (``@scope/name@range``) keep everything up to their second ``@``;
    unscoped ones are cut at their last ``@``.
    """
    selector = header.strip().rstrip(":").split(",", 1)[0].strip().strip('"')
    if selector.startswith("@"):
        at = selector.find("@", 1)
        return selector if at < 0 else selector[:at]
    at = selector.rfind("@")
    return selector[:at] if at > 0 else selector


def extract(raw: str, deps: DependencySet, *, source: str = "yarn.lock") -> ParseResult:
    """Add one ``name@version`` per blank-line separated stanza to ``deps``."""
    found = added = 0

    for stanza in _STANZA_BREAK.split(raw):
        version = _VERSION_FIELD.search(stanza)
        if version is None:
            continue
        name = package_name(_header(stanza))
        if not name:
            continue
        found += 1
        added += deps.add(name, version.group(1))

    return ParseResult.from_counts(Dialect.YARN, found=found, added=added)
