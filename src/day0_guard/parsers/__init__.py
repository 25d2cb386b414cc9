"""Lockfile parsers and the registry that maps lockfile formats to them.

Every parser shares the same contract: ``extract(raw, deps, source=...)``
adds whatever ``name@version`` pairs it recognises in ``raw`` to ``deps`` and
returns a ParseResult. Parsers never raise on malformed input; callers only
depend on this contract, not on how a given format is read.
"""

from __future__ import annotations

from typing import Protocol

from ..models import DependencySet, LockfileFormat, ParseResult
from . import package_lock, pnpm_lock, yarn_lock


class ParseFunction(Protocol):
    def __call__(self, raw: str, deps: DependencySet, *, source: str = ...) -> ParseResult: ...


PARSERS: dict[LockfileFormat, ParseFunction] = {
    LockfileFormat.PACKAGE_LOCK: package_lock.extract,
    LockfileFormat.PNPM_LOCK: pnpm_lock.extract,
    LockfileFormat.YARN_LOCK: yarn_lock.extract,
}


def get_parser(fmt: LockfileFormat) -> ParseFunction:
    """Return the parser registered for ``fmt``."""
    try:
        return PARSERS[fmt]
    except KeyError:
        known = ", ".join(sorted(f.value for f in PARSERS))
        raise ValueError(f"No parser for {fmt!r}. Known formats: {known}") from None


def extract(fmt: LockfileFormat, raw: str, deps: DependencySet, *, source: str = "") -> ParseResult:
    """Parse ``raw`` as ``fmt`` into ``deps``."""
    return get_parser(fmt)(raw, deps, source=source or fmt.value)


__all__ = [
    "PARSERS",
    "ParseFunction",
    "extract",
    "get_parser",
]
