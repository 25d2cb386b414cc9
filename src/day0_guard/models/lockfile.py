"""Lockfile descriptors and parse results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LockfileFormat(str, Enum):
    """Recognised lockfile basenames."""

    PACKAGE_LOCK = "package-lock.json"
    PNPM_LOCK = "pnpm-lock.yaml"
    YARN_LOCK = "yarn.lock"

    @classmethod
    def from_path(cls, path: str) -> LockfileFormat | None:
        basename = path.rsplit("/", 1)[-1]
        for fmt in cls:
            if fmt.value == basename:
                return fmt
        return None


class Dialect(str, Enum):
    """Concrete schema a lockfile was parsed as."""

    NPM_V1 = "npm-v1"
    NPM_V2PLUS = "npm-v2plus"
    PNPM = "pnpm"
    YARN = "yarn"


@dataclass(frozen=True)
class LockfileDescriptor:
    """A lockfile path relative to the repository root plus its format."""

    path: str
    format: LockfileFormat

    @property
    def is_root(self) -> bool:
        return "/" not in self.path

    @classmethod
    def from_path(cls, path: str) -> LockfileDescriptor | None:
        fmt = LockfileFormat.from_path(path)
        if fmt is None:
            return None
        return cls(path=path, format=fmt)


class ParseStatus(str, Enum):
    PARSED = "parsed"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class ParseResult:
    """Outcome of feeding one raw lockfile to a parser.

    ``found`` counts entries recognised in the document, ``added`` the ones
    that were new to the target set.
    """

    status: ParseStatus
    dialect: Dialect | None = None
    found: int = 0
    added: int = 0
    message: str = ""

    @classmethod
    def from_counts(cls, dialect: Dialect, *, found: int, added: int) -> ParseResult:
        status = ParseStatus.PARSED if found else ParseStatus.EMPTY
        return cls(status=status, dialect=dialect, found=found, added=added)

    @classmethod
    def error(cls, message: str, dialect: Dialect | None = None) -> ParseResult:
        return cls(status=ParseStatus.ERROR, dialect=dialect, message=message)

    @property
    def ok(self) -> bool:
        return self.status is ParseStatus.PARSED
