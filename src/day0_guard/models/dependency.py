"""Resolved dependency identifiers and the size-bounded set that holds them."""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Iterator

DEFAULT_MAX_DEPENDENCIES = 5000


@dataclass(frozen=True)
class DependencySpec:
    """A resolved ``name@version`` pair.

    ``name`` may be scoped (``@scope/name``); the version is always whatever
    follows the last ``@`` of the rendered identifier.
    """

    name: str
    version: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Dependency name must be non-empty")
        if not self.version:
            raise ValueError("Dependency version must be non-empty")
        if "@" in self.version:
            raise ValueError(f"Dependency version must not contain '@': {self.version}")
        if self.name.startswith("@") and "/" not in self.name[2:]:
            raise ValueError(f"Scoped dependency name must look like @scope/name: {self.name}")

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"

    @classmethod
    def parse(cls, spec: str) -> DependencySpec | None:
        """Split ``spec`` at its last ``@``; return None when that is not meaningful."""
        at = spec.rfind("@")
        if at <= 0:
            return None
        try:
            return cls(name=spec[:at], version=spec[at + 1 :])
        except ValueError:
            return None


class DependencySet:
    """Deduplicated, insertion-ordered set of dependencies with a hard size cap.

    Inserts past ``max_size`` are refused and remembered through ``overflowed``
    so callers can report that not every lockfile entry was checked.
    """

    def __init__(self, max_size: int = DEFAULT_MAX_DEPENDENCIES) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self.overflowed = False
        self._items: dict[str, DependencySpec] = {}

    def add(self, name: str, version: str) -> bool:
        """Insert ``name@version``; return True only when the set grew."""
        try:
            spec = DependencySpec(name=name, version=version)
        except ValueError:
            return False

        key = str(spec)
        if key in self._items:
            return False
        if self.is_full:
            self.overflowed = True
            return False
        self._items[key] = spec
        return True

    @property
    def is_full(self) -> bool:
        return len(self._items) >= self.max_size

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[DependencySpec]:
        return iter(self._items.values())

    def __contains__(self, item: object) -> bool:
        return str(item) in self._items

    def as_strings(self) -> list[str]:
        return list(self._items)
