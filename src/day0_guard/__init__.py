"""day0-guard core package.

Locates npm, pnpm and yarn lockfiles in a pull request's head revision and
flags dependencies whose versions were published inside the Day-0 window.
"""

__all__ = [
    "core",
]
