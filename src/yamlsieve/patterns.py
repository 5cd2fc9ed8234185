"""Gitignore-style path patterns, matched one path segment at a time."""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable, Iterator
from dataclasses import dataclass


def normalize_path(path: str) -> str:
    """Forward slashes, no leading ``./``."""
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


def _consumed(segments: list[str], parts: list[str]) -> Iterator[int]:
    """Yield how many leading ``parts`` each way of matching ``segments`` uses.

    ``*``, ``?`` and ``[...]`` never cross a slash since each segment is
    matched against a single path component; ``**`` spans zero or more
    whole components.
    """
    if not segments:
        yield 0
        return
    head, rest = segments[0], segments[1:]
    if head == "**":
        for skip in range(len(parts) + 1):
            for used in _consumed(rest, parts[skip:]):
                yield skip + used
    elif parts and fnmatch.fnmatchcase(parts[0], head):
        for used in _consumed(rest, parts[1:]):
            yield 1 + used


@dataclass(frozen=True)
class PathPattern:
    """One pattern line.

    A pattern without a slash (other than a trailing one) matches any path
    component; otherwise it is anchored at the root and matches a leading
    run of components, unless it starts with ``**/``.  A trailing slash
    restricts it to directories, and a matching directory covers everything
    below it.
    """

    pattern: str
    negate: bool = False
    dir_only: bool = False
    anchored: bool = False

    @classmethod
    def parse(cls, line: str) -> PathPattern | None:
        line = line.rstrip()
        if not line or line.startswith("#"):
            return None

        negate = line.startswith("!")
        if negate:
            line = line[1:]
        dir_only = line.endswith("/")
        line = line.rstrip("/")
        floating = line.startswith("**/")
        if floating:
            line = line[3:]
        anchored = "/" in line and not floating
        line = line.lstrip("/")
        if not line:
            return None
        return cls(line, negate=negate, dir_only=dir_only, anchored=anchored)

    def matches(self, path: str) -> bool:
        parts = normalize_path(path).strip("/").split("/")
        segments = self.pattern.split("/")
        starts = [0] if self.anchored else range(len(parts))
        for start in starts:
            for used in _consumed(segments, parts[start:]):
                # A directory pattern must leave the file below the match
                if not self.dir_only or start + used < len(parts):
                    return True
        return False


class PathPatterns:
    """An ordered list of patterns; the last one matching a path decides."""

    def __init__(self, patterns: Iterable[PathPattern]) -> None:
        self.patterns = list(patterns)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> PathPatterns:
        parsed = (PathPattern.parse(line) for line in lines)
        return cls(pattern for pattern in parsed if pattern is not None)

    def matches(self, path: str) -> bool:
        matched = False
        for pattern in self.patterns:
            if pattern.matches(path):
                matched = not pattern.negate
        return matched

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def __repr__(self) -> str:
        return f"PathPatterns({[p.pattern for p in self.patterns]!r})"
