"""Glob-style path exclusion.

`*` (and `**`) match any run of characters, path separators included; every
other character is literal. A glob is compiled into a prefix, an ordered list
of literal fragments and a suffix, so matching is a handful of substring
searches and never backtracks.
"""

import functools
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional


MAX_GLOB_WILDCARDS = 10

_STAR_RUN = re.compile(r"\*+")


@dataclass(frozen=True)
class GlobMatcher:
    """Anchored matcher for one compiled glob."""
    pattern: str
    prefix: str = ""
    fragments: tuple[str, ...] = ()
    suffix: str = ""
    has_wildcard: bool = False
    never_matches: bool = False

    def matches(self, path: str) -> bool:
        if self.never_matches:
            return False
        if not self.has_wildcard:
            return path == self.prefix

        if len(path) < len(self.prefix) + len(self.suffix):
            return False
        if not (path.startswith(self.prefix) and path.endswith(self.suffix)):
            return False

        middle = path[len(self.prefix):len(path) - len(self.suffix)]
        position = 0
        for fragment in self.fragments:
            found = middle.find(fragment, position)
            if found == -1:
                return False
            position = found + len(fragment)
        return True


@functools.lru_cache(maxsize=1024)
def compile_glob(pattern: str) -> GlobMatcher:
    """Compile a glob; globs with too many wildcards match nothing."""
    if pattern.count("*") > MAX_GLOB_WILDCARDS:
        return GlobMatcher(pattern=pattern, never_matches=True)

    parts = _STAR_RUN.split(pattern)
    if len(parts) == 1:
        return GlobMatcher(pattern=pattern, prefix=pattern)

    return GlobMatcher(
        pattern=pattern,
        prefix=parts[0],
        fragments=tuple(part for part in parts[1:-1] if part),
        suffix=parts[-1],
        has_wildcard=True,
    )


def normalize_path(path: str) -> str:
    return path.replace("\\", "/")


def is_excluded(path: str, patterns: Optional[Iterable[str]]) -> bool:
    """True if the path matches any of the exclusion globs."""
    if not patterns:
        return False
    normalized = normalize_path(path)
    return any(compile_glob(pattern).matches(normalized) for pattern in patterns)
