"""
Normalization of raw ignore patterns into depth-independent globs.

Every raw pattern expands to one or more globs so that it matches at any
nesting depth. The expansion over-generates on purpose: excluding a file
that was meant to be kept is preferred to keeping a file meant to be ignored.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from loguru import logger

from kodu.file_discovery.errors import UnsupportedPatternError

# Characters that make a pattern a glob rather than a literal path.
GLOB_CHARS = frozenset("*?[")


def has_glob_chars(pattern: str) -> bool:
    return any(c in GLOB_CHARS for c in pattern)


def normalize_pattern(raw: str) -> frozenset[str]:
    """
    Expand one raw ignore pattern into its canonical globs.

    Root anchors are not distinguished from relative patterns: `/build` and
    `build` normalize identically. Raises `UnsupportedPatternError` for negated
    (`!`) patterns, which the glob engine cannot express.
    """
    pattern = raw.strip()
    if not pattern:
        return frozenset()
    if pattern.startswith("!"):
        raise UnsupportedPatternError(raw, "negation is not supported")

    pattern = pattern.lstrip("/")
    if not pattern:
        return frozenset()

    if pattern.endswith("/"):
        directory = pattern.rstrip("/")
        return frozenset({f"{directory}/**", f"**/{directory}/**"})

    if not has_glob_chars(pattern):
        if "/" not in pattern:
            if "." in pattern:
                # Looks like a specific file name
                return frozenset({f"**/{pattern}"})
            return frozenset({pattern, f"**/{pattern}", f"{pattern}/**", f"**/{pattern}/**"})
        return frozenset({pattern, f"**/{pattern}", f"{pattern}/**"})

    if pattern.startswith("**/"):
        return frozenset({pattern})
    return frozenset({pattern, f"**/{pattern}"})


@dataclass
class NormalizedPatterns:
    """Union of canonical globs, plus the raw patterns that were dropped."""

    globs: set[str] = field(default_factory=set)
    dropped: list[str] = field(default_factory=list)

    def update(self, other: NormalizedPatterns) -> None:
        self.globs |= other.globs
        self.dropped.extend(other.dropped)


def normalize_patterns(patterns: Iterable[str], origin: str = "patterns") -> NormalizedPatterns:
    """
    Normalize a sequence of raw patterns. Unsupported patterns are logged and
    collected in `dropped` instead of raising.
    """
    result = NormalizedPatterns()
    for raw in patterns:
        try:
            result.globs |= normalize_pattern(raw)
        except UnsupportedPatternError as e:
            logger.warning(f"Dropping ignore pattern from {origin}: {e}")
            result.dropped.append(raw.strip())
    return result
