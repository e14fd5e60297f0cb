"""Configuration and result types for file discovery."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Protocol

from kodu.file_discovery.defaults import DEFAULT_EXCLUDED_DIRS, DEFAULT_IGNORE_PATTERNS


class SourceKind(str, Enum):
    """Where a set of ignore patterns came from."""

    DEFAULTS = "defaults"
    GITIGNORE = "gitignore"
    TOOL_IGNORE = "tool_ignore"
    OVERRIDE = "override"


class SkipReason(str, Enum):
    """Why a file was left out of the result."""

    NONE = "none"
    TOO_LARGE = "too_large"
    BINARY = "binary"
    UNREADABLE = "unreadable"
    PERMISSION_DENIED = "permission_denied"


class MatcherEngine(str, Enum):
    """
    `GLOB` unions the normalized globs of every source (negations dropped).
    `GITIGNORE` evaluates raw lines in order with gitignore precedence.
    """

    GLOB = "glob"
    GITIGNORE = "gitignore"


@dataclass(frozen=True)
class IgnoreSource:
    """Raw ignore patterns from a single origin, in file order."""

    kind: SourceKind
    patterns: tuple[str, ...]
    path: Path | None = None


class Matcher(Protocol):
    """
    Predicate over root-relative posix paths. A path ending in `/` names a
    directory. Implementations hold no mutable state.
    """

    def matches(self, path: str) -> bool: ...

    def matches_dir(self, path: str) -> bool: ...


@dataclass(frozen=True)
class FileCandidate:
    """A regular file found during traversal, before classification."""

    absolute_path: Path
    relative_path: str
    size: int


@dataclass(frozen=True)
class Classification:
    binary: bool
    skip_reason: SkipReason = SkipReason.NONE


@dataclass(frozen=True)
class ScoredFile:
    path: str
    score: int
    size: int


@dataclass(frozen=True)
class SkippedFile:
    path: str
    reason: SkipReason


@dataclass
class DiscoveryResult:
    """
    Output of one discovery call. `files` is the ordered path list in either
    mode; `scored` carries scores and sizes in ranking mode and is empty
    otherwise.
    """

    files: list[str] = field(default_factory=list)
    scored: list[ScoredFile] = field(default_factory=list)
    skipped: list[SkippedFile] = field(default_factory=list)
    dropped_patterns: list[str] = field(default_factory=list)


@dataclass
class DiscoveryConfig:
    """
    Settings for a discovery call. Built by the caller and passed explicitly;
    treated as read-only while a walk is in progress.

    `tool_name` determines the ignore file name (e.g., `.koduignore`).
    `ignore=None` means use `DEFAULT_IGNORE_PATTERNS`; providing a list replaces them.
    `max_file_size=0` disables the size limit.
    """

    tool_name: str = "kodu"
    ignore: list[str] | None = None
    extend_ignore: list[str] = field(default_factory=list)
    use_gitignore: bool = True
    content_sniffing: bool = False
    max_file_size: int = 1_048_576  # 1 MiB
    include_hidden: bool = False
    excluded_dirs: frozenset[str] = DEFAULT_EXCLUDED_DIRS
    ranking: bool = False
    max_workers: int = 1
    engine: MatcherEngine = MatcherEngine.GLOB

    @property
    def base_ignore(self) -> list[str]:
        """Fixed deny patterns: `ignore` if given, else the built-in defaults."""
        return list(self.ignore) if self.ignore is not None else list(DEFAULT_IGNORE_PATTERNS)
