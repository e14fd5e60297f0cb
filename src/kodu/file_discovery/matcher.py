"""
Compiled ignore matchers.

`GlobMatcher` evaluates plain globs (`*`, `**`, `?`, `[...]`) against
root-relative posix paths. `GitIgnoreMatcher` evaluates raw gitignore lines
with full precedence, including `!` re-inclusion. Both satisfy `Matcher`,
so the walker does not care which one it is given.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

import pathspec
from pathspec.pattern import RegexPattern

from kodu.file_discovery.types import IgnoreSource

# Separators converted to `/` before matching, on every platform.
_SEPARATORS = ("\\",)

# Any run of characters, newlines included.
_ANY = r"[\s\S]*"


def _class_body(body: str) -> str:
    """Translate the inside of a `[...]` class, keeping `\\x` escapes literal."""
    out: list[str] = []
    i = 0
    n = len(body)
    while i < n:
        c = body[i]
        i += 1
        if c == "\\" and i < n:
            c = body[i]
            i += 1
            out.append("\\" + c if not c.isalnum() else c)
        elif c in "\\[]^":
            out.append("\\" + c)
        else:
            out.append(c)
    return "".join(out)


def _translate_segment(segment: str) -> str:
    """Translate one path segment (no `/`) of a glob into a regex fragment."""
    out: list[str] = []
    i = 0
    n = len(segment)
    while i < n:
        c = segment[i]
        i += 1
        if c == "*":
            # Collapse runs; a `**` inside a segment is just `*`
            while i < n and segment[i] == "*":
                i += 1
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "[":
            j = i
            if j < n and segment[j] in "!^":
                j += 1
            if j < n and segment[j] == "]":
                j += 1
            while j < n and segment[j] != "]":
                if segment[j] == "\\":
                    j += 1
                j += 1
            if j >= n:
                # Unclosed bracket is a literal
                out.append(re.escape(c))
                continue
            body = segment[i:j]
            i = j + 1
            negate = body[:1] in ("!", "^")
            if negate:
                body = body[1:]
            # A class never matches the separator, even through a range
            body = _class_body(body)
            out.append(f"[^/{body}]" if negate else f"(?!/)[{body}]")
        elif c == "\\" and i < n:
            out.append(re.escape(segment[i]))
            i += 1
        else:
            out.append(re.escape(c))
    return "".join(out)


def translate_glob(glob: str) -> str:
    """
    Translate a glob into an anchored regular expression.

    A `**` segment matches zero or more whole segments; a trailing `/**`
    matches everything below a directory, including the bare `dir/` probe
    the walker uses for pruning.
    """
    segments = glob.split("/")
    last = len(segments) - 1
    regex = ""
    after_globstar = False
    for i, segment in enumerate(segments):
        sep = "" if i == 0 or after_globstar else "/"
        if segment == "**":
            regex += sep + (_ANY if i == last else f"(?:{_ANY}/)?")
            after_globstar = i != last
        else:
            regex += sep + _translate_segment(segment)
            after_globstar = False
    return f"^{regex}\\Z"


class GlobPattern(RegexPattern):
    """A `pathspec` pattern compiled from a plain glob."""

    __slots__ = ()

    @classmethod
    def pattern_to_regex(cls, pattern: str) -> tuple[str, bool]:  # pyright: ignore[reportIncompatibleMethodOverride]
        return translate_glob(pattern), True


class GlobMatcher:
    """
    Union of canonical globs. Evaluation is a pure function of the path.
    """

    def __init__(self, globs: Iterable[str]) -> None:
        # Sorted so two matchers built from the same set behave identically
        self.globs: tuple[str, ...] = tuple(sorted(set(globs)))
        self._spec: pathspec.PathSpec = pathspec.PathSpec(GlobPattern(g) for g in self.globs)

    def matches(self, path: str) -> bool:
        if not self.globs:
            return False
        return self._spec.match_file(path, separators=_SEPARATORS)

    def matches_dir(self, path: str) -> bool:
        """Directory probe: `dir/` matches `dir/**`, pruning the subtree."""
        return self.matches(path.rstrip("/\\") + "/")

    def __repr__(self) -> str:
        return f"GlobMatcher({len(self.globs)} globs)"


def compile_matcher(globs: Iterable[str]) -> GlobMatcher:
    return GlobMatcher(globs)


class GitIgnoreMatcher:
    """
    Raw gitignore lines evaluated last-match-wins, so `!pattern` can re-include
    a path excluded by an earlier line.
    """

    def __init__(self, lines: Sequence[str]) -> None:
        self.lines: tuple[str, ...] = tuple(lines)
        self._spec: pathspec.GitIgnoreSpec = pathspec.GitIgnoreSpec.from_lines(self.lines)

    def matches(self, path: str) -> bool:
        return self._spec.match_file(path, separators=_SEPARATORS)

    def matches_dir(self, path: str) -> bool:
        return self.matches(path.rstrip("/\\") + "/")

    def __repr__(self) -> str:
        return f"GitIgnoreMatcher({len(self.lines)} lines)"


def build_gitignore_matcher(sources: Iterable[IgnoreSource]) -> GitIgnoreMatcher:
    """Concatenate the raw lines of every source, in source order."""
    lines: list[str] = []
    for source in sources:
        lines.extend(p.strip() for p in source.patterns if p.strip())
    return GitIgnoreMatcher(lines)
