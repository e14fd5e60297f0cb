"""
Priority scoring for ranking mode.

Rules are tried in order and the first match wins. Scores only order output;
they never filter it.
"""

from __future__ import annotations

import posixpath
from collections.abc import Callable, Sequence
from dataclasses import dataclass

# (relative_path, basename, dirname) -> bool
RuleTest = Callable[[str, str, str], bool]

DEFAULT_SCORE = 0


@dataclass(frozen=True)
class PriorityRule:
    score: int
    test: RuleTest
    name: str = ""


MANIFEST_FILES = frozenset(
    {
        "README.md",
        "package.json",
        "pyproject.toml",
        "Cargo.toml",
        "go.mod",
        "Dockerfile",
        "docker-compose.yml",
        "Makefile",
    }
)

TEST_DIRS = frozenset({"test", "tests", "__tests__"})


def _endswith(*suffixes: str) -> RuleTest:
    return lambda _path, name, _dir: name.endswith(suffixes)


def _is_manifest(_path: str, name: str, _dir: str) -> bool:
    return name in MANIFEST_FILES


def _is_test(_path: str, name: str, dirname: str) -> bool:
    if ".test." in name or ".spec." in name:
        return True
    if name.startswith("test_") and name.endswith(".py"):
        return True
    if name.endswith("_test.go"):
        return True
    return any(part in TEST_DIRS for part in dirname.split("/"))


def _is_markdown(_path: str, name: str, _dir: str) -> bool:
    return name.endswith(".md") and not name.endswith("CHANGELOG.md")


DEFAULT_PRIORITY_RULES: list[PriorityRule] = [
    PriorityRule(100, _is_manifest, "manifest"),
    PriorityRule(5, _endswith(".d.ts", ".min.js", ".min.css", ".bundle.js", ".map"), "generated"),
    PriorityRule(10, _is_test, "test"),
    PriorityRule(90, _is_markdown, "docs"),
    PriorityRule(80, _endswith(".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs"), "javascript"),
    PriorityRule(70, _endswith(".py", ".go", ".rs", ".java", ".kt", ".scala"), "source"),
    PriorityRule(60, _endswith(".html", ".css", ".scss", ".sass"), "web"),
    PriorityRule(50, _endswith(".json", ".yaml", ".yml", ".toml"), "data"),
]


def get_priority_score(
    relative_path: str,
    basename: str,
    dirname: str,
    rules: Sequence[PriorityRule] = DEFAULT_PRIORITY_RULES,
) -> int:
    for rule in rules:
        if rule.test(relative_path, basename, dirname):
            return rule.score
    return DEFAULT_SCORE


def score_path(relative_path: str, rules: Sequence[PriorityRule] = DEFAULT_PRIORITY_RULES) -> int:
    """Score a root-relative posix path. A file at the root has dirname `""`."""
    dirname, basename = posixpath.split(relative_path)
    return get_priority_score(relative_path, basename, dirname, rules)
