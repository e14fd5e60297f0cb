"""
Self-contained file discovery module with ignore-pattern matching,
binary detection, and priority ranking.

No imports from `kodu` outside this package.

Usage::

    from kodu.file_discovery import DiscoveryConfig, FileDiscovery

    config = DiscoveryConfig(
        extend_ignore=["fixtures/"],
        content_sniffing=True,
    )
    result = FileDiscovery(config).discover(".")
    files = result.files
"""

from kodu.file_discovery.classifier import classify
from kodu.file_discovery.defaults import DEFAULT_EXCLUDED_DIRS, DEFAULT_IGNORE_PATTERNS
from kodu.file_discovery.discovery import FileDiscovery, discover_files
from kodu.file_discovery.errors import (
    DiscoveryCancelledError,
    DiscoveryError,
    InvalidRootError,
    UnsupportedPatternError,
)
from kodu.file_discovery.ignore_files import load_ignore_sources
from kodu.file_discovery.matcher import GitIgnoreMatcher, GlobMatcher, compile_matcher
from kodu.file_discovery.patterns import normalize_pattern, normalize_patterns
from kodu.file_discovery.priority import DEFAULT_PRIORITY_RULES, PriorityRule, score_path
from kodu.file_discovery.types import (
    DiscoveryConfig,
    DiscoveryResult,
    IgnoreSource,
    Matcher,
    MatcherEngine,
    ScoredFile,
    SkippedFile,
    SkipReason,
    SourceKind,
)

__all__ = [
    "DEFAULT_EXCLUDED_DIRS",
    "DEFAULT_IGNORE_PATTERNS",
    "DEFAULT_PRIORITY_RULES",
    "DiscoveryCancelledError",
    "DiscoveryConfig",
    "DiscoveryError",
    "DiscoveryResult",
    "FileDiscovery",
    "GitIgnoreMatcher",
    "GlobMatcher",
    "IgnoreSource",
    "InvalidRootError",
    "Matcher",
    "MatcherEngine",
    "PriorityRule",
    "ScoredFile",
    "SkipReason",
    "SkippedFile",
    "SourceKind",
    "UnsupportedPatternError",
    "classify",
    "compile_matcher",
    "discover_files",
    "load_ignore_sources",
    "normalize_pattern",
    "normalize_patterns",
    "score_path",
]
