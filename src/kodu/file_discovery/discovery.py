"""
FileDiscovery: main entry point for file discovery.

Loads ignore sources, compiles them into one matcher, walks the tree,
classifies what survives, and returns a deterministically ordered result.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from loguru import logger

from kodu.file_discovery.classifier import classify
from kodu.file_discovery.errors import DiscoveryCancelledError, InvalidRootError
from kodu.file_discovery.ignore_files import load_ignore_sources
from kodu.file_discovery.matcher import build_gitignore_matcher, compile_matcher
from kodu.file_discovery.patterns import NormalizedPatterns, normalize_patterns
from kodu.file_discovery.priority import DEFAULT_PRIORITY_RULES, PriorityRule, score_path
from kodu.file_discovery.types import (
    Classification,
    DiscoveryConfig,
    DiscoveryResult,
    FileCandidate,
    IgnoreSource,
    Matcher,
    MatcherEngine,
    ScoredFile,
    SkippedFile,
    SkipReason,
)
from kodu.file_discovery.walker import walk


def validate_root(root: str | Path) -> Path:
    """Check that `root` is an existing directory, before any traversal."""
    path = Path(root)
    if not path.exists():
        raise InvalidRootError(f"Root path not found: {root}")
    if not path.is_dir():
        raise InvalidRootError(f"Root path is not a directory: {root}")
    return path


class FileDiscovery:
    """
    Discovers the files of a project that downstream tools should process.

    Every call to `discover()` builds its own matcher and result; nothing is
    cached between calls, so one instance can serve concurrent calls.
    """

    def __init__(
        self,
        config: DiscoveryConfig | None = None,
        priority_rules: Sequence[PriorityRule] = DEFAULT_PRIORITY_RULES,
    ) -> None:
        self._config: DiscoveryConfig = config if config is not None else DiscoveryConfig()
        self._priority_rules: Sequence[PriorityRule] = priority_rules

    @property
    def config(self) -> DiscoveryConfig:
        return self._config

    def build_matcher(self, sources: Sequence[IgnoreSource]) -> tuple[Matcher, list[str]]:
        """Compile all sources into one matcher. Returns the matcher and any dropped patterns."""
        if self._config.engine == MatcherEngine.GITIGNORE:
            return build_gitignore_matcher(sources), []

        normalized = NormalizedPatterns()
        for source in sources:
            origin = str(source.path) if source.path is not None else source.kind.value
            normalized.update(normalize_patterns(source.patterns, origin))
        return compile_matcher(normalized.globs), normalized.dropped

    def discover(
        self,
        root: str | Path,
        sources: Sequence[IgnoreSource] | None = None,
        *,
        cancel: threading.Event | None = None,
    ) -> DiscoveryResult:
        """
        Discover files under `root`.

        `sources=None` loads ignore sources from `root` per the config. Raises
        `InvalidRootError` if `root` is not a directory, and
        `DiscoveryCancelledError` if `cancel` is set mid-scan.
        """
        root_path = validate_root(root)
        if sources is None:
            sources = load_ignore_sources(root_path, self._config)
        matcher, dropped = self.build_matcher(sources)
        logger.debug(f"Discovering files under {root_path} with {matcher!r}")

        skipped: list[SkippedFile] = []

        def record_skip(path: str, reason: SkipReason) -> None:
            skipped.append(SkippedFile(path, reason))

        try:
            candidates = list(
                walk(root_path, matcher, self._config, on_skip=record_skip, cancel=cancel)
            )
            classifications = self._classify_all(candidates, cancel)
        except DiscoveryCancelledError:
            logger.info("Discovery cancelled, discarding partial results")
            raise

        kept: list[FileCandidate] = []
        for candidate, classification in zip(candidates, classifications):
            if classification.binary:
                record_skip(candidate.relative_path, classification.skip_reason)
            else:
                kept.append(candidate)

        result = DiscoveryResult(dropped_patterns=dropped)
        if self._config.ranking:
            scored = [
                ScoredFile(c.relative_path, score_path(c.relative_path, self._priority_rules), c.size)
                for c in kept
            ]
            # Stable sort: equal scores keep discovery order
            scored.sort(key=lambda s: -s.score)
            result.scored = scored
            result.files = [s.path for s in scored]
        else:
            result.files = sorted(c.relative_path for c in kept)

        result.skipped = sorted(skipped, key=lambda s: s.path)
        logger.debug(f"Discovered {len(result.files)} files, skipped {len(result.skipped)}")
        return result

    def _classify_all(
        self, candidates: list[FileCandidate], cancel: threading.Event | None
    ) -> list[Classification]:
        """Classify candidates, in order, on a bounded thread pool if configured."""
        sniffing = self._config.content_sniffing

        def classify_one(candidate: FileCandidate) -> Classification:
            if cancel is not None and cancel.is_set():
                raise DiscoveryCancelledError()
            return classify(candidate.relative_path, candidate.absolute_path, sniffing)

        if self._config.max_workers <= 1 or len(candidates) < 2:
            return [classify_one(c) for c in candidates]
        with ThreadPoolExecutor(max_workers=self._config.max_workers) as executor:
            return list(executor.map(classify_one, candidates))


def discover_files(root: str | Path, config: DiscoveryConfig | None = None) -> list[str]:
    """Convenience wrapper: the ordered relative paths under `root`."""
    return FileDiscovery(config).discover(root).files
