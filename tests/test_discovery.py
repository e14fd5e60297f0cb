"""Tests for the FileDiscovery facade."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from kodu.file_discovery import (
    DiscoveryCancelledError,
    DiscoveryConfig,
    FileDiscovery,
    IgnoreSource,
    InvalidRootError,
    MatcherEngine,
    ScoredFile,
    SkippedFile,
    SkipReason,
    SourceKind,
    discover_files,
)
from kodu.file_discovery import discovery as discovery_module

PNG_HEADER = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"


def _make_project(root: Path) -> None:
    src = root / "src"
    src.mkdir()
    (src / "index.ts").write_text("export {}\n")  # 10 bytes
    nm = root / "node_modules" / "lib"
    nm.mkdir(parents=True)
    (nm / "x.js").write_text("module.exports = 1;\n")
    (root / "image.png").write_bytes(PNG_HEADER)
    (root / ".gitignore").write_text("*.log\n")
    (root / "app.log").write_text("x" * 200)


def test_end_to_end_scenario(tmp_path: Path):
    _make_project(tmp_path)
    result = FileDiscovery(DiscoveryConfig()).discover(tmp_path)
    assert result.files == ["src/index.ts"]
    assert result.skipped == [SkippedFile("image.png", SkipReason.BINARY)]
    assert result.scored == []
    assert result.dropped_patterns == []


def test_gitignore_is_what_excludes_log(tmp_path: Path):
    _make_project(tmp_path)
    result = FileDiscovery(DiscoveryConfig(use_gitignore=False)).discover(tmp_path)
    assert result.files == ["app.log", "src/index.ts"]


def test_discover_is_idempotent(tmp_path: Path):
    _make_project(tmp_path)
    (tmp_path / "b.md").write_text("# B\n")
    (tmp_path / "a" / "z").mkdir(parents=True)
    (tmp_path / "a" / "z" / "c.py").write_text("c = 1\n")
    discovery = FileDiscovery(DiscoveryConfig(content_sniffing=True))
    assert discovery.discover(tmp_path) == discovery.discover(tmp_path)


def test_simple_mode_is_lexicographic(tmp_path: Path):
    for name in ["c.md", "B.md", "a.md", "a-b.md"]:
        (tmp_path / name).write_text(f"# {name}\n")
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "z.md").write_text("# z\n")
    files = discover_files(tmp_path)
    assert files == sorted(files)
    assert files == ["B.md", "a-b.md", "a.md", "a/z.md", "c.md"]


def test_ranking_mode(tmp_path: Path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "app.test.ts").write_text("test()\n")
    (src / "app.ts").write_text("export const app = 1;\n")
    (tmp_path / "package.json").write_text('{"name": "demo"}\n')

    result = FileDiscovery(DiscoveryConfig(ranking=True)).discover(tmp_path)
    assert result.files == ["package.json", "src/app.ts", "src/app.test.ts"]
    assert [s.score for s in result.scored] == [100, 80, 10]
    assert result.scored[0] == ScoredFile("package.json", 100, len('{"name": "demo"}\n'))


def test_every_source_excludes(tmp_path: Path):
    for name in ["default.lock", "git.tmp", "tool.bak", "override.out", "keep.txt"]:
        (tmp_path / name).write_text("data\n")
    (tmp_path / ".gitignore").write_text("*.tmp\n")
    (tmp_path / ".koduignore").write_text("*.bak\n")
    config = DiscoveryConfig(ignore=["default.lock"], extend_ignore=["*.out"])
    assert discover_files(tmp_path, config) == ["keep.txt"]


def test_explicit_sources(tmp_path: Path):
    (tmp_path / "a.txt").write_text("a\n")
    (tmp_path / "b.txt").write_text("b\n")
    (tmp_path / ".gitignore").write_text("a.txt\n")
    sources = [IgnoreSource(SourceKind.OVERRIDE, ("b.txt",))]
    result = FileDiscovery().discover(tmp_path, sources)
    # Explicit sources replace everything loaded from disk
    assert result.files == ["a.txt"]


def test_pruned_files_never_classified(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    classified: list[str] = []
    real_classify = discovery_module.classify

    def spy(relative_path: str, absolute_path: Path, content_sniffing: bool):
        classified.append(relative_path)
        return real_classify(relative_path, absolute_path, content_sniffing)

    monkeypatch.setattr(discovery_module, "classify", spy)
    (tmp_path / "main.py").write_text("x = 1\n")
    ignored = tmp_path / "generated"
    ignored.mkdir()
    (ignored / "would_pass.py").write_text("y = 2\n")
    (tmp_path / "big.txt").write_text("x" * 500)

    config = DiscoveryConfig(extend_ignore=["generated"], max_file_size=100)
    result = FileDiscovery(config).discover(tmp_path)
    assert result.files == ["main.py"]
    assert classified == ["main.py"]
    assert result.skipped == [SkippedFile("big.txt", SkipReason.TOO_LARGE)]


def test_content_sniffing_excludes_binary(tmp_path: Path):
    (tmp_path / "data").write_bytes(b"header\x00payload")
    (tmp_path / "notes").write_text("plain words\n")
    sniffing = FileDiscovery(DiscoveryConfig(content_sniffing=True)).discover(tmp_path)
    assert sniffing.files == ["notes"]
    assert sniffing.skipped == [SkippedFile("data", SkipReason.BINARY)]

    permissive = FileDiscovery(DiscoveryConfig(content_sniffing=False)).discover(tmp_path)
    assert permissive.files == ["data", "notes"]


def test_negated_patterns_dropped(tmp_path: Path):
    (tmp_path / ".gitignore").write_text("*.log\n!keep.log\n")
    (tmp_path / "keep.log").write_text("k\n")
    (tmp_path / "other.log").write_text("o\n")
    (tmp_path / "main.py").write_text("m\n")
    result = FileDiscovery().discover(tmp_path)
    assert result.files == ["main.py"]
    assert result.dropped_patterns == ["!keep.log"]


def test_gitignore_engine_reincludes(tmp_path: Path):
    (tmp_path / ".gitignore").write_text("*.log\n!keep.log\n")
    (tmp_path / "keep.log").write_text("k\n")
    (tmp_path / "other.log").write_text("o\n")
    nm = tmp_path / "node_modules"
    nm.mkdir()
    (nm / "x.js").write_text("x\n")
    result = FileDiscovery(DiscoveryConfig(engine=MatcherEngine.GITIGNORE)).discover(tmp_path)
    assert result.files == ["keep.log"]
    assert result.dropped_patterns == []


def test_parallel_classification_matches_sequential(tmp_path: Path):
    for i in range(20):
        (tmp_path / f"file{i:02}.txt").write_text(f"{i}\n")
        (tmp_path / f"blob{i:02}").write_bytes(b"\x00" * (i + 1))
    sequential = FileDiscovery(DiscoveryConfig(content_sniffing=True)).discover(tmp_path)
    parallel = FileDiscovery(DiscoveryConfig(content_sniffing=True, max_workers=4)).discover(
        tmp_path
    )
    assert parallel == sequential
    assert len(parallel.files) == 20
    assert len(parallel.skipped) == 20


def test_concurrent_calls_are_independent(tmp_path: Path):
    _make_project(tmp_path)
    discovery = FileDiscovery()
    results: list[list[str]] = []

    def run() -> None:
        results.append(discovery.discover(tmp_path).files)

    threads = [threading.Thread(target=run) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert results == [["src/index.ts"]] * 4


def test_cancellation(tmp_path: Path):
    _make_project(tmp_path)
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(DiscoveryCancelledError) as exc_info:
        FileDiscovery().discover(tmp_path, cancel=cancel)
    assert exc_info.value.partial == []


def test_missing_root(tmp_path: Path):
    with pytest.raises(InvalidRootError, match="not found"):
        FileDiscovery().discover(tmp_path / "missing")


def test_root_is_a_file(tmp_path: Path):
    f = tmp_path / "file.txt"
    f.write_text("x\n")
    with pytest.raises(InvalidRootError, match="not a directory"):
        discover_files(f)


def test_hidden_files_opt_in(tmp_path: Path):
    (tmp_path / ".env.example").write_text("KEY=\n")
    (tmp_path / "main.py").write_text("m\n")
    assert discover_files(tmp_path) == ["main.py"]
    assert discover_files(tmp_path, DiscoveryConfig(include_hidden=True)) == [".env.example", "main.py"]
