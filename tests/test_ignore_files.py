"""Tests for ignore source loading."""

from __future__ import annotations

import os
import stat
from pathlib import Path

from kodu.file_discovery import DEFAULT_IGNORE_PATTERNS, DiscoveryConfig, SourceKind, load_ignore_sources
from kodu.file_discovery.ignore_files import (
    _read_ignore_file,  # pyright: ignore[reportPrivateUsage]
    find_tool_ignore,
    load_gitignore,
    load_tool_ignore,
)


def test_read_ignore_file_drops_blanks_and_comments(tmp_path: Path):
    f = tmp_path / ".gitignore"
    f.write_text("# comment\n\n*.log\n  build/  \n   # indented comment\n")
    assert _read_ignore_file(f) == ["*.log", "build/"]


def test_read_ignore_file_missing(tmp_path: Path):
    assert _read_ignore_file(tmp_path / "nonexistent") is None


def test_read_ignore_file_unreadable(tmp_path: Path):
    if os.getuid() == 0:
        # Root can read any file regardless of permissions; test the OSError
        # path via a directory instead.
        (tmp_path / "dir_ignore").mkdir()
        assert _read_ignore_file(tmp_path / "dir_ignore") is None
        return
    ignore_file = tmp_path / ".gitignore"
    ignore_file.write_text("*.log\n")
    ignore_file.chmod(0o000)
    try:
        assert _read_ignore_file(ignore_file) is None
    finally:
        ignore_file.chmod(stat.S_IRUSR | stat.S_IWUSR)


def test_read_ignore_file_non_utf8(tmp_path: Path, log_messages: list[str]):
    ignore_file = tmp_path / ".gitignore"
    ignore_file.write_bytes(b"\x80\x81\x82\xff\xfe")
    assert _read_ignore_file(ignore_file) is None
    assert any("unreadable ignore file" in m for m in log_messages)


def test_load_gitignore(tmp_path: Path):
    (tmp_path / ".gitignore").write_text("*.log\n")
    source = load_gitignore(tmp_path)
    assert source is not None
    assert source.kind == SourceKind.GITIGNORE
    assert source.patterns == ("*.log",)
    assert source.path == tmp_path / ".gitignore"


def test_load_gitignore_comments_only(tmp_path: Path):
    (tmp_path / ".gitignore").write_text("# nothing here\n\n")
    assert load_gitignore(tmp_path) is None


def test_find_tool_ignore_walks_up(tmp_path: Path):
    ignore = tmp_path / ".koduignore"
    ignore.write_text("drafts/\n")
    deep = tmp_path / "a" / "b"
    deep.mkdir(parents=True)
    assert find_tool_ignore("kodu", deep) == ignore.resolve()


def test_load_tool_ignore_custom_tool_name(tmp_path: Path):
    (tmp_path / ".mytoolignore").write_text("drafts/\n")
    source = load_tool_ignore("mytool", tmp_path)
    assert source is not None
    assert source.kind == SourceKind.TOOL_IGNORE
    assert source.patterns == ("drafts/",)
    assert load_tool_ignore("kodu", tmp_path) is None


def test_load_ignore_sources_order(tmp_path: Path):
    (tmp_path / ".gitignore").write_text("*.log\n")
    (tmp_path / ".koduignore").write_text("drafts/\n")
    config = DiscoveryConfig(extend_ignore=["fixtures/"])
    sources = load_ignore_sources(tmp_path, config)
    assert [s.kind for s in sources] == [
        SourceKind.DEFAULTS,
        SourceKind.GITIGNORE,
        SourceKind.TOOL_IGNORE,
        SourceKind.OVERRIDE,
    ]
    assert sources[0].patterns == tuple(DEFAULT_IGNORE_PATTERNS)
    assert sources[-1].patterns == ("fixtures/",)


def test_load_ignore_sources_without_gitignore(tmp_path: Path):
    (tmp_path / ".gitignore").write_text("*.log\n")
    sources = load_ignore_sources(tmp_path, DiscoveryConfig(use_gitignore=False))
    assert [s.kind for s in sources] == [SourceKind.DEFAULTS]


def test_ignore_replaces_defaults(tmp_path: Path):
    sources = load_ignore_sources(tmp_path, DiscoveryConfig(ignore=["custom/"]))
    assert sources[0].patterns == ("custom/",)
