"""Loading of ignore sources: defaults, `.gitignore`, tool ignore file, overrides."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from kodu.file_discovery.types import DiscoveryConfig, IgnoreSource, SourceKind


def _read_ignore_file(path: Path) -> list[str] | None:
    """
    Read an ignore file, dropping blank lines and `#` comments. Returns `None`
    if the file is missing, unreadable, or not valid UTF-8.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Ignoring unreadable ignore file {path}: {e}")
        return None
    return [
        line.strip()
        for line in text.splitlines()
        if line.strip() and not line.strip().startswith("#")
    ]


def load_gitignore(root: Path) -> IgnoreSource | None:
    """
    Read `.gitignore` in the given directory, or `None` if it doesn't exist
    or has no patterns.
    """
    gitignore = root / ".gitignore"
    if not gitignore.is_file():
        return None
    lines = _read_ignore_file(gitignore)
    if not lines:
        return None
    logger.debug(f"Loaded {len(lines)} patterns from {gitignore}")
    return IgnoreSource(SourceKind.GITIGNORE, tuple(lines), gitignore)


def find_tool_ignore(tool_name: str, start_dir: Path) -> Path | None:
    """Walk up from `start_dir` looking for `.{tool_name}ignore` (e.g., `.koduignore`)."""
    ignore_name = f".{tool_name}ignore"
    current = start_dir.resolve()
    while True:
        candidate = current / ignore_name
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def load_tool_ignore(tool_name: str, start_dir: Path) -> IgnoreSource | None:
    """Source from the first tool ignore file found from `start_dir` upward, or `None`."""
    path = find_tool_ignore(tool_name, start_dir)
    if path is None:
        return None
    lines = _read_ignore_file(path)
    if not lines:
        return None
    logger.debug(f"Loaded {len(lines)} patterns from {path}")
    return IgnoreSource(SourceKind.TOOL_IGNORE, tuple(lines), path)


def load_ignore_sources(root: Path, config: DiscoveryConfig) -> list[IgnoreSource]:
    """
    All ignore sources for a discovery call, in precedence order: fixed
    defaults, `.gitignore` (if enabled), tool ignore file, caller overrides.
    Missing sources are simply absent.
    """
    sources = [IgnoreSource(SourceKind.DEFAULTS, tuple(config.base_ignore))]
    if config.use_gitignore:
        gitignore = load_gitignore(root)
        if gitignore is not None:
            sources.append(gitignore)
    tool_ignore = load_tool_ignore(config.tool_name, root)
    if tool_ignore is not None:
        sources.append(tool_ignore)
    if config.extend_ignore:
        sources.append(IgnoreSource(SourceKind.OVERRIDE, tuple(config.extend_ignore)))
    return sources
