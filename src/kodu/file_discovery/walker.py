"""
Depth-first directory traversal with early pruning.

The walker yields `FileCandidate`s in host directory-entry order. Sorting is
left to the caller.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from kodu.file_discovery.errors import DiscoveryCancelledError
from kodu.file_discovery.types import DiscoveryConfig, FileCandidate, Matcher, SkipReason

SkipCallback = Callable[[str, SkipReason], None]


@dataclass(frozen=True)
class DirectoryListing:
    """Result of reading one directory: its entries, or the error that stopped the read."""

    path: Path
    entries: list[os.DirEntry[str]] = field(default_factory=list)
    error: OSError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def read_directory(path: Path) -> DirectoryListing:
    try:
        with os.scandir(path) as it:
            return DirectoryListing(path, list(it))
    except OSError as e:
        return DirectoryListing(path, error=e)


def _accept_listing(listing: DirectoryListing, rel_path: str, on_skip: SkipCallback | None) -> bool:
    """
    Decide whether a directory read can be used. Permission and not-found
    errors are logged and the directory is skipped; anything else is raised.
    """
    error = listing.error
    if error is None:
        return True
    display = rel_path or "."
    if isinstance(error, PermissionError):
        logger.warning(f"Permission denied reading directory {display}, skipping")
        if on_skip is not None:
            on_skip(display, SkipReason.PERMISSION_DENIED)
        return False
    if isinstance(error, FileNotFoundError):
        logger.warning(f"Directory vanished during scan: {display}")
        return False
    raise error


def walk(
    root: Path,
    matcher: Matcher,
    config: DiscoveryConfig,
    *,
    on_skip: SkipCallback | None = None,
    cancel: threading.Event | None = None,
) -> Iterator[FileCandidate]:
    """
    Walk `root` depth-first, yielding regular files that pass every exclusion
    rule. Per entry, in order: hidden names, excluded directory names,
    symlinks, the ignore matcher (directories are pruned), then the size limit.
    """
    root_listing = read_directory(root)
    if not _accept_listing(root_listing, "", on_skip):
        return

    # Stack of (relative dir, remaining entries), giving pre-order traversal
    stack: list[tuple[str, Iterator[os.DirEntry[str]]]] = [("", iter(root_listing.entries))]
    while stack:
        if cancel is not None and cancel.is_set():
            raise DiscoveryCancelledError()

        rel_dir, entries = stack[-1]
        entry = next(entries, None)
        if entry is None:
            stack.pop()
            continue

        name = entry.name
        rel_path = f"{rel_dir}/{name}" if rel_dir else name

        if name.startswith(".") and not config.include_hidden:
            continue

        try:
            if entry.is_symlink():
                logger.debug(f"Skipping symlink: {rel_path}")
                continue
            is_dir = entry.is_dir(follow_symlinks=False)
            is_file = not is_dir and entry.is_file(follow_symlinks=False)
        except (PermissionError, FileNotFoundError) as e:
            logger.warning(f"Cannot inspect {rel_path}: {e}")
            if on_skip is not None:
                on_skip(rel_path, SkipReason.UNREADABLE)
            continue

        if is_dir:
            if name in config.excluded_dirs:
                continue
            if matcher.matches_dir(rel_path):
                logger.trace(f"Pruned ignored directory: {rel_path}")
                continue
            listing = read_directory(Path(entry.path))
            if _accept_listing(listing, rel_path, on_skip):
                stack.append((rel_path, iter(listing.entries)))
            continue

        if not is_file:
            # Sockets, FIFOs, device nodes
            continue
        if matcher.matches(rel_path):
            continue

        try:
            size = entry.stat(follow_symlinks=False).st_size
        except (PermissionError, FileNotFoundError) as e:
            logger.warning(f"Cannot stat {rel_path}: {e}")
            if on_skip is not None:
                on_skip(rel_path, SkipReason.UNREADABLE)
            continue

        if config.max_file_size and size > config.max_file_size:
            logger.debug(f"Skipping {rel_path}: {size} bytes exceeds {config.max_file_size}")
            if on_skip is not None:
                on_skip(rel_path, SkipReason.TOO_LARGE)
            continue

        yield FileCandidate(absolute_path=Path(entry.path), relative_path=rel_path, size=size)
