#!/usr/bin/env python3
"""
kodu-files: list the project files that kodu tools operate on

Common usage:
  kodu-files .
  kodu-files --ranked --scores .
  kodu-files --extend-ignore 'fixtures/' --show-skipped src/

Ignore sources, in order: built-in defaults (or --ignore), the root .gitignore,
.koduignore (searched upward from the root), and --extend-ignore patterns.
Settings can also come from .kodu.toml, kodu.toml, or [tool.kodu] in pyproject.toml.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import sys
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from kodu.config import ConfigError, find_config_file, load_config, merge_cli_with_config, parse_engine
from kodu.file_discovery import DiscoveryConfig, DiscoveryError, FileDiscovery, InvalidRootError, MatcherEngine
from kodu.logs import configure_logging


@dataclass
class Options:
    """Command-line options for the kodu-files tool."""

    root: str
    ignore: list[str] | None
    extend_ignore: list[str]
    use_gitignore: bool
    content_sniffing: bool
    max_file_size: int
    include_hidden: bool
    ranking: bool
    max_workers: int
    engine: str
    scores: bool
    show_skipped: bool
    verbose: bool
    quiet: bool
    version: bool


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns a tuple of (options, explicit_flags) where `explicit_flags`
    tracks which flags the user explicitly passed (for config merge precedence).
    """
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "root",
        nargs="?",
        type=str,
        default=".",
        help="Project root directory (default: current directory)",
    )
    parser.add_argument(
        "--ranked",
        action="store_true",
        dest="ranking",
        help="Order files by priority (manifests and docs first, tests last) instead of by path",
    )
    parser.add_argument(
        "--scores",
        action="store_true",
        help="Print the priority score and size in bytes before each path (implies --ranked)",
    )
    parser.add_argument(
        "--ignore",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Replace the built-in ignore patterns. Can be repeated",
    )
    parser.add_argument(
        "--extend-ignore",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Add ignore patterns (e.g., 'fixtures/'). Can be repeated",
    )
    parser.add_argument(
        "--no-gitignore",
        action="store_true",
        dest="no_gitignore",
        help="Do not read the root .gitignore",
    )
    parser.add_argument(
        "--content-sniffing",
        action="store_true",
        dest="content_sniffing",
        help="Detect binary files by content when the extension is unknown",
    )
    parser.add_argument(
        "--max-file-size",
        type=int,
        default=1_048_576,
        dest="max_file_size",
        metavar="BYTES",
        help="Skip files larger than this size in bytes (0 = no limit, default: %(default)s)",
    )
    parser.add_argument(
        "--include-hidden",
        action="store_true",
        dest="include_hidden",
        help="Include files and directories whose names start with '.'",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        dest="max_workers",
        metavar="N",
        help="Classify files on N worker threads (default: %(default)s)",
    )
    parser.add_argument(
        "--engine",
        type=str,
        choices=[e.value for e in MatcherEngine],
        default=MatcherEngine.GLOB.value,
        help="Ignore matching engine: 'glob' drops !negations, 'gitignore' honors them "
        "(default: %(default)s)",
    )
    parser.add_argument(
        "--show-skipped",
        action="store_true",
        dest="show_skipped",
        help="Report skipped files (too large, binary, unreadable) on stderr",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    # Re-parse with sentinel defaults to detect which flags were actually supplied,
    # rather than comparing against default values.
    _SENTINEL = object()
    _tracked_flags: dict[str, str] = {
        # argparse dest name -> Options field name
        "ranking": "ranking",
        "ignore": "ignore",
        "extend_ignore": "extend_ignore",
        "no_gitignore": "use_gitignore",
        "content_sniffing": "content_sniffing",
        "max_file_size": "max_file_size",
        "include_hidden": "include_hidden",
        "max_workers": "max_workers",
        "engine": "engine",
    }
    sentinel_parser = argparse.ArgumentParser(add_help=False)
    sentinel_parser.add_argument("--ranked", dest="ranking", action="store_true", default=_SENTINEL)
    sentinel_parser.add_argument("--ignore", action="append", default=None)
    sentinel_parser.add_argument("--extend-ignore", action="append", default=None)
    sentinel_parser.add_argument(
        "--no-gitignore", dest="no_gitignore", action="store_true", default=_SENTINEL
    )
    sentinel_parser.add_argument(
        "--content-sniffing", dest="content_sniffing", action="store_true", default=_SENTINEL
    )
    sentinel_parser.add_argument(
        "--max-file-size", type=int, dest="max_file_size", default=_SENTINEL
    )
    sentinel_parser.add_argument(
        "--include-hidden", dest="include_hidden", action="store_true", default=_SENTINEL
    )
    sentinel_parser.add_argument("--workers", type=int, dest="max_workers", default=_SENTINEL)
    sentinel_parser.add_argument("--engine", type=str, default=_SENTINEL)
    sentinel_opts, _ = sentinel_parser.parse_known_args(args if args is not None else sys.argv[1:])

    explicit_flags: set[str] = set()
    for dest_name, field_name in _tracked_flags.items():
        val = getattr(sentinel_opts, dest_name, _SENTINEL)
        # For append actions, None means not supplied; a list means supplied
        if dest_name in ("ignore", "extend_ignore"):
            if val is not None:
                explicit_flags.add(field_name)
        elif val is not _SENTINEL:
            explicit_flags.add(field_name)

    return (
        Options(
            root=opts.root,
            ignore=opts.ignore,
            extend_ignore=opts.extend_ignore,
            use_gitignore=not opts.no_gitignore,
            content_sniffing=opts.content_sniffing,
            max_file_size=opts.max_file_size,
            include_hidden=opts.include_hidden,
            ranking=opts.ranking,
            max_workers=opts.max_workers,
            engine=opts.engine,
            scores=opts.scores,
            show_skipped=opts.show_skipped,
            verbose=opts.verbose,
            quiet=opts.quiet,
            version=opts.version,
        ),
        explicit_flags,
    )


def _discovery_config(options: Options) -> DiscoveryConfig:
    return DiscoveryConfig(
        ignore=options.ignore,
        extend_ignore=options.extend_ignore,
        use_gitignore=options.use_gitignore,
        content_sniffing=options.content_sniffing,
        max_file_size=options.max_file_size,
        include_hidden=options.include_hidden,
        ranking=options.ranking,
        max_workers=options.max_workers,
        engine=parse_engine(options.engine),
    )


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the kodu-files CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    options, explicit_flags = _parse_args(args)
    configure_logging(verbose=options.verbose, quiet=options.quiet)

    # Display version information if requested
    if options.version:
        try:
            version = importlib.metadata.version("kodu")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    try:
        # Config is searched from the project root, not the working directory
        root = Path(options.root)
        config_path = find_config_file(root if root.is_dir() else Path.cwd())
        if config_path:
            merge_cli_with_config(options, load_config(config_path), explicit_flags)
        if options.scores:
            options.ranking = True
        discovery = FileDiscovery(_discovery_config(options))
        result = discovery.discover(root)
    except (InvalidRootError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130
    except (DiscoveryError, OSError) as e:
        logger.opt(exception=e).debug("Discovery failed")
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if options.scores:
        for scored in result.scored:
            print(f"{scored.score}\t{scored.size}\t{scored.path}")
    else:
        for path in result.files:
            print(path)

    if options.show_skipped:
        for skipped in result.skipped:
            print(f"skipped: {skipped.path} ({skipped.reason.value})", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
