"""
TOML-based config file loading for kodu.

Searches for `.kodu.toml`, `kodu.toml`, or `pyproject.toml [tool.kodu]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

from loguru import logger

from kodu.file_discovery import DiscoveryConfig, MatcherEngine

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


class ConfigError(ValueError):
    """A config file exists but cannot be parsed or has invalid values."""


@dataclass
class KoduConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    allowing the merge logic to distinguish "not configured" from "explicitly set
    to default value".
    """

    ignore: list[str] | None = None
    extend_ignore: list[str] | None = None
    use_gitignore: bool | None = None
    content_sniffing: bool | None = None
    max_file_size: int | None = None
    include_hidden: bool | None = None
    ranking: bool | None = None
    max_workers: int | None = None
    engine: str | None = None

    def to_discovery_config(self, tool_name: str = "kodu") -> DiscoveryConfig:
        """A `DiscoveryConfig` with configured values over the built-in defaults."""
        config = DiscoveryConfig(tool_name=tool_name)
        for cfg_field in fields(self):
            value = getattr(self, cfg_field.name)
            if value is None:
                continue
            if cfg_field.name == "engine":
                value = parse_engine(value)
            setattr(config, cfg_field.name, value)
        return config


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".kodu.toml", "kodu.toml", "pyproject.toml"]

# Mapping from TOML kebab-case keys to Python snake_case field names
_KEBAB_TO_SNAKE: dict[str, str] = {
    "extend-ignore": "extend_ignore",
    "use-gitignore": "use_gitignore",
    "content-sniffing": "content_sniffing",
    "max-file-size": "max_file_size",
    "include-hidden": "include_hidden",
    "max-workers": "max_workers",
}

_VALID_FIELDS = {f.name for f in fields(KoduConfig)}


def parse_engine(value: str) -> MatcherEngine:
    try:
        return MatcherEngine(value)
    except ValueError:
        choices = ", ".join(e.value for e in MatcherEngine)
        raise ConfigError(f"Invalid engine {value!r} (expected one of: {choices})") from None


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.kodu.toml` >
    `kodu.toml` > `pyproject.toml` (only if it has `[tool.kodu]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    # Only use pyproject.toml if it has [tool.kodu]
                    if _pyproject_has_kodu_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_kodu_section(path: Path) -> bool:
    """Check if a pyproject.toml has a [tool.kodu] section."""
    try:
        data = tomllib.loads(path.read_text())
        return "kodu" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> KoduConfig:
    """
    Load a `KoduConfig` from a TOML file. Supports both standalone
    `kodu.toml` / `.kodu.toml` and `pyproject.toml` (extracts
    `[tool.kodu]`). TOML kebab-case keys are mapped to Python snake_case.
    Malformed TOML yields an empty config; a value of the wrong type raises
    `ConfigError`.
    """
    try:
        data = tomllib.loads(config_path.read_text())
    except tomllib.TOMLDecodeError as e:
        logger.warning(f"Ignoring malformed config file {config_path}: {e}")
        return KoduConfig()

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("kodu", {})

    logger.debug(f"Loaded config from {config_path}")
    return _parse_config_data(data)


def _parse_config_data(data: dict[str, Any]) -> KoduConfig:
    """Parse a flat or sectioned TOML dict into KoduConfig."""
    # Flatten sections: [discovery] merges into top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    # Map kebab-case to snake_case
    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = _KEBAB_TO_SNAKE.get(key, key.replace("-", "_"))
        if snake_key in _VALID_FIELDS:
            mapped[snake_key] = value
        else:
            logger.warning(f"Unknown config key: {key}")

    for key, value in mapped.items():
        _check_value(key, value)
    if "engine" in mapped:
        parse_engine(mapped["engine"])
    return KoduConfig(**mapped)


_LIST_FIELDS = {"ignore", "extend_ignore"}
_BOOL_FIELDS = {"use_gitignore", "content_sniffing", "include_hidden", "ranking"}
_INT_FIELDS = {"max_file_size": 0, "max_workers": 1}  # field -> minimum


def _check_value(key: str, value: Any) -> None:
    """Raise `ConfigError` if a config value does not have its field's type."""
    if key in _LIST_FIELDS:
        if not isinstance(value, list) or not all(
            isinstance(item, str) for item in cast(list[Any], value)
        ):
            raise ConfigError(f"Config key {key!r} must be a list of strings, got {value!r}")
    elif key in _BOOL_FIELDS:
        if not isinstance(value, bool):
            raise ConfigError(f"Config key {key!r} must be true or false, got {value!r}")
    elif key in _INT_FIELDS:
        minimum = _INT_FIELDS[key]
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
            raise ConfigError(f"Config key {key!r} must be an integer >= {minimum}, got {value!r}")
    elif key == "engine" and not isinstance(value, str):
        raise ConfigError(f"Config key 'engine' must be a string, got {value!r}")


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: KoduConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(KoduConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue  # Not set in config

        # Skip if CLI explicitly set this flag
        if cfg_field.name in explicit_flags:
            continue

        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
