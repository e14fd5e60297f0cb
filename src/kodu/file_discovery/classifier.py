"""Text/binary classification by extension tables and content sniffing."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from loguru import logger

from kodu.file_discovery.defaults import (
    BINARY_EXTENSIONS,
    BINARY_SIGNATURES,
    SNIFF_BYTES,
    TEXT_EXTENSIONS,
    TEXT_FILENAMES,
)
from kodu.file_discovery.types import Classification, SkipReason

TEXT = Classification(binary=False)
BINARY = Classification(binary=True, skip_reason=SkipReason.BINARY)
UNREADABLE = Classification(binary=True, skip_reason=SkipReason.UNREADABLE)


def _extension(name: str) -> str:
    return PurePosixPath(name).suffix.lower()


def is_known_text(name: str) -> bool:
    return name in TEXT_FILENAMES or _extension(name) in TEXT_EXTENSIONS


def is_known_binary(name: str) -> bool:
    return _extension(name) in BINARY_EXTENSIONS


def sniff_is_binary(data: bytes) -> bool:
    """True if a byte prefix contains a NUL byte or starts with a binary signature."""
    if b"\x00" in data:
        return True
    return any(data.startswith(sig) for sig in BINARY_SIGNATURES)


def classify(relative_path: str, absolute_path: Path, content_sniffing: bool) -> Classification:
    """
    Decide whether a file is binary. The first decisive check wins:

    1. known-text extension or basename: text
    2. known-binary extension: binary
    3. sniffing disabled: text
    4. first `SNIFF_BYTES` bytes contain NUL or a binary signature: binary

    A file that cannot be read while sniffing is reported as unreadable and
    treated as binary.
    """
    name = PurePosixPath(relative_path).name
    if is_known_text(name):
        return TEXT
    if is_known_binary(name):
        return BINARY
    if not content_sniffing:
        return TEXT

    try:
        with open(absolute_path, "rb") as f:
            data = f.read(SNIFF_BYTES)
    except OSError as e:
        logger.debug(f"Cannot read {relative_path} for sniffing: {e}")
        return UNREADABLE
    return BINARY if sniff_is_binary(data) else TEXT
