"""Expansion of configured device patterns into device-file paths."""

from __future__ import annotations

import logging
import os
import re
import stat
from collections.abc import Iterable, Iterator
from fnmatch import fnmatchcase
from pathlib import Path

from loudspin.core.errors import DevicePatternError
from loudspin.core.model import MatchError

_MAGIC_RE = re.compile(r"[*?[]")
_RECURSIVE = "**"
LOGGER = logging.getLogger(__name__)


def _split_pattern(pattern: str) -> tuple[Path, list[str]]:
    if pattern.startswith("/"):
        return Path("/"), [part for part in pattern.split("/") if part]
    return Path(), [part for part in pattern.split("/") if part]


def _check_segment(segment: str) -> None:
    if "***" in segment:
        raise ValueError("wildcards are either regular `*` or recursive `**`")
    if _RECURSIVE in segment and segment != _RECURSIVE:
        raise ValueError("recursive wildcards must form a single path component")

    index = 0
    while index < len(segment):
        if segment[index] != "[":
            index += 1
            continue
        end = index + 1
        if end < len(segment) and segment[end] == "!":
            end += 1
        # A ']' right after the opening bracket is a literal member.
        if end < len(segment) and segment[end] == "]":
            end += 1
        close = segment.find("]", end)
        if close == -1:
            raise ValueError("unclosed character class")
        index = close + 1


def check_pattern(pattern: str) -> None:
    """Reject patterns with malformed wildcards or character classes."""
    for segment in _split_pattern(pattern)[1]:
        try:
            _check_segment(segment)
        except ValueError as exc:
            raise DevicePatternError("error listing device files") from ValueError(
                f'invalid pattern "{pattern}": {exc}'
            )


def _scan(directory: Path) -> list[str]:
    with os.scandir(directory) as entries:
        return sorted(entry.name for entry in entries)


def _is_directory(path: Path, *, follow_symlinks: bool = True) -> bool:
    try:
        mode = path.stat(follow_symlinks=follow_symlinks).st_mode
    except (FileNotFoundError, NotADirectoryError):
        return False
    return stat.S_ISDIR(mode)


def _walk(base: Path, parts: list[str]) -> Iterator[Path | MatchError]:
    if not parts:
        yield base
        return

    head, rest = parts[0], parts[1:]

    if not _MAGIC_RE.search(head):
        candidate = base / head
        if not rest:
            if os.path.lexists(candidate):
                yield candidate
            return
        try:
            is_dir = _is_directory(candidate)
        except OSError as exc:
            yield MatchError(path=candidate, error=exc)
            return
        if is_dir:
            yield from _walk(candidate, rest)
        return

    if head == _RECURSIVE:
        yield from _walk_recursive(base, parts)
        return

    try:
        names = _scan(base)
    except OSError as exc:
        yield MatchError(path=base, error=exc)
        return

    for name in names:
        if name.startswith(".") and not head.startswith("."):
            continue
        if not fnmatchcase(name, head):
            continue
        candidate = base / name
        if not rest:
            yield candidate
            continue
        try:
            is_dir = _is_directory(candidate)
        except OSError as exc:
            yield MatchError(path=candidate, error=exc)
            continue
        if is_dir:
            yield from _walk(candidate, rest)


def _walk_recursive(base: Path, parts: list[str]) -> Iterator[Path | MatchError]:
    # "**" matches base itself, then every non-hidden subdirectory below it.
    # Symlinked directories are not descended into.
    yield from _walk(base, parts[1:])

    try:
        names = _scan(base)
    except OSError as exc:
        yield MatchError(path=base, error=exc)
        return

    for name in names:
        if name.startswith("."):
            continue
        candidate = base / name
        try:
            is_dir = _is_directory(candidate, follow_symlinks=False)
        except OSError as exc:
            yield MatchError(path=candidate, error=exc)
            continue
        if is_dir:
            yield from _walk_recursive(candidate, parts)


def expand(pattern: str) -> Iterator[Path | MatchError]:
    """Lazily expand a glob-style pattern into existing paths.

    Wildcards match inside a single path segment and skip names with a
    leading dot unless the segment itself starts with one. A whole-segment
    ``**`` matches the current directory and all subdirectories. Entries are
    visited in sorted order. A directory or candidate that cannot be read is
    yielded as a MatchError instead of ending the expansion; a malformed
    pattern raises DevicePatternError.
    """
    check_pattern(pattern)
    base, parts = _split_pattern(pattern)
    yield from _walk(base, parts)


def expand_all(patterns: Iterable[str]) -> Iterator[Path | MatchError]:
    for pattern in patterns:
        LOGGER.debug('processing glob "%s"', pattern)
        yield from expand(pattern)
