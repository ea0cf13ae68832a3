"""Reader for ``go test -coverprofile`` output.

The format is one ``mode: <set|count|atomic>`` header followed by lines of::

    <file>:<startLine>.<startCol>,<endLine>.<endCol> <numStmt> <count>
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from checkcov._meta import logger
from checkcov.core.model.coverage import CoverageBlock, FileProfile
from checkcov.core.model.positions import Range
from checkcov.errors import NoInputError, ProfileFormatError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

MODES = frozenset({"set", "count", "atomic"})

_MODE_RE = re.compile(r"^mode:\s*(\S+)\s*$")
_LINE_RE = re.compile(r"^(?P<file>.*):(\d+)\.(\d+),(\d+)\.(\d+) (\d+) (\d+)$")


def _parse_mode(line: str, *, source: str, lineno: int) -> str:
    match = _MODE_RE.match(line)
    if match is None:
        msg = f"bad mode line: {line!r}"
        raise ProfileFormatError(source, msg, lineno=lineno)
    mode = match.group(1)
    if mode not in MODES:
        msg = f"unknown counting mode {mode!r} (expected one of: {', '.join(sorted(MODES))})"
        raise ProfileFormatError(source, msg, lineno=lineno)
    return mode


def _parse_block(line: str, *, source: str, lineno: int) -> tuple[str, CoverageBlock]:
    match = _LINE_RE.match(line)
    if match is None:
        msg = f"line {line!r} doesn't match expected format: file:start.col,end.col numStmt count"
        raise ProfileFormatError(source, msg, lineno=lineno)
    file_name = match.group("file")
    if not file_name.strip():
        raise ProfileFormatError(source, "profile block has a blank file name", lineno=lineno)
    start_line, start_col, end_line, end_col, num_stmt, count = (int(g) for g in match.groups()[1:])
    block_range = Range.of(start_line, start_col, end_line, end_col)
    if block_range.end < block_range.start:
        msg = f"block ends before it starts: {block_range}"
        raise ProfileFormatError(source, msg, lineno=lineno)
    return file_name, CoverageBlock(range=block_range, statement_count=num_stmt, hit_count=count)


def merge_blocks(
    existing: CoverageBlock, new: CoverageBlock, *, mode: str, source: str, lineno: int | None = None
) -> CoverageBlock:
    """Combine two records of the same block: ``set`` keeps the max hit, other modes sum."""
    if existing.statement_count != new.statement_count:
        msg = (
            f"inconsistent statement count for block {new.range}: "
            f"{existing.statement_count} != {new.statement_count}"
        )
        raise ProfileFormatError(source, msg, lineno=lineno)
    if mode == "set":
        hits = max(existing.hit_count, new.hit_count)
    else:
        hits = existing.hit_count + new.hit_count
    return CoverageBlock(range=new.range, statement_count=new.statement_count, hit_count=hits)


def parse_profile_lines(lines: Iterable[str], *, source: str = "<profile>") -> list[FileProfile]:
    """Parse profile *lines* into per-file profiles sorted by file name.

    Repeated blocks (same file and range, as produced when profiles of
    several test binaries are concatenated) are merged.
    """
    mode: str | None = None
    by_file: dict[str, dict[Range, CoverageBlock]] = {}

    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            continue
        if mode is None:
            mode = _parse_mode(line, source=source, lineno=lineno)
            continue
        if line.startswith("mode:"):
            # Concatenated profiles repeat the header.
            if _parse_mode(line, source=source, lineno=lineno) != mode:
                raise ProfileFormatError(source, "conflicting counting modes", lineno=lineno)
            continue
        file_name, block = _parse_block(line, source=source, lineno=lineno)
        blocks = by_file.setdefault(file_name, {})
        seen = blocks.get(block.range)
        blocks[block.range] = (
            block if seen is None else merge_blocks(seen, block, mode=mode, source=source, lineno=lineno)
        )

    if mode is None:
        raise ProfileFormatError(source, "profile is empty: missing mode line")

    profiles = [
        FileProfile(
            file_name=name,
            mode=mode,
            blocks=tuple(sorted(blocks.values(), key=lambda b: (b.range.start, b.range.end))),
        )
        for name, blocks in sorted(by_file.items())
    ]
    logger.debug("%s: %d files in %s-mode profile", source, len(profiles), mode)
    return profiles


def read_profile(path: Path) -> list[FileProfile]:
    """Read and parse the coverage profile at *path*."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        msg = f"coverage profile not found: {path}"
        raise NoInputError(msg) from exc
    except UnicodeDecodeError as exc:
        msg = f"profile is not valid UTF-8 (byte {exc.start})"
        raise ProfileFormatError(str(path), msg) from exc
    return parse_profile_lines(text.splitlines(), source=str(path))


__all__ = ["MODES", "merge_blocks", "parse_profile_lines", "read_profile"]
