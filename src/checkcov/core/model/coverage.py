"""Statement, function and package coverage records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from checkcov.core.model.positions import Range


@dataclass(frozen=True, slots=True)
class Statement:
    """One atomic executable unit and its accumulated hit count."""

    range: Range
    executed_count: int = 0


@dataclass(frozen=True, slots=True)
class Function:
    """A top-level function or method with its statements in traversal order."""

    name: str
    source_path: str
    range: Range
    statements: tuple[Statement, ...] = ()


@dataclass(frozen=True, slots=True)
class CoverageBlock:
    """A profile block: a source range, its declared statement count and hits."""

    range: Range
    statement_count: int
    hit_count: int


@dataclass(frozen=True, slots=True)
class FileProfile:
    """All blocks recorded for one file in a coverage profile."""

    file_name: str
    mode: str
    blocks: tuple[CoverageBlock, ...] = ()


@dataclass(frozen=True, slots=True)
class FunctionCoverage:
    """Reconciled statement/covered counts for one function."""

    name: str
    source_path: str
    statement_count: int
    covered_count: int
    function: Function | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class PackageCoverage:
    """Aggregated counts and truncated percentage for one package."""

    package_key: str
    statement_count: int
    executed_count: int
    percent: float


__all__ = [
    "CoverageBlock",
    "FileProfile",
    "Function",
    "FunctionCoverage",
    "PackageCoverage",
    "Statement",
]
