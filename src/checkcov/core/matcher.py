"""Reconcile extracted statements with coverage profile blocks."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from checkcov._meta import logger
from checkcov.core.model.coverage import Function, FunctionCoverage
from checkcov.core.model.positions import overlaps

if TYPE_CHECKING:
    from collections.abc import Sequence

    from checkcov.core.model.coverage import CoverageBlock


def record_statement_coverage(function: Function, blocks: Sequence[CoverageBlock]) -> Function:
    """Return a copy of *function* whose statements carry accumulated hit counts.

    Matching is cumulative: a statement split across several blocks gets the
    hits of every block it overlaps.
    """
    statements = tuple(
        replace(
            stmt,
            executed_count=stmt.executed_count
            + sum(block.hit_count for block in blocks if overlaps(block.range, stmt.range)),
        )
        for stmt in function.statements
    )
    return replace(function, statements=statements)


def record_function_coverage(
    function: Function, blocks: Sequence[CoverageBlock] | None
) -> FunctionCoverage:
    """Return the statement and covered counts of *function*.

    Counts come from the declared statement counts of the blocks overlapping
    the function. When the profile has nothing for the function (``blocks``
    is ``None`` or no block overlaps) the extracted statements are counted
    instead, none of them covered.
    """
    block_total = 0
    block_covered = 0
    if blocks is not None:
        function = record_statement_coverage(function, blocks)
        for block in blocks:
            if not overlaps(block.range, function.range):
                continue
            block_total += block.statement_count
            if block.hit_count > 0:
                block_covered += block.statement_count

    ast_total = len(function.statements)
    statement_count = block_total
    if block_total != ast_total:
        logger.debug(
            "function %s statement counts don't match profile: %d AST: %d",
            function.name,
            block_total,
            ast_total,
        )
        if block_total == 0 and ast_total > 0:
            statement_count = ast_total

    return FunctionCoverage(
        name=function.name,
        source_path=function.source_path,
        statement_count=statement_count,
        covered_count=block_covered,
        function=function,
    )


def record_file_coverage(
    functions: Sequence[Function], blocks: Sequence[CoverageBlock] | None
) -> list[FunctionCoverage]:
    """Apply :func:`record_function_coverage` to every function of one file."""
    return [record_function_coverage(fn, blocks) for fn in functions]


__all__ = ["record_file_coverage", "record_function_coverage", "record_statement_coverage"]
