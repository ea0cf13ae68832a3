from __future__ import annotations

import sys
from io import StringIO
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.table import Table

from checkcov.core.model.metrics import truncated_pct
from checkcov.core.thresholds import format_number

if TYPE_CHECKING:
    from collections.abc import Sequence

    from checkcov.core.model.report import CheckReport
    from checkcov.core.thresholds import PackageOutcome

_HEADERS = ("Package", "Coverage", "Minimum", "Statements", "Status")
_FUNCTION_HEADERS = ("Function", "File", "Coverage", "Statements")


def _render_table(table: Table, *, color: bool) -> str:
    buf = StringIO()
    console = Console(
        file=buf,
        force_terminal=color,
        width=sys.maxsize,
        color_system="standard" if color else None,
        no_color=not color,
    )
    console.print(table)
    return buf.getvalue().rstrip()


def format_table(headers: Sequence[str], rows: Sequence[Sequence[Any]], *, color: bool = False) -> str:
    """Render a Rich table captured to text."""
    if not headers or not rows:
        return ""
    table = Table(show_header=True, header_style="bold")
    for h in headers:
        table.add_column(h, justify="right")

    # Left-align the label column
    table.columns[0].justify = "left"

    for r in rows:
        table.add_row(*[str(v) for v in r])
    return _render_table(table, color=color)


def _status(outcome: PackageOutcome, *, color: bool) -> str:
    if outcome.passed:
        return "[green]ok[/green]" if color else "ok"
    return "[red]FAIL[/red]" if color else "FAIL"


def _package_row(outcome: PackageOutcome, *, color: bool) -> tuple[str, ...]:
    pkg = outcome.package
    return (
        pkg.package_key,
        f"{format_number(pkg.percent)}%",
        f"{format_number(outcome.minimum)}%",
        f"{pkg.executed_count}/{pkg.statement_count}",
        _status(outcome, color=color),
    )


def render_table(report: CheckReport, *, color: bool = False, show_functions: bool = False) -> str:
    """Render package outcomes (and optionally functions) as Rich tables."""
    rows = [_package_row(o, color=color) for o in report.outcomes]
    parts = [format_table(_HEADERS, rows, color=color)]

    if show_functions:
        fn_rows = [
            (
                fc.name,
                fc.source_path,
                f"{format_number(truncated_pct(fc.covered_count, fc.statement_count))}%",
                f"{fc.covered_count}/{fc.statement_count}",
            )
            for o in report.outcomes
            for fc in o.functions
        ]
        if fn_rows:
            parts.append(format_table(_FUNCTION_HEADERS, fn_rows, color=color))

    return "\n\n".join(p for p in parts if p)


__all__ = ["format_table", "render_table"]
