from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from checkcov.render.json import format_json
from checkcov.render.table import render_table
from checkcov.render.text import render_text

if TYPE_CHECKING:
    from checkcov.core.model.report import CheckReport


class OutputFormat(StrEnum):
    TEXT = "text"
    TABLE = "table"
    JSON = "json"


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Options that affect *presentation* only (not report content)."""

    color: bool = False
    show_functions: bool = False


def render(report: CheckReport, *, fmt: str, options: RenderOptions) -> str:
    """Render a report to text.

    Parameters
    ----------
    report:
        Verified report.
    fmt:
        One of: "text", "table", "json".
    options:
        Presentation options.
    """
    f = (fmt or "").strip().lower()

    if f == OutputFormat.TEXT:
        return render_text(report)
    if f == OutputFormat.TABLE:
        return render_table(report, color=options.color, show_functions=options.show_functions)
    if f == OutputFormat.JSON:
        return format_json(report, with_functions=options.show_functions)
    choices = ", ".join(m.value for m in OutputFormat)
    msg = f"Unsupported format: {fmt!r}. Expected one of: {choices}."
    raise ValueError(msg)


__all__ = ["OutputFormat", "RenderOptions", "render"]
