from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from checkcov.core.model.report import CheckReport


def render_text(report: CheckReport) -> str:
    """One verifier line per package (function lines first when requested)."""
    return "\n".join(report.lines)


__all__ = ["render_text"]
