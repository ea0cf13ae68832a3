from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from checkcov.core.thresholds import PackageOutcome, VerificationResult

# -----------------------------------------------------------------------------
# Report surface model (what renderers + JSON output consume)
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ReportMeta:
    """Inputs the report was built from (schema: meta)."""

    source_root: str
    profile: str
    mode: str | None = None
    skipped_files: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class CheckReport:
    meta: ReportMeta
    verification: VerificationResult

    @property
    def passed(self) -> bool:
        return self.verification.passed

    @property
    def outcomes(self) -> tuple[PackageOutcome, ...]:
        return self.verification.outcomes

    @property
    def lines(self) -> tuple[str, ...]:
        """Verifier lines in emission order."""
        return self.verification.lines


__all__ = ["CheckReport", "ReportMeta"]
