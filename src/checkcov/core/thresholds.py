"""Verify package coverage against configured minimums."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from checkcov._meta import logger
from checkcov.core.config import ThresholdConfig
from checkcov.core.model.metrics import truncated_pct
from checkcov.errors import LookupMiss

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from checkcov.core.model.coverage import FunctionCoverage, PackageCoverage


def format_number(value: float) -> str:
    """Shortest round-trip form of *value* without a trailing ``.0``."""
    text = repr(float(value))
    return text.removesuffix(".0")


def package_line(package: PackageCoverage, minimum: float) -> str:
    return (
        f"pkg {package.package_key} coverage {format_number(package.percent)}% "
        f"minimum {format_number(minimum)}% "
        f"statements {package.executed_count}/{package.statement_count}"
    )


def function_line(function: FunctionCoverage) -> str:
    percent = truncated_pct(function.covered_count, function.statement_count)
    return (
        f"function {function.name} has {function.statement_count} statements "
        f"of which {function.covered_count} were executed "
        f"for a percent of {format_number(percent)}"
    )


@dataclass(frozen=True, slots=True)
class PackageOutcome:
    """Verification result for one package."""

    package: PackageCoverage
    minimum: float
    passed: bool
    functions: tuple[FunctionCoverage, ...] = ()


@dataclass(frozen=True, slots=True)
class VerificationResult:
    """Outcome of verifying every package of a run."""

    passed: bool
    outcomes: tuple[PackageOutcome, ...]
    lines: tuple[str, ...]

    @property
    def failures(self) -> tuple[PackageOutcome, ...]:
        return tuple(o for o in self.outcomes if not o.passed)


class ThresholdVerifier:
    """Compare package percentages with their minimums.

    The minimum of a package is its exact-name entry in *config*; otherwise
    ``default_minimum``, then the config file's own default, then ``0``.
    """

    def __init__(
        self,
        config: ThresholdConfig | None = None,
        *,
        default_minimum: float | None = None,
        print_functions: bool = False,
    ) -> None:
        self.config = config or ThresholdConfig()
        self.print_functions = print_functions
        if default_minimum is not None:
            self.default_minimum = float(default_minimum)
        elif self.config.min_coverage_percent is not None:
            self.default_minimum = self.config.min_coverage_percent
        else:
            self.default_minimum = 0.0

    def minimum_for(self, package_key: str) -> float:
        try:
            return self.config.package(package_key).min_coverage_percent
        except LookupMiss:
            logger.debug("package %s has no configured minimum; using %s", package_key, self.default_minimum)
            return self.default_minimum

    def check(self, package: PackageCoverage) -> tuple[float, bool]:
        """Return ``(minimum, passed)`` for *package*; equality passes."""
        minimum = self.minimum_for(package.package_key)
        return minimum, not (package.percent < minimum)

    def verify(
        self,
        packages: Sequence[PackageCoverage],
        functions: Mapping[str, Sequence[FunctionCoverage]] | None = None,
    ) -> VerificationResult:
        """Evaluate and report every package before signalling failure."""
        outcomes: list[PackageOutcome] = []
        lines: list[str] = []
        for package in packages:
            minimum, passed = self.check(package)
            members = tuple((functions or {}).get(package.package_key, ()))
            if self.print_functions:
                lines.extend(function_line(fc) for fc in members)
            lines.append(package_line(package, minimum))
            if not passed:
                logger.debug(
                    "package %s coverage %s%% is below minimum %s%%",
                    package.package_key,
                    format_number(package.percent),
                    format_number(minimum),
                )
            outcomes.append(PackageOutcome(package=package, minimum=minimum, passed=passed, functions=members))
        return VerificationResult(
            passed=all(o.passed for o in outcomes),
            outcomes=tuple(outcomes),
            lines=tuple(lines),
        )


__all__ = [
    "PackageOutcome",
    "ThresholdVerifier",
    "VerificationResult",
    "format_number",
    "function_line",
    "package_line",
]
