"""Roll function coverage up to package percentages."""

from __future__ import annotations

from typing import TYPE_CHECKING

from more_itertools import map_reduce

from checkcov.core.model.coverage import FunctionCoverage, PackageCoverage
from checkcov.core.model.metrics import truncated_pct

if TYPE_CHECKING:
    from collections.abc import Iterable


def _function_sort_key(fc: FunctionCoverage) -> tuple[str, str, int, int]:
    start = fc.function.range.start if fc.function is not None else None
    return (fc.name, fc.source_path, start.line if start else 0, start.column if start else 0)


def package_coverage(package_key: str, functions: Iterable[FunctionCoverage]) -> PackageCoverage:
    """Sum *functions* into a :class:`PackageCoverage`.

    An empty package is reported as fully covered.
    """
    statements = 0
    executed = 0
    for fc in functions:
        statements += fc.statement_count
        executed += fc.covered_count
    return PackageCoverage(
        package_key=package_key,
        statement_count=statements,
        executed_count=executed,
        percent=truncated_pct(executed, statements),
    )


class CoverageAggregator:
    """Collects function coverage per package key for one analysis run.

    Packages registered without functions still appear in :meth:`packages`.
    """

    def __init__(self) -> None:
        self._packages: dict[str, list[FunctionCoverage]] = {}

    def register(self, package_key: str) -> None:
        self._packages.setdefault(package_key, [])

    def add(self, package_key: str, coverage: Iterable[FunctionCoverage]) -> None:
        self._packages.setdefault(package_key, []).extend(coverage)

    def add_all(self, entries: Iterable[tuple[str, FunctionCoverage]]) -> None:
        for key, functions in map_reduce(entries, keyfunc=lambda e: e[0], valuefunc=lambda e: e[1]).items():
            self.add(key, functions)

    @property
    def package_keys(self) -> list[str]:
        return sorted(self._packages)

    def functions(self, package_key: str) -> list[FunctionCoverage]:
        """Return the functions of *package_key* ordered by name, file and position."""
        return sorted(self._packages.get(package_key, ()), key=_function_sort_key)

    def packages(self) -> list[PackageCoverage]:
        """Return package coverage sorted by package key."""
        return [package_coverage(key, self._packages[key]) for key in self.package_keys]


__all__ = ["CoverageAggregator", "package_coverage"]
