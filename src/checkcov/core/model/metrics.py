from __future__ import annotations

FULL_COVERAGE = 100.0

# Percentages keep two decimals: floor(ratio * 10000) / 100.
_SCALE = 10000


def truncated_pct(covered: int, total: int) -> float:
    """Return ``covered / total`` as a percentage truncated to two decimals.

    Defaults to :data:`FULL_COVERAGE` when nothing is countable. Integer
    arithmetic keeps values like 29/100 from flooring to 28.99.
    """
    if total <= 0:
        return FULL_COVERAGE
    covered = max(0, min(covered, total))
    return (covered * _SCALE // total) / 100


__all__ = ["FULL_COVERAGE", "truncated_pct"]
