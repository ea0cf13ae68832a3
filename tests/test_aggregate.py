from checkcov.core.aggregate import CoverageAggregator, package_coverage
from checkcov.core.model.coverage import FunctionCoverage, PackageCoverage


def fc(name: str, total: int, covered: int, path: str = "pkg/a.go") -> FunctionCoverage:
    return FunctionCoverage(name=name, source_path=path, statement_count=total, covered_count=covered)


def test_package_percent_is_truncated() -> None:
    assert package_coverage("pkg", [fc("A", 2, 1), fc("B", 1, 0)]) == PackageCoverage(
        package_key="pkg", statement_count=3, executed_count=1, percent=33.33
    )


def test_empty_package_is_fully_covered() -> None:
    assert package_coverage("empty", []).percent == 100.0


def test_registered_packages_without_functions_are_reported() -> None:
    agg = CoverageAggregator()
    agg.register("b/empty")
    agg.add("a", [fc("Z", 4, 4, "a/z.go"), fc("A", 4, 0, "a/a.go")])
    assert agg.package_keys == ["a", "b/empty"]
    assert [(p.package_key, p.percent) for p in agg.packages()] == [("a", 50.0), ("b/empty", 100.0)]
    assert [f.name for f in agg.functions("a")] == ["A", "Z"]
    assert agg.functions("missing") == []


def test_add_all_groups_by_package() -> None:
    agg = CoverageAggregator()
    agg.add_all([("x", fc("A", 1, 1)), ("y", fc("B", 2, 0)), ("x", fc("C", 1, 0))])
    assert [(p.package_key, p.statement_count, p.executed_count) for p in agg.packages()] == [
        ("x", 2, 1),
        ("y", 2, 0),
    ]
