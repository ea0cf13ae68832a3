from pathlib import Path

import pytest

from checkcov.errors import LookupMiss, NoInputError
from checkcov.inputs.discover import (
    ProfileIndex,
    SourceFile,
    discover_sources,
    read_module_path,
    resolve_source_root,
)

GO = "package p\n"


def make_tree(root: Path, names: list[str]) -> None:
    for name in names:
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(GO, encoding="utf-8")


def test_discover_sources_skips_tests_vendor_and_hidden(tmp_path: Path) -> None:
    make_tree(
        tmp_path,
        [
            "main.go",
            "main_test.go",
            "README.md",
            "pkg/a/a.go",
            "pkg/b/b.go",
            "vendor/dep/dep.go",
            "pkg/vendor/x.go",
            "testdata/fixture.go",
            ".git/hooks.go",
            "_scratch/s.go",
        ],
    )
    found = discover_sources(tmp_path)
    assert [f.relative for f in found] == ["main.go", "pkg/a/a.go", "pkg/b/b.go"]
    assert [f.package_key for f in found] == [".", "pkg/a", "pkg/b"]


def test_discover_sources_custom_skip_patterns(tmp_path: Path) -> None:
    make_tree(tmp_path, ["pkg/a/a.go", "pkg/b/b.go", "gen/g.go", "vendor/v.go"])
    found = discover_sources(tmp_path, skip=("pkg/b", "gen"))
    assert [f.relative for f in found] == ["pkg/a/a.go", "vendor/v.go"]


def test_resolve_source_root(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    assert resolve_source_root("src", cwd=tmp_path) == (tmp_path / "src").resolve()
    assert resolve_source_root(None, cwd=tmp_path) == tmp_path.resolve()
    with pytest.raises(NoInputError, match="source directory not found"):
        resolve_source_root("missing", cwd=tmp_path)


def test_read_module_path(tmp_path: Path) -> None:
    (tmp_path / "go.mod").write_text("module example.com/zoo\n\ngo 1.22\n", encoding="utf-8")
    (tmp_path / "sub").mkdir()
    assert read_module_path(tmp_path) == "example.com/zoo"
    assert read_module_path(tmp_path / "sub") == "example.com/zoo/sub"


def test_profile_index_resolution(tmp_path: Path) -> None:
    tmp_path = tmp_path.resolve()
    files = [
        SourceFile(tmp_path / "a.go", "a.go"),
        SourceFile(tmp_path / "pkg/a.go", "pkg/a.go"),
    ]
    index = ProfileIndex(tmp_path, files, module_path="example.com/zoo")
    assert index.resolve("example.com/zoo/pkg/a.go").relative == "pkg/a.go"
    assert index.resolve("example.com/zoo/a.go").relative == "a.go"
    assert index.resolve(str(tmp_path / "pkg" / "a.go")).relative == "pkg/a.go"
    assert index.resolve("pkg/a.go").relative == "pkg/a.go"
    with pytest.raises(LookupMiss):
        index.resolve("example.com/zoo/missing.go")


def test_profile_index_rejects_other_modules(tmp_path: Path) -> None:
    files = [SourceFile(tmp_path / "util.go", "util.go")]
    index = ProfileIndex(tmp_path, files, module_path="example.com/a")
    with pytest.raises(LookupMiss, match="outside module example.com/a"):
        index.resolve("github.com/other/lib/util.go")


def test_profile_index_suffix_match_without_module(tmp_path: Path) -> None:
    files = [
        SourceFile(tmp_path / "a.go", "a.go"),
        SourceFile(tmp_path / "pkg/a.go", "pkg/a.go"),
    ]
    index = ProfileIndex(tmp_path, files)
    # The longest matching suffix wins.
    assert index.resolve("other.org/mirror/pkg/a.go").relative == "pkg/a.go"
    assert index.resolve("other.org/mirror/a.go").relative == "a.go"
