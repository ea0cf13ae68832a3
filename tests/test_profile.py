from pathlib import Path

import pytest

from checkcov.core.model.coverage import CoverageBlock
from checkcov.core.model.positions import Range
from checkcov.errors import NoInputError, ProfileFormatError
from checkcov.inputs.profile import merge_blocks, parse_profile_lines, read_profile


def test_parse_profile_groups_blocks_by_file() -> None:
    profiles = parse_profile_lines(
        [
            "mode: count",
            "example.com/zoo/b.go:10.2,12.3 2 0",
            "example.com/zoo/a.go:7.2,9.3 1 4",
            "example.com/zoo/a.go:3.26,5.3 2 1",
            "",
        ]
    )
    assert [p.file_name for p in profiles] == ["example.com/zoo/a.go", "example.com/zoo/b.go"]
    assert {p.mode for p in profiles} == {"count"}
    assert profiles[0].blocks == (
        CoverageBlock(Range.of(3, 26, 5, 3), statement_count=2, hit_count=1),
        CoverageBlock(Range.of(7, 2, 9, 3), statement_count=1, hit_count=4),
    )


@pytest.mark.parametrize(("mode", "expected"), [("set", 1), ("count", 3), ("atomic", 3)])
def test_duplicate_blocks_are_merged(mode: str, expected: int) -> None:
    profiles = parse_profile_lines(
        [f"mode: {mode}", "a.go:1.1,2.2 1 1", f"mode: {mode}", "a.go:1.1,2.2 1 2"]
    )
    assert profiles[0].blocks == (CoverageBlock(Range.of(1, 1, 2, 2), 1, expected),)


def test_only_mode_line_is_an_empty_profile() -> None:
    assert parse_profile_lines(["mode: set"]) == []


@pytest.mark.parametrize(
    ("lines", "pattern"),
    [
        ([], "missing mode line"),
        (["a.go:1.1,2.2 1 1"], "bad mode line"),
        (["mode: sometimes"], "unknown counting mode"),
        (["mode: set", "a.go:1.1,2.2 1"], "doesn't match expected format"),
        (["mode: set", "a.go:x.1,2.2 1 1"], "doesn't match expected format"),
        (["mode: set", " :1.1,2.2 1 1"], "blank file name"),
        (["mode: set", "a.go:5.1,2.2 1 1"], "ends before it starts"),
        (["mode: set", "a.go:1.1,2.2 1 1", "a.go:1.1,2.2 2 1"], "inconsistent statement count"),
        (["mode: set", "a.go:1.1,2.2 1 1", "mode: count"], "conflicting counting modes"),
    ],
)
def test_malformed_profiles(lines: list[str], pattern: str) -> None:
    with pytest.raises(ProfileFormatError, match=pattern):
        parse_profile_lines(lines, source="cover.out")


def test_errors_carry_line_numbers() -> None:
    with pytest.raises(ProfileFormatError) as excinfo:
        parse_profile_lines(["mode: set", "a.go:1.1,2.2 1 1", "garbage"], source="cover.out")
    assert excinfo.value.lineno == 3
    assert str(excinfo.value).startswith("cover.out:3:")


def test_read_profile(tmp_path: Path) -> None:
    path = tmp_path / "cover.out"
    path.write_text("mode: atomic\nx/y.go:1.10,3.2 2 5\n", encoding="utf-8")
    [profile] = read_profile(path)
    assert profile.file_name == "x/y.go"
    assert profile.mode == "atomic"


def test_read_profile_missing(tmp_path: Path) -> None:
    with pytest.raises(NoInputError, match="coverage profile not found"):
        read_profile(tmp_path / "missing.out")


def test_read_profile_rejects_invalid_utf8(tmp_path: Path) -> None:
    path = tmp_path / "cover.out"
    path.write_bytes(b"mode: set\n\xff\xfe.go:1.1,2.2 1 1\n")
    with pytest.raises(ProfileFormatError, match="not valid UTF-8") as excinfo:
        read_profile(path)
    assert excinfo.value.source == str(path)


@pytest.mark.parametrize(("mode", "expected"), [("set", 1), ("count", 5)])
def test_merge_blocks(mode: str, expected: int) -> None:
    first = CoverageBlock(Range.of(1, 1, 2, 2), statement_count=2, hit_count=1)
    second = CoverageBlock(Range.of(1, 1, 2, 2), statement_count=2, hit_count=4)
    merged = merge_blocks(first, second, mode=mode, source="cover.out")
    assert (merged.statement_count, merged.hit_count) == (2, expected)
