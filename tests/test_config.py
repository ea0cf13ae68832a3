from pathlib import Path

import pytest

from checkcov.core.config import (
    DEFAULT_CONFIG_FILE,
    ConfigPackage,
    ThresholdConfig,
    dump_config,
    load_config,
    parse_config,
)
from checkcov.errors import ConfigFormatError, LookupMiss, NoInputError


def test_parse_config() -> None:
    config = parse_config(
        "min_coverage_percentage: 50\n"
        "packages:\n"
        "  - name: foo/bar\n"
        "    min_coverage_percentage: 10\n"
        "  - name: baz\n"
    )
    assert config == ThresholdConfig(
        packages=(ConfigPackage("foo/bar", 10.0), ConfigPackage("baz", 0.0)),
        min_coverage_percent=50.0,
    )
    assert config.package("foo/bar").min_coverage_percent == 10.0


def test_package_lookup_miss() -> None:
    with pytest.raises(LookupMiss):
        ThresholdConfig().package("nope")


@pytest.mark.parametrize("text", ["", "# nothing here\n", "packages: []\n"])
def test_empty_configs(text: str) -> None:
    assert parse_config(text) == ThresholdConfig()


@pytest.mark.parametrize(
    ("text", "pattern"),
    [
        ("packages: [", "invalid YAML"),
        ("- a\n- b\n", "expected a mapping at the top level"),
        ("packages: foo\n", "expected a list"),
        ("packages:\n  - foo\n", "expected a mapping"),
        ("packages:\n  - name: ''\n", "non-empty string"),
        ("packages:\n  - name: a\n  - name: a\n", "duplicate package"),
        ("packages:\n  - name: a\n    min_coverage_percentage: lots\n", "expected a number"),
        ("packages:\n  - name: a\n    min_coverage_percentage: true\n", "expected a number"),
        ("min_coverage_percentage: 120\n", "out of range"),
        ("min_coverage_percentage: -1\n", "out of range"),
    ],
)
def test_malformed_configs(text: str, pattern: str) -> None:
    with pytest.raises(ConfigFormatError, match=pattern):
        parse_config(text, source="cfg.yml")


def test_error_names_the_key() -> None:
    with pytest.raises(ConfigFormatError) as excinfo:
        parse_config("packages:\n  - name: a\n    min_coverage_percentage: 101\n", source="cfg.yml")
    assert excinfo.value.key == "packages[0].min_coverage_percentage"


def test_load_config_default_file(tmp_path: Path) -> None:
    assert load_config(None, cwd=tmp_path) == ThresholdConfig()
    (tmp_path / DEFAULT_CONFIG_FILE).write_text("min_coverage_percentage: 75\n", encoding="utf-8")
    assert load_config(None, cwd=tmp_path).min_coverage_percent == 75.0


def test_load_config_explicit_missing(tmp_path: Path) -> None:
    with pytest.raises(NoInputError, match="config file not found"):
        load_config(tmp_path / "nope.yml")


def test_load_config_rejects_invalid_utf8(tmp_path: Path) -> None:
    path = tmp_path / "bad.yml"
    path.write_bytes(b"min_coverage_percentage: \xff\n")
    with pytest.raises(ConfigFormatError, match="not valid UTF-8") as excinfo:
        load_config(path)
    assert excinfo.value.source == str(path)


def test_dump_config_reads_back() -> None:
    packages = [ConfigPackage("animals", 33.33), ConfigPackage(".", 100.0)]
    text = dump_config(packages, min_coverage_percent=20.0)
    assert text.startswith("min_coverage_percentage: 20.0\npackages:\n")
    assert parse_config(text) == ThresholdConfig(packages=tuple(packages), min_coverage_percent=20.0)
