from pathlib import Path

from checkcov.scripts import build_completion_script, build_man_page, write_man_page


def test_build_man_page_mentions_commands_and_options() -> None:
    man = build_man_page()
    assert "checkcov - per-package statement coverage checks for Go projects" in man
    assert "CHECKCOV CHECK" in man
    assert "CHECKCOV INIT" in man
    assert "--profile-file" in man
    assert "--minimum-coverage" in man
    assert "EXIT STATUS" in man
    assert "2  a package is below its minimum coverage" in man


def test_build_completion_script_lists_check_options() -> None:
    script = build_completion_script("zsh")
    first = script.splitlines()[0]
    assert first.startswith("# checkcov check options:")
    for flag in ("--print-functions", "--skip-dirs", "--no-config", "-p"):
        assert flag in first


def test_write_man_page(tmp_path: Path) -> None:
    dest = tmp_path / "man" / "checkcov.1.txt"
    write_man_page(dest)
    assert dest.read_text(encoding="utf-8") == build_man_page()
