from __future__ import annotations

import textwrap
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest
from click.testing import CliRunner

MEOW_SOURCE = """\
package animals

func Meow(x, y int) bool {
	if x > y {
		return true
	}
	return false
}
"""

MODULE = "example.com/zoo"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Click CLI runner for invoking the command-line interface."""
    return CliRunner()


@pytest.fixture
def go_project(tmp_path: Path) -> Callable[..., Path]:
    """Write a Go module under ``tmp_path/src`` and return its root."""

    def write(files: Mapping[str, str], *, module: str | None = MODULE) -> Path:
        root = tmp_path / "src"
        root.mkdir(exist_ok=True)
        if module is not None:
            (root / "go.mod").write_text(f"module {module}\n\ngo 1.22\n", encoding="utf-8")
        for rel, source in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(source), encoding="utf-8")
        return root

    return write


@pytest.fixture
def profile_file(tmp_path: Path) -> Callable[..., Path]:
    """Write a coverage profile from ``(file, "sl.sc,el.ec", stmts, hits)`` rows."""

    def write(
        rows: list[tuple[str, str, int, int]],
        *,
        mode: str = "set",
        filename: str = "cover.out",
    ) -> Path:
        lines = [f"mode: {mode}"]
        lines.extend(f"{name}:{span} {stmts} {hits}" for name, span, stmts, hits in rows)
        path = tmp_path / filename
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return write


@pytest.fixture
def meow_source() -> str:
    return MEOW_SOURCE


@pytest.fixture
def meow_project(go_project: Callable[..., Path]) -> Path:
    return go_project({"animals/meow.go": MEOW_SOURCE})
