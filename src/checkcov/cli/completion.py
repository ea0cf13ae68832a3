from __future__ import annotations

from enum import StrEnum
from pathlib import Path  # noqa: TC003
from typing import Annotated

import typer

from checkcov.cli.exit_codes import EXIT_OK
from checkcov.io import write_output
from checkcov.scripts import build_completion_script


class Shell(StrEnum):
    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"


def register(app: typer.Typer) -> None:
    @app.command("completion")
    def completion(
        shell: Annotated[
            Shell,
            typer.Argument(help="Shell name: bash, zsh, or fish.", case_sensitive=False),
        ],
        output: Annotated[
            Path | None,
            typer.Option("--output", help="Write script to PATH (use '-' for stdout)."),
        ] = None,
    ) -> None:
        """Generate shell completion scripts."""
        script = build_completion_script(shell.value)
        write_output(script, output)
        raise typer.Exit(code=EXIT_OK)


__all__ = ["Shell", "register"]
