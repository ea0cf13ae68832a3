from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from checkcov.cli._shared import configure_runtime, fail, split_skip_dirs
from checkcov.cli.exit_codes import EXIT_GENERIC, EXIT_OK
from checkcov.core.config import DEFAULT_CONFIG_FILE, DEFAULT_SKIP_DIRS
from checkcov.core.pipeline import AnalysisOptions, PipelineError, build_initial_config
from checkcov.io import write_output

_BOOL_FALSE = False


def init_cmd(
    profile_file: Annotated[
        Path,
        typer.Option("-p", "--profile-file", help="Coverage profile written by 'go test -coverprofile'."),
    ],
    path: Annotated[
        Path | None,
        typer.Argument(help="Root of the Go source tree (defaults to the working directory)."),
    ] = None,
    skip_dirs: Annotated[
        list[str] | None,
        typer.Option(
            "-s",
            "--skip-dirs",
            help="Directories to skip, comma separated or repeated (default: vendor).",
        ),
    ] = None,
    output: Annotated[
        Path,
        typer.Option("--output", help="Write the config to PATH (use '-' for stdout)."),
    ] = Path(DEFAULT_CONFIG_FILE),
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = _BOOL_FALSE,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Emit diagnostic logging."),
    ] = _BOOL_FALSE,
    quiet: Annotated[
        bool,
        typer.Option("-q", "--quiet", help="Suppress INFO logs, emit only errors."),
    ] = _BOOL_FALSE,
) -> None:
    """Write a config file pinning every package at its current coverage."""
    configure_runtime(quiet=quiet, verbose=verbose)
    if output != Path("-") and output.exists() and not force:
        typer.echo(f"ERROR: {output} already exists (use --force to overwrite)", err=True)
        raise typer.Exit(code=EXIT_GENERIC)

    options = AnalysisOptions(
        source_root=path or Path.cwd(),
        profile_path=profile_file,
        skip_dirs=split_skip_dirs(skip_dirs) if skip_dirs else DEFAULT_SKIP_DIRS,
    )
    try:
        text = build_initial_config(options)
    except PipelineError as exc:
        fail(exc)

    write_output(text.rstrip("\n"), output)
    raise typer.Exit(code=EXIT_OK)


def register(app: typer.Typer) -> None:
    app.command("init")(init_cmd)


__all__ = ["init_cmd", "register"]
