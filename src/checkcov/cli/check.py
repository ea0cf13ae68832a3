from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from checkcov.cli._shared import configure_runtime, fail, resolve_use_color, split_skip_dirs
from checkcov.cli.exit_codes import EXIT_OK, EXIT_THRESHOLD
from checkcov.core.config import DEFAULT_SKIP_DIRS
from checkcov.core.pipeline import (
    AnalysisOptions,
    PipelineError,
    ThresholdFailure,
    evaluate_or_raise,
    load_thresholds,
    render_report,
    run_check,
)
from checkcov.io import color_allowed, write_output
from checkcov.render.render import OutputFormat, RenderOptions

_BOOL_FALSE = False


def check_cmd(
    profile_file: Annotated[
        Path,
        typer.Option("-p", "--profile-file", help="Coverage profile written by 'go test -coverprofile'."),
    ],
    path: Annotated[
        Path | None,
        typer.Argument(help="Root of the Go source tree (defaults to the working directory)."),
    ] = None,
    minimum_coverage: Annotated[
        float | None,
        typer.Option(
            "-m",
            "--minimum-coverage",
            help="Minimum coverage % for packages without their own entry in the config file.",
            min=0,
            max=100,
        ),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("-c", "--config-file", help="Config file (default: .checkcov.yml if present)."),
    ] = None,
    no_config: Annotated[
        bool,
        typer.Option("--no-config", help="Do not read any config file."),
    ] = _BOOL_FALSE,
    skip_dirs: Annotated[
        list[str] | None,
        typer.Option(
            "-s",
            "--skip-dirs",
            help="Directories to skip, comma separated or repeated (default: vendor).",
        ),
    ] = None,
    print_functions: Annotated[
        bool,
        typer.Option("--print-functions", help="Print per-function coverage before each package."),
    ] = _BOOL_FALSE,
    skip_unparsable: Annotated[
        bool,
        typer.Option("--skip-unparsable", help="Skip Go files that fail to parse instead of aborting."),
    ] = _BOOL_FALSE,
    jobs: Annotated[
        int,
        typer.Option("-j", "--jobs", help="Parse files with N worker threads.", min=1),
    ] = 1,
    fmt: Annotated[
        OutputFormat,
        typer.Option("--format", help="Output format.", case_sensitive=False),
    ] = OutputFormat.TEXT,
    output: Annotated[
        Path | None,
        typer.Option("--output", help="Write output to PATH (use '-' for stdout)."),
    ] = None,
    color: Annotated[
        bool,
        typer.Option("--color", help="Force color output (table format)."),
    ] = _BOOL_FALSE,
    no_color: Annotated[
        bool,
        typer.Option("--no-color", help="Disable color output."),
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
    """Check per-package statement coverage of a Go project against minimums."""
    configure_runtime(quiet=quiet, verbose=verbose)
    cwd = Path.cwd()
    options = AnalysisOptions(
        source_root=path or cwd,
        profile_path=profile_file,
        skip_dirs=split_skip_dirs(skip_dirs) if skip_dirs else DEFAULT_SKIP_DIRS,
        skip_unparsable=skip_unparsable,
        jobs=jobs,
    )
    use_color = resolve_use_color(color=color, no_color=no_color, color_allowed=color_allowed(output))

    try:
        config = load_thresholds(config_file, no_config=no_config, cwd=cwd)
        report = run_check(
            options,
            config=config,
            default_minimum=minimum_coverage,
            print_functions=print_functions,
        )
        text = render_report(
            report,
            fmt=fmt.value,
            options=RenderOptions(color=use_color, show_functions=print_functions),
        )
    except PipelineError as exc:
        fail(exc)

    write_output(text, output)

    try:
        evaluate_or_raise(report)
    except ThresholdFailure as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=EXIT_THRESHOLD) from exc
    raise typer.Exit(code=EXIT_OK)


def register(app: typer.Typer) -> None:
    app.command("check")(check_cmd)


__all__ = ["check_cmd", "register"]
