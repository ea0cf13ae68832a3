from __future__ import annotations

import logging
from typing import NoReturn

import typer

from checkcov import logger
from checkcov.cli.exit_codes import EXIT_CONFIG, EXIT_DATAERR, EXIT_GENERIC, EXIT_NOINPUT
from checkcov.core.config import LOG_FORMAT
from checkcov.core.pipeline import ConfigFailure, DataFailure, NoInputFailure, PipelineError

_EXIT_CODES: tuple[tuple[type[PipelineError], int], ...] = (
    (NoInputFailure, EXIT_NOINPUT),
    (DataFailure, EXIT_DATAERR),
    (ConfigFailure, EXIT_CONFIG),
)


def configure_runtime(*, quiet: bool, verbose: bool) -> None:
    """Configure logging based on *quiet*/*verbose*."""
    level = logging.ERROR if quiet else (logging.DEBUG if verbose else logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.debug("log level %s", logging.getLevelName(level))


def resolve_use_color(*, color: bool, no_color: bool, color_allowed: bool) -> bool:
    # CLI flags take precedence over the IO policy default.
    if no_color:
        return False
    if color:
        return True
    return color_allowed


def exit_code_for(exc: PipelineError) -> int:
    for kind, code in _EXIT_CODES:
        if isinstance(exc, kind):
            return code
    return EXIT_GENERIC


def fail(exc: PipelineError) -> NoReturn:
    typer.echo(f"ERROR: {exc}", err=True)
    raise typer.Exit(code=exit_code_for(exc)) from exc


def split_skip_dirs(values: list[str] | None) -> tuple[str, ...]:
    """Flatten repeatable, comma-separated ``--skip-dirs`` values."""
    out: list[str] = []
    for value in values or []:
        out.extend(part.strip() for part in value.split(",") if part.strip())
    return tuple(dict.fromkeys(out))


__all__ = ["configure_runtime", "exit_code_for", "fail", "resolve_use_color", "split_skip_dirs"]
