from __future__ import annotations

from typing import Annotated

import typer
from typer.main import get_command

from checkcov import __version__
from checkcov.cli import check, completion, init, man


def create_app() -> typer.Typer:
    app = typer.Typer(help="Per-package statement coverage checks for Go projects.")

    @app.callback(invoke_without_command=True)
    def _root(
        ctx: typer.Context,
        *,
        version: Annotated[
            bool,
            typer.Option("--version", help="Show version and exit"),
        ] = False,
    ) -> None:
        if version:
            typer.echo(f"checkcov {__version__}")
            raise typer.Exit
        if ctx.invoked_subcommand is None:
            typer.echo(ctx.get_help())
            raise typer.Exit

    check.register(app)
    init.register(app)
    completion.register(app)
    man.register(app)

    return app


def main() -> None:
    app = create_app()
    get_command(app)()


# Click-compatible object for tooling that imports it
cli = get_command(create_app())

__all__ = ["cli", "create_app", "main"]
